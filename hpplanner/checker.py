"""Manual placement edits - pure validation, never mutates the given assignment."""
from collections.abc import Iterable, Mapping
from enum import IntEnum, auto, unique
from typing import Optional

from hpplanner.models import Hero, HeroRoster, PuzzleDefinition, PuzzleNode, SlotKey


@unique
class PlacementIssue(IntEnum):
    NONE           = 0
    UNKNOWN_PUZZLE = auto()
    UNKNOWN_NODE   = auto()
    UNKNOWN_HERO   = auto()
    CLASS_INACTIVE = auto()
    DUPLICATE_HERO = auto()


class PlacementError(ValueError):
    """A manual placement was rejected."""

    def __init__(self, key: SlotKey, hero_id: int, issue: PlacementIssue):
        self.key = key
        self.hero_id = hero_id
        self.issue = issue
        super().__init__(
            f"Cannot place hero {hero_id} in {key.puzzle_id!r}/{key.node_id!r}: {issue.name}")


class PlacementChecker:
    """Validates and applies hand-made edits to a slot -> hero id assignment."""

    def __init__(self, heroes: Iterable[Hero], puzzles: Iterable[PuzzleDefinition],
                 active_classes: Mapping[int, Iterable[str]]):
        self.roster = HeroRoster(heroes, active_classes)
        self.puzzles: dict[str, PuzzleDefinition] = {p.id: p for p in puzzles}

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _get_node(self, key: SlotKey) -> Optional[PuzzleNode]:
        puzzle = self.puzzles.get(key.puzzle_id)
        return puzzle.get_node(key.node_id) if puzzle else None

    def check_placement(self, key: SlotKey, hero_id: int) -> PlacementIssue:
        """Return the first PlacementIssue for putting hero_id in key, or NONE."""
        if key.puzzle_id not in self.puzzles:
            return PlacementIssue.UNKNOWN_PUZZLE
        node = self._get_node(key)
        if node is None:
            return PlacementIssue.UNKNOWN_NODE
        hero = self.roster.get(hero_id)
        if hero is None:
            return PlacementIssue.UNKNOWN_HERO
        if not self.roster.can_fill(hero, node.required_class):
            return PlacementIssue.CLASS_INACTIVE
        return PlacementIssue.NONE

    def find_violations(self, assignment: Mapping[SlotKey, int]
                        ) -> dict[SlotKey, PlacementIssue]:
        """Every entry that breaks an assignment invariant.

        A hero placed more than once is reported on each repeat after the first.
        """
        violations: dict[SlotKey, PlacementIssue] = {}
        seen: set[int] = set()
        for key, hero_id in assignment.items():
            issue = self.check_placement(key, hero_id)
            if issue == PlacementIssue.NONE and hero_id in seen:
                issue = PlacementIssue.DUPLICATE_HERO
            seen.add(hero_id)
            if issue != PlacementIssue.NONE:
                violations[key] = issue
        return violations

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def place(self, assignment: Mapping[SlotKey, int], key: SlotKey,
              hero_id: int) -> dict[SlotKey, int]:
        """Move hero_id into key, replacing the occupant and vacating its old slot."""
        issue = self.check_placement(key, hero_id)
        if issue != PlacementIssue.NONE:
            raise PlacementError(key, hero_id, issue)
        result = self.release_hero(assignment, hero_id)
        result[key] = hero_id
        return result

    @staticmethod
    def clear_slot(assignment: Mapping[SlotKey, int], key: SlotKey) -> dict[SlotKey, int]:
        return {k: v for k, v in assignment.items() if k != key}

    @staticmethod
    def release_hero(assignment: Mapping[SlotKey, int], hero_id: int) -> dict[SlotKey, int]:
        """Drop the hero from every slot (e.g. it is no longer owned)."""
        return {k: v for k, v in assignment.items() if v != hero_id}

    def prune_inactive(self, assignment: Mapping[SlotKey, int]) -> dict[SlotKey, int]:
        """Drop placements whose slot class is no longer active for the hero.

        Entries for unknown slots or heroes are left alone.
        """
        return {
            k: v for k, v in assignment.items()
            if self.check_placement(k, v) != PlacementIssue.CLASS_INACTIVE
        }
