"""Puzzle slot optimizer - greedy seed + swap/exchange local search."""
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Optional, Union

from hpplanner.models import (
    Hero, HeroRoster, OptimizeResult, OptimizerConfig, PuzzleDefinition,
    PuzzleResult, SlotAssignment, SlotKey,
)
from hpplanner.scoring import SynergyScorer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Slot:
    key: SlotKey
    required_class: str
    neighbors: tuple[SlotKey, ...]

    @property
    def degree(self) -> int:
        return len(self.neighbors)


@dataclass
class _SearchState:
    """Private working copy of one optimization call."""
    puzzles: list[PuzzleDefinition]
    placements: dict[SlotKey, Hero]
    pool: list[Hero]
    score: int = 0


# ---------------------------------------------------------------------------
# Moves
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _SwapMove:
    """Exchange the heroes of two occupied slots."""
    slot_a: SlotKey
    slot_b: SlotKey

    def apply(self, placements: dict[SlotKey, Hero]) -> None:
        placements[self.slot_a], placements[self.slot_b] = (
            placements[self.slot_b], placements[self.slot_a])

    revert = apply

    def commit(self, pool: list[Hero]) -> None:
        pass


@dataclass(frozen=True)
class _ExchangeMove:
    """Put a pool hero into a slot; the previous occupant takes its pool position."""
    slot: SlotKey
    pool_index: int
    incoming: Hero
    outgoing: Optional[Hero]

    def apply(self, placements: dict[SlotKey, Hero]) -> None:
        placements[self.slot] = self.incoming

    def revert(self, placements: dict[SlotKey, Hero]) -> None:
        if self.outgoing is None:
            del placements[self.slot]
        else:
            placements[self.slot] = self.outgoing

    def commit(self, pool: list[Hero]) -> None:
        if self.outgoing is None:
            del pool[self.pool_index]
        else:
            pool[self.pool_index] = self.outgoing


_Move = Union[_SwapMove, _ExchangeMove]


class PlacementOptimizer:
    """Assigns owned heroes to puzzle slots, maximizing faction synergy."""

    def __init__(self, config: Optional[OptimizerConfig] = None):
        self.config = config or OptimizerConfig()
        self.scorer = SynergyScorer(self.config)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def optimize(self, heroes: Iterable[Hero], puzzles: Iterable[PuzzleDefinition],
                 active_classes: Mapping[int, Iterable[str]],
                 fixed: Optional[Mapping[SlotKey, int]] = None) -> dict[SlotKey, int]:
        """Best-effort slot -> hero id map. Only occupied slots; fixed entries verbatim."""
        heroes = list(heroes)
        if not heroes:
            return {}
        fixed = dict(fixed or {})
        state, _, _ = self._solve(heroes, puzzles, active_classes, fixed, search=True)
        return self._to_id_map(state, fixed)

    def seed(self, heroes: Iterable[Hero], puzzles: Iterable[PuzzleDefinition],
             active_classes: Mapping[int, Iterable[str]],
             fixed: Optional[Mapping[SlotKey, int]] = None) -> dict[SlotKey, int]:
        """Greedy assignment alone, without local search."""
        heroes = list(heroes)
        if not heroes:
            return {}
        fixed = dict(fixed or {})
        state, _, _ = self._solve(heroes, puzzles, active_classes, fixed, search=False)
        return self._to_id_map(state, fixed)

    def optimize_detailed(self, heroes: Iterable[Hero],
                          puzzles: Iterable[PuzzleDefinition],
                          active_classes: Mapping[int, Iterable[str]],
                          fixed: Optional[Mapping[SlotKey, int]] = None
                          ) -> OptimizeResult:
        """Like optimize(), with per-puzzle assignments, edge breakdown and scores."""
        heroes = list(heroes)
        fixed = dict(fixed or {})
        state, seed_score, rounds = self._solve(
            heroes, puzzles, active_classes, fixed, search=True)
        placements = self._to_id_map(state, fixed) if heroes else {}
        return OptimizeResult(
            placements={key.encode(): hero_id for key, hero_id in placements.items()},
            puzzles=[self._build_puzzle_result(p, state, fixed) for p in state.puzzles],
            total_score=state.score,
            seed_score=seed_score,
            rounds=rounds,
            unplaced_hero_ids=[h.id for h in state.pool],
        )

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def _solve(self, heroes: list[Hero], puzzles: Iterable[PuzzleDefinition],
               active_classes: Mapping[int, Iterable[str]],
               fixed: dict[SlotKey, int],
               search: bool) -> tuple[_SearchState, int, int]:
        """Returns (final state, greedy seed score, rounds run)."""
        roster = HeroRoster(heroes, active_classes)
        puzzles = list(puzzles)

        # Pinned heroes score and count as seeded neighbors but never move.
        placements: dict[SlotKey, Hero] = {
            key: roster.get(hero_id)
            for key, hero_id in fixed.items() if hero_id in roster
        }
        fixed_ids = set(fixed.values())
        state = _SearchState(
            puzzles=puzzles,
            placements=placements,
            pool=[h for h in roster.heroes if h.id not in fixed_ids],
        )
        if not roster.heroes:
            return state, 0, 0

        slots = [s for s in self._build_slots(puzzles) if s.key not in fixed]

        self._greedy_seed(slots, state, roster)
        state.score = self.scorer.global_score(puzzles, state.placements)
        seed_score = state.score

        rounds = self._local_search(slots, state, roster) if search else 0
        logger.info(
            f"Placed {len(state.placements)} heroes in {len(slots)} free slots "
            f"across {len(puzzles)} puzzles: seed {seed_score} -> {state.score} "
            f"after {rounds} rounds ({len(state.pool)} heroes left in pool)")
        return state, seed_score, rounds

    @staticmethod
    def _build_slots(puzzles: list[PuzzleDefinition]) -> list[_Slot]:
        """All slots in puzzle order, then node order."""
        return [
            _Slot(
                key=SlotKey(puzzle.id, node.id),
                required_class=node.required_class,
                neighbors=tuple(SlotKey(puzzle.id, n) for n in puzzle.neighbors(node.id)),
            )
            for puzzle in puzzles
            for node in puzzle.nodes
        ]

    @staticmethod
    def _to_id_map(state: _SearchState, fixed: dict[SlotKey, int]) -> dict[SlotKey, int]:
        result = dict(fixed)
        for key, hero in state.placements.items():
            if key not in fixed:
                result[key] = hero.id
        return result

    # ------------------------------------------------------------------
    # Greedy seed
    # ------------------------------------------------------------------

    def _greedy_seed(self, slots: list[_Slot], state: _SearchState,
                     roster: HeroRoster) -> None:
        """Single forward pass, most-connected slots first."""
        placements, pool = state.placements, state.pool
        for slot in sorted(slots, key=lambda s: -s.degree):
            best_idx, best_gain = -1, -1
            for idx, hero in enumerate(pool):
                if not roster.can_fill(hero, slot.required_class):
                    continue
                gain = sum(
                    self.scorer.edge_score(hero, placements[n])
                    for n in slot.neighbors if n in placements
                )
                # Ties go to the hero with fewer declared classes.
                if gain > best_gain or (
                        gain == best_gain
                        and len(hero.classes) < len(pool[best_idx].classes)):
                    best_idx, best_gain = idx, gain

            if best_idx == -1:
                continue
            placements[slot.key] = pool.pop(best_idx)

    # ------------------------------------------------------------------
    # Local search
    # ------------------------------------------------------------------

    def _local_search(self, slots: list[_Slot], state: _SearchState,
                      roster: HeroRoster) -> int:
        """Hill-climb until a round accepts nothing or round_cap is hit. Returns rounds run."""
        rounds = 0
        improved = True
        while improved and rounds < self.config.round_cap:
            rounds += 1
            swapped = self._swap_pass(slots, state, roster)
            exchanged = self._exchange_pass(slots, state, roster)
            improved = swapped or exchanged
            logger.debug(
                f"Round {rounds}: score {state.score} "
                f"(swap {'accepted' if swapped else 'none'}, "
                f"exchange {'accepted' if exchanged else 'none'})")
        return rounds

    def _swap_pass(self, slots: list[_Slot], state: _SearchState,
                   roster: HeroRoster) -> bool:
        accepted = False
        for i, slot_a in enumerate(slots):
            for slot_b in slots[i + 1:]:
                hero_a = state.placements.get(slot_a.key)
                hero_b = state.placements.get(slot_b.key)
                if hero_a is None or hero_b is None or hero_a.id == hero_b.id:
                    continue
                if not (roster.can_fill(hero_a, slot_b.required_class)
                        and roster.can_fill(hero_b, slot_a.required_class)):
                    continue
                if self._try_move(state, _SwapMove(slot_a.key, slot_b.key)):
                    accepted = True
        return accepted

    def _exchange_pass(self, slots: list[_Slot], state: _SearchState,
                       roster: HeroRoster) -> bool:
        accepted = False
        for slot in slots:
            outgoing = state.placements.get(slot.key)
            for idx, hero in enumerate(state.pool):
                if not roster.can_fill(hero, slot.required_class):
                    continue
                move = _ExchangeMove(slot.key, idx, hero, outgoing)
                if self._try_move(state, move):
                    accepted = True
                    break  # first improvement per slot
        return accepted

    def _try_move(self, state: _SearchState, move: _Move) -> bool:
        """Apply, rescore from scratch, keep only on strict improvement."""
        move.apply(state.placements)
        score = self.scorer.global_score(state.puzzles, state.placements)
        if score > state.score:
            move.commit(state.pool)
            state.score = score
            return True
        move.revert(state.placements)
        return False

    # ------------------------------------------------------------------
    # Result builder
    # ------------------------------------------------------------------

    def _build_puzzle_result(self, puzzle: PuzzleDefinition, state: _SearchState,
                             fixed: dict[SlotKey, int]) -> PuzzleResult:
        placements: dict[str, Hero] = {}
        assignments = []
        for node in puzzle.nodes:
            key = SlotKey(puzzle.id, node.id)
            hero = state.placements.get(key)
            if hero is not None:
                placements[node.id] = hero
            assignments.append(SlotAssignment(
                puzzle_id=puzzle.id,
                node_id=node.id,
                required_class=node.required_class,
                hero_id=hero.id if hero is not None else fixed.get(key),
                hero_name=hero.name if hero is not None else None,
                fixed=key in fixed,
            ))
        return PuzzleResult(
            puzzle_id=puzzle.id,
            assignments=assignments,
            edges=self.scorer.get_breakdown(puzzle, placements),
            score=self.scorer.puzzle_score(puzzle, placements),
        )


def optimize(owned_heroes: Iterable[Hero], puzzles: Iterable[PuzzleDefinition],
             active_classes: Mapping[int, Iterable[str]],
             fixed: Optional[Mapping[SlotKey, int]] = None,
             config: Optional[OptimizerConfig] = None) -> dict[SlotKey, int]:
    """Assign owned heroes to puzzle slots. See PlacementOptimizer.optimize."""
    return PlacementOptimizer(config).optimize(owned_heroes, puzzles, active_classes, fixed)
