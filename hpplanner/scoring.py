"""Faction synergy scoring for puzzle placements."""
from collections.abc import Iterable, Mapping
from typing import Optional

from hpplanner.models import EdgeScore, Hero, OptimizerConfig, PuzzleDefinition, SlotKey


class SynergyScorer:
    """Scores hero placements by shared factions across puzzle edges."""

    def __init__(self, config: Optional[OptimizerConfig] = None):
        self.config = config or OptimizerConfig()

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def edge_score(self, hero_a: Hero, hero_b: Hero) -> int:
        """Distinct factions shared by two heroes, capped at edge_score_cap."""
        shared = len(set(hero_a.factions) & set(hero_b.factions))
        return min(shared, self.config.edge_score_cap)

    def puzzle_score(self, puzzle: PuzzleDefinition,
                     placements: Mapping[str, Optional[Hero]]) -> int:
        """Score of one puzzle. placements is keyed by node id; None means empty."""
        score = 0
        if self.config.placement_bonus:
            filled = sum(1 for node_id in puzzle.node_ids
                         if placements.get(node_id) is not None)
            score += filled * self.config.placement_bonus
        for a, b in puzzle.edges:
            hero_a = placements.get(a)
            hero_b = placements.get(b)
            if hero_a is not None and hero_b is not None:
                score += self.edge_score(hero_a, hero_b)
        return score

    def global_score(self, puzzles: Iterable[PuzzleDefinition],
                     assignment: Mapping[SlotKey, Hero]) -> int:
        """Sum of puzzle scores. Puzzles share no edges, so nothing is counted twice."""
        total = 0
        bonus = self.config.placement_bonus
        for puzzle in puzzles:
            if bonus:
                total += bonus * sum(1 for node_id in puzzle.node_ids
                                     if SlotKey(puzzle.id, node_id) in assignment)
            for a, b in puzzle.edges:
                hero_a = assignment.get(SlotKey(puzzle.id, a))
                if hero_a is None:
                    continue
                hero_b = assignment.get(SlotKey(puzzle.id, b))
                if hero_b is not None:
                    total += self.edge_score(hero_a, hero_b)
        return total

    # ------------------------------------------------------------------
    # Breakdown (for UI / API)
    # ------------------------------------------------------------------

    def get_breakdown(self, puzzle: PuzzleDefinition,
                      placements: Mapping[str, Optional[Hero]]) -> list[EdgeScore]:
        """Per-edge synergy for every edge with both ends occupied, in edge order."""
        breakdown = []
        for a, b in puzzle.edges:
            hero_a = placements.get(a)
            hero_b = placements.get(b)
            if hero_a is None or hero_b is None:
                continue
            breakdown.append(EdgeScore(
                node_a=a,
                node_b=b,
                hero_a=hero_a.id,
                hero_b=hero_b.id,
                score=self.edge_score(hero_a, hero_b),
            ))
        return breakdown


def placements_for_puzzle(puzzle_id: str, assignment: Mapping[SlotKey, int],
                          heroes_by_id: Mapping[int, Hero]) -> dict[str, Hero]:
    """Project a global hero-id assignment onto one puzzle, keyed by node id."""
    placements: dict[str, Hero] = {}
    for key, hero_id in assignment.items():
        if key.puzzle_id != puzzle_id:
            continue
        hero = heroes_by_id.get(hero_id)
        if hero is not None:
            placements[key.node_id] = hero
    return placements


# ---------------------------------------------------------------------------
# Default-rule shortcuts
# ---------------------------------------------------------------------------

_DEFAULT_SCORER = SynergyScorer()


def edge_score(hero_a: Hero, hero_b: Hero) -> int:
    return _DEFAULT_SCORER.edge_score(hero_a, hero_b)


def puzzle_score(puzzle: PuzzleDefinition,
                 placements: Mapping[str, Optional[Hero]]) -> int:
    return _DEFAULT_SCORER.puzzle_score(puzzle, placements)


def global_score(puzzles: Iterable[PuzzleDefinition],
                 assignment: Mapping[SlotKey, Hero]) -> int:
    return _DEFAULT_SCORER.global_score(puzzles, assignment)
