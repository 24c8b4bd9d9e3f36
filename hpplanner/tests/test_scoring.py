"""Tests for SynergyScorer and the default-rule scoring shortcuts (scoring.py).

Heroes are constructed directly via Pydantic - no catalog file needed.
"""
import itertools
import random

import pytest

from hpplanner import (
    Hero, OptimizerConfig, PuzzleDefinition, SlotKey, SynergyScorer,
    edge_score, global_score, placements_for_puzzle, puzzle_score,
)
from hpplanner.constants import FACTIONS


def _make_hero(hero_id: int, factions: tuple[str, ...],
               classes: tuple[str, ...] = ("INFANTRY",)) -> Hero:
    return Hero(id=hero_id, name=f"Hero {hero_id}", factions=factions, classes=classes)


class TestEdgeScore:
    def test_one_shared_faction(self) -> None:
        a = _make_hero(1, ("F1", "F2"))
        b = _make_hero(2, ("F2", "F3"))
        assert edge_score(a, b) == 1

    def test_no_shared_faction_scores_zero(self) -> None:
        a = _make_hero(1, ("F1",))
        b = _make_hero(2, ("F2",))
        assert edge_score(a, b) == 0

    def test_four_shared_factions_clamped_to_three(self) -> None:
        factions = ("F1", "F2", "F3", "F4")
        assert edge_score(_make_hero(1, factions), _make_hero(2, factions)) == 3

    def test_repeated_faction_counts_once(self) -> None:
        a = _make_hero(1, ("F1", "F1"))
        b = _make_hero(2, ("F1",))
        assert edge_score(a, b) == 1
        assert edge_score(b, a) == 1

    def test_symmetric_and_in_range(self) -> None:
        rng = random.Random(7)
        heroes = [
            _make_hero(i, tuple(rng.sample(FACTIONS, rng.randint(1, 5))))
            for i in range(12)
        ]
        for a, b in itertools.combinations(heroes, 2):
            assert edge_score(a, b) == edge_score(b, a)
            assert 0 <= edge_score(a, b) <= 3

    def test_custom_cap(self) -> None:
        scorer = SynergyScorer(OptimizerConfig(edge_score_cap=5))
        factions = ("F1", "F2", "F3", "F4")
        assert scorer.edge_score(_make_hero(1, factions), _make_hero(2, factions)) == 4


class TestPuzzleScore:
    def test_empty_placements_score_zero(self, pair_puzzle: PuzzleDefinition) -> None:
        assert puzzle_score(pair_puzzle, {}) == 0

    def test_one_endpoint_contributes_nothing(self, pair_puzzle: PuzzleDefinition) -> None:
        a = _make_hero(1, ("F1",))
        assert puzzle_score(pair_puzzle, {"n1": a, "n2": None}) == 0

    def test_sums_realized_edges(self, path_puzzle: PuzzleDefinition) -> None:
        a = _make_hero(1, ("F1", "F2"))
        b = _make_hero(2, ("F1", "F2", "F3"))
        c = _make_hero(3, ("F3",))
        # n1-n2: 2, n2-n3: 1, n3-n4 unrealized
        assert puzzle_score(path_puzzle, {"n1": a, "n2": b, "n3": c}) == 3

    def test_placement_bonus(self, pair_puzzle: PuzzleDefinition) -> None:
        scorer = SynergyScorer(OptimizerConfig(placement_bonus=1))
        a = _make_hero(1, ("F1", "F2"))
        b = _make_hero(2, ("F2", "F3"))
        assert scorer.puzzle_score(pair_puzzle, {"n1": a, "n2": b}) == 3
        assert scorer.puzzle_score(pair_puzzle, {"n1": a}) == 1


class TestGlobalScore:
    def test_empty_assignment_scores_zero(
        self, pair_puzzle: PuzzleDefinition, path_puzzle: PuzzleDefinition
    ) -> None:
        assert global_score([pair_puzzle, path_puzzle], {}) == 0

    def test_adds_puzzle_scores(
        self, pair_puzzle: PuzzleDefinition, path_puzzle: PuzzleDefinition
    ) -> None:
        a = _make_hero(1, ("F1", "F2"))
        b = _make_hero(2, ("F2", "F3"))
        c = _make_hero(3, ("F2",))
        d = _make_hero(4, ("F2", "F3"))
        assignment = {
            SlotKey("pair", "n1"): a, SlotKey("pair", "n2"): b,
            SlotKey("path", "n3"): c, SlotKey("path", "n4"): d,
        }
        assert global_score([pair_puzzle, path_puzzle], assignment) == 2

    def test_same_node_id_in_other_puzzle_is_not_a_neighbor(
        self, pair_puzzle: PuzzleDefinition, path_puzzle: PuzzleDefinition
    ) -> None:
        a = _make_hero(1, ("F1",))
        b = _make_hero(2, ("F1",))
        assignment = {SlotKey("pair", "n1"): a, SlotKey("path", "n2"): b}
        assert global_score([pair_puzzle, path_puzzle], assignment) == 0

    def test_adding_a_placement_never_decreases_score(
        self, path_puzzle: PuzzleDefinition
    ) -> None:
        rng = random.Random(11)
        heroes = [
            _make_hero(i, tuple(rng.sample(FACTIONS[:4], rng.randint(1, 3))))
            for i in range(4)
        ]
        assignment: dict[SlotKey, Hero] = {}
        previous = 0
        for node_id, hero in zip(path_puzzle.node_ids, heroes):
            assignment[SlotKey("path", node_id)] = hero
            current = global_score([path_puzzle], assignment)
            assert current >= previous
            previous = current


class TestBreakdown:
    def test_only_occupied_edges_in_edge_order(self, path_puzzle: PuzzleDefinition) -> None:
        scorer = SynergyScorer()
        a = _make_hero(1, ("F1", "F2"))
        b = _make_hero(2, ("F1", "F2", "F3"))
        d = _make_hero(4, ("F3",))
        breakdown = scorer.get_breakdown(path_puzzle, {"n1": a, "n2": b, "n4": d})
        assert len(breakdown) == 1
        edge = breakdown[0]
        assert (edge.node_a, edge.node_b) == ("n1", "n2")
        assert (edge.hero_a, edge.hero_b) == (1, 2)
        assert edge.score == 2

    def test_empty_placements_empty_breakdown(self, pair_puzzle: PuzzleDefinition) -> None:
        assert SynergyScorer().get_breakdown(pair_puzzle, {}) == []


class TestPlacementsForPuzzle:
    def test_projects_one_puzzle(self) -> None:
        a = _make_hero(1, ("F1",))
        b = _make_hero(2, ("F1",))
        assignment = {
            SlotKey("pair", "n1"): 1,
            SlotKey("path", "n1"): 2,
            SlotKey("pair", "n2"): 99,  # not owned
        }
        placements = placements_for_puzzle("pair", assignment, {1: a, 2: b})
        assert placements == {"n1": a}

    def test_feeds_puzzle_score(self, pair_puzzle: PuzzleDefinition) -> None:
        a = _make_hero(1, ("F1", "F2"))
        b = _make_hero(2, ("F2", "F3"))
        assignment = {SlotKey("pair", "n1"): 1, SlotKey("pair", "n2"): 2}
        placements = placements_for_puzzle("pair", assignment, {1: a, 2: b})
        assert puzzle_score(pair_puzzle, placements) == 1


@pytest.mark.parametrize("bonus", [0, 2])
def test_global_matches_sum_of_puzzle_scores(
    bonus: int, pair_puzzle: PuzzleDefinition, path_puzzle: PuzzleDefinition
) -> None:
    scorer = SynergyScorer(OptimizerConfig(placement_bonus=bonus))
    a = _make_hero(1, ("F1", "F2"))
    b = _make_hero(2, ("F2",))
    c = _make_hero(3, ("F1", "F2"))
    assignment = {
        SlotKey("pair", "n1"): a,
        SlotKey("path", "n2"): b, SlotKey("path", "n3"): c,
    }
    per_puzzle = (
        scorer.puzzle_score(pair_puzzle, {"n1": a})
        + scorer.puzzle_score(path_puzzle, {"n2": b, "n3": c})
    )
    assert scorer.global_score([pair_puzzle, path_puzzle], assignment) == per_puzzle
