"""Shared fixtures for hpplanner unit tests.

Puzzles here are tiny hand-made boards; every expected score in the tests
was worked out by hand from these definitions.
"""
import pytest

from hpplanner import PuzzleDefinition, PuzzleNode


def _nodes(*specs: tuple[str, str]) -> tuple[PuzzleNode, ...]:
    return tuple(PuzzleNode(id=node_id, required_class=cls) for node_id, cls in specs)


@pytest.fixture
def pair_puzzle() -> PuzzleDefinition:
    """n1 - n2, both INFANTRY."""
    return PuzzleDefinition(
        id="pair",
        nodes=_nodes(("n1", "INFANTRY"), ("n2", "INFANTRY")),
        edges=(("n1", "n2"),),
    )


@pytest.fixture
def path_puzzle() -> PuzzleDefinition:
    """n1 - n2 - n3 - n4, all INFANTRY."""
    return PuzzleDefinition(
        id="path",
        nodes=_nodes(("n1", "INFANTRY"), ("n2", "INFANTRY"),
                     ("n3", "INFANTRY"), ("n4", "INFANTRY")),
        edges=(("n1", "n2"), ("n2", "n3"), ("n3", "n4")),
    )


@pytest.fixture
def mixed_puzzle() -> PuzzleDefinition:
    """a - b - c with a, b INFANTRY and c MAGE."""
    return PuzzleDefinition(
        id="mixed",
        nodes=_nodes(("a", "INFANTRY"), ("b", "INFANTRY"), ("c", "MAGE")),
        edges=(("a", "b"), ("b", "c")),
    )
