"""hpplanner - hero puzzle placement optimizer."""

from hpplanner.models import (
    SlotKey,
    Hero, HeroRoster,
    PuzzleNode, PuzzleDefinition,
    OptimizerConfig,
    SlotAssignment, EdgeScore, PuzzleResult, OptimizeResult,
)
from hpplanner.scoring import (
    SynergyScorer, edge_score, puzzle_score, global_score, placements_for_puzzle,
)
from hpplanner.optimizer import PlacementOptimizer, optimize
from hpplanner.checker import PlacementChecker, PlacementError, PlacementIssue
from hpplanner.catalog import (
    Catalog, CatalogError, load_catalog, dump_assignment, load_assignment,
)

__all__ = [
    # Models
    "SlotKey",
    "Hero", "HeroRoster",
    "PuzzleNode", "PuzzleDefinition",
    "OptimizerConfig",
    "SlotAssignment", "EdgeScore", "PuzzleResult", "OptimizeResult",
    # Scoring
    "SynergyScorer", "edge_score", "puzzle_score", "global_score",
    "placements_for_puzzle",
    # Optimizer
    "PlacementOptimizer", "optimize",
    # Manual edits
    "PlacementChecker", "PlacementError", "PlacementIssue",
    # Catalog
    "Catalog", "CatalogError", "load_catalog", "dump_assignment", "load_assignment",
]
