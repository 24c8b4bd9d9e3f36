"""Pydantic models for heroes, puzzles, and optimizer results.

These are the API-ready schemas - keep field names stable.
"""
from collections.abc import Iterable, Mapping
from typing import NamedTuple, Optional
from urllib.parse import quote, unquote

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from hpplanner.constants import EDGE_SCORE_CAP, ROUND_CAP, SLOT_KEY_SEPARATOR


# ---------------------------------------------------------------------------
# Slot keys
# ---------------------------------------------------------------------------

class SlotKey(NamedTuple):
    """Globally unique slot identity: (puzzle id, node id)."""
    puzzle_id: str
    node_id: str

    def encode(self) -> str:
        """String form for JSON map keys. Both parts are escaped, so it never collides."""
        return (quote(self.puzzle_id, safe="")
                + SLOT_KEY_SEPARATOR
                + quote(self.node_id, safe=""))

    @classmethod
    def decode(cls, text: str) -> "SlotKey":
        parts = text.split(SLOT_KEY_SEPARATOR)
        if len(parts) != 2:
            raise ValueError(f"Malformed slot key: {text!r}")
        return cls(unquote(parts[0]), unquote(parts[1]))


# ---------------------------------------------------------------------------
# Heroes
# ---------------------------------------------------------------------------

class Hero(BaseModel):
    """A collectible hero. Immutable snapshot."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    factions: tuple[str, ...] = Field(min_length=1)
    classes: tuple[str, ...] = ()   # declared classes, toggled on/off elsewhere


class HeroRoster:
    """Owned heroes plus their enabled classes (not Pydantic - internal use)."""

    def __init__(self, heroes: Iterable[Hero],
                 active_classes: Mapping[int, Iterable[str]]):
        self.heroes: list[Hero] = list(heroes)
        self.active_classes: dict[int, frozenset[str]] = {
            hero_id: frozenset(classes) for hero_id, classes in active_classes.items()
        }
        self._by_id: dict[int, Hero] = {h.id: h for h in self.heroes}

    def get(self, hero_id: int) -> Optional[Hero]:
        return self._by_id.get(hero_id)

    def active_for(self, hero_id: int) -> frozenset[str]:
        """Enabled classes of a hero; a hero missing from the map has none."""
        return self.active_classes.get(hero_id, frozenset())

    def can_fill(self, hero: Hero, required_class: str) -> bool:
        return required_class in self.active_for(hero.id)

    def get_candidates(self, required_class: str,
                       among: Optional[Iterable[Hero]] = None) -> list[Hero]:
        """Heroes able to take a slot of required_class, in roster (or `among`) order."""
        heroes = self.heroes if among is None else among
        return [h for h in heroes if self.can_fill(h, required_class)]

    def __contains__(self, hero_id: object) -> bool:
        return hero_id in self._by_id

    def __len__(self) -> int:
        return len(self.heroes)


# ---------------------------------------------------------------------------
# Puzzles
# ---------------------------------------------------------------------------

class PuzzleNode(BaseModel):
    """One slot of a puzzle board."""
    model_config = ConfigDict(frozen=True)

    id: str
    required_class: str
    label: str = ""
    row: Optional[str] = None   # "top" | "mid" | "bot", display only


class PuzzleDefinition(BaseModel):
    """A puzzle board: slots plus the undirected edges that generate synergy."""
    model_config = ConfigDict(frozen=True)

    id: str
    nodes: tuple[PuzzleNode, ...]
    edges: tuple[tuple[str, str], ...] = ()

    @model_validator(mode="after")
    def _check_graph(self) -> "PuzzleDefinition":
        node_ids = [n.id for n in self.nodes]
        if len(set(node_ids)) != len(node_ids):
            raise ValueError(f"Puzzle {self.id!r} has duplicate node ids")
        known = set(node_ids)
        seen: set[frozenset[str]] = set()
        for a, b in self.edges:
            if a not in known or b not in known:
                raise ValueError(
                    f"Puzzle {self.id!r} edge ({a!r}, {b!r}) references an unknown node")
            if a == b:
                raise ValueError(f"Puzzle {self.id!r} has a self loop on {a!r}")
            pair = frozenset((a, b))
            if pair in seen:
                raise ValueError(f"Puzzle {self.id!r} repeats edge ({a!r}, {b!r})")
            seen.add(pair)
        return self

    @computed_field
    @property
    def total_slots(self) -> int:
        return len(self.nodes)

    @property
    def node_ids(self) -> list[str]:
        return [n.id for n in self.nodes]

    def get_node(self, node_id: str) -> Optional[PuzzleNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def neighbors(self, node_id: str) -> list[str]:
        """Adjacent node ids, in edge order."""
        return [b if a == node_id else a
                for a, b in self.edges if node_id in (a, b)]

    def degree(self, node_id: str) -> int:
        return len(self.neighbors(node_id))

    def slot_key(self, node_id: str) -> SlotKey:
        return SlotKey(self.id, node_id)


# ---------------------------------------------------------------------------
# Solver configuration
# ---------------------------------------------------------------------------

class OptimizerConfig(BaseModel):
    """Tunables for scoring and local search. Defaults are the game rules."""
    model_config = ConfigDict(frozen=True)

    round_cap: int = Field(default=ROUND_CAP, ge=0)
    edge_score_cap: int = Field(default=EDGE_SCORE_CAP, ge=0)
    # Flat reward per occupied slot. Earlier scoring revisions used 1.
    placement_bonus: int = Field(default=0, ge=0)


# ---------------------------------------------------------------------------
# Optimizer results
# ---------------------------------------------------------------------------

class SlotAssignment(BaseModel):
    """A hero (or nothing) in one puzzle slot."""
    puzzle_id: str
    node_id: str
    required_class: str
    hero_id: Optional[int] = None
    hero_name: Optional[str] = None
    fixed: bool = False


class EdgeScore(BaseModel):
    """Synergy realized on one occupied edge."""
    node_a: str
    node_b: str
    hero_a: int
    hero_b: int
    score: int


class PuzzleResult(BaseModel):
    """Placement and score of a single puzzle. Ready as an API response."""
    puzzle_id: str
    assignments: list[SlotAssignment]
    edges: list[EdgeScore]
    score: int

    @computed_field
    @property
    def filled_slots(self) -> int:
        return sum(1 for a in self.assignments if a.hero_id is not None)

    @computed_field
    @property
    def total_slots(self) -> int:
        return len(self.assignments)


class OptimizeResult(BaseModel):
    """Full optimizer output across all puzzles."""
    placements: dict[str, int]  # SlotKey.encode() -> hero id
    puzzles: list[PuzzleResult]
    total_score: int
    seed_score: int
    rounds: int
    unplaced_hero_ids: list[int] = Field(default_factory=list)

    def slot_placements(self) -> dict[SlotKey, int]:
        return {SlotKey.decode(k): v for k, v in self.placements.items()}
