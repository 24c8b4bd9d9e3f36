"""Hero roster / puzzle catalog loading and assignment JSON encoding."""
import logging
import pathlib
from collections.abc import Iterable, Mapping

import orjson
from pydantic import BaseModel, ValidationError, model_validator

from hpplanner.models import Hero, PuzzleDefinition, SlotKey

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Catalog file missing, unreadable, or invalid."""


class Catalog(BaseModel):
    """All heroes and puzzles known to the game."""
    heroes: list[Hero]
    puzzles: list[PuzzleDefinition]

    @model_validator(mode="after")
    def _check_unique_ids(self) -> "Catalog":
        hero_ids = [h.id for h in self.heroes]
        if len(set(hero_ids)) != len(hero_ids):
            raise ValueError("Catalog has duplicate hero ids")
        puzzle_ids = [p.id for p in self.puzzles]
        if len(set(puzzle_ids)) != len(puzzle_ids):
            raise ValueError("Catalog has duplicate puzzle ids")
        return self

    def hero_by_id(self) -> dict[int, Hero]:
        return {h.id: h for h in self.heroes}

    def owned(self, hero_ids: Iterable[int]) -> list[Hero]:
        """Owned heroes in catalog order; unknown ids are ignored."""
        wanted = set(hero_ids)
        return [h for h in self.heroes if h.id in wanted]

    def default_active_classes(self) -> dict[int, list[str]]:
        """Every declared class enabled - the state before any toggles."""
        return {h.id: list(h.classes) for h in self.heroes}


def load_catalog(path: pathlib.Path) -> Catalog:
    """Read a catalog JSON file: {"heroes": [...], "puzzles": [...]}."""
    try:
        catalog = Catalog.model_validate(orjson.loads(path.read_bytes()))
    except (OSError, orjson.JSONDecodeError, ValidationError) as e:
        logger.error(f"Error loading catalog {path}: {e}")
        raise CatalogError(f"Cannot load catalog {path}") from e
    logger.info(
        f"Loaded catalog {path.name}: {len(catalog.heroes)} heroes, "
        f"{len(catalog.puzzles)} puzzles")
    return catalog


# ---------------------------------------------------------------------------
# Assignment encoding
# ---------------------------------------------------------------------------

def dump_assignment(assignment: Mapping[SlotKey, int]) -> bytes:
    return orjson.dumps(
        {key.encode(): hero_id for key, hero_id in assignment.items()},
        option=orjson.OPT_INDENT_2,
    )


def load_assignment(data: bytes) -> dict[SlotKey, int]:
    """Inverse of dump_assignment. Raises ValueError on malformed keys or values."""
    raw = orjson.loads(data)
    if not isinstance(raw, dict):
        raise ValueError("Assignment JSON must be an object")
    result: dict[SlotKey, int] = {}
    for text, hero_id in raw.items():
        if not isinstance(hero_id, int) or isinstance(hero_id, bool):
            raise ValueError(f"Hero id for {text!r} must be an integer, got {hero_id!r}")
        result[SlotKey.decode(text)] = hero_id
    return result
