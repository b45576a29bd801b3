"""Structured facets extracted from a food query."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UnitCount:
    """Leading quantity such as "2 slices"."""

    count: float
    unit: str


@dataclass(frozen=True)
class Facets:
    """Core nouns, preparation, cuisine and quantity found in a query."""

    core: tuple[str, ...] = ()
    prep: tuple[str, ...] = ()
    cuisine: tuple[str, ...] = ()
    units: UnitCount | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.core or self.prep or self.cuisine or self.units)
