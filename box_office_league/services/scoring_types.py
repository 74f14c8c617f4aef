"""Shared identifier and accumulator types for the scoring cycle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NewType, Protocol

StudioId = NewType("StudioId", int)
MovieId = NewType("MovieId", int)


class RevenueFact(Protocol):
    """The fields of a movie's weekly revenue row that scoring reads."""

    movie_id: int
    domestic_gross: int
    worldwide_gross: int


@dataclass
class StudioTotals:
    """Running domestic/worldwide gross for one studio in one week."""

    domestic: int = 0
    worldwide: int = 0

    def add(self, fact: RevenueFact) -> None:
        self.domestic += int(fact.domestic_gross or 0)
        self.worldwide += int(fact.worldwide_gross or 0)
