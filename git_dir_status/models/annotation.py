"""Annotation data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Annotation:
    """A zero-width marker placed on one listing row."""

    row: int
    column: int
    text: str
    tag: str
    style: str = ""

    def __str__(self) -> str:
        return f"{self.row}:{self.column} {self.text!r} [{self.tag}]"
