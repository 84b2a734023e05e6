"""Session participant as published by the server."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class SkillLevel(IntEnum):
    UNSPECIFIED = 0
    BEGINNER = 1
    INTERMEDIATE = 2
    EXPERT = 3


def _as_int(value: Any, default: int = 0) -> Any:
    """Best-effort int; anything unusable is passed through for the renderer to tolerate."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if value is None:
        return default
    return value


@dataclass(frozen=True)
class Participant:
    """One connected client."""
    name: str = ""          # max 16 chars, may carry surrounding whitespace
    city: str = ""
    country: int = 0        # QLocale country number, opaque here
    skill_level: int = SkillLevel.UNSPECIFIED
    instrument: int = 0     # index into core.instruments

    @property
    def display_name(self) -> str:
        return self.name.strip()

    @property
    def is_visible(self) -> bool:
        return bool(self.display_name)

    @classmethod
    def from_dict(cls, data: dict) -> "Participant":
        name = data.get("name", "")
        city = data.get("city", "")
        return cls(
            name=name if isinstance(name, str) else ("" if name is None else str(name)),
            city=city if isinstance(city, str) else ("" if city is None else str(city)),
            country=_as_int(data.get("country")),
            skill_level=_as_int(data.get("skillLevel")),
            instrument=_as_int(data.get("instrument")),
        )
