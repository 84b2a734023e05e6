"""Partial snapshot updates decoded from stream messages."""

import json
from dataclasses import dataclass
from typing import Any, Optional

from core.models.participant import Participant


class PayloadError(ValueError):
    """Stream message could not be decoded into an update."""


@dataclass(frozen=True)
class SnapshotUpdate:
    """
    One inbound event. A field left as None means "unchanged".

    Levels are kept as received; range handling happens at render time.
    """
    participants: Optional[tuple[Participant, ...]] = None
    levels: Optional[tuple[Any, ...]] = None

    @property
    def is_empty(self) -> bool:
        return self.participants is None and self.levels is None

    @classmethod
    def from_payload(cls, payload: Any) -> "SnapshotUpdate":
        if not isinstance(payload, dict):
            raise PayloadError(f"expected a JSON object, got {type(payload).__name__}")

        participants = None
        clients = payload.get("clients")
        if clients is not None:
            if not isinstance(clients, list):
                raise PayloadError("'clients' must be a list")
            if not all(isinstance(c, dict) for c in clients):
                raise PayloadError("'clients' entries must be objects")
            participants = tuple(Participant.from_dict(c) for c in clients)

        levels = None
        raw_levels = payload.get("levels")
        if raw_levels is not None:
            if not isinstance(raw_levels, list):
                raise PayloadError("'levels' must be a list")
            levels = tuple(raw_levels)

        return cls(participants=participants, levels=levels)

    @classmethod
    def from_json(cls, text: str) -> "SnapshotUpdate":
        try:
            payload = json.loads(text)
        except (TypeError, ValueError) as e:
            raise PayloadError(f"invalid JSON: {e}") from e
        return cls.from_payload(payload)
