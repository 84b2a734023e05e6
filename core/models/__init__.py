"""Typed data models for the dashboard."""

from core.models.participant import Participant, SkillLevel
from core.models.update import PayloadError, SnapshotUpdate

__all__ = [
    "Participant",
    "PayloadError",
    "SkillLevel",
    "SnapshotUpdate",
]
