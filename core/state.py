"""Latest known session state.

Single writer (the dashboard controller) and a single reader (the renderer,
called synchronously from the same handler), so no locking is needed.
"""

from dataclasses import dataclass, field
from typing import Any

from core.models import Participant, SnapshotUpdate


@dataclass
class DashboardSnapshot:
    """Participants in display order plus their positional level readings."""
    participants: tuple[Participant, ...] = field(default_factory=tuple)
    levels: tuple[Any, ...] = field(default_factory=tuple)

    def level_for(self, index: int) -> Any:
        """Level reading at a participant's original index; missing entries read as 0."""
        if 0 <= index < len(self.levels):
            value = self.levels[index]
            return 0 if value is None else value
        return 0

    @property
    def visible_participants(self) -> list[tuple[int, Participant]]:
        """(original index, participant) for every participant with a non-blank name."""
        return [(i, p) for i, p in enumerate(self.participants) if p.is_visible]


class StateModel:
    """Holds exactly one DashboardSnapshot with replace-only updates."""

    def __init__(self):
        self._snapshot = DashboardSnapshot()

    @property
    def snapshot(self) -> DashboardSnapshot:
        return self._snapshot

    def apply_update(self, update: SnapshotUpdate) -> DashboardSnapshot:
        """Replace whichever fields the update carries; omitted fields are left untouched."""
        if update.participants is not None:
            self._snapshot.participants = tuple(update.participants)
        if update.levels is not None:
            self._snapshot.levels = tuple(update.levels)
        return self._snapshot

    def level_for(self, index: int) -> Any:
        return self._snapshot.level_for(index)
