"""Runtime state containers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Phase(Enum):
    IDLE = "idle"
    MUTED = "muted"
    LOCKED = "locked"
    REPLAYING = "replaying"


@dataclass(slots=True)
class EngineState:
    """Mode state machine for one engine instance.

    ``phase`` moves IDLE/MUTED -> LOCKED -> REPLAYING -> back to where the
    timed-typing run started. LOCKED and REPLAYING are phases of that single
    operation and never overlap. ``suspended`` is an overlay that composes
    with every phase. ``replacing`` guards an instant write against
    re-entering detection through the host's own change notification.
    """

    phase: Phase = Phase.IDLE
    suspended: bool = False
    replacing: bool = False
    mute_buffer: str = ""
    locked_keys: list[str] = field(default_factory=list)
    _resume_phase: Phase = Phase.IDLE

    @property
    def muted(self) -> bool:
        if self.phase in (Phase.LOCKED, Phase.REPLAYING):
            return self._resume_phase is Phase.MUTED
        return self.phase is Phase.MUTED

    @property
    def locked(self) -> bool:
        return self.phase is Phase.LOCKED

    def set_muted(self, enabled: bool) -> None:
        target = Phase.MUTED if enabled else Phase.IDLE
        if self.phase in (Phase.LOCKED, Phase.REPLAYING):
            self._resume_phase = target
        else:
            self.phase = target
        if not enabled:
            self.mute_buffer = ""

    def lock(self) -> None:
        if self.phase in (Phase.LOCKED, Phase.REPLAYING):
            raise RuntimeError(f"cannot lock while {self.phase.value}")
        self._resume_phase = self.phase
        self.phase = Phase.LOCKED
        self.locked_keys = []

    def begin_replay(self) -> list[str]:
        if self.phase is not Phase.LOCKED:
            raise RuntimeError(f"cannot replay while {self.phase.value}")
        self.phase = Phase.REPLAYING
        keys, self.locked_keys = self.locked_keys, []
        return keys

    def finish_replay(self) -> None:
        self.phase = self._resume_phase
        self._resume_phase = Phase.IDLE
