"""
Projection Clock
================

Injectable source of "now" for projection cycles, in epoch milliseconds.

Connection activity is a function of (last_activation, now), so a cycle
is only reproducible if ``now`` is. The bridge never calls time.time()
itself; it asks this clock.

MODES:
======
- live:   wall-clock milliseconds, optionally kept in a tick log
- replay: a fixed tick sequence, typically loaded from such a log
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional
import json
import time

TICK_LOG_FORMAT = "nvb-ticks/1"


class ClockExhausted(Exception):
    """A replay clock was asked for more ticks than it holds."""
    pass


def _wall_ms() -> float:
    return time.time() * 1000.0


@dataclass
class LogicalClock:
    """
    Millisecond clock with a live and a replay mode.

    Build instances through ``live``, ``replay`` or ``from_log``.
    """
    _sequence: List[float] = field(default_factory=list)
    _reads: int = 0
    _replaying: bool = False
    _keep_ticks: bool = True
    _origin: Optional[float] = None

    def now(self) -> float:
        """Next tick: wall time when live, the next recorded value on replay."""
        if not self._replaying:
            tick = _wall_ms()
            if self._keep_ticks:
                self._sequence.append(tick)
        elif self._reads < len(self._sequence):
            tick = self._sequence[self._reads]
        else:
            raise ClockExhausted(
                f"Replay needs tick #{self._reads + 1} but only "
                f"{len(self._sequence)} were recorded"
            )
        self._reads += 1
        return tick

    def tick_count(self) -> int:
        """How many times ``now`` has answered."""
        return self._reads

    def is_live(self) -> bool:
        return not self._replaying

    def get_start_time(self) -> Optional[float]:
        return self._sequence[0] if self._sequence else self._origin

    @classmethod
    def live(cls, record: bool = True) -> 'LogicalClock':
        """
        Wall-clock mode.

        With ``record=False`` ticks are counted but not kept, for
        long-running processes that never replay.
        """
        return cls(_keep_ticks=record, _origin=_wall_ms())

    @classmethod
    def replay(cls, ticks: Iterable[float]) -> 'LogicalClock':
        sequence = [float(t) for t in ticks]
        return cls(
            _sequence=sequence,
            _replaying=True,
            _origin=sequence[0] if sequence else None,
        )

    @classmethod
    def from_log(cls, path: Path) -> 'LogicalClock':
        """Replay clock over a tick log written by ``save_log``."""
        document = json.loads(Path(path).read_text())
        return cls.replay(document["ticks_ms"])

    def save_log(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        document = {
            "format": TICK_LOG_FORMAT,
            "source": "replay" if self._replaying else "live",
            "count": len(self._sequence),
            "ticks_ms": list(self._sequence),
        }
        path.write_text(json.dumps(document, indent=2))

    def __repr__(self) -> str:
        mode = "replay" if self._replaying else "live"
        return f"LogicalClock({mode}, ticks={len(self._sequence)}, reads={self._reads})"
