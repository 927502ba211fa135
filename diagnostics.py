# diagnostics.py
from __future__ import annotations

import inspect
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from helper import print_event_colored

LEVEL_LABELS: dict[str, str] = {
    "info": "INFO",
    "warn": "WARNING",
    "error": "ERROR",
}


@dataclass(frozen=True)
class DiagnosticEvent:
    """
    One recorded parser diagnostic.

    level:
      - "info"
      - "warn"
      - "error"

    where: call site as 'file.py:LINE in function'.
    """
    timestamp_ns: int
    level: str
    message: str
    where: str

    def format(self) -> str:
        seconds, nsec = divmod(self.timestamp_ns, 1_000_000_000)
        stamp = datetime.fromtimestamp(seconds).strftime("%Y-%m-%d %H:%M:%S")
        label = LEVEL_LABELS.get(self.level, "N/A")
        return f"[{stamp}.{nsec}] {label.ljust(7)} : {self.message} ({self.where})"


def _call_site(depth: int) -> str:
    """Describe the frame `depth` levels above this function (0 = _call_site)."""
    frame = inspect.currentframe()
    try:
        for _ in range(depth):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            return "<unknown>"
        code = frame.f_code
        return f"{Path(code.co_filename).name}:{frame.f_lineno} in {code.co_name}"
    finally:
        del frame


@dataclass
class Diagnostics:
    """
    Append-only buffer of diagnostic events for one parse session.

    The parser only writes to it; callers decide when to report() or drain().
    """
    events: list[DiagnosticEvent] = field(default_factory=list)

    def _log(self, level: str, message: str, where: Optional[str]) -> None:
        if level not in LEVEL_LABELS:
            raise ValueError(f"Unknown diagnostic level: {level!r}")
        if where is None:
            # _call_site <- _log <- record/info/warn/error <- caller
            where = _call_site(3)
        self.events.append(
            DiagnosticEvent(
                timestamp_ns=time.time_ns(),
                level=level,
                message=message,
                where=where,
            )
        )

    def record(self, level: str, message: str, where: Optional[str] = None) -> None:
        self._log(level, message, where)

    def info(self, message: str) -> None:
        self._log("info", message, None)

    def warn(self, message: str) -> None:
        self._log("warn", message, None)

    def error(self, message: str) -> None:
        self._log("error", message, None)

    def has_errors(self) -> bool:
        return any(ev.level == "error" for ev in self.events)

    def drain(self) -> list[DiagnosticEvent]:
        """Return all buffered events and clear the buffer."""
        drained = list(self.events)
        self.events.clear()
        return drained

    def report(self, stream: Optional[TextIO] = None, *, color: bool = False) -> None:
        """
        Print buffered events in insertion order, one line each:

          [2026-01-01 12:00:00.123456789] WARNING : message (cr_parser.py:88 in build_heading)
        """
        out = stream or sys.stderr
        for ev in self.events:
            line = ev.format()
            if color:
                print_event_colored(line, ev.level, out)
            else:
                print(line, file=out)
