from __future__ import annotations

from dataclasses import dataclass
from typing import List
import logging

from .config import EVENT_LOG_CAP, LOG_COALESCE_S

logger = logging.getLogger(__name__)


@dataclass
class LogEntry:
    kind: str
    message: str
    t: float
    count: int = 1

    def text(self) -> str:
        base = f"{self.kind}: {self.message}"
        return f"{base} (x{self.count})" if self.count > 1 else base


class EventLog:
    """Newest-first list of simulation events.

    An event identical to the newest entry and arriving within `window`
    seconds of it bumps that entry's repeat count instead of adding a row.
    """

    def __init__(self, window: float = LOG_COALESCE_S, cap: int = EVENT_LOG_CAP):
        self.window = float(window)
        self.cap = max(1, int(cap))
        self.entries: List[LogEntry] = []

    def push(self, message: str, kind: str = "EVENT", now: float = 0.0) -> LogEntry:
        head = self.entries[0] if self.entries else None
        if (head is not None and head.message == message and head.kind == kind
                and now - head.t < self.window):
            head.count += 1
            head.t = now
            logger.debug("%s: %s (x%d)", kind, message, head.count)
            return head
        entry = LogEntry(kind=kind, message=message, t=now)
        self.entries.insert(0, entry)
        del self.entries[self.cap:]
        logger.info("%s: %s", kind, message)
        return entry

    def latest(self, n: int = 5) -> List[str]:
        return [e.text() for e in self.entries[:n]]

    def __len__(self) -> int:
        return len(self.entries)
