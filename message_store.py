import json
import logging
import os
import time
from dataclasses import asdict, dataclass, field
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

MAX_MESSAGES = 4


@dataclass
class Message:
    kind: str  # "ai" | "user"
    content: str
    message_id: str = ""
    timestamp: float = field(default_factory=time.time)
    session_id: Optional[str] = None
    message_order: int = 0
    chart: Optional[dict[str, Any]] = None


class MessageStore:
    """Recent assistant/user messages, newest first, bounded to max_items.

    Lifecycle: load() restores the persisted list, add() appends and persists,
    clear() drops everything including the file.
    """

    def __init__(self, path: str, max_items: int = MAX_MESSAGES):
        self.path = path
        self.max_items = max(1, max_items)
        self.messages: List[Message] = []
        self._seq = 0

    def load(self) -> List[Message]:
        if not os.path.exists(self.path):
            self.messages = []
            return self.recent()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self.messages = [Message(**item) for item in data][: self.max_items]
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("discarding unreadable message store %s: %s", self.path, exc)
            self.messages = []
            self._remove_file()
        self._seq = max((m.message_order for m in self.messages), default=0)
        return self.recent()

    def add(self, kind: str, content: str, session_id: str | None = None, chart: dict | None = None) -> Message:
        if kind not in {"ai", "user"}:
            raise ValueError(f"Unknown message kind: {kind}")
        self._seq += 1
        msg = Message(
            kind=kind,
            content=content,
            message_id=f"{int(time.time() * 1000)}-{self._seq}",
            session_id=session_id,
            message_order=self._seq,
            chart=chart,
        )
        self.messages = [msg] + self.messages
        self.messages = self.messages[: self.max_items]
        self.persist()
        return msg

    def persist(self) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump([asdict(m) for m in self.messages], f)
        except OSError as exc:
            logger.warning("could not persist messages to %s: %s", self.path, exc)

    def clear(self) -> None:
        self.messages = []
        self._remove_file()

    def _remove_file(self):
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("could not remove %s: %s", self.path, exc)

    def recent(self) -> List[Message]:
        """Chronological order (oldest first)."""
        return list(reversed(self.messages))

    def __len__(self):
        return len(self.messages)
