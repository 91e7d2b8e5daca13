"""Messages returned alongside results for conditions the caller should surface."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List


class MessageLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ServiceMessage:
    level: MessageLevel
    text: str
    code: str = "general"


def has_errors(messages: Iterable[ServiceMessage]) -> bool:
    return any(message.level is MessageLevel.ERROR for message in messages)


def by_level(messages: Iterable[ServiceMessage], level: MessageLevel) -> List[ServiceMessage]:
    return [message for message in messages if message.level is level]
