from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from scenarist.domain.errors import AdaptiveError, NotifyLevel


@dataclass
class MemoryNotifier:
    """In-memory notifier used for tests and offline development."""

    posts: List[Tuple[AdaptiveError, NotifyLevel]] = field(default_factory=list)

    def post(self, error: AdaptiveError, level: NotifyLevel) -> None:
        self.posts.append((error, NotifyLevel.parse(level)))

    @property
    def errors(self) -> List[AdaptiveError]:
        return [error for error, _ in self.posts]

    def clear(self) -> None:
        self.posts.clear()


__all__ = ["MemoryNotifier"]
