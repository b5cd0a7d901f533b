"""Process-wide execution state: build cache, run history, profile index, watch mode."""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from simple_code_runner.configuration.runtime_settings import (
    DEFAULT_FLAG_PROFILE,
    FlagProfile,
    LanguageProfile,
)

HISTORY_CAPACITY = 10

SaveCallback = Callable[[Path], None]
Unsubscribe = Callable[[], None]
SaveSubscriber = Callable[[SaveCallback], Unsubscribe]


@dataclass(frozen=True)
class HistoryEntry:
    """One completed run."""

    file_name: str
    language_id: str
    elapsed_seconds: float
    timestamp: str


class RunHistory:
    """Most-recent-first record of completed runs, bounded to `capacity` entries."""

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        self._entries: deque[HistoryEntry] = deque(maxlen=capacity)

    def record(self, entry: HistoryEntry) -> None:
        # appendleft on a bounded deque drops from the tail
        self._entries.appendleft(entry)

    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(tuple(self._entries))


class ActiveProfileIndex:
    """1-based active flag-profile index per language; absent means 1."""

    def __init__(self) -> None:
        self._indexes: dict[str, int] = {}

    def index_for(self, language_id: str) -> int:
        return self._indexes.get(language_id, 1)

    def active_profile(self, profile: LanguageProfile) -> FlagProfile:
        """Return the selected flag profile, or the synthetic Default one."""
        if not profile.flag_profiles:
            return DEFAULT_FLAG_PROFILE
        index = self.index_for(profile.language_id)
        if not 1 <= index <= len(profile.flag_profiles):
            return profile.flag_profiles[0]
        return profile.flag_profiles[index - 1]

    def cycle(self, profile: LanguageProfile) -> FlagProfile | None:
        """Advance to the next flag profile, wrapping around.

        Returns None without touching the index when the language has no profiles.
        """
        count = len(profile.flag_profiles)
        if count == 0:
            return None
        current = self.index_for(profile.language_id)
        updated = current % count + 1
        self._indexes[profile.language_id] = updated
        return profile.flag_profiles[updated - 1]


class LastBuildCache:
    """Most recent successful artifact path per language."""

    def __init__(self) -> None:
        self._artifacts: dict[str, Path] = {}

    def record(self, language_id: str, artifact_path: Path) -> None:
        self._artifacts[language_id] = artifact_path

    def get(self, language_id: str) -> Path | None:
        return self._artifacts.get(language_id)

    def clear(self) -> None:
        self._artifacts.clear()

    def __contains__(self, language_id: object) -> bool:
        return language_id in self._artifacts

    def __len__(self) -> int:
        return len(self._artifacts)


class WatchMode:
    """Toggled file-save subscription with a debounced trigger."""

    def __init__(self) -> None:
        self._unsubscribe: Unsubscribe | None = None
        self._pending: asyncio.TimerHandle | None = None

    @property
    def enabled(self) -> bool:
        return self._unsubscribe is not None

    def toggle(self, subscribe: SaveSubscriber, on_save: SaveCallback) -> bool:
        """Install the subscription when off, remove it when on; return the new state."""
        if self._unsubscribe is not None:
            self.disable()
            return False
        self._unsubscribe = subscribe(on_save)
        return True

    def disable(self) -> None:
        self.cancel_pending()
        if self._unsubscribe is not None:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            unsubscribe()

    def schedule(self, trigger: Callable[[], None], delay_seconds: float) -> None:
        """Run `trigger` after `delay_seconds`, restarting the delay on repeated saves."""
        self.cancel_pending()
        loop = asyncio.get_running_loop()
        self._pending = loop.call_later(delay_seconds, self._fire, trigger)

    def cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _fire(self, trigger: Callable[[], None]) -> None:
        self._pending = None
        trigger()


@dataclass
class ExecutionState:
    """All mutable engine state; confined to the event-loop thread."""

    last_build: LastBuildCache = field(default_factory=LastBuildCache)
    history: RunHistory = field(default_factory=RunHistory)
    profiles: ActiveProfileIndex = field(default_factory=ActiveProfileIndex)
    watch: WatchMode = field(default_factory=WatchMode)
