"""In-memory list of host profiles backed by one SSH config file."""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from .profile import Profile
from .ssh_config_utils import read_profiles, write_profiles

logger = logging.getLogger(__name__)


class ProfileStore:
    """Ordered profiles for the running session plus the selected index.

    Order is file order and display order. ``selected_index`` is ``None`` only
    while the store is empty.
    """

    def __init__(self, path: str, profiles: Optional[Sequence[Profile]] = None):
        self.path = path
        self._profiles: List[Profile] = list(profiles or [])
        self.selected_index: Optional[int] = 0 if self._profiles else None

    @classmethod
    def load(cls, path: str) -> "ProfileStore":
        """Read *path*; a missing or unreadable file gives an empty store."""
        try:
            profiles = read_profiles(path)
        except OSError as exc:
            logger.warning("Unable to read SSH config %s: %s", path, exc)
            profiles = []
        return cls(path, profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    def __iter__(self) -> Iterator[Profile]:
        return iter(self._profiles)

    @property
    def profiles(self) -> Tuple[Profile, ...]:
        return tuple(self._profiles)

    def select(self, index: int) -> None:
        if not 0 <= index < len(self._profiles):
            raise IndexError(f"profile index {index} out of range")
        self.selected_index = index

    def move_selection(self, delta: int) -> None:
        """Move the selection by *delta*, wrapping at both ends."""
        if not self._profiles:
            return
        current = self.selected_index or 0
        self.selected_index = (current + delta) % len(self._profiles)

    def current(self) -> Optional[Profile]:
        if self.selected_index is None:
            return None
        return self._profiles[self.selected_index]

    def replace(self, index: int, profile: Profile) -> None:
        if not 0 <= index < len(self._profiles):
            raise IndexError(f"profile index {index} out of range")
        self._profiles[index] = profile

    def append(self, profile: Profile) -> int:
        self._profiles.append(profile)
        if self.selected_index is None:
            self.selected_index = 0
        return len(self._profiles) - 1

    def persist(self) -> None:
        """Write every profile to :attr:`path`, replacing the file contents."""
        write_profiles(self.path, self._profiles)
        logger.info("Saved %d host(s) to %s", len(self._profiles), self.path)

    def reload(self) -> None:
        """Re-read :attr:`path`. ``OSError`` propagates and leaves the store as it was."""
        profiles = read_profiles(self.path)
        self._profiles = profiles
        if not profiles:
            self.selected_index = None
        elif self.selected_index is None:
            self.selected_index = 0
        else:
            self.selected_index = min(self.selected_index, len(profiles) - 1)


__all__ = ["ProfileStore"]
