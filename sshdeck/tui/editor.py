from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from sshdeck.permissions import PermissionFixer
from sshdeck.profile import Profile, ProfileDraft, ProfileField
from sshdeck.profile_store import ProfileStore

LOG = logging.getLogger(__name__)

NEW_HOST_NAME = "new-host"

Clock = Callable[[], float]


@dataclass(frozen=True)
class KeyPress:
    """A key as reported by the terminal: Textual key name plus printable character."""

    key: str
    character: Optional[str] = None

    @property
    def is_printable(self) -> bool:
        return self.character is not None and len(self.character) == 1 and self.character.isprintable()


class Mode(Enum):
    BROWSING = "browsing"
    EDITING = "editing"


class SessionAction(Enum):
    """What the event loop should do after a key was handled."""

    NONE = "none"
    QUIT = "quit"
    CONNECT = "connect"


@dataclass(frozen=True)
class EditTarget:
    """Where a committed draft goes: an existing index, or appended when ``index`` is None."""

    index: Optional[int] = None

    @classmethod
    def new(cls) -> "EditTarget":
        return cls(None)

    @property
    def is_new(self) -> bool:
        return self.index is None


class KeyDebouncer:
    """Drops a key repeated within *window* seconds of the last admitted key.

    Terminals sometimes deliver the same key event twice in a burst. Only
    admitted keys move the baseline, so a dropped duplicate never extends the
    window.
    """

    def __init__(self, window: float = 0.1, clock: Clock = time.monotonic):
        self.window = window
        self.clock = clock
        self.last_key: Optional[KeyPress] = None
        self.last_key_time: Optional[float] = None

    def admit(self, key: KeyPress) -> bool:
        now = self.clock()
        if (
            self.window > 0
            and key == self.last_key
            and self.last_key_time is not None
            and now - self.last_key_time < self.window
        ):
            return False
        self.last_key = key
        self.last_key_time = now
        return True


BROWSE_DOWN = {"down", "j"}
BROWSE_UP = {"up", "k"}
BROWSE_CONNECT = {"enter", "c"}
EDIT_NEXT = {"tab", "down"}
EDIT_PREV = {"shift+tab", "up"}


class EditorSession:
    """
    Key-driven state machine for browsing and editing host profiles.

    The session never draws anything; the app projects its state with
    :func:`sshdeck.tui.view_model.build_view_model` after each key.
    """

    def __init__(
        self,
        store: ProfileStore,
        *,
        fixer: Optional[PermissionFixer] = None,
        debounce: float = 0.1,
        clock: Clock = time.monotonic,
    ):
        self.store = store
        self.fixer = fixer or PermissionFixer()
        self.debouncer = KeyDebouncer(debounce, clock)

        self.mode = Mode.BROWSING
        self.buffer: Optional[ProfileDraft] = None
        self.field_cursor = ProfileField.NAME
        self.target: Optional[EditTarget] = None

        self.status_message: Optional[str] = None
        self.status_is_error = False
        self.connect_target: Optional[str] = None

    # ---------------------------------------------------------------- status
    def set_status(self, message: Optional[str], *, error: bool = False) -> None:
        self.status_message = message
        self.status_is_error = bool(message) and error

    def clear_status(self) -> None:
        self.set_status(None)

    # ------------------------------------------------------------------ keys
    def handle_key(self, key: KeyPress) -> SessionAction:
        """Apply one key press and report what the event loop should do next."""
        if not self.debouncer.admit(key):
            LOG.debug("Dropped repeated key %s", key.key)
            return SessionAction.NONE
        if self.mode is Mode.EDITING:
            self._handle_editing_key(key)
            return SessionAction.NONE
        return self._handle_browsing_key(key)

    def _handle_browsing_key(self, key: KeyPress) -> SessionAction:
        name = key.key
        if name in BROWSE_DOWN:
            self.store.move_selection(1)
        elif name in BROWSE_UP:
            self.store.move_selection(-1)
        elif name == "e":
            self.begin_edit()
        elif name == "n":
            self.begin_new()
        elif name in BROWSE_CONNECT:
            return self.request_connect()
        elif name == "p":
            self.fix_permissions()
        elif name == "r":
            self.reload()
        elif name == "q":
            return SessionAction.QUIT
        return SessionAction.NONE

    def _handle_editing_key(self, key: KeyPress) -> None:
        name = key.key
        if name == "escape":
            self.cancel_edit()
        elif name == "enter":
            self.commit_edit()
        elif name in EDIT_NEXT:
            self.field_cursor = self.field_cursor.next()
        elif name in EDIT_PREV:
            self.field_cursor = self.field_cursor.previous()
        elif name == "backspace":
            self.buffer.pop_char(self.field_cursor)
        elif key.is_printable:
            self.buffer.append_char(self.field_cursor, key.character)

    # ------------------------------------------------------------- browsing
    def begin_edit(self) -> bool:
        profile = self.store.current()
        if profile is None:
            self.set_status("No host selected", error=True)
            return False
        self._enter_editing(ProfileDraft.from_profile(profile), EditTarget(self.store.selected_index))
        return True

    def begin_new(self) -> None:
        self._enter_editing(ProfileDraft.from_profile(Profile(name=NEW_HOST_NAME)), EditTarget.new())

    def _enter_editing(self, draft: ProfileDraft, target: EditTarget) -> None:
        self.clear_status()
        self.buffer = draft
        self.target = target
        self.field_cursor = ProfileField.NAME
        self.mode = Mode.EDITING

    def request_connect(self) -> SessionAction:
        profile = self.store.current()
        if profile is None:
            self.set_status("No host selected", error=True)
            return SessionAction.NONE
        self.connect_target = profile.name
        return SessionAction.CONNECT

    def fix_permissions(self) -> None:
        profile = self.store.current()
        if profile is None:
            self.set_status("No host selected", error=True)
            return
        if not profile.identity_file:
            self.set_status(f"{profile.name} has no IdentityFile", error=True)
            return
        path = os.path.expanduser(os.path.expandvars(profile.identity_file))
        report = self.fixer.tighten_permissions(path)
        self.set_status(report.summary(), error=not report.ok)

    def reload(self) -> None:
        try:
            self.store.reload()
        except OSError as exc:
            LOG.warning("Reload of %s failed: %s", self.store.path, exc)
            self.set_status(f"Unable to reload {self.store.path}: {exc}", error=True)
            return
        self.set_status(f"Loaded {len(self.store)} host(s)")

    # -------------------------------------------------------------- editing
    def cancel_edit(self) -> None:
        self._leave_editing()
        self.set_status("Edit cancelled")

    def commit_edit(self) -> bool:
        """Store the draft and save the file.

        Returns False when the draft is rejected. A failed save keeps the
        change in memory and is reported through the status message.
        """
        try:
            profile = self.buffer.to_profile()
        except ValueError:
            self.set_status("Host name cannot be empty", error=True)
            return False

        target = self.target
        if target.is_new:
            index = self.store.append(profile)
        else:
            index = target.index
            self.store.replace(index, profile)
        self.store.select(index)
        self._leave_editing()

        try:
            self.store.persist()
        except OSError as exc:
            LOG.exception("Failed to save %s", self.store.path)
            self.set_status(f"Failed to save {self.store.path}: {exc}", error=True)
        else:
            self.set_status(f"Saved {profile.name} to {self.store.path}")
        return True

    def _leave_editing(self) -> None:
        self.clear_status()
        self.buffer = None
        self.target = None
        self.field_cursor = ProfileField.NAME
        self.mode = Mode.BROWSING


__all__ = [
    "EditTarget",
    "EditorSession",
    "KeyDebouncer",
    "KeyPress",
    "Mode",
    "NEW_HOST_NAME",
    "SessionAction",
]
