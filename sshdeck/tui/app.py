from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.timer import Timer
from textual.widgets import Header, Static

from sshdeck.config import Config
from sshdeck.permissions import PermissionFixer
from sshdeck.profile_store import ProfileStore
from sshdeck.tui.command_builder import build_ssh_command, format_command, launch_connection
from sshdeck.tui.editor import EditorSession, KeyPress, Mode, SessionAction
from sshdeck.tui.view_model import ViewModel, build_view_model

LOG = logging.getLogger(__name__)


class HostList(Static, can_focus=True):
    """Host list that owns keyboard focus and forwards every key to the app."""

    class KeyPressed(Message):
        """Sent for each key the terminal delivers."""

        def __init__(self, key: KeyPress):
            super().__init__()
            self.key = key

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.post_message(self.KeyPressed(KeyPress(event.key, event.character)))

    def show_rows(self, view: ViewModel) -> None:
        if not view.rows:
            self.update(Text(view.empty_message or "", style="italic"))
            return
        text = Text()
        for index, row in enumerate(view.rows):
            if index:
                text.append("\n")
            if row.is_selected:
                text.append(f"→ {row.label}", style="reverse")
            else:
                text.append(f"  {row.label}")
        self.update(text)


class EditForm(Static):
    """Field list of the profile being edited."""

    def show_form(self, view: ViewModel) -> None:
        text = Text()
        width = max((len(item.label) for item in view.form), default=0)
        for index, item in enumerate(view.form):
            if index:
                text.append("\n")
            text.append(f"{item.label:<{width}}  ", style="bold")
            if item.is_focused:
                text.append(f"{item.value}_", style="reverse")
            elif item.is_set:
                text.append(item.value)
            else:
                text.append("-", style="dim")
        self.update(text)


class StatusBar(Static):
    """Single-line status indicator."""

    def set_message(self, message: str, *, error: bool = False) -> None:
        self.set_class(error, "error")
        self.update(message or "")


class SshDeckApp(App[int]):
    """Textual front end for browsing, editing and launching SSH host profiles."""

    TITLE = "sshdeck"
    CSS = """
    Screen {
        layout: vertical;
    }

    #body {
        height: 1fr;
        padding: 1 2;
    }

    #list-panel {
        margin-right: 2;
    }

    #list-panel, #form-panel {
        height: 1fr;
        border: round $secondary;
        padding: 0 1;
    }

    #form-panel {
        display: none;
    }

    #host-list {
        height: 1fr;
        overflow-y: auto;
    }

    #hint {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }

    #status {
        height: 3;
        content-align: left middle;
        padding: 0 1;
        background: $boost;
    }

    #status.error {
        background: $error;
        color: $text;
    }

    .panel-title {
        text-style: bold;
        padding-bottom: 1;
    }
    """

    def __init__(
        self,
        store: ProfileStore,
        session: Optional[EditorSession] = None,
        *,
        status_timeout: float = 6,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.store = store
        self.session = session or EditorSession(store)
        self.status_timeout = status_timeout
        self.connect_host: Optional[str] = None
        self._status_timer: Optional[Timer] = None
        self._shown_status: Optional[str] = None

    # --------------------------------------------------------------------- UI
    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="body"):
            with Vertical(id="list-panel"):
                yield Static("", id="list-title", classes="panel-title")
                yield HostList(id="host-list")
            with Vertical(id="form-panel"):
                yield Static("Edit host", id="form-title", classes="panel-title")
                yield EditForm(id="edit-form")
        yield Static("", id="hint")
        yield StatusBar(id="status")

    def on_mount(self) -> None:
        self.host_list = self.query_one(HostList)
        self.edit_form = self.query_one(EditForm)
        self.status_bar = self.query_one(StatusBar)
        self.host_list.focus()
        if not self.session.status_message:
            self.session.set_status(f"Loaded {len(self.store)} host(s)")
        self.refresh_view()

    # ----------------------------------------------------------------- events
    def on_host_list_key_pressed(self, message: HostList.KeyPressed) -> None:
        message.stop()
        self.handle_key_press(message.key)

    def handle_key_press(self, key: KeyPress) -> None:
        action = self.session.handle_key(key)
        if action is SessionAction.QUIT:
            self.exit(0)
            return
        if action is SessionAction.CONNECT:
            self.connect_host = self.session.connect_target
            self.exit(0)
            return
        self.refresh_view()

    # ----------------------------------------------------------------- render
    def refresh_view(self) -> None:
        view = build_view_model(self.session, self.store)
        self.query_one("#list-title", Static).update(view.title)
        self.host_list.show_rows(view)

        editing = view.mode is Mode.EDITING
        self.query_one("#form-panel").display = editing
        if editing:
            target = self.session.target
            title = "New host" if target is not None and target.is_new else "Edit host"
            self.query_one("#form-title", Static).update(title)
            self.edit_form.show_form(view)

        self.query_one("#hint", Static).update(view.hint)
        self._show_status(view.status, error=view.status_is_error)

    def _show_status(self, message: Optional[str], *, error: bool) -> None:
        if message == self._shown_status and not error:
            return
        self._shown_status = message
        if self._status_timer:
            self._status_timer.stop()
            self._status_timer = None
        self.status_bar.set_message(message or "", error=error)
        if message and not error and self.status_timeout > 0:
            self._status_timer = self.set_timer(self.status_timeout, self._clear_status, name="status-clear")

    def _clear_status(self) -> None:
        self._status_timer = None
        self.session.clear_status()
        self.refresh_view()


def parse_args(argv: Optional[Sequence[str]] = None):
    parser = argparse.ArgumentParser(description="Edit and launch SSH host profiles")
    parser.add_argument(
        "--config",
        dest="config_path",
        help="SSH config file to edit (default: ~/.ssh/config)",
    )
    parser.add_argument(
        "--debounce-ms",
        type=float,
        default=None,
        help="Ignore a repeated key arriving within this many milliseconds (0 disables)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Python logging level (default: WARNING)",
    )
    return parser.parse_args(argv)


def connect(host_name: str, config: Config, config_path: str) -> int:
    """Run the SSH client for *host_name* once the TUI has released the terminal."""
    try:
        cmd = build_ssh_command(
            host_name,
            ssh_command=config.get_setting("ssh_command", "ssh"),
            config_path=config_path,
        )
    except ValueError as exc:
        LOG.error("Failed to build SSH command: %s", exc)
        print(f"Failed to prepare SSH command: {exc}")
        return 1

    print(f"Connecting with: {format_command(cmd)}")
    rc = launch_connection(cmd)
    if rc == -1:
        print(f"{cmd[0]} could not be started; connection to {host_name} failed.")
        return 1
    if rc != 0:
        print(f"SSH exited with code {rc}")
    return rc


def main(argv: Optional[Sequence[str]] = None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    config = Config()
    config_path = args.config_path or config.get_ssh_config_path()
    debounce = config.get_debounce_seconds() if args.debounce_ms is None else max(args.debounce_ms, 0) / 1000.0

    store = ProfileStore.load(config_path)
    session = EditorSession(store, fixer=PermissionFixer(), debounce=debounce)
    app = SshDeckApp(store, session, status_timeout=config.get_status_timeout())
    try:
        app.run()
    except KeyboardInterrupt:
        return 0

    if app.connect_host:
        return connect(app.connect_host, config, config_path)
    return 0


__all__ = ["main", "SshDeckApp"]


if __name__ == "__main__":
    raise SystemExit(main())
