"""
Pure projection of the editor state into something a renderer can draw.

Nothing here touches the terminal; the Textual app turns a :class:`ViewModel`
into widget updates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from sshdeck.profile import ProfileField
from sshdeck.profile_store import ProfileStore
from sshdeck.tui.editor import EditorSession, Mode

EMPTY_MESSAGE = "No hosts found."
BROWSE_HINT = "↑/↓ select  e edit  n new  Enter connect  p fix key permissions  r reload  q quit"
EDIT_HINT = "Tab/↓ next field  Shift+Tab/↑ previous  Enter save  Esc cancel"


@dataclass(frozen=True)
class Row:
    label: str
    is_selected: bool


@dataclass(frozen=True)
class FormField:
    label: str
    value: str
    is_focused: bool
    is_set: bool = True


@dataclass(frozen=True)
class ViewModel:
    title: str
    mode: Mode
    rows: List[Row] = field(default_factory=list)
    empty_message: Optional[str] = None
    form: List[FormField] = field(default_factory=list)
    focused_index: Optional[int] = None
    status: Optional[str] = None
    status_is_error: bool = False
    hint: str = ""


def _form_fields(session: EditorSession) -> List[FormField]:
    fields: List[FormField] = []
    for member in ProfileField:
        value = session.buffer.get(member)
        fields.append(
            FormField(
                label=member.label,
                value=value or "",
                is_focused=member is session.field_cursor,
                is_set=value is not None,
            )
        )
    return fields


def build_view_model(session: EditorSession, store: ProfileStore) -> ViewModel:
    rows = [
        Row(label=profile.label, is_selected=index == store.selected_index)
        for index, profile in enumerate(store)
    ]
    form: List[FormField] = []
    focused_index: Optional[int] = None
    if session.mode is Mode.EDITING and session.buffer is not None:
        form = _form_fields(session)
        focused_index = list(ProfileField).index(session.field_cursor)

    return ViewModel(
        title=f"SSH Hosts ({store.path})",
        mode=session.mode,
        rows=rows,
        empty_message=None if rows else EMPTY_MESSAGE,
        form=form,
        focused_index=focused_index,
        status=session.status_message,
        status_is_error=session.status_is_error,
        hint=EDIT_HINT if session.mode is Mode.EDITING else BROWSE_HINT,
    )


__all__ = ["FormField", "Row", "ViewModel", "build_view_model"]
