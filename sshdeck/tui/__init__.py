"""
Terminal front end for sshdeck.

``editor`` holds the key-driven browse/edit state machine, ``view_model``
projects it for drawing, ``command_builder`` starts the ``ssh`` client and
``app`` wires them into a Textual application. :func:`main` is the ``sshdeck``
console script; ``app`` is imported on call so the Textual stack loads only
when the UI actually starts.
"""

from __future__ import annotations

from typing import Any

__all__ = ["main"]


def main(*args: Any, **kwargs: Any) -> Any:
    from .app import main as _app_main

    return _app_main(*args, **kwargs)
