"""One-shot messages carried in the session across a redirect."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starlette.requests import Request

_SESSION_KEY = "_flashes"


def flash(request: Request, category: str, message: str) -> None:
    flashes = list(request.session.get(_SESSION_KEY, []))
    flashes.append([category, message])
    request.session[_SESSION_KEY] = flashes


def get_flashed_messages(request: Request) -> list[tuple[str, str]]:
    """Return and clear pending messages as ``(category, message)`` pairs."""
    flashes = request.session.pop(_SESSION_KEY, [])
    return [(category, message) for category, message in flashes]
