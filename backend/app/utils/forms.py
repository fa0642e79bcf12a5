from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from starlette.datastructures import UploadFile

if TYPE_CHECKING:
    from starlette.requests import Request

_KEY_PART = re.compile(r"\[([^\]]*)\]")


def parse_nested_form(items: list[tuple[str, Any]]) -> dict[str, Any]:
    """Decode bracketed form names into nested dicts.

    ``[("listing[image][url]", "x")]`` becomes ``{"listing": {"image": {"url": "x"}}}``.
    Later duplicates win.
    """
    result: dict[str, Any] = {}
    for name, value in items:
        head, _, rest = name.partition("[")
        keys = [head] + (_KEY_PART.findall("[" + rest) if rest else [])
        node = result
        for key in keys[:-1]:
            child = node.get(key)
            if not isinstance(child, dict):
                child = {}
                node[key] = child
            node = child
        node[keys[-1]] = value
    return result


async def read_nested_form(request: Request) -> dict[str, Any]:
    form = await request.form()
    return parse_nested_form(list(form.multi_items()))


def pop_upload(data: dict[str, Any], field: str = "image") -> UploadFile | None:
    """Remove ``field`` from the decoded form, returning it if a file was picked."""
    value = data.pop(field, None)
    if isinstance(value, UploadFile) and value.filename:
        return value
    return None
