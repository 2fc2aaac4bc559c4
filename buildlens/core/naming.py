"""Display name helpers."""

from __future__ import annotations

ELLIPSIS = "..."


def elide(name: str, length: int = 20) -> str:
    """Shorten *name* to *length* characters by cutting out its middle.

    >>> elide("package_with_one_revision")
    'package_w...revision'
    """
    if len(name) <= length:
        return name
    room = max(length - len(ELLIPSIS), 2)
    head = -(-room // 2)
    tail = room // 2
    return f"{name[:head]}{ELLIPSIS}{name[-tail:]}"
