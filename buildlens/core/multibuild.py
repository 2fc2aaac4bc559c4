"""Multibuild package names — ``base`` or ``base:flavor``.

A literal ``:`` may appear inside a base name, so the split point is never
guessed.  A trailing segment counts as a flavor only if the backend lists
it among the package's flavors; otherwise the whole string is the base
name.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from buildlens.models.jobs import BuildStatus
from buildlens.models.packages import PackageRef

SEPARATOR = ":"


def parse(project: str, name: str, flavors: Iterable[str] = ()) -> PackageRef:
    """Split *name* on a backend-confirmed flavor.

    When several known flavors match, the shortest one (the rightmost
    split point) wins.

    >>> str(parse("home:tom", "pkg:docs", ["docs"]))
    'pkg:docs'
    >>> parse("home:tom", "pkg:docs").flavor is None
    True
    """
    for flavor in sorted({f for f in flavors if f}, key=len):
        suffix = f"{SEPARATOR}{flavor}"
        if name.endswith(suffix) and len(name) > len(suffix):
            return PackageRef(
                project=project,
                base_name=name[: -len(suffix)],
                flavor=flavor,
            )
    return PackageRef(project=project, base_name=name)


def format(ref: PackageRef) -> str:  # noqa: A001
    """Serialize *ref* back to the composite identifier."""
    return str(ref)


def base_name_candidates(name: str) -> list[str]:
    """Possible base names for *name*, longest first.

    Used to find which package to ask for its flavor list before the
    split point is known.
    """
    candidates = [name]
    head = name
    while SEPARATOR in head:
        head = head.rpartition(SEPARATOR)[0]
        if head:
            candidates.append(head)
    return candidates


def select_status(
    statuses: Sequence[BuildStatus], ref: PackageRef
) -> BuildStatus | None:
    """Pick the status entry addressed by *ref* among several."""
    wanted = format(ref)
    for status in statuses:
        if status.package_name == wanted:
            return status
    return None
