"""Position identifiers for nodes in a test-run tree.

An id is a tuple of positive integers. The root is ``()``; child ``n`` of
``(1, 2)`` is ``(1, 2, n)``. Siblings are numbered from 1 without gaps.
"""

from __future__ import annotations

TestId = tuple[int, ...]

ROOT: TestId = ()


def child(node_id: TestId, n: int) -> TestId:
    """Return the id of the ``n``-th child of ``node_id``."""
    if n < 1:
        raise ValueError(f"child index must be >= 1, got {n}")
    return (*node_id, n)


def parent(node_id: TestId) -> TestId | None:
    """Return the parent id, or None for the root."""
    if not node_id:
        return None
    return node_id[:-1]


def is_ancestor(ancestor: TestId | None, node_id: TestId | None) -> bool:
    """True if ``ancestor`` is a strict ancestor of ``node_id``."""
    if ancestor is None or node_id is None:
        return False
    return len(ancestor) < len(node_id) and node_id[: len(ancestor)] == ancestor


def format_id(node_id: TestId | None) -> str:
    if node_id is None:
        return "-"
    return "[" + ",".join(str(n) for n in node_id) + "]"


__all__ = ["ROOT", "TestId", "child", "format_id", "is_ancestor", "parent"]
