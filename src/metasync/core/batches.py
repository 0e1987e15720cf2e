"""Split partition lists into bounded-size batches for the catalog service."""

from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")


def plan_batches(items: Sequence[T], batch_size: int) -> list[list[T]]:
    """
    Split `items` into consecutive batches of at most `batch_size` elements.

    Order is preserved and only the last batch may be smaller. A `batch_size`
    of zero or less means unbounded: exactly one batch holding every item.

    Args:
        items: Items to split.
        batch_size: Maximum batch length.

    Returns:
        The list of batches; concatenated, they equal `items`.
    """
    if batch_size <= 0:
        return [list(items)]
    return [list(items[i : i + batch_size]) for i in range(0, len(items), batch_size)]
