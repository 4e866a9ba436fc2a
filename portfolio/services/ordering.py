"""
Ordered-collection helpers.

A collection's presentation order is the ascending `order` value of its
records. A move never computes a minimal delta: the whole sequence is
renumbered 0..n-1 in its new arrangement and resubmitted.
"""
from typing import Iterable, List, Sequence, TypeVar

from portfolio.exceptions import ValidationError

T = TypeVar("T")


def move(sequence: Sequence[T], source: int, destination: int) -> List[T]:
    """
    Return a copy of `sequence` with the element at `source` relocated to `destination`.
    The destination is clamped to the bounds of the sequence.
    """
    if not 0 <= source < len(sequence):
        raise ValidationError(f"Source index {source} is out of range", reason="invalid_position")

    items = list(sequence)
    item = items.pop(source)
    destination = max(0, min(destination, len(items)))
    items.insert(destination, item)
    return items


def renumber(ids: Iterable[int]) -> List[tuple[int, int]]:
    """Assign sequential order values 0..n-1 to ids in the given sequence."""
    return [(record_id, position) for position, record_id in enumerate(ids)]


def normalize_entries(entries: Iterable) -> List[tuple[int, int]]:
    """
    Turn submitted {id, order} entries into (id, order) pairs.
    Rejects duplicate ids since the final order would depend on write order.
    """
    pairs = [(entry.id, entry.order) for entry in entries]
    ids = [record_id for record_id, _ in pairs]
    if len(ids) != len(set(ids)):
        raise ValidationError("Duplicate ids are not allowed", reason="duplicate_ids")
    return pairs
