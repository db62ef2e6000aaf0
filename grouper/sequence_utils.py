"""Sequence helpers shared by the grouping stages."""

from typing import Any, Callable, Iterable, List, NamedTuple, Sequence, TypeVar, Union

T = TypeVar('T')


class ArraySlice(NamedTuple):
    """A contiguous slice of a sequence and the index it starts at (-1 when empty)."""
    slice_starts_at: int
    elements: List[Any]


def flatten(items: Iterable[Any]) -> List[Any]:
    """Flatten nested lists of any depth into one list."""
    result: List[Any] = []
    for item in items:
        if isinstance(item, list):
            result.extend(flatten(item))
        else:
            result.append(item)
    return result


def group_consecutive_elements_while(
    elements: Sequence[T],
    predicate: Callable[[T, T], bool]
) -> List[Union[T, List[T]]]:
    """
    Group runs of consecutive elements for which ``predicate(current, previous)`` holds.

    Runs of two or more elements are returned as lists, single elements are
    returned unwrapped, so callers can tell a merged run from a lone element.

    Args:
        elements: Elements to scan in order
        predicate: Adjacency test called with the current and the previous element

    Returns:
        List mixing lone elements and lists of grouped elements
    """
    groups: List[List[T]] = []
    for index, element in enumerate(elements):
        if index > 0 and predicate(element, elements[index - 1]):
            groups[-1].append(element)
        else:
            groups.append([element])
    return [group[0] if len(group) == 1 else group for group in groups]


def slice_from_reverse_while(
    elements: Sequence[T],
    start_index: int,
    predicate: Callable[[T], bool]
) -> ArraySlice:
    """Collect the maximal run ending at ``start_index`` whose elements satisfy ``predicate``."""
    collected: List[T] = []
    starts_at = -1
    index = start_index
    while index >= 0 and predicate(elements[index]):
        collected.append(elements[index])
        starts_at = index
        index -= 1
    collected.reverse()
    return ArraySlice(starts_at, collected)
