"""
List nesting: rebuilds hierarchical lists from flat list-item blocks.

The pass runs in three phases:

1. Flat grouping - consecutive list-item blocks of the same kind and indent
   become one ListGroup; consecutive ListGroups form a section.
2. Indent resolution - inside each section, groups are attached, deepest
   indent first, under the last item of the nearest earlier group with a
   lower indent. Groups without such a parent stay at top level.
3. Root merge - adjacent top-level ListGroups of the same kind are joined.
"""

import logging
from typing import Any, List, Optional, Sequence, Union

from .group_types import Block, ListGroup, ListItem, Unit
from .sequence_utils import flatten, group_consecutive_elements_while


def _is_list_block(unit: Any) -> bool:
    return isinstance(unit, Block) and unit.op.is_list()


class ListNester:
    """Turns list-item blocks into nested ListGroup trees."""

    def __init__(self, logger: logging.Logger = None):
        """Initialize with optional logger."""
        self.logger = logger or logging.getLogger('quill_delta_renderer.grouper.listnester')

    def nest(self, units: Sequence[Unit]) -> List[Unit]:
        """
        Nest all list content of a unit sequence.

        Args:
            units: Units after same-style merge and table grouping

        Returns:
            Units where every list is a top-level ListGroup tree
        """
        self._normalize_indents(units)
        list_grouped = self._convert_list_blocks_to_list_groups(units)
        sections = self._group_consecutive_list_groups(list_grouped)

        nested = flatten(
            self._nest_list_section(section) if isinstance(section, list) else section
            for section in sections
        )

        roots = group_consecutive_elements_while(
            nested,
            lambda current, previous: (
                isinstance(current, ListGroup)
                and isinstance(previous, ListGroup)
                and current.items[0].item.op.is_same_list_as(previous.items[0].item.op)
            )
        )
        return [
            ListGroup([li for group in root for li in group.items]) if isinstance(root, list) else root
            for root in roots
        ]

    def _normalize_indents(self, units: Sequence[Unit]) -> None:
        """Default a missing indent to 0 on list-item defining operations."""
        for unit in units:
            if _is_list_block(unit):
                unit.op.attributes['indent'] = unit.op.attributes.get('indent') or 0

    def _convert_list_blocks_to_list_groups(self, units: Sequence[Unit]) -> List[Unit]:
        grouped = group_consecutive_elements_while(
            units,
            lambda current, previous: (
                _is_list_block(current)
                and _is_list_block(previous)
                and current.op.is_same_list_as(previous.op)
                and current.op.has_same_indentation_as(previous.op)
            )
        )

        result: List[Unit] = []
        for item in grouped:
            if isinstance(item, list):
                result.append(ListGroup([ListItem(block) for block in item]))
            elif _is_list_block(item):
                result.append(ListGroup([ListItem(item)]))
            else:
                result.append(item)
        return result

    def _group_consecutive_list_groups(self, units: Sequence[Unit]) -> List[Union[Unit, List[ListGroup]]]:
        grouped = group_consecutive_elements_while(
            units,
            lambda current, previous: isinstance(current, ListGroup) and isinstance(previous, ListGroup)
        )
        # A lone ListGroup is a section of one.
        return [[item] if isinstance(item, ListGroup) else item for item in grouped]

    def _nest_list_section(self, section: List[ListGroup]) -> List[ListGroup]:
        """
        Resolve indentation inside one section.

        Groups are addressed by their index in ``section``; ``top_level`` holds
        the indices still at the top, in document order.
        """
        depths = [group.indent for group in section]
        top_level = list(range(len(section)))

        for depth in sorted({d for d in depths if d > 0}, reverse=True):
            for index in [i for i in top_level if depths[i] == depth]:
                position = top_level.index(index)
                parent = self._find_parent(top_level[:position], depths, depth)
                if parent is None:
                    self.logger.debug(f"No parent for list group at indent {depth}, keeping it at top level")
                    continue
                section[parent].items[-1].attach(section[index])
                top_level.remove(index)

        return [section[i] for i in top_level]

    @staticmethod
    def _find_parent(candidates: List[int], depths: List[int], depth: int) -> Optional[int]:
        """Nearest earlier group whose indent is strictly lower than ``depth``."""
        for index in reversed(candidates):
            if depths[index] < depth:
                return index
        return None
