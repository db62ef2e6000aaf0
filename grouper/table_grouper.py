"""Reassembles runs of table-cell blocks into tables."""

import logging
from typing import Any, List, Sequence

from .group_types import Block, TableCell, TableGroup, TableRow, Unit
from .sequence_utils import group_consecutive_elements_while


def _is_table_block(unit: Any) -> bool:
    return isinstance(unit, Block) and unit.op.is_table()


class TableGrouper:
    """Groups consecutive table-cell blocks into rows (by row id) and tables."""

    def __init__(self, logger: logging.Logger = None):
        """Initialize with optional logger."""
        self.logger = logger or logging.getLogger('quill_delta_renderer.grouper.tablegrouper')

    def group(self, units: Sequence[Unit]) -> List[Unit]:
        """Replace every maximal run of table-cell blocks with one TableGroup."""
        grouped = group_consecutive_elements_while(
            units,
            lambda current, previous: _is_table_block(current) and _is_table_block(previous)
        )

        result: List[Unit] = []
        for item in grouped:
            if isinstance(item, list):
                result.append(TableGroup(self._convert_to_rows(item)))
            elif _is_table_block(item):
                result.append(TableGroup([TableRow([TableCell(item)])]))
            else:
                result.append(item)

        tables = sum(1 for unit in result if isinstance(unit, TableGroup))
        if tables:
            self.logger.debug(f"Built {tables} table(s)")
        return result

    def _convert_to_rows(self, blocks: List[Block]) -> List[TableRow]:
        """Partition cells into rows of contiguous equal row identifiers."""
        grouped = group_consecutive_elements_while(
            blocks,
            lambda current, previous: current.op.is_same_table_row_as(previous.op)
        )
        return [
            TableRow([TableCell(block) for block in item])
            if isinstance(item, list)
            else TableRow([TableCell(item)])
            for item in grouped
        ]
