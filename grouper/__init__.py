"""Grouping stages turning a flat operation list into the rendering plan."""

from .block_grouper import (
    group_consecutive_same_style_blocks,
    merge_same_style_blocks,
    pair_ops_with_their_block,
    reduce_consecutive_same_style_blocks_to_one,
)
from .group_types import (
    Block,
    InlineRun,
    ListGroup,
    ListItem,
    StandaloneItem,
    TableCell,
    TableGroup,
    TableRow,
    Unit,
)
from .list_nester import ListNester
from .table_grouper import TableGrouper

__all__ = [
    'pair_ops_with_their_block',
    'group_consecutive_same_style_blocks',
    'reduce_consecutive_same_style_blocks_to_one',
    'merge_same_style_blocks',
    'ListNester',
    'TableGrouper',
    'InlineRun',
    'Block',
    'StandaloneItem',
    'ListItem',
    'ListGroup',
    'TableCell',
    'TableRow',
    'TableGroup',
    'Unit',
]
