"""
Block pairing and same-style block merging.

Delta documents put the block terminator (the newline carrying ``header``,
``list`` and friends) after the inline content it governs, so pairing scans
the operations right to left.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from models import Operation

from .group_types import Block, InlineRun, StandaloneItem, Unit
from .sequence_utils import flatten, group_consecutive_elements_while, slice_from_reverse_while

logger = logging.getLogger('quill_delta_renderer.grouper.blockgrouper')

DEFAULT_MERGE_OPTIONS = {
    'header': True,
    'code_blocks': True,
    'blockquotes': True,
    'custom_blocks': True,
}


def _can_be_in_block(op: Operation) -> bool:
    return not (
        op.is_just_newline()
        or op.is_standalone()
        or op.is_container_block()
    )


def pair_ops_with_their_block(ops: Sequence[Operation]) -> List[Unit]:
    """
    Segment operations into standalone items, blocks and inline runs.

    Args:
        ops: Converted operations in document order

    Returns:
        Units in document order, before any merging
    """
    result: List[Unit] = []
    index = len(ops) - 1

    while index >= 0:
        op = ops[index]

        if op.is_standalone():
            result.append(StandaloneItem(op))
        elif op.is_container_block():
            run = slice_from_reverse_while(ops, index - 1, _can_be_in_block)
            result.append(Block(op, run.elements))
            if run.slice_starts_at > -1:
                index = run.slice_starts_at
        else:
            run = slice_from_reverse_while(ops, index - 1, lambda o: o.is_inline())
            result.append(InlineRun(run.elements + [op]))
            if run.slice_starts_at > -1:
                index = run.slice_starts_at
        index -= 1

    result.reverse()
    logger.debug(f"Paired {len(ops)} operations into {len(result)} units")
    return result


def are_both_code_blocks_with_same_lang(block: Block, other: Block) -> bool:
    return block.op.is_code_block() and other.op.is_code_block() and block.op.has_same_lang_as(other.op)


def are_both_same_headers_with_same_adi(block: Block, other: Block) -> bool:
    return block.op.is_same_header_as(other.op) and block.op.has_same_adi_as(other.op)


def are_both_blockquotes_with_same_adi(block: Block, other: Block) -> bool:
    return block.op.is_blockquote() and other.op.is_blockquote() and block.op.has_same_adi_as(other.op)


def are_both_custom_blocks_with_same_attr(block: Block, other: Block) -> bool:
    return (
        block.op.is_custom_text_block()
        and other.op.is_custom_text_block()
        and block.op.has_same_attr(other.op)
    )


def group_consecutive_same_style_blocks(
    units: Sequence[Unit],
    blocks_of: Optional[Dict[str, bool]] = None
) -> List[Union[Unit, List[Block]]]:
    """
    Group adjacent blocks that represent one logical block split by soft line breaks.

    Args:
        units: Paired units
        blocks_of: Per-category toggles (header, code_blocks, blockquotes, custom_blocks)

    Returns:
        Units, with each mergeable run replaced by a list of its blocks
    """
    options = dict(DEFAULT_MERGE_OPTIONS)
    options.update(blocks_of or {})

    def same_style(current: Any, previous: Any) -> bool:
        if not isinstance(current, Block) or not isinstance(previous, Block):
            return False
        return (
            (options['code_blocks'] and are_both_code_blocks_with_same_lang(current, previous))
            or (options['blockquotes'] and are_both_blockquotes_with_same_adi(current, previous))
            or (options['header'] and are_both_same_headers_with_same_adi(current, previous))
            or (options['custom_blocks'] and are_both_custom_blocks_with_same_attr(current, previous))
        )

    return group_consecutive_elements_while(units, same_style)


def reduce_consecutive_same_style_blocks_to_one(
    groups: Sequence[Union[Unit, List[Block]]]
) -> List[Unit]:
    """
    Collapse each run of same-style blocks into its first block.

    Member children are joined with line-break operations; empty blocks,
    merged or not, get a single line break so they always render something.
    """
    result: List[Unit] = []
    for group in groups:
        if not isinstance(group, list):
            if isinstance(group, Block) and not group.ops:
                group = Block(group.op, [Operation.new_line()])
            result.append(group)
            continue

        last_index = len(group) - 1
        merged_ops = flatten(
            [Operation.new_line()] if not block.ops
            else block.ops + ([Operation.new_line()] if i < last_index else [])
            for i, block in enumerate(group)
        )
        result.append(Block(group[0].op, merged_ops))
    return result


def merge_same_style_blocks(
    units: Sequence[Unit],
    blocks_of: Optional[Dict[str, bool]] = None
) -> List[Unit]:
    """Group and reduce same-style blocks in one step."""
    merged = reduce_consecutive_same_style_blocks_to_one(
        group_consecutive_same_style_blocks(units, blocks_of)
    )
    logger.debug(f"Same-style merge reduced {len(units)} units to {len(merged)}")
    return merged
