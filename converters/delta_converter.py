"""Delta to HTML converter: runs the grouping pipeline and renders each unit."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from bs4 import BeautifulSoup, Tag

from grouper import (
    Block,
    InlineRun,
    ListGroup,
    ListItem,
    ListNester,
    StandaloneItem,
    TableCell,
    TableGrouper,
    TableGroup,
    TableRow,
    Unit,
    merge_same_style_blocks,
    pair_ops_with_their_block,
)
from models import GroupType, Operation

from .html_utils import BR_TAG, encode_html, make_end_tag, make_start_tag
from .op_to_html import DEFAULT_OPTIONS as OP_DEFAULT_OPTIONS
from .op_to_html import OpToHtmlConverter
from .ops_converter import InsertOpsConverter

DEFAULT_OPTIONS: Dict[str, Any] = dict(OP_DEFAULT_OPTIONS)
DEFAULT_OPTIONS.update({
    'inline_styles': False,
    'ordered_list_tag': 'ol',
    'bullet_list_tag': 'ol',
    'link_target': '_blank',
    'multi_line_blockquote': True,
    'multi_line_header': True,
    'multi_line_codeblock': True,
    'multi_line_paragraph': True,
    'multi_line_custom_block': True,
})

DEFAULT_TREE_CLASSES = ('ql-editor', 'ql-container', 'cell-content')

# Defaults that an explicit None removes instead of keeping.
CLEARABLE_OPTIONS = ('link_target', 'link_rel')

# Options forwarded to the per-operation converter.
OP_OPTION_KEYS = tuple(OP_DEFAULT_OPTIONS)


@dataclass
class RenderCallbacks:
    """
    Optional render hooks.

    before_render(group_type, unit) -> markup or None; non-empty markup
    replaces the default rendering of the unit.
    after_render(group_type, markup) -> markup; always applied.
    render_custom(op, context_op) -> markup for custom embeds; default is empty.
    """

    before_render: Optional[Callable[[GroupType, Unit], Optional[str]]] = None
    after_render: Optional[Callable[[GroupType, str], str]] = None
    render_custom: Optional[Callable[[Operation, Optional[Operation]], str]] = None


class DeltaToHtmlConverter:
    """
    Converts a list of delta insert records into HTML.

    Pipeline: input conversion, block pairing, same-style merge, table
    grouping, list nesting, then per-unit rendering.
    """

    def __init__(
        self,
        delta_ops: Any,
        config: Dict[str, Any] = None,
        callbacks: RenderCallbacks = None,
        logger: logging.Logger = None
    ):
        """
        Initialize converter.

        Args:
            delta_ops: Raw delta records
            config: Converter options (see DEFAULT_OPTIONS)
            callbacks: Optional render hooks
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger('quill_delta_renderer.converters.deltaconverter')
        self.raw_delta_ops = delta_ops
        self.callbacks = callbacks or RenderCallbacks()

        self.options = dict(DEFAULT_OPTIONS)
        self.options.update({
            k: v for k, v in (config or {}).items()
            if v is not None or k in CLEARABLE_OPTIONS
        })

        self.converter_options = {key: self.options.get(key) for key in OP_OPTION_KEYS}
        self.converter_options['inline_styles'] = self._resolve_inline_styles(self.options.get('inline_styles'))

        self.ops_converter = InsertOpsConverter(self.logger)
        self.table_grouper = TableGrouper(self.logger)
        self.list_nester = ListNester(self.logger)

    @staticmethod
    def _resolve_inline_styles(inline_styles: Any) -> Any:
        """None for class mode, True or a non-empty override mapping for inline style mode."""
        if isinstance(inline_styles, dict):
            return inline_styles or True
        return True if inline_styles else None

    # --- pipeline ---------------------------------------------------------

    def get_grouped_ops(self) -> List[Unit]:
        """Run every grouping stage and return the final rendering plan."""
        ops = self.ops_converter.convert(self.raw_delta_ops)
        self.logger.debug(f"Converted {len(ops)} operations")

        units = pair_ops_with_their_block(ops)
        units = merge_same_style_blocks(units, {
            'blockquotes': bool(self.options.get('multi_line_blockquote')),
            'header': bool(self.options.get('multi_line_header')),
            'code_blocks': bool(self.options.get('multi_line_codeblock')),
            'custom_blocks': bool(self.options.get('multi_line_custom_block')),
        })
        units = self.table_grouper.group(units)
        units = self.list_nester.nest(units)
        self.logger.debug(f"Rendering plan has {len(units)} top-level units")
        return units

    # --- outputs ----------------------------------------------------------

    def convert(self) -> str:
        """Render the whole document to one markup string."""
        return ''.join(self.render_groups())

    def render_groups(self) -> List[str]:
        """Render each top-level unit to markup, in document order."""
        return [self._render_unit(unit) for unit in self.get_grouped_ops()]

    def convert_to_tree(self, classes: Optional[List[str]] = None) -> List[Tag]:
        """
        Render each top-level unit as a BeautifulSoup ``div`` node.

        Args:
            classes: Wrapper classes for every node (default ql-editor ql-container cell-content)

        Returns:
            One wrapper node per top-level unit
        """
        wrapper_classes = list(classes if classes is not None else DEFAULT_TREE_CLASSES)
        soup = BeautifulSoup('', 'lxml')
        nodes = []
        for unit in self.get_grouped_ops():
            if isinstance(unit, StandaloneItem) and not unit.op.is_custom_embed():
                nodes.append(self._frame_node(soup, unit.op, wrapper_classes))
                continue
            node = soup.new_tag('div', attrs={'class': ' '.join(wrapper_classes)})
            fragment = BeautifulSoup(self._render_unit_body(unit), 'lxml')
            container = fragment.body or fragment
            for child in list(container.contents):
                node.append(child.extract())
            nodes.append(node)
        return nodes

    def get_grouped_delta(self) -> List[List[Dict[str, Any]]]:
        """Raw records that produced each top-level unit, in document order."""
        grouped = []
        for unit in self.get_grouped_ops():
            origins: List[Dict[str, Any]] = []
            for op in self._unit_ops(unit):
                if op.origin is not None and not any(op.origin is seen for seen in origins):
                    origins.append(op.origin)
            grouped.append(origins)
        return grouped

    # --- rendering --------------------------------------------------------

    def _render_unit(self, unit: Unit) -> str:
        if isinstance(unit, ListGroup):
            return self._render_with_callbacks(GroupType.LIST, unit, lambda: self._render_list(unit))
        if isinstance(unit, TableGroup):
            return self._render_with_callbacks(GroupType.TABLE, unit, lambda: self._render_table(unit))
        if isinstance(unit, Block):
            return self._render_with_callbacks(
                GroupType.BLOCK, unit, lambda: self._render_block(unit.op, unit.ops)
            )
        if isinstance(unit, StandaloneItem):
            if unit.op.is_custom_embed():
                return self._render_custom(unit.op, None)
            return self._render_with_callbacks(
                GroupType.IFRAME, unit, lambda: OpToHtmlConverter(unit.op, self.converter_options).get_html()
            )
        return self._render_with_callbacks(
            GroupType.INLINE_GROUP, unit, lambda: self._render_inlines(unit.ops, True)
        )

    def _render_unit_body(self, unit: Unit) -> str:
        """Markup for a tree node: default rendering without callbacks."""
        if isinstance(unit, ListGroup):
            return self._render_list(unit)
        if isinstance(unit, TableGroup):
            return self._render_table(unit)
        if isinstance(unit, Block):
            return self._render_block(unit.op, unit.ops)
        if isinstance(unit, StandaloneItem):
            return self._render_custom(unit.op, None)
        return self._render_inlines(unit.ops, True)

    def _get_list_tag(self, op: Operation) -> str:
        if op.is_ordered_list():
            return self.options.get('ordered_list_tag') or 'ol'
        if op.is_list():
            return self.options.get('bullet_list_tag') or 'ol'
        return ''

    def _render_list(self, list_group: ListGroup) -> str:
        tag = self._get_list_tag(list_group.items[0].item.op)
        return (
            make_start_tag(tag)
            + ''.join(self._render_list_item(li) for li in list_group.items)
            + make_end_tag(tag)
        )

    def _render_list_item(self, li: ListItem) -> str:
        parts = OpToHtmlConverter(li.item.op, self.converter_options).get_html_parts()
        inner = self._render_list(li.inner_list) if li.inner_list else ''
        return parts.opening_tag + self._render_inlines(li.item.ops, False) + inner + parts.closing_tag

    def _render_table(self, table: TableGroup) -> str:
        return (
            make_start_tag('table')
            + make_start_tag('tbody')
            + ''.join(self._render_table_row(row) for row in table.rows)
            + make_end_tag('tbody')
            + make_end_tag('table')
        )

    def _render_table_row(self, row: TableRow) -> str:
        return (
            make_start_tag('tr')
            + ''.join(self._render_table_cell(cell) for cell in row.cells)
            + make_end_tag('tr')
        )

    def _render_table_cell(self, cell: TableCell) -> str:
        parts = OpToHtmlConverter(cell.item.op, self.converter_options).get_html_parts()
        return (
            make_start_tag('td', [('data-row', cell.item.op.attributes.get('table'))])
            + parts.opening_tag
            + self._render_inlines(cell.item.ops, False)
            + parts.closing_tag
            + make_end_tag('td')
        )

    def _render_block(self, block_op: Operation, ops: List[Operation]) -> str:
        parts = OpToHtmlConverter(block_op, self.converter_options).get_html_parts()

        if block_op.is_code_block():
            code = ''.join(
                self._render_custom(op, block_op) if op.is_custom_embed() else str(op.insert.value)
                for op in ops
            )
            return parts.opening_tag + encode_html(code) + parts.closing_tag

        inlines = ''.join(self._render_inline(op, block_op) for op in ops)
        return parts.opening_tag + (inlines or BR_TAG) + parts.closing_tag

    def _render_inlines(self, ops: List[Operation], is_inline_group: bool = True) -> str:
        markup = ''.join(self._render_inline(op, None) for op in ops)
        if not is_inline_group:
            return markup

        start_tag = make_start_tag(self.options.get('paragraph_tag'))
        end_tag = make_end_tag(self.options.get('paragraph_tag'))
        if markup == BR_TAG or self.options.get('multi_line_paragraph'):
            return start_tag + markup + end_tag
        lines = [line or BR_TAG for line in markup.split(BR_TAG)]
        return start_tag + (end_tag + start_tag).join(lines) + end_tag

    def _render_inline(self, op: Operation, context_op: Optional[Operation]) -> str:
        if op.is_custom_embed():
            return self._render_custom(op, context_op)
        return OpToHtmlConverter(op, self.converter_options).get_html().replace('\n', BR_TAG)

    def _render_custom(self, op: Operation, context_op: Optional[Operation]) -> str:
        if self.callbacks.render_custom is None:
            return ''
        return self.callbacks.render_custom(op, context_op) or ''

    def _render_with_callbacks(self, group_type: GroupType, unit: Unit, render: Callable[[], str]) -> str:
        markup = ''
        if self.callbacks.before_render is not None:
            markup = self.callbacks.before_render(group_type, unit) or ''
        if not markup:
            markup = render()
        if self.callbacks.after_render is not None:
            markup = self.callbacks.after_render(group_type, markup)
        return markup

    def _frame_node(self, soup: BeautifulSoup, op: Operation, wrapper_classes: List[str]) -> Tag:
        holder = soup.new_tag('div', attrs={'class': ' '.join(wrapper_classes + ['ql-frame-holder'])})
        frame_attrs = {
            'src': str(op.insert.value),
            'class': 'ql-frame',
            'frameborder': '0',
            'allowfullscreen': 'false',
        }
        style = self._frame_style(op.attributes.get('style'))
        if style:
            frame_attrs['style'] = style
        holder.append(soup.new_tag('iframe', attrs=frame_attrs))
        return holder

    @staticmethod
    def _frame_style(style: Any) -> str:
        """Keep the op's style declarations, forcing the frame to full width."""
        if not isinstance(style, str):
            return ''
        declarations = []
        for item in style.split(';'):
            key, _, value = item.partition(':')
            key, value = key.strip(), value.strip()
            if key == 'width':
                value = '100%'
            if key and value:
                declarations.append(f'{key}: {value}')
        return '; '.join(declarations)

    # --- origins ----------------------------------------------------------

    def _unit_ops(self, unit: Unit) -> List[Operation]:
        if isinstance(unit, ListGroup):
            return [op for li in unit.walk() for op in li.item.ops + [li.item.op]]
        if isinstance(unit, TableGroup):
            return [
                op for row in unit.rows for cell in row.cells
                for op in cell.item.ops + [cell.item.op]
            ]
        if isinstance(unit, Block):
            return unit.ops + [unit.op]
        if isinstance(unit, StandaloneItem):
            return [unit.op]
        return list(unit.ops)
