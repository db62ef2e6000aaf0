"""Units produced by the grouping stages: the rendering plan of a document."""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

from models import Operation


@dataclass
class InlineRun:
    """Consecutive inline operations without a block container (renders as a paragraph)."""

    ops: List[Operation] = field(default_factory=list)


@dataclass
class Block:
    """A container-defining operation plus the inline operations it terminates."""

    op: Operation
    ops: List[Operation] = field(default_factory=list)


@dataclass
class StandaloneItem:
    """A single operation that never merges with its neighbors (video, iframe, custom embed block)."""

    op: Operation


@dataclass
class ListItem:
    """One list-item block and, optionally, the list nested under it."""

    item: Block
    inner_list: Optional['ListGroup'] = None

    def attach(self, child: 'ListGroup') -> None:
        """Nest ``child`` under this item, extending an existing inner list."""
        if self.inner_list is None:
            self.inner_list = child
        else:
            self.inner_list.items.extend(child.items)


@dataclass
class ListGroup:
    """Ordered sequence of list items."""

    items: List[ListItem] = field(default_factory=list)

    @property
    def indent(self) -> int:
        """Indent depth of the group: the deepest indent among its own items."""
        return max((li.item.op.indent for li in self.items), default=0)

    def walk(self) -> Iterator[ListItem]:
        """Yield every item of the tree in pre-order."""
        for li in self.items:
            yield li
            if li.inner_list is not None:
                yield from li.inner_list.walk()


@dataclass
class TableCell:
    item: Block


@dataclass
class TableRow:
    cells: List[TableCell] = field(default_factory=list)


@dataclass
class TableGroup:
    rows: List[TableRow] = field(default_factory=list)


Unit = Union[InlineRun, Block, StandaloneItem, ListGroup, TableGroup]
