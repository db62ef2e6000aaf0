"""Data models for the delta to HTML rendering pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

NEW_LINE = '\n'


class ListType(Enum):
    """List kinds carried by the ``list`` attribute."""
    ORDERED = "ordered"
    BULLET = "bullet"
    CHECKED = "checked"
    UNCHECKED = "unchecked"


class ScriptType(Enum):
    """Values of the ``script`` attribute."""
    SUB = "sub"
    SUPER = "super"


class DirectionType(Enum):
    """Values of the ``direction`` attribute."""
    RTL = "rtl"


class DataType(Enum):
    """Kinds of insert values recognized by the converter."""
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    IFRAME = "iframe"
    FORMULA = "formula"
    DIVIDER = "divider"


class GroupType(Enum):
    """Group kinds reported to render callbacks."""
    BLOCK = "block"
    INLINE_GROUP = "inline-group"
    LIST = "list"
    IFRAME = "iframe"
    TABLE = "table"


@dataclass(frozen=True)
class InsertData:
    """Insert value of a built-in kind (text, image, video, iframe, formula, divider)."""

    type: str
    value: Any


@dataclass(frozen=True)
class InsertDataCustom(InsertData):
    """Insert value of a custom embed: ``type`` is the embed key, ``value`` its payload."""


@dataclass
class Operation:
    """
    One insert operation of a delta document.

    The classifier predicates below are pure functions of ``insert`` and
    ``attributes`` and are the foundation of every grouping stage.
    """

    insert: InsertData
    attributes: Dict[str, Any] = field(default_factory=dict)
    origin: Optional[Dict[str, Any]] = None

    @classmethod
    def new_line(cls) -> 'Operation':
        """Create an explicit line-break operation (no origin)."""
        return cls(InsertData(DataType.TEXT.value, NEW_LINE))

    # --- insert kinds -------------------------------------------------

    def is_text(self) -> bool:
        return self.insert.type == DataType.TEXT.value and not self.is_custom_embed()

    def is_image(self) -> bool:
        return self.insert.type == DataType.IMAGE.value and not self.is_custom_embed()

    def is_video(self) -> bool:
        return self.insert.type == DataType.VIDEO.value and not self.is_custom_embed()

    def is_iframe(self) -> bool:
        return self.insert.type == DataType.IFRAME.value and not self.is_custom_embed()

    def is_formula(self) -> bool:
        return self.insert.type == DataType.FORMULA.value and not self.is_custom_embed()

    def is_divider(self) -> bool:
        return self.insert.type == DataType.DIVIDER.value and not self.is_custom_embed()

    def is_custom_embed(self) -> bool:
        return isinstance(self.insert, InsertDataCustom)

    def is_just_newline(self) -> bool:
        return self.is_text() and self.insert.value == NEW_LINE

    # --- block attributes ---------------------------------------------

    def is_header(self) -> bool:
        return bool(self.attributes.get('header'))

    def is_blockquote(self) -> bool:
        return bool(self.attributes.get('blockquote'))

    def is_code_block(self) -> bool:
        return bool(self.attributes.get('code-block'))

    def is_table(self) -> bool:
        return bool(self.attributes.get('table'))

    def is_block_attribute(self) -> bool:
        """True when align, direction or indent is set (alignment-only blocks)."""
        attrs = self.attributes
        return bool(attrs.get('align') or attrs.get('direction') or attrs.get('indent'))

    def is_custom_text_block(self) -> bool:
        return self.is_text() and bool(self.attributes.get('renderAsBlock'))

    def is_custom_embed_block(self) -> bool:
        return self.is_custom_embed() and bool(self.attributes.get('renderAsBlock'))

    def is_container_block(self) -> bool:
        return (
            self.is_blockquote()
            or self.is_list()
            or self.is_table()
            or self.is_code_block()
            or self.is_header()
            or self.is_block_attribute()
            or self.is_custom_text_block()
        )

    def is_standalone(self) -> bool:
        """Video, iframe and block-level custom embeds never merge with neighbors."""
        return self.is_video() or self.is_iframe() or self.is_custom_embed_block()

    def is_inline(self) -> bool:
        return not (self.is_container_block() or self.is_standalone())

    # --- lists ----------------------------------------------------------

    def is_ordered_list(self) -> bool:
        return self.attributes.get('list') == ListType.ORDERED.value

    def is_bullet_list(self) -> bool:
        return self.attributes.get('list') == ListType.BULLET.value

    def is_checked_list(self) -> bool:
        return self.attributes.get('list') == ListType.CHECKED.value

    def is_unchecked_list(self) -> bool:
        return self.attributes.get('list') == ListType.UNCHECKED.value

    def is_check_list(self) -> bool:
        return self.is_checked_list() or self.is_unchecked_list()

    def is_list(self) -> bool:
        return (
            self.is_ordered_list()
            or self.is_bullet_list()
            or self.is_checked_list()
            or self.is_unchecked_list()
        )

    @property
    def indent(self) -> int:
        """Numeric indent level, 0 when missing or malformed."""
        try:
            return int(self.attributes.get('indent') or 0)
        except (TypeError, ValueError):
            return 0

    # --- inline attributes ----------------------------------------------

    def is_link(self) -> bool:
        return self.is_text() and bool(self.attributes.get('link'))

    def is_mention(self) -> bool:
        return self.is_text() and bool(self.attributes.get('mention'))

    # --- structural comparisons -----------------------------------------

    def has_same_lang_as(self, other: 'Operation') -> bool:
        return self.attributes.get('code-block') == other.attributes.get('code-block')

    def is_same_header_as(self, other: 'Operation') -> bool:
        return self.is_header() and self.attributes.get('header') == other.attributes.get('header')

    def has_same_adi_as(self, other: 'Operation') -> bool:
        """Same align, direction and indent."""
        return all(
            self.attributes.get(key) == other.attributes.get(key)
            for key in ('align', 'direction', 'indent')
        )

    def has_same_attr(self, other: 'Operation') -> bool:
        return self.attributes == other.attributes

    def is_same_list_as(self, other: 'Operation') -> bool:
        if not other.attributes.get('list'):
            return False
        return (
            self.attributes.get('list') == other.attributes.get('list')
            or (self.is_check_list() and other.is_check_list())
        )

    def has_same_indentation_as(self, other: 'Operation') -> bool:
        return self.attributes.get('indent') == other.attributes.get('indent')

    def has_higher_indent_than(self, other: 'Operation') -> bool:
        return self.indent > other.indent

    def is_same_table_row_as(self, other: 'Operation') -> bool:
        return (
            self.is_table()
            and other.is_table()
            and self.attributes.get('table') == other.attributes.get('table')
        )

    def __repr__(self) -> str:
        return f"Operation({self.insert.type}={self.insert.value!r}, {self.attributes!r})"
