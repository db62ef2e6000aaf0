"""Tag, class, style and attribute resolution for a single operation."""

import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Union

from models import NEW_LINE, DirectionType, Operation, ScriptType

from .attribute_checks import is_valid_color_literal, is_valid_rel, is_valid_target
from .html_utils import TagAttribute, encode_html, make_end_tag, make_start_tag

logger = logging.getLogger('quill_delta_renderer.converters.optohtml')

InlineStyleConverter = Union[Callable[[Any, Operation], Optional[str]], Dict[str, str]]

DEFAULT_INLINE_FONTS = {
    'serif': 'font-family: Georgia, Times New Roman, serif',
    'monospace': 'font-family: Monaco, Courier New, monospace',
}


def _font_style(value: Any, op: Operation) -> Optional[str]:
    return DEFAULT_INLINE_FONTS.get(value, f'font-family:{value}')


def _indent_style(value: Any, op: Operation) -> Optional[str]:
    try:
        indent_size = int(value) * 3
    except (TypeError, ValueError):
        return None
    side = 'right' if op.attributes.get('direction') == DirectionType.RTL.value else 'left'
    return f'padding-{side}:{indent_size}em'


def _direction_style(value: Any, op: Operation) -> Optional[str]:
    if value != DirectionType.RTL.value:
        return None
    return 'direction:rtl' + ('' if op.attributes.get('align') else '; text-align:inherit')


DEFAULT_INLINE_STYLES: Dict[str, InlineStyleConverter] = {
    'font': _font_style,
    'size': {
        'small': 'font-size: 0.75em',
        'large': 'font-size: 1.5em',
        'huge': 'font-size: 2.5em',
    },
    'indent': _indent_style,
    'direction': _direction_style,
}

DEFAULT_OPTIONS: Dict[str, Any] = {
    'class_prefix': 'ql',
    'inline_styles': None,
    'encode_html': True,
    'list_item_tag': 'li',
    'paragraph_tag': 'p',
    'link_rel': None,
    'link_target': None,
    'allow_background_classes': False,
    'custom_css_classes_props': None,
    'custom_tag': None,
    'custom_tag_attributes': None,
    'custom_css_classes': None,
    'custom_css_styles': None,
}

# Block attributes in priority order: (attribute, default tag option or tag).
BLOCK_TAGS = (
    ('blockquote', 'blockquote'),
    ('code-block', 'pre'),
    ('list', 'list_item_tag'),
    ('header', None),
    ('align', 'paragraph_tag'),
    ('direction', 'paragraph_tag'),
    ('indent', 'paragraph_tag'),
)

# Inline attributes in nesting order: (attribute, tag); script picks sub/sup.
INLINE_TAGS = (
    ('link', 'a'),
    ('mention', 'a'),
    ('script', None),
    ('bold', 'strong'),
    ('italic', 'em'),
    ('strike', 's'),
    ('underline', 'u'),
    ('code', 'code'),
)

CLASS_ATTRIBUTES = ('indent', 'align', 'direction', 'font', 'size')

# (attribute, css property); None means the attribute name is the property.
STYLE_ATTRIBUTES = (
    ('indent', None),
    ('align', 'text-align'),
    ('direction', None),
    ('font', 'font-family'),
    ('size', None),
)


class HtmlParts(NamedTuple):
    opening_tag: str
    content: str
    closing_tag: str


class OpToHtmlConverter:
    """Resolves the markup of one operation under the fixed precedence rules."""

    def __init__(self, op: Operation, options: Optional[Dict[str, Any]] = None):
        self.op = op
        self.options = dict(DEFAULT_OPTIONS)
        self.options.update(options or {})

    def prefix_class(self, class_name: str) -> str:
        prefix = self.options.get('class_prefix')
        return f'{prefix}-{class_name}' if prefix else class_name

    def get_html(self) -> str:
        parts = self.get_html_parts()
        return parts.opening_tag + parts.content + parts.closing_tag

    def get_html_parts(self) -> HtmlParts:
        """Build opening tags, content and closing tags for the operation."""
        op = self.op
        if op.is_just_newline() and not op.is_container_block():
            return HtmlParts('', NEW_LINE, '')

        if op.is_divider():
            return HtmlParts(
                make_start_tag('div', [('class', self.prefix_class('hr'))]), '', make_end_tag('div')
            )

        tags = self.get_tags()
        attrs = self.get_tag_attributes()
        if not tags and attrs:
            tags = ['span']

        begin_tags: List[str] = []
        end_tags: List[str] = []
        for tag in tags:
            is_image_link = tag == 'img' and bool(op.attributes.get('link'))
            if is_image_link:
                begin_tags.append(make_start_tag('a', self.get_link_attrs()))

            begin_tags.append(make_start_tag(tag, attrs))

            if op.is_list():
                begin_tags.append(make_start_tag('span', self.get_list_item_ui_attrs()))
                begin_tags.append(make_end_tag('span'))

            if tag != 'img':
                end_tags.append(make_end_tag(tag))
            if is_image_link:
                end_tags.append(make_end_tag('a'))
            # Attributes belong to the outermost tag only
            attrs = []

        end_tags.reverse()
        return HtmlParts(''.join(begin_tags), self.get_content(), ''.join(end_tags))

    def get_content(self) -> str:
        op = self.op
        if op.is_container_block():
            return ''
        if not (op.is_text() or op.is_formula()):
            return ''
        content = str(op.insert.value)
        return encode_html(content) if self.options.get('encode_html') else content

    # --- tags ------------------------------------------------------------

    def get_tags(self) -> List[str]:
        """Tags to open, outermost first."""
        op = self.op
        attrs = op.attributes

        if not op.is_text():
            if op.is_iframe() or op.is_video():
                return ['iframe']
            if op.is_image():
                return ['img']
            return ['span']

        paragraph_tag = self.options.get('paragraph_tag') or 'p'
        for attribute, default_tag in BLOCK_TAGS:
            if not attrs.get(attribute):
                continue
            custom_tag = self.get_custom_tag(attribute)
            if custom_tag:
                return [custom_tag]
            if attribute == 'header':
                return [f'h{attrs[attribute]}']
            if default_tag == 'list_item_tag':
                return [self.options.get('list_item_tag') or 'li']
            if default_tag == 'paragraph_tag':
                return [paragraph_tag]
            return [default_tag]

        if op.is_custom_text_block():
            return [self.get_custom_tag('renderAsBlock') or paragraph_tag]

        custom_tags = {}
        for attribute in attrs:
            custom_tag = self.get_custom_tag(attribute)
            if custom_tag:
                custom_tags[attribute] = custom_tag

        tags = []
        for attribute, tag in INLINE_TAGS:
            if not attrs.get(attribute):
                continue
            if attribute in custom_tags:
                tags.append(custom_tags[attribute])
            elif attribute == 'script':
                tags.append('sub' if attrs[attribute] == ScriptType.SUB.value else 'sup')
            else:
                tags.append(tag)

        builtin = {attribute for attribute, _ in INLINE_TAGS}
        tags.extend(tag for attribute, tag in custom_tags.items() if attribute not in builtin)
        return tags

    # --- classes and styles ----------------------------------------------

    def get_css_classes(self) -> List[str]:
        op = self.op
        attrs = op.attributes

        if self.options.get('inline_styles'):
            return []

        props = list(CLASS_ATTRIBUTES)
        if self.options.get('allow_background_classes'):
            props.append('background')
        props.extend(self.options.get('custom_css_classes_props') or [])

        classes = [
            f'{prop}-{attrs[prop]}'
            for prop in props
            if attrs.get(prop) and (prop != 'background' or is_valid_color_literal(attrs[prop]))
        ]
        if op.is_formula():
            classes.append('formula')
        if op.is_video():
            classes.append('video')
        if op.is_iframe():
            classes.append('iframe')
        if op.is_image():
            classes.append('image')

        custom_classes = self._as_list(self._call_hook('custom_css_classes'))
        return custom_classes + [self.prefix_class(cls) for cls in classes]

    def get_css_styles(self) -> List[str]:
        attrs = self.op.attributes
        inline_styles = self.options.get('inline_styles')

        props = [('color', None)]
        if inline_styles or not self.options.get('allow_background_classes'):
            props.append(('background', 'background-color'))
        if inline_styles:
            props.extend(STYLE_ATTRIBUTES)

        overrides = inline_styles if isinstance(inline_styles, dict) else {}
        styles = self._as_list(self._call_hook('custom_css_styles'))
        for attribute, css_property in props:
            value = attrs.get(attribute)
            if not value:
                continue
            converter = overrides.get(attribute) or DEFAULT_INLINE_STYLES.get(attribute)
            if isinstance(converter, dict):
                style = converter.get(value)
            elif callable(converter):
                style = converter(value, self.op)
            else:
                style = f'{css_property or attribute}:{value}'
            if style:
                styles.append(style)
        return styles

    # --- attributes -------------------------------------------------------

    def get_tag_attributes(self) -> List[TagAttribute]:
        """Attributes of the outermost tag, in output order."""
        op = self.op
        attrs = op.attributes

        if attrs.get('code') and not op.is_link():
            return []

        custom_attrs = self._call_hook('custom_tag_attributes') or {}
        tag_attrs: List[TagAttribute] = [(key, value) for key, value in custom_attrs.items()]
        classes = self.get_css_classes()
        if classes:
            tag_attrs.append(('class', ' '.join(classes)))

        if op.is_image():
            if attrs.get('width'):
                tag_attrs.append(('width', attrs['width']))
            tag_attrs.append(('src', op.insert.value))
            return tag_attrs

        if op.is_check_list():
            tag_attrs.append(('data-list', 'checked' if op.is_checked_list() else 'unchecked'))
            return tag_attrs
        if op.is_bullet_list():
            tag_attrs.append(('data-list', 'bullet'))
            return tag_attrs
        if op.is_ordered_list():
            tag_attrs.append(('data-list', 'ordered'))
            return tag_attrs

        if op.is_formula():
            return tag_attrs

        if op.is_iframe() or op.is_video():
            tag_attrs.extend([
                ('frameborder', '0'),
                ('allowfullscreen', 'true'),
                ('src', op.insert.value),
            ])
            return tag_attrs

        if op.is_mention():
            return tag_attrs + self.get_mention_attrs()

        styles = self.get_css_styles()
        if styles:
            tag_attrs.append(('style', ';'.join(styles)))

        if op.is_code_block() and isinstance(attrs.get('code-block'), str):
            tag_attrs.append(('data-language', attrs['code-block']))
            return tag_attrs

        if op.is_container_block():
            return tag_attrs

        if op.is_link():
            tag_attrs.extend(self.get_link_attrs())
        return tag_attrs

    def get_mention_attrs(self) -> List[TagAttribute]:
        mention = self.op.attributes.get('mention')
        mention = mention if isinstance(mention, dict) else {}
        mention_attrs: List[TagAttribute] = []
        if mention.get('class'):
            mention_attrs.append(('class', mention['class']))
        if mention.get('end-point') and mention.get('slug'):
            mention_attrs.append(('href', f"{mention['end-point']}/{mention['slug']}"))
        else:
            mention_attrs.append(('href', 'about:blank'))
        if mention.get('target'):
            mention_attrs.append(('target', mention['target']))
        return mention_attrs

    def get_link_attrs(self) -> List[TagAttribute]:
        """href plus target/rel: the operation's own value wins over a valid converter default."""
        attrs = self.op.attributes
        target_default = self.options.get('link_target')
        rel_default = self.options.get('link_rel')
        if target_default and not is_valid_target(target_default):
            logger.debug(f"Dropping invalid default link target: {target_default!r}")
            target_default = None
        if rel_default and not is_valid_rel(rel_default):
            logger.debug(f"Dropping invalid default link rel: {rel_default!r}")
            rel_default = None

        target = attrs.get('target') or target_default
        rel = attrs.get('rel') or rel_default

        link_attrs: List[TagAttribute] = [('href', attrs.get('link'))]
        if target:
            link_attrs.append(('target', target))
        if rel:
            link_attrs.append(('rel', rel))
        return link_attrs

    def get_list_item_ui_attrs(self) -> List[TagAttribute]:
        return [('class', self.prefix_class('ui')), ('contenteditable', 'false')]

    # --- hooks ------------------------------------------------------------

    def get_custom_tag(self, format_name: str) -> Optional[str]:
        return self._call_hook('custom_tag', format_name)

    def _call_hook(self, name: str, *args: Any) -> Any:
        hook = self.options.get(name)
        if not callable(hook):
            return None
        return hook(*args, self.op)

    @staticmethod
    def _as_list(value: Any) -> List[str]:
        if not value:
            return []
        return list(value) if isinstance(value, (list, tuple)) else [value]
