"""Tests for per-operation tag and attribute resolution."""

import pytest

from converters.attribute_checks import is_valid_color_literal, is_valid_rel, is_valid_target
from converters.html_utils import encode_html, make_attrs, make_end_tag, make_start_tag
from converters.op_to_html import OpToHtmlConverter
from models import DataType, InsertData, InsertDataCustom, Operation


def text_op(value, **attributes):
    return Operation(InsertData(DataType.TEXT.value, value), attributes)


def html_of(op, **options):
    return OpToHtmlConverter(op, options).get_html()


class TestHtmlUtils:
    def test_encode_html(self):
        assert encode_html('<b>"fish" & chips</b>') == '&lt;b&gt;&quot;fish&quot; &amp; chips&lt;/b&gt;'

    def test_encode_html_prevents_double_encoding(self):
        assert encode_html('a &amp; b') == 'a &amp; b'
        assert encode_html('a &amp; b', prevent_double_encoding=False) == 'a &amp;amp; b'

    def test_start_and_end_tags(self):
        assert make_start_tag('p') == '<p>'
        assert make_start_tag('img', [('src', 'a.png')]) == '<img src="a.png"/>'
        assert make_start_tag('a', [('href', 'x?a=1&b=2')]) == '<a href="x?a=1&amp;b=2">'
        assert make_start_tag('') == ''
        assert make_end_tag('p') == '</p>'
        assert make_end_tag('') == ''

    def test_empty_attribute_value_renders_bare_key(self):
        assert make_attrs([('contenteditable', None), ('hidden', '')]) == 'contenteditable hidden'


class TestAttributeChecks:
    def test_color_literal(self):
        assert is_valid_color_literal('red')
        assert is_valid_color_literal('DarkBlue')
        assert not is_valid_color_literal('#ff0000')
        assert not is_valid_color_literal('rgb(0,0,0)')
        assert not is_valid_color_literal(None)

    def test_target(self):
        assert is_valid_target('_blank')
        assert not is_valid_target('frame-1')

    def test_rel(self):
        assert is_valid_rel('noopener noreferrer')
        assert not is_valid_rel('noopener evil')
        assert not is_valid_rel('')


class TestTagResolution:
    """Block and inline tag priority."""

    def test_header_beats_alignment(self):
        op = text_op('\n', header=2, align='center')
        assert OpToHtmlConverter(op).get_tags() == ['h2']
        assert html_of(op) == '<h2 class="ql-align-center"></h2>'

    def test_block_priority(self):
        assert OpToHtmlConverter(text_op('\n', blockquote=True, header=1)).get_tags() == ['blockquote']
        assert OpToHtmlConverter(text_op('\n', **{'code-block': True, 'list': 'bullet'})).get_tags() == ['pre']
        assert OpToHtmlConverter(text_op('\n', list='ordered', header=3)).get_tags() == ['li']
        assert OpToHtmlConverter(text_op('\n', align='right')).get_tags() == ['p']

    def test_configured_block_tags(self):
        converter = OpToHtmlConverter(text_op('\n', list='bullet'), {'list_item_tag': 'div'})
        assert converter.get_tags() == ['div']
        converter = OpToHtmlConverter(text_op('\n', indent=1), {'paragraph_tag': 'section'})
        assert converter.get_tags() == ['section']

    def test_inline_tags_nest_in_order(self):
        op = text_op('hi', italic=True, bold=True, underline=True, strike=True)
        assert html_of(op) == '<strong><em><s><u>hi</u></s></em></strong>'

    def test_script(self):
        assert html_of(text_op('2', script='sub')) == '<sub>2</sub>'
        assert html_of(text_op('2', script='super')) == '<sup>2</sup>'

    def test_embed_tags(self):
        assert OpToHtmlConverter(Operation(InsertData('image', 'a.png'))).get_tags() == ['img']
        assert OpToHtmlConverter(Operation(InsertData('iframe', 'u'))).get_tags() == ['iframe']
        assert OpToHtmlConverter(Operation(InsertData('formula', 'x'))).get_tags() == ['span']

    def test_plain_text_is_encoded(self):
        assert html_of(text_op('a < b')) == 'a &lt; b'
        assert html_of(text_op('a < b'), encode_html=False) == 'a < b'

    def test_bare_newline_renders_as_newline(self):
        assert html_of(text_op('\n')) == '\n'

    def test_attributes_without_tag_use_span(self):
        assert html_of(text_op('hi', color='red')) == '<span style="color:red">hi</span>'

    def test_attributes_go_on_outermost_tag(self):
        assert html_of(text_op('hi', bold=True, italic=True, color='red')) == (
            '<strong style="color:red"><em>hi</em></strong>'
        )


class TestEmbeds:
    def test_image_link_wraps_image_in_anchor(self):
        op = Operation(InsertData('image', 'https://example.com/a.png'), {'link': 'https://example.com'})
        assert html_of(op, link_target='_blank') == (
            '<a href="https://example.com" target="_blank">'
            '<img class="ql-image" src="https://example.com/a.png"/></a>'
        )

    def test_image_width(self):
        op = Operation(InsertData('image', 'a.png'), {'width': '120'})
        assert html_of(op) == '<img class="ql-image" width="120" src="a.png"/>'

    def test_video(self):
        op = Operation(InsertData('video', 'https://example.com/v'))
        assert html_of(op) == (
            '<iframe class="ql-video" frameborder="0" allowfullscreen="true" '
            'src="https://example.com/v"></iframe>'
        )

    def test_formula(self):
        op = Operation(InsertData('formula', 'e=mc^2'))
        assert html_of(op) == '<span class="ql-formula">e=mc^2</span>'

    def test_divider(self):
        assert html_of(Operation(InsertData('divider', True))) == '<div class="ql-hr"></div>'

    def test_custom_embed_has_no_content(self):
        parts = OpToHtmlConverter(Operation(InsertDataCustom('widget', {'id': 1}))).get_html_parts()
        assert parts.content == ''


class TestLinksAndMentions:
    def test_link_without_defaults(self):
        assert html_of(text_op('a', link='https://example.com')) == '<a href="https://example.com">a</a>'

    def test_valid_defaults_apply(self):
        html = html_of(text_op('a', link='https://example.com'), link_target='_blank', link_rel='noopener')
        assert html == '<a href="https://example.com" target="_blank" rel="noopener">a</a>'

    def test_invalid_defaults_are_dropped(self):
        html = html_of(text_op('a', link='https://example.com'), link_target='frame-1', link_rel='bogus')
        assert html == '<a href="https://example.com">a</a>'

    def test_operation_values_win(self):
        op = text_op('a', link='https://example.com', target='_self', rel='nofollow')
        html = html_of(op, link_target='_blank', link_rel='noopener')
        assert html == '<a href="https://example.com" target="_self" rel="nofollow">a</a>'

    def test_mention(self):
        op = text_op('@bob', mention={'end-point': 'https://example.com/users', 'slug': 'bob',
                                      'class': 'user', 'target': '_self'})
        assert html_of(op) == '<a class="user" href="https://example.com/users/bob" target="_self">@bob</a>'

    def test_mention_without_endpoint(self):
        assert html_of(text_op('@x', mention={'slug': 'x'})) == '<a href="about:blank">@x</a>'


class TestClassesAndStyles:
    def test_block_classes(self):
        op = text_op('\n', align='justify', direction='rtl', indent=2)
        assert html_of(op) == '<p class="ql-indent-2 ql-align-justify ql-direction-rtl"></p>'

    def test_font_and_size_classes(self):
        assert html_of(text_op('x', font='serif', size='large')) == (
            '<span class="ql-font-serif ql-size-large">x</span>'
        )

    def test_inline_style_mode(self):
        op = text_op('\n', align='center', indent=1)
        assert html_of(op, inline_styles=True) == '<p style="padding-left:3em;text-align:center"></p>'

    def test_inline_style_defaults(self):
        op = text_op('x', font='serif', size='huge')
        assert html_of(op, inline_styles=True) == (
            '<span style="font-family: Georgia, Times New Roman, serif;font-size: 2.5em">x</span>'
        )

    def test_rtl_inline_styles(self):
        op = text_op('\n', direction='rtl', indent=1)
        assert html_of(op, inline_styles=True) == (
            '<p style="padding-right:3em;direction:rtl; text-align:inherit"></p>'
        )

    def test_inline_style_overrides(self):
        overrides = {
            'size': {'small': 'font-size: 10px'},
            'font': lambda value, op: f'font-family: {value.upper()}',
        }
        op = text_op('x', size='small', font='mono')
        assert html_of(op, inline_styles=overrides) == (
            '<span style="font-family: MONO;font-size: 10px">x</span>'
        )

    def test_style_lookup_miss_is_dropped(self):
        assert html_of(text_op('x', size='gigantic'), inline_styles=True) == 'x'

    def test_background_as_style_by_default(self):
        assert html_of(text_op('x', background='#ffff00')) == '<span style="background-color:#ffff00">x</span>'

    def test_background_class_requires_color_literal(self):
        assert html_of(text_op('x', background='yellow'), allow_background_classes=True) == (
            '<span class="ql-background-yellow">x</span>'
        )
        assert html_of(text_op('x', background='#ffff00'), allow_background_classes=True) == 'x'

    def test_inline_code_suppresses_attributes(self):
        op = text_op('x', code=True, bold=True, color='red', font='serif')
        assert html_of(op) == '<strong><code>x</code></strong>'

    def test_class_prefix(self):
        assert html_of(text_op('\n', align='center'), class_prefix='ed') == '<p class="ed-align-center"></p>'

    def test_list_item_attributes(self):
        op = text_op('\n', list='checked', indent=1)
        assert html_of(op) == (
            '<li class="ql-indent-1" data-list="checked">'
            '<span class="ql-ui" contenteditable="false"></span></li>'
        )

    def test_code_block_language(self):
        assert html_of(text_op('\n', **{'code-block': 'python'})) == '<pre data-language="python"></pre>'
        assert html_of(text_op('\n', **{'code-block': True})) == '<pre></pre>'


class TestHooks:
    def test_custom_tag_overrides_builtin(self):
        def custom_tag(format_name, op):
            return 'b' if format_name == 'bold' else None

        assert html_of(text_op('x', bold=True, italic=True), custom_tag=custom_tag) == '<b><em>x</em></b>'

    def test_custom_tag_for_block(self):
        def custom_tag(format_name, op):
            return 'aside' if format_name == 'blockquote' else None

        assert html_of(text_op('\n', blockquote=True), custom_tag=custom_tag) == '<aside></aside>'

    def test_custom_attribute_adds_wrapping_tag(self):
        def custom_tag(format_name, op):
            return 'mark' if format_name == 'highlight' else None

        assert html_of(text_op('x', bold=True, highlight=True), custom_tag=custom_tag) == (
            '<strong><mark>x</mark></strong>'
        )

    def test_custom_text_block_tag(self):
        def custom_tag(format_name, op):
            return 'div' if format_name == 'renderAsBlock' else None

        op = text_op('\n', renderAsBlock=True)
        assert html_of(op) == '<p></p>'
        assert html_of(op, custom_tag=custom_tag) == '<div></div>'

    def test_custom_attributes_classes_and_styles(self):
        op = text_op('x', bold=True, color='red')
        html = html_of(
            op,
            custom_tag_attributes=lambda o: {'data-id': '7'},
            custom_css_classes=lambda o: ['mine'],
            custom_css_styles=lambda o: 'font-weight:900',
        )
        assert html == '<strong data-id="7" class="mine" style="font-weight:900;color:red">x</strong>'

    def test_custom_css_classes_props(self):
        op = text_op('x', highlight='soft')
        assert html_of(op, custom_css_classes_props=['highlight']) == (
            '<span class="ql-highlight-soft">x</span>'
        )

    @pytest.mark.parametrize('hook_result', [None, '', []])
    def test_empty_hook_results_are_ignored(self, hook_result):
        html = html_of(text_op('x', bold=True), custom_css_classes=lambda o: hook_result)
        assert html == '<strong>x</strong>'
