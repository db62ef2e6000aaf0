"""Tests for configuration loading, validation and CLI merging."""

import argparse
import logging

import pytest
import yaml

from config_loader import ConfigLoader, get_nested


def write_config(tmp_path, content):
    path = tmp_path / 'render.yaml'
    path.write_text(content, encoding='utf-8')
    return str(path)


class TestLoad:
    def test_load_yaml(self, tmp_path):
        path = write_config(tmp_path, """
converter:
  paragraph_tag: div
  inline_styles: true
output:
  format: markdown
""")
        config = ConfigLoader.load(path)

        assert config['converter'] == {'paragraph_tag': 'div', 'inline_styles': True}
        assert get_nested(config, 'output.format') == 'markdown'

    def test_env_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv('QDR_PREFIX', 'editor')
        path = write_config(tmp_path, """
converter:
  class_prefix: ${QDR_PREFIX}
  link_rel: ${QDR_UNSET_VARIABLE}
""")
        config = ConfigLoader.load(path)

        assert config['converter']['class_prefix'] == 'editor'
        assert config['converter']['link_rel'] == '${QDR_UNSET_VARIABLE}'

    def test_empty_file_is_empty_config(self, tmp_path):
        assert ConfigLoader.load(write_config(tmp_path, '')) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader.load(str(tmp_path / 'missing.yaml'))

    def test_top_level_must_be_mapping(self, tmp_path):
        with pytest.raises(ValueError):
            ConfigLoader.load(write_config(tmp_path, '- a\n- b\n'))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(yaml.YAMLError):
            ConfigLoader.load(write_config(tmp_path, 'converter: [unclosed\n'))


class TestValidate:
    def test_valid_config(self):
        ConfigLoader.validate({
            'converter': {
                'paragraph_tag': 'div',
                'bullet_list_tag': 'ul',
                'encode_html': False,
                'inline_styles': {'size': {'small': 'font-size: 10px'}},
                'custom_css_classes_props': ['highlight'],
                'custom_tag': lambda fmt, op: None,
            },
            'output': {'format': 'grouped'},
        })

    def test_empty_config_is_valid(self):
        ConfigLoader.validate({})

    @pytest.mark.parametrize('converter', [
        {'paragraph_tag': '<p>'},
        {'list_item_tag': 3},
        {'multi_line_header': 'yes'},
        {'class_prefix': 5},
        {'inline_styles': 'on'},
        {'inline_styles': {'size': 'small'}},
        {'custom_css_classes_props': 'highlight'},
        {'custom_css_styles': 'color:red'},
    ])
    def test_invalid_converter_options(self, converter):
        with pytest.raises(ValueError):
            ConfigLoader.validate({'converter': converter})

    def test_converter_section_must_be_mapping(self):
        with pytest.raises(ValueError):
            ConfigLoader.validate({'converter': ['p']})

    def test_invalid_output_format(self):
        with pytest.raises(ValueError, match='output.format'):
            ConfigLoader.validate({'output': {'format': 'pdf'}})

    def test_invalid_link_defaults_only_warn(self, caplog, monkeypatch):
        # setup_logging turns propagation off; caplog listens on the root logger
        monkeypatch.setattr(logging.getLogger('quill_delta_renderer'), 'propagate', True)
        with caplog.at_level(logging.WARNING, logger='quill_delta_renderer'):
            ConfigLoader.validate({'converter': {'link_target': 'frame-1', 'link_rel': 'bogus'}})

        assert 'link_target' in caplog.text
        assert 'link_rel' in caplog.text


class TestMergeWithArgs:
    def test_cli_overrides_file(self):
        config = {'converter': {'paragraph_tag': 'div', 'class_prefix': 'ql'}, 'output': {'format': 'html'}}
        args = argparse.Namespace(
            inline_styles=False,
            class_prefix='ed',
            paragraph_tag=None,
            link_target='_self',
            format='markdown',
            output_dir='out',
            verbose=2,
        )

        merged = ConfigLoader.merge_with_args(config, args)

        assert merged['converter'] == {
            'paragraph_tag': 'div',
            'class_prefix': 'ed',
            'inline_styles': False,
            'link_target': '_self',
        }
        assert merged['output'] == {'format': 'markdown', 'directory': 'out'}
        assert merged['logging'] == {'level': 'DEBUG'}
        assert config['converter']['class_prefix'] == 'ql'

    def test_missing_args_keep_file_values(self):
        merged = ConfigLoader.merge_with_args({'converter': {'paragraph_tag': 'div'}}, argparse.Namespace())
        assert merged['converter'] == {'paragraph_tag': 'div'}
        assert merged['output'] == {}

    def test_converter_options_copy(self):
        config = {'converter': {'paragraph_tag': 'div'}}
        options = ConfigLoader.converter_options(config)
        options['paragraph_tag'] = 'p'
        assert config['converter']['paragraph_tag'] == 'div'
        assert ConfigLoader.converter_options({}) == {}


class TestGetNested:
    def test_get_nested(self):
        config = {'a': {'b': {'c': 1}}}
        assert get_nested(config, 'a.b.c') == 1
        assert get_nested(config, 'a.x', 'default') == 'default'
        assert get_nested(config, 'a.b.c.d') is None
