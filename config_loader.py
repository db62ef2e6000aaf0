"""Configuration loader with YAML support and environment variable substitution."""

import copy
import logging
import os
import re
from typing import Any, Dict

import yaml

from converters.attribute_checks import is_valid_rel, is_valid_target

logger = logging.getLogger('quill_delta_renderer')

TAG_NAME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9-]*$')

TAG_OPTIONS = ('paragraph_tag', 'list_item_tag', 'ordered_list_tag', 'bullet_list_tag')
BOOLEAN_OPTIONS = (
    'encode_html',
    'allow_background_classes',
    'multi_line_blockquote',
    'multi_line_header',
    'multi_line_codeblock',
    'multi_line_paragraph',
    'multi_line_custom_block',
)
HOOK_OPTIONS = ('custom_tag', 'custom_tag_attributes', 'custom_css_classes', 'custom_css_styles')
OUTPUT_FORMATS = ('html', 'markdown', 'grouped')


class ConfigLoader:
    """Handles loading and validation of configuration files."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

    @classmethod
    def load(cls, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file with environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a dictionary")

        return cls._substitute_env_vars_recursive(config_data)

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate configuration for correct types and values.

        Args:
            config: Configuration dictionary to validate

        Raises:
            ValueError: If validation fails
        """
        converter = get_nested(config, 'converter', {})
        if not isinstance(converter, dict):
            raise ValueError("converter must be a dictionary of converter options")

        for option in TAG_OPTIONS:
            value = converter.get(option)
            if value is not None and not (isinstance(value, str) and TAG_NAME_PATTERN.match(value)):
                raise ValueError(f"converter.{option} must be a tag name, got {value!r}")

        for option in BOOLEAN_OPTIONS:
            value = converter.get(option)
            if value is not None and not isinstance(value, bool):
                raise ValueError(f"converter.{option} must be a boolean")

        class_prefix = converter.get('class_prefix')
        if class_prefix is not None and not isinstance(class_prefix, str):
            raise ValueError("converter.class_prefix must be a string")

        inline_styles = converter.get('inline_styles')
        if inline_styles is not None:
            cls._validate_inline_styles(inline_styles)

        props = converter.get('custom_css_classes_props')
        if props is not None and not (
            isinstance(props, list) and all(isinstance(prop, str) for prop in props)
        ):
            raise ValueError("converter.custom_css_classes_props must be a list of attribute names")

        for option in HOOK_OPTIONS:
            value = converter.get(option)
            if value is not None and not callable(value):
                raise ValueError(f"converter.{option} must be callable")

        # Invalid link defaults are dropped by the renderer, so only warn.
        link_target = converter.get('link_target')
        if link_target and not is_valid_target(link_target):
            logger.warning(f"converter.link_target '{link_target}' is not a valid target and will be ignored")
        link_rel = converter.get('link_rel')
        if link_rel and not is_valid_rel(link_rel):
            logger.warning(f"converter.link_rel '{link_rel}' is not a valid rel and will be ignored")

        output_format = get_nested(config, 'output.format', 'html')
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"output.format must be one of: {list(OUTPUT_FORMATS)}")

    @classmethod
    def merge_with_args(cls, config: Dict[str, Any], args) -> Dict[str, Any]:
        """
        Merge configuration file with CLI arguments.
        CLI arguments take precedence over config file values.

        Args:
            config: Base configuration dictionary
            args: CLI arguments with attributes matching config keys

        Returns:
            Merged configuration dictionary
        """
        merged = copy.deepcopy(config)

        # Ensure nested dictionaries exist
        for section in ('converter', 'output', 'logging'):
            if not isinstance(merged.get(section), dict):
                merged[section] = {}

        if getattr(args, 'inline_styles', None) is not None:
            merged['converter']['inline_styles'] = args.inline_styles

        if getattr(args, 'class_prefix', None) is not None:
            merged['converter']['class_prefix'] = args.class_prefix

        if getattr(args, 'paragraph_tag', None):
            merged['converter']['paragraph_tag'] = args.paragraph_tag

        if getattr(args, 'link_target', None):
            merged['converter']['link_target'] = args.link_target

        if getattr(args, 'format', None):
            merged['output']['format'] = args.format

        if getattr(args, 'output_dir', None):
            merged['output']['directory'] = args.output_dir

        verbose = getattr(args, 'verbose', 0)
        if verbose:
            merged['logging']['level'] = 'DEBUG' if verbose >= 2 else 'INFO'

        return merged

    @staticmethod
    def converter_options(config: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of the converter options section."""
        return dict(get_nested(config, 'converter', {}) or {})

    @classmethod
    def _validate_inline_styles(cls, inline_styles: Any) -> None:
        if isinstance(inline_styles, bool):
            return
        if not isinstance(inline_styles, dict):
            raise ValueError("converter.inline_styles must be a boolean or a mapping of attribute overrides")
        for attribute, override in inline_styles.items():
            if not (isinstance(override, dict) or callable(override)):
                raise ValueError(
                    f"converter.inline_styles.{attribute} must be a value mapping or a callable"
                )

    @classmethod
    def _substitute_env_vars_recursive(cls, data: Any) -> Any:
        """Recursively substitute environment variables in data structure."""
        if isinstance(data, dict):
            return {key: cls._substitute_env_vars_recursive(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [cls._substitute_env_vars_recursive(item) for item in data]
        elif isinstance(data, str):
            return cls._substitute_env_vars(data)
        else:
            return data

    @classmethod
    def _substitute_env_vars(cls, value: str) -> str:
        """Substitute environment variables in a string value."""
        def replace_match(match):
            var_name = match.group(1)
            env_value = os.getenv(var_name)
            return env_value if env_value is not None else match.group(0)

        return cls.ENV_VAR_PATTERN.sub(replace_match, value)


def get_nested(config: dict, path: str, default: Any = None) -> Any:
    """Safely retrieve nested configuration values using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "converter.paragraph_tag")
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default
    """
    keys = path.split('.')
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


__all__ = ['ConfigLoader', 'get_nested']
