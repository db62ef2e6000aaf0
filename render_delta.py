#!/usr/bin/env python3
"""
Quill Delta Renderer - Main CLI Entry Point

Renders rich-text delta documents (JSON lists of insert operations) to HTML,
Markdown, or a grouped JSON view of the records behind each rendered unit.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from config_loader import ConfigLoader, get_nested
from converters import DeltaToHtmlConverter, convert_delta_to_markdown
from logger import ProgressTracker, log_config, log_section, setup_logging

__version__ = "1.0.0"

OUTPUT_SUFFIXES = {'html': '.html', 'markdown': '.md', 'grouped': '.json'}

EXIT_CONFIG_ERROR = 1
EXIT_INPUT_ERROR = 2


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog='render-delta',
        description="Render delta documents to HTML, Markdown, or grouped JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Render one document to stdout
  render-delta doc.json

  # Render a batch to a directory as Markdown
  render-delta docs/*.json --format markdown --output-dir out/

  # Inline styles instead of ql-* classes
  render-delta doc.json --inline-styles

  # Use a configuration file, verbose logging
  render-delta doc.json --config render.yaml -vv
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        'inputs',
        nargs='+',
        metavar='INPUT',
        help='JSON file holding a list of operations or an object with an "ops" list'
    )

    parser.add_argument(
        '--config',
        type=str,
        help='Path to configuration YAML file'
    )

    parser.add_argument(
        '--format',
        choices=['html', 'markdown', 'grouped'],
        default=None,
        help='Output format (default: html)'
    )

    parser.add_argument(
        '--output-dir',
        type=str,
        help='Directory for rendered files (default: stdout for a single input)'
    )

    parser.add_argument(
        '--inline-styles',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Emit inline style declarations instead of ql-* classes'
    )

    parser.add_argument(
        '--class-prefix',
        type=str,
        help='Prefix for generated CSS classes (default: ql)'
    )

    parser.add_argument(
        '--paragraph-tag',
        type=str,
        help='Tag used for paragraphs (default: p)'
    )

    parser.add_argument(
        '--link-target',
        type=str,
        help='Default target for links (default: _blank)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v for INFO, -vv for DEBUG)'
    )

    return parser


def load_delta(path: Path) -> List[Any]:
    """
    Read a delta document from a JSON file.

    Args:
        path: Path to the JSON document

    Returns:
        The list of raw operations

    Raises:
        ValueError: If the file is not valid JSON or holds no operation list
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get('ops')
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of operations or an object with an 'ops' list")
    return data


def render_document(delta_ops: List[Any], output_format: str, options: Dict[str, Any],
                    logger: logging.Logger) -> str:
    """Render one document in the requested output format."""
    if output_format == 'markdown':
        return convert_delta_to_markdown(delta_ops, config=options, logger=logger)

    converter = DeltaToHtmlConverter(delta_ops, config=options, logger=logger)
    if output_format == 'grouped':
        return json.dumps(converter.get_grouped_delta(), indent=2, ensure_ascii=False) + '\n'
    return converter.convert()


def run_render(config: Dict[str, Any], inputs: List[str], logger: logging.Logger) -> int:
    """
    Render every input document and write the results.

    Returns:
        0 when every document rendered, EXIT_INPUT_ERROR otherwise
    """
    output_format = get_nested(config, 'output.format', 'html')
    output_dir = get_nested(config, 'output.directory')
    options = ConfigLoader.converter_options(config)

    if output_dir is None and len(inputs) > 1:
        output_dir = '.'
        logger.info("Multiple inputs given without an output directory; writing to current directory")

    if output_dir is not None:
        Path(output_dir).mkdir(parents=True, exist_ok=True)

    with ProgressTracker(len(inputs)) as tracker:
        for input_path in inputs:
            path = Path(input_path)
            try:
                delta_ops = load_delta(path)
                rendered = render_document(delta_ops, output_format, options, logger)
            except (OSError, ValueError) as e:
                logger.error(f"Failed to render {path}: {e}")
                tracker.increment(success=False)
                continue

            if output_dir is None:
                sys.stdout.write(rendered)
            else:
                target = Path(output_dir) / (path.stem + OUTPUT_SUFFIXES[output_format])
                target.write_text(rendered, encoding='utf-8')
                logger.info(f"Wrote {target}")
            tracker.increment(success=True)

        failed = tracker.failed_items

    return EXIT_INPUT_ERROR if failed else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(verbosity=args.verbose)
    logger = logging.getLogger('quill_delta_renderer')

    try:
        config: Dict[str, Any] = {}
        if args.config:
            logger.info(f"Loading configuration from {args.config}")
            config = ConfigLoader.load(args.config)

        # CLI takes precedence over the configuration file
        config = ConfigLoader.merge_with_args(config, args)
        ConfigLoader.validate(config)

        logging_config = config.get('logging', {})
        setup_logging(
            verbosity=args.verbose,
            log_file=logging_config.get('file'),
            log_format=logging_config.get('format'),
            level=logging_config.get('level'),
        )
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return EXIT_CONFIG_ERROR
    except yaml.YAMLError as e:
        logger.error(f"Invalid YAML in configuration: {e}")
        return EXIT_CONFIG_ERROR
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR

    log_section("Quill Delta Renderer")
    logger.info(f"Version: {__version__}")
    log_config(config)

    return run_render(config, args.inputs, logger)


if __name__ == "__main__":
    sys.exit(main())
