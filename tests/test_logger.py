"""Tests for logging setup and progress tracking."""

import logging

import colorlog
import pytest

from logger import ProgressTracker, log_config, setup_logging


class TestSetupLogging:
    def test_verbosity_levels(self):
        assert setup_logging(verbosity=0).level == logging.WARNING
        assert setup_logging(verbosity=1).level == logging.INFO
        assert setup_logging(verbosity=2).level == logging.DEBUG

    def test_explicit_level_wins(self):
        assert setup_logging(verbosity=2, level='error').level == logging.ERROR

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            setup_logging(level='LOUD')

    def test_console_handler_is_colored(self):
        logger = setup_logging()
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, colorlog.ColoredFormatter)

    def test_log_file(self, tmp_path):
        log_file = tmp_path / 'render.log'
        logger = setup_logging(verbosity=1, log_file=str(log_file))
        logger.info('written to file')
        for handler in logger.handlers:
            handler.flush()

        assert 'written to file' in log_file.read_text(encoding='utf-8')
        for handler in logger.handlers[1:]:
            handler.close()


class TestProgressTracker:
    def test_counts(self):
        with ProgressTracker(3) as tracker:
            tracker.increment()
            tracker.increment(success=False)
            tracker.increment()

        stats = tracker.get_stats()
        assert stats['processed'] == 3
        assert stats['successful'] == 2
        assert stats['failed'] == 1

    def test_format_elapsed(self):
        assert ProgressTracker._format_elapsed(5.3) == '5.3s'
        assert ProgressTracker._format_elapsed(125) == '2m 5s'


class TestLogConfig:
    def test_hooks_are_shown_by_name(self, tmp_path):
        log_file = tmp_path / 'config.log'
        logger = setup_logging(verbosity=1, log_file=str(log_file))

        def custom_tag(format_name, op):
            return None

        log_config({'converter': {'paragraph_tag': 'div', 'custom_tag': custom_tag}, 'output': {}})
        for handler in logger.handlers:
            handler.flush()

        text = log_file.read_text(encoding='utf-8')
        assert "paragraph_tag: 'div'" in text
        assert 'custom_tag: <hook custom_tag>' in text
        assert '[output]' not in text
        for handler in logger.handlers[1:]:
            handler.close()
