# Tests for logging setup

import logging
from logging.handlers import RotatingFileHandler

import pytest
from src.logging_config import resolve_level, setup_logging


class TestResolveLevel:
    """Test resolve_level"""

    def test_names(self):
        assert resolve_level('debug') == logging.DEBUG
        assert resolve_level(' WARNING ') == logging.WARNING

    def test_number(self):
        assert resolve_level(logging.ERROR) == logging.ERROR

    def test_unknown_name(self):
        assert resolve_level('chatty') == logging.INFO


class TestSetupLogging:
    """Test setup_logging"""

    def test_file_and_console(self, tmp_path, restore_logging):
        log_path = tmp_path / 'logs' / 'scan.log'

        setup_logging(log_path=log_path, level='debug')
        logging.getLogger('src.test').info('hello')

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert sum(isinstance(h, RotatingFileHandler) for h in root.handlers) == 1
        assert len(root.handlers) == 2
        for h in root.handlers:
            h.flush()
        assert 'hello' in log_path.read_text(encoding='utf-8')

    def test_repeated_calls_replace_handlers(self, tmp_path, restore_logging):
        setup_logging(log_path=tmp_path / 'a.log', console=False)
        setup_logging(log_path=tmp_path / 'b.log', console=False)

        assert len(logging.getLogger().handlers) == 1
        assert logging.getLogger('urllib3').level == logging.WARNING
