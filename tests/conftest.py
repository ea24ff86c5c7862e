# Shared fixtures

import logging

import pytest


@pytest.fixture
def restore_logging():
    """Undo root logger changes made by setup_logging()"""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)
