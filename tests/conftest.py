"""Root test configuration: logger reset between tests"""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_mdsite_logger():
    """Drop handlers installed by setup_logging so CLI runs do not leak into later tests."""
    yield
    logger = logging.getLogger("mdsite")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
