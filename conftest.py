"""Root conftest.py for fql-client tests.

This file MUST be at the repository root for fixtures to be discovered
when running tests from any subdirectory.

Provides shared fixtures used across all test modules.
"""

import pytest
from unittest.mock import MagicMock


@pytest.fixture
def mock_logger():
    """Create a mock logger satisfying LoggerProtocol.

    ``bind`` returns the same mock so assertions can be made on the logger
    the component actually uses.
    """
    logger = MagicMock()
    logger.info = MagicMock()
    logger.debug = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    logger.bind = MagicMock(return_value=logger)
    return logger
