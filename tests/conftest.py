import sys

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def reset_logger():
    # huffzip.main rebinds the sink to whatever sys.stderr is during a test
    yield
    logger.remove()
    logger.add(sys.stderr, level="DEBUG")
