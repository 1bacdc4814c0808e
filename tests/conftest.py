import logging
from typing import Iterator

import pytest
from loguru import logger

from coded_errors.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """Drop cached settings so env changes made by a test take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def loguru_caplog(
    caplog: pytest.LogCaptureFixture,
) -> Iterator[pytest.LogCaptureFixture]:
    """Route the library's loguru output into *caplog*."""
    logger.enable("coded_errors")
    caplog.set_level(logging.DEBUG)
    sink_id = logger.add(caplog.handler, level="TRACE", format="{message}")
    try:
        yield caplog
    finally:
        logger.remove(sink_id)
        logger.disable("coded_errors")
