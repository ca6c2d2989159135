"""Root test configuration: logging reset between tests"""

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI commands reconfigure structlog against the runner's streams; restore defaults afterwards."""
    yield
    structlog.reset_defaults()
