# type: ignore
import logging
import os

# Must be set before spdx_store modules read their configuration
os.environ["SPDX_STORE_CONFIG"] = "/dev/null"

import pytest  # noqa: E402

import spdx_store.log  # noqa: E402
from spdx_store.config import Config  # noqa: E402


def init_testsuite_env():
    """Initialize testsuite environment."""
    # Activate full debug logs
    spdx_store.log.activate(level=logging.DEBUG, store_debug=True)

    # Force UTC timezone
    os.environ["TZ"] = "UTC"


init_testsuite_env()


@pytest.fixture(autouse=True)
def reset_config():
    """Discard configuration loaded by a test."""
    yield
    Config.data.clear()
