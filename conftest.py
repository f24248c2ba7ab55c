"""
Pytest configuration for yabs test suite.

This configuration enables the --full flag to run integration tests.
"""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_yabs_logger():
    """Undo console logging set up by CLI tests so caplog keeps working."""
    logger = logging.getLogger("yabs")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--full",
        action="store_true",
        default=False,
        help="Run full test suite including integration tests (needs a C compiler)",
    )


def pytest_configure(config):
    """Register the integration marker."""
    config.addinivalue_line(
        "markers", "integration: builds real projects with the system C compiler"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --full is given."""
    if config.getoption("--full"):
        return
    skip_integration = pytest.mark.skip(reason="integration test, use --full to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
