"""
Pytest configuration shared by the unit and integration suites
"""

import os

import pytest


def pytest_collection_modifyitems(config, items):
    """Add markers based on test location"""
    for item in items:
        if "integration" in str(item.path):
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.slow)
        else:
            item.add_marker(pytest.mark.fast)


def pytest_addoption(parser):
    """Add custom command line options"""
    parser.addoption(
        "--skip-slow",
        action="store_true",
        default=False,
        help="Skip tests that need the test database"
    )


def pytest_runtest_setup(item):
    if item.config.getoption("--skip-slow") and item.get_closest_marker("slow"):
        pytest.skip("Skipping slow test")


def pytest_runtest_logstart(nodeid, location):
    """Log test start for better CI visibility"""
    if os.getenv("CI"):
        print(f"\n🧪 Starting: {nodeid}")


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Enhanced failure reporting for CI"""
    outcome = yield
    rep = outcome.get_result()

    if rep.failed and os.getenv("CI"):
        print(f"❌ FAILED: {item.nodeid}")
