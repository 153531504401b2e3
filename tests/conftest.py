"""
Pytest configuration.

Registers the integration marker (tests needing a real Tesseract install)
and shared receipt fixtures.
"""

import pytest


def pytest_addoption(parser):
    """Add custom command-line options"""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against a real Tesseract installation"
    )


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test requiring Tesseract"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration is specified"""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --run-integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture
def supermart_receipt():
    return (
        "SuperMart LLC\n"
        "12.03.2024\n"
        "Milk          3.50\n"
        "Bread         2.20\n"
        "Subtotal: 5.70\n"
        "Total: 5.70\n"
        "Thank you\n"
    )


@pytest.fixture
def polish_receipt():
    return (
        "BIEDRONKA\n"
        "Jeronimo Martins Polska S.A.\n"
        "PARAGON FISKALNY\n"
        "Data: 05.01.2024\n"
        "Mleko 2 x 3,49 = 6,98\n"
        "Chleb  4,50\n"
        "SUMA PLN 11,48\n"
        "CARD 11,48\n"
    )
