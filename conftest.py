"""
Global pytest configuration for Browser Use Live.
"""


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests that call the real Browser Use Cloud API"
    )
