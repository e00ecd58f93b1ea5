"""
PyTest Configuration for requant Tests

Provides fixtures, markers, and test setup.
"""
import sys
from pathlib import Path

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Add repository root to path so tests.correctness resolves
root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path))


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "correctness: mark test as correctness test")
    config.addinivalue_line("markers", "property: mark test as property-based test")


@pytest.fixture(autouse=True)
def reset_config():
    """Restore default global configuration around every test."""
    from requant.api.config import configure

    configure(reset=True)
    yield
    configure(reset=True)

