import os
import sys

import pytest

# Make fake_session importable from the test modules in this directory.
sys.path.insert(0, os.path.dirname(__file__))


def pytest_collection_modifyitems(items):
    for item in items:
        if "file-transfer" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
