import os
import pytest


def pytest_runtest_setup(item):
    if item.get_closest_marker("tk_required"):
        if not os.getenv("TK_TESTS"):
            pytest.skip("TK_TESTS not set; skipping Tk-dependent test")
