import shutil

import pytest
from _pytest.config import Config
from _pytest.nodes import Item


def pytest_configure(config: Config) -> None:
    config.addinivalue_line(
        "markers", "git: test needs the git executable to be available")


def pytest_runtest_setup(item: Item) -> None:
    if 'git' in item.keywords and shutil.which("git") is None:
        pytest.skip("need the git executable to run this test")
