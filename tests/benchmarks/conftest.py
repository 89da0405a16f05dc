"""Mark everything collected under this directory as a codspeed benchmark."""

from pathlib import Path

import pytest

BENCHMARK_DIR = Path(__file__).parent


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if item.path.is_relative_to(BENCHMARK_DIR):
            item.add_marker(pytest.mark.benchmark)
