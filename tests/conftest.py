from collections.abc import Generator
from pathlib import Path

import pytest

from sqlscan import SQLScan, SQLScanConfig

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture
def scan() -> Generator[SQLScan, None, None]:
    """SQLScan with an in-memory SQLite database registered as ``main``."""
    with SQLScan() as instance:
        instance.register("main", "sqlite", ":memory:")
        yield instance


@pytest.fixture
def debug_scan() -> Generator[SQLScan, None, None]:
    """Like ``scan`` but with statement tracing enabled."""
    with SQLScan(SQLScanConfig(debug=True)) as instance:
        instance.register("main", "sqlite", ":memory:")
        yield instance
