import os
from typing import Any

import pytest

# Monkeypatch coverage to bypass teardown crash in act/docker
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

    import coverage.collector

    def safe_stop(self: Any) -> None:
        if self in getattr(self, "_collectors", []):
            self._collectors.remove(self)

    coverage.collector.Collector.stop = safe_stop


@pytest.fixture(autouse=True)  # type: ignore[misc]
def no_user_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's LOX_CONFIG from leaking into tests."""
    monkeypatch.delenv("LOX_CONFIG", raising=False)
