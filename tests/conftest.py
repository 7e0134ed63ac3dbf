"""Root conftest — isolates the env vars read by bazelws.settings.

Real BAZELWS_* variables in the developer's shell must not leak into tests
that assert on default settings, and the process-wide settings cache is
reset so each test sees its own environment.
"""

from collections.abc import Iterator

import pytest

from bazelws.settings import get_settings


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("BAZELWS_CONFIG", raising=False)
    monkeypatch.delenv("BAZELWS_TMPDIR", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
