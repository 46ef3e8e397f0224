"""Shared test fixtures for apiq.

Provides reusable fixtures for isolating the config file, managing output
state, swapping in an in-memory profile store and a mock HTTP transport, and
running CLI commands. These fixtures are automatically discovered by pytest.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest

from apiq.client.dispatcher import RequestDispatcher
from apiq.config import InMemoryProfileStore
from apiq.models import Config
from apiq.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When CliRunner or capsys swap those streams out, the
    cached references go stale, so a fresh manager is created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME at subdirectories of tmp_path,
    clears APIQ_CONFIG and changes the working directory to tmp_path.

    Returns:
        The path the config file will be written to.
    """
    monkeypatch.setattr("apiq.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("APIQ_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path / "config" / "apiq" / "config.yml"


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a PLAIN, colourless output manager.

    Create it inside the test (after capsys has swapped the streams) by
    requesting this fixture.
    """
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Store and transport fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_config() -> Config:
    """Two profiles, ``dev`` being the default."""
    return Config(
        default="dev",
        profiles={
            "dev": {"base_url": "http://dev.local:8080", "token": "dev-token"},
            "prod": {"base_url": "https://api.example.com/v1/", "token": "prod-token"},
        },
    )


@pytest.fixture
def memory_store(sample_config: Config) -> InMemoryProfileStore:
    return InMemoryProfileStore(sample_config)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it handled."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            request.read()
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def json_transport() -> RecordingTransport:
    """Transport that answers every request with ``{"ok": true}``."""
    return RecordingTransport(
        lambda request: httpx.Response(200, content=b'{"ok":true}')
    )


@pytest.fixture
def cli_env(
    monkeypatch: pytest.MonkeyPatch,
    memory_store: InMemoryProfileStore,
    json_transport: RecordingTransport,
) -> tuple[InMemoryProfileStore, RecordingTransport]:
    """Route the CLI's store and dispatcher factories to in-memory fakes."""
    monkeypatch.setattr("apiq.commands.common.make_store", lambda: memory_store)
    monkeypatch.setattr(
        "apiq.commands.common.make_dispatcher",
        lambda: RequestDispatcher(transport=json_transport),
    )
    return memory_store, json_transport


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
