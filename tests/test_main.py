# tests/test_main.py

from __future__ import annotations

import pytest

from tasktrack.cli import main as cli_main
from tasktrack.config import Settings
from tasktrack.core.state import AppState
from tasktrack.tasks.task_errors import StoreConnectionError

from .fakes import FakeTaskRepo


@pytest.fixture()
def fake_store(monkeypatch: pytest.MonkeyPatch, settings: Settings) -> FakeTaskRepo:
    """Run main() against a fake store, without touching the root logger."""
    repo = FakeTaskRepo()
    monkeypatch.setattr(cli_main, "get_settings", lambda: settings)
    monkeypatch.setattr(cli_main, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(
        cli_main,
        "create_initial_state",
        lambda *, settings: AppState(settings=settings, store=repo),
    )
    return repo


def test_main_closes_store_after_console_exits(
    monkeypatch: pytest.MonkeyPatch, fake_store: FakeTaskRepo
) -> None:
    monkeypatch.setattr(cli_main, "run_console_loop", lambda state: None)

    assert cli_main.main() == 0
    assert fake_store.close_calls == 1


def test_main_closes_store_when_console_crashes(
    monkeypatch: pytest.MonkeyPatch, fake_store: FakeTaskRepo
) -> None:
    def crash(state: AppState) -> None:
        raise RuntimeError("console died")

    monkeypatch.setattr(cli_main, "run_console_loop", crash)

    with pytest.raises(RuntimeError, match="console died"):
        cli_main.main()
    assert fake_store.close_calls == 1


def test_main_reports_unreachable_database(
    monkeypatch: pytest.MonkeyPatch, settings: Settings
) -> None:
    def refuse(*, settings: Settings) -> AppState:
        raise StoreConnectionError("connect failed: connection refused")

    monkeypatch.setattr(cli_main, "get_settings", lambda: settings)
    monkeypatch.setattr(cli_main, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(cli_main, "create_initial_state", refuse)

    assert cli_main.main() == 1
