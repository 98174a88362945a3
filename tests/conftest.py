from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import httpx
import pendulum
import pytest

from beeline import configuration
from beeline.model.datapoint import Datapoint
from beeline.repository.beeminder import BeeminderRepository
from beeline.repository.configuration import CONFIGURATION_REPO
from tests.fakes import (
    BASE_URL,
    T1,
    T2,
    TEST_TOKEN,
    TEST_TZ,
    FakeBeeminder,
    FakeEditor,
    make_datapoint,
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Point the config file at a temp directory and drop any cached config.
    Automatically applied to all tests so the real user config is never read.
    """
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setattr(configuration, "CONFIG_PATH", config_dir)
    monkeypatch.setattr(configuration, "APP_CONFIG_PATH", config_dir / "config.yaml")
    monkeypatch.setattr(CONFIGURATION_REPO, "_config", None)
    monkeypatch.setattr(CONFIGURATION_REPO, "is_dirty", False)
    return config_dir / "config.yaml"


@pytest.fixture(autouse=True)
def api_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(configuration.API_KEY_ENV_VAR, TEST_TOKEN)
    monkeypatch.delenv(configuration.EDITOR_ENV_VAR, raising=False)


@pytest.fixture
def tz() -> pendulum.FixedTimezone:
    return TEST_TZ


@pytest.fixture
def before() -> list[Datapoint]:
    return [
        make_datapoint("a", T1, 1.0, "first"),
        make_datapoint("b", T2, 2.0, ""),
    ]


@pytest.fixture
def fake_beeminder() -> FakeBeeminder:
    return FakeBeeminder()


@pytest.fixture
def repository(fake_beeminder: FakeBeeminder) -> Iterator[BeeminderRepository]:
    repository = BeeminderRepository(
        api_key=TEST_TOKEN,
        base_url=BASE_URL,
        timeout=5.0,
        transport=httpx.MockTransport(fake_beeminder.handler),
    )
    yield repository
    repository.close()


@pytest.fixture
def fake_editor(monkeypatch: pytest.MonkeyPatch) -> FakeEditor:
    editor = FakeEditor()
    monkeypatch.setattr("beeline.service.edit.subprocess.run", editor.run)
    return editor
