import json
import shutil
from pathlib import Path
from typing import Any

import pytest

from succubus_realm.app import Realm
from succubus_realm.config import Settings

TEST_DATA_DIR = Path("data-tests")


@pytest.fixture(autouse=True)
def clean_test_data():
    """Wipe and re-create data-tests/ before every test."""
    if TEST_DATA_DIR.exists():
        shutil.rmtree(TEST_DATA_DIR)
    TEST_DATA_DIR.mkdir(parents=True)
    yield
    # leave data-tests around after tests for inspection; CI can ignore it


@pytest.fixture
def settings() -> Settings:
    return Settings(app_env="test", data_dir=TEST_DATA_DIR, backup_suffix=".backup")


@pytest.fixture
def realm(settings: Settings) -> Realm:
    return Realm(settings)


@pytest.fixture
def write_characters(settings: Settings):
    """Write a roster file: write_characters([{"id": 1, "name": "Lilith"}, ...])."""
    def _write(characters: list[dict[str, Any]]) -> Path:
        path = settings.characters_path
        path.write_text(json.dumps({"succubi": characters}, indent=2), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def write_likes(settings: Settings):
    """Write the likes file verbatim: a dict is dumped as JSON, a str is written as-is."""
    def _write(data: dict[str, Any] | str) -> Path:
        path = settings.likes_path
        text = data if isinstance(data, str) else json.dumps(data, indent=2)
        path.write_text(text, encoding="utf-8")
        return path
    return _write
