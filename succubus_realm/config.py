"""Runtime settings read from the environment (and the repo's .env file)."""

import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

ROOT = Path(__file__).parent.parent
DEFAULT_DATA_DIR = ROOT / "data"

load_dotenv(ROOT / ".env")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Settings(BaseModel):
    app_env: str = "development"
    data_dir: Path = DEFAULT_DATA_DIR
    likes_file: str = "likes-data.json"
    characters_file: str = "succubi-data.json"
    backup_suffix: str = ".backup"
    log_level: str = "INFO"

    @property
    def likes_path(self) -> Path:
        return self.data_dir / self.likes_file

    @property
    def characters_path(self) -> Path:
        return self.data_dir / self.characters_file

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, with per-environment defaults."""
        app_env = (os.getenv("APP_ENV") or "development").lower()
        default_suffix = ".test.backup" if app_env == "test" else ".backup"
        default_level = "DEBUG" if app_env == "development" else "INFO"
        return cls(
            app_env=app_env,
            data_dir=Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR))),
            likes_file=os.getenv("LIKES_FILE", "likes-data.json"),
            characters_file=os.getenv("CHARACTERS_FILE", "succubi-data.json"),
            backup_suffix=os.getenv("BACKUP_SUFFIX", default_suffix),
            log_level=os.getenv("LOG_LEVEL", default_level).upper(),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(level: str | int = "INFO") -> None:
    """Install the root handler. Later calls only adjust the level."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
