"""
Runtime configuration for the content graph.

Settings are read from ``CRUXGRAPH_*`` environment variables. A ``.env`` file
in the working directory is loaded first when present; variables already set
in the environment take precedence over it.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .core.exceptions import ConfigurationError
from .core.pagination import DEFAULT_PER_PAGE
from .infrastructure.storage.plugins.sqlite.constants import STORAGEDB

ENV_PREFIX = "CRUXGRAPH_"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    """
    Configuration values for storage, link rendering and logging.

    Attributes:
        data_dir (str): Directory holding the SQLite database
        db_name (str): SQLite database file name
        base_url (str): Base URL used to build pagination links
        primary_home_id (str): Home assigned to newly created rows
        default_per_page (int): Page size when a request doesn't ask for one
        log_level (str): Name of the logging level
    """

    data_dir: str = "data"
    db_name: str = STORAGEDB
    base_url: str = "http://localhost:3000"
    primary_home_id: str = "home"
    default_per_page: int = DEFAULT_PER_PAGE
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.data_dir:
            raise ConfigurationError("data_dir must not be empty")
        if not self.db_name:
            raise ConfigurationError("db_name must not be empty")
        if not self.primary_home_id:
            raise ConfigurationError("primary_home_id must not be empty")
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"base_url must be an http(s) URL: {self.base_url}")
        if isinstance(self.default_per_page, bool) or not isinstance(self.default_per_page, int):
            raise ConfigurationError("default_per_page must be an integer")
        if self.default_per_page < 1:
            raise ConfigurationError("default_per_page must be positive")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigurationError(f"Unknown log level: {self.log_level}")

    @property
    def db_path(self) -> str:
        return os.path.join(self.data_dir, self.db_name)

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, dotenv_path: Optional[str] = None
    ) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``; no ``.env`` file
                     is loaded when given
            dotenv_path: Explicit ``.env`` file to load into ``os.environ``

        Returns:
            Settings with defaults for unset variables

        Raises:
            ConfigurationError: If a value is malformed
        """
        if environ is None:
            load_dotenv(dotenv_path=dotenv_path)
            environ = os.environ

        def read(name: str, default: str) -> str:
            value = environ.get(f"{ENV_PREFIX}{name}")
            return value.strip() if value and value.strip() else default

        raw_per_page = read("DEFAULT_PER_PAGE", str(DEFAULT_PER_PAGE))
        try:
            per_page = int(raw_per_page)
        except ValueError:
            raise ConfigurationError(
                f"{ENV_PREFIX}DEFAULT_PER_PAGE must be an integer, got '{raw_per_page}'"
            )

        return cls(
            data_dir=read("DATA_DIR", "data"),
            db_name=read("DB_NAME", STORAGEDB),
            base_url=read("BASE_URL", "http://localhost:3000").rstrip("/"),
            primary_home_id=read("PRIMARY_HOME_ID", "home"),
            default_per_page=per_page,
            log_level=read("LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(settings: Settings) -> None:
    """Configure the root logger for command-line use."""
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(settings.log_level.upper())
