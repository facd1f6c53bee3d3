"""migrakit configuration parsing."""

from __future__ import annotations

import configparser
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from migrakit.errors import ConfigError, ConnectionNotFoundError

CONFIG_FILENAME = "migrakit.ini"
DEFAULT_CONNECTION = "default"

_CONNECTION_PREFIX = "connection:"
_ENV_PREFIX = "MIGRAKIT_"


@dataclass
class ConnectionConfig:
    """One named database connection."""

    name: str
    url: str | None = None


@dataclass
class MigrakitConfig:
    """Parse and represent migrakit.ini configuration.

    Example migrakit.ini:
        [migrakit]
        url = sqlite:///app.db
        migration_table = migrations
        migration_dir = database/migrations
        seeder_dir = database/seeders
        log_level = info

        [connection:reporting]
        url = postgresql://localhost/reporting
    """

    connections: dict[str, ConnectionConfig] = field(default_factory=dict)
    """Named connections; the ``[migrakit]`` url is stored as ``default``."""

    default_connection: str = DEFAULT_CONNECTION
    """Connection used when no name is given."""

    migration_table: str = "migrations"
    """Table name for tracking applied migrations."""

    migration_dir: Path = Path("migrations")
    """Directory containing migration files."""

    seeder_dir: Path = Path("seeders")
    """Directory containing seeder files."""

    log_level: str = "info"
    """Console log level used by the CLI."""

    extra: dict[str, Any] = field(default_factory=dict)
    """Additional configuration options."""

    _config_path: Path | None = None
    """Path to the config file (internal)."""

    @classmethod
    def from_ini(cls, path: Path | str) -> MigrakitConfig:
        """Load configuration from a migrakit.ini file.

        Args:
            path: Path to migrakit.ini

        Returns:
            Parsed MigrakitConfig

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigError: If the [migrakit] section is missing
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        config = configparser.ConfigParser()
        config.read(path)

        if "migrakit" not in config:
            raise ConfigError(f"No [migrakit] section in {path}")

        section = config["migrakit"]

        connections = {}
        url = section.get("url")
        if url:
            connections[DEFAULT_CONNECTION] = ConnectionConfig(DEFAULT_CONNECTION, url)
        for name in config.sections():
            if name.startswith(_CONNECTION_PREFIX):
                conn_name = name[len(_CONNECTION_PREFIX):].strip()
                connections[conn_name] = ConnectionConfig(conn_name, config[name].get("url"))

        known_keys = {"url", "migration_table", "migration_dir", "seeder_dir", "log_level"}
        extra = {k: v for k, v in section.items() if k not in known_keys}

        return cls(
            connections=connections,
            migration_table=section.get("migration_table", "migrations"),
            migration_dir=_resolve(path.parent, section.get("migration_dir", "migrations")),
            seeder_dir=_resolve(path.parent, section.get("seeder_dir", "seeders")),
            log_level=section.get("log_level", "info"),
            extra=extra,
            _config_path=path,
        )

    @classmethod
    def auto_detect(cls, start_path: Path | str | None = None) -> MigrakitConfig | None:
        """Auto-detect migrakit.ini by searching up from start_path.

        Args:
            start_path: Directory to start searching from (default: cwd)

        Returns:
            MigrakitConfig if found, None otherwise
        """
        start_path = Path.cwd() if start_path is None else Path(start_path)

        current = start_path
        while current != current.parent:
            ini_path = current / CONFIG_FILENAME
            if ini_path.exists():
                return cls.from_ini(ini_path)
            current = current.parent

        return None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> MigrakitConfig:
        """Build configuration from ``MIGRAKIT_*`` environment variables."""
        env = os.environ if environ is None else environ

        def get(key: str, default: str) -> str:
            return env.get(_ENV_PREFIX + key) or default

        connections = {}
        url = env.get(_ENV_PREFIX + "URL")
        if url:
            connections[DEFAULT_CONNECTION] = ConnectionConfig(DEFAULT_CONNECTION, url)

        return cls(
            connections=connections,
            migration_table=get("MIGRATION_TABLE", "migrations"),
            migration_dir=Path(get("MIGRATION_DIR", "migrations")),
            seeder_dir=Path(get("SEEDER_DIR", "seeders")),
            log_level=get("LOG_LEVEL", "info"),
        )

    def validate(self) -> None:
        """Check that every connection has a URL.

        Raises:
            ConfigError: Listing every problem found
        """
        problems = []
        if self.default_connection not in self.connections:
            problems.append(f"default connection {self.default_connection!r} is not configured")
        for name, conn in sorted(self.connections.items()):
            if not conn.url:
                problems.append(f"connection {name!r} has no url")
        if problems:
            raise ConfigError("invalid configuration: " + "; ".join(problems))

    def get_url(self, name: str | None = None, override: str | None = None) -> str:
        """Get a connection URL with optional override.

        Args:
            name: Connection name (default connection when omitted)
            override: URL to use instead of config value

        Returns:
            Database URL

        Raises:
            ConnectionNotFoundError: If the named connection is not configured
            ConfigError: If no URL is available
        """
        if override:
            return override
        name = name or self.default_connection
        conn = self.connections.get(name)
        if conn is None:
            if name == self.default_connection:
                raise ConfigError("No database URL configured")
            raise ConnectionNotFoundError(f"connection {name!r}: not configured")
        if not conn.url:
            raise ConfigError(f"connection {name!r}: no url configured")
        return conn.url


def _resolve(base: Path, value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else base / path
