"""Per-user directories where the server keeps configuration, data, cache and logs."""

from pathlib import Path

import platformdirs

_APP_NAME = "activitywatch"
_SERVER_NAME = "aw-server-rust"


def _ensure(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Configuration directory, created if missing."""
    base = platformdirs.user_config_dir(_APP_NAME, appauthor=False)
    return _ensure(Path(base) / _SERVER_NAME)


def get_data_dir() -> Path:
    """Data directory, created if missing."""
    base = platformdirs.user_data_dir(_APP_NAME, appauthor=False)
    return _ensure(Path(base) / _SERVER_NAME)


def get_cache_dir() -> Path:
    """Cache directory, created if missing."""
    base = platformdirs.user_cache_dir(_APP_NAME, appauthor=False)
    return _ensure(Path(base) / _SERVER_NAME)


def get_log_dir(module: str) -> Path:
    """Log directory of one module, created if missing."""
    base = platformdirs.user_log_dir(_APP_NAME, appauthor=False)
    return _ensure(Path(base) / module)


def db_path(testing: bool) -> Path:
    """Path of the database file; testing mode uses a separate file."""
    name = "sqlite-testing.db" if testing else "sqlite.db"
    return get_data_dir() / name