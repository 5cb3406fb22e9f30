"""Server configuration, stored as TOML in the configuration directory."""

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from . import dirs

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "127.0.0.1"
DEFAULT_PORT = 5601
DEFAULT_TESTING_PORT = 5667


def _default_port(testing: bool) -> int:
    return DEFAULT_TESTING_PORT if testing else DEFAULT_PORT


@dataclass
class AWConfig:
    """Settings of the server. ``testing`` is never written to the file."""

    address: str = DEFAULT_ADDRESS
    port: int = DEFAULT_PORT
    testing: bool = False
    cors: list[str] = field(default_factory=list)
    custom_static: dict[str, str] = field(default_factory=dict)

    @classmethod
    def default(cls, testing: bool = False) -> "AWConfig":
        """The defaults for the given mode."""
        return cls(port=_default_port(testing), testing=testing)

    @classmethod
    def from_toml(cls, text: str, testing: bool = False) -> "AWConfig":
        """Parse TOML text; missing keys take their defaults."""
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as err:
            raise ValueError(f"Failed to parse config file: {err}") from err
        config = cls.default(testing)
        if "address" in data:
            config.address = _check(data["address"], str, "address")
        if "port" in data:
            port = data["port"]
            if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 65535:
                raise ValueError(f"Failed to parse config file: invalid port {port!r}")
            config.port = port
        if "cors" in data:
            cors = _check(data["cors"], list, "cors")
            config.cors = [_check(origin, str, "cors") for origin in cors]
        if "custom_static" in data:
            static = _check(data["custom_static"], dict, "custom_static")
            config.custom_static = {
                _check(name, str, "custom_static"): _check(path, str, "custom_static")
                for name, path in static.items()
            }
        return config

    def to_toml(self) -> str:
        """TOML text of every setting except ``testing``."""
        return tomli_w.dumps(
            {
                "address": self.address,
                "port": self.port,
                "cors": list(self.cors),
                "custom_static": dict(self.custom_static),
            }
        )


def _check(value: Any, kind: type, key: str) -> Any:
    if not isinstance(value, kind):
        raise ValueError(f"Failed to parse config file: invalid value {value!r} for {key}")
    return value


def default_config_text(testing: bool = False) -> str:
    """The default configuration with every line commented out."""
    lines = AWConfig.default(testing).to_toml().splitlines()
    return "### DEFAULT SETTINGS ###\n" + "".join(f"#{line}\n" for line in lines)


def create_config(testing: bool = False, config_dir: Path | None = None) -> AWConfig:
    """Read the config file, first writing a commented-out default if none exists."""
    directory = Path(config_dir) if config_dir is not None else dirs.get_config_dir()
    path = directory / ("config-testing.toml" if testing else "config.toml")

    if not path.is_file():
        logger.debug("Writing default commented out config at %s", path)
        with open(path, "w", encoding="utf-8") as file:
            file.write(default_config_text(testing))
            file.flush()
            os.fsync(file.fileno())

    logger.debug("Reading config at %s", path)
    return AWConfig.from_toml(path.read_text(encoding="utf-8"), testing)