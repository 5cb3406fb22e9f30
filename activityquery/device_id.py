"""Persistent identifier of this device."""

import uuid
from pathlib import Path

from . import dirs


def get_device_id(data_dir: Path | None = None) -> str:
    """Return the stored device id, generating and storing a UUID4 if none exists."""
    directory = Path(data_dir) if data_dir is not None else dirs.get_data_dir()
    path = directory / "device_id"
    if path.exists():
        return path.read_text(encoding="utf-8")
    device_id = str(uuid.uuid4())
    path.write_text(device_id, encoding="utf-8")
    return device_id