from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from .domain.models import SourceId
from .utils.hash import short_hash

CONFIG_DIR = Path.home() / ".crateyard"
CONFIG_FILE = CONFIG_DIR / "config"

DEFAULT_INDEX_URL = "https://github.com/crateyard/crateyard-index"
INDEX_URL_KEY = "CRATEYARD_INDEX_URL"


def _read_config(config_file: Path) -> dict:
    config = {}
    if not config_file.exists():
        return config
    try:
        with open(config_file, "r") as f:
            for line in f:
                line = line.strip()
                if "=" in line:
                    key, value = line.split("=", 1)
                    config[key] = value
    except (IOError, PermissionError, OSError):
        # if we can't read the file, treat as not configured
        return {}
    return config


def get_index_url(config_file: Optional[Path] = None) -> str:
    """get the registry index URL, preferring the config file override."""
    config = _read_config(config_file or CONFIG_FILE)
    return config.get(INDEX_URL_KEY) or DEFAULT_INDEX_URL


def set_index_url(url: str, config_file: Optional[Path] = None):
    """set the index URL in config file, preserving other config values."""
    config_file = config_file or CONFIG_FILE
    config_file.parent.mkdir(parents=True, exist_ok=True)

    config = _read_config(config_file)
    config[INDEX_URL_KEY] = url

    try:
        with open(config_file, "w") as f:
            for key, value in config.items():
                f.write(f"{key}={value}\n")
    except (IOError, PermissionError, OSError) as e:
        raise RuntimeError(f"failed to write config file: {e}") from e


def registry_index_path(home: Path = CONFIG_DIR) -> Path:
    return home / "registry" / "index"


def registry_cache_path(home: Path = CONFIG_DIR) -> Path:
    return home / "registry" / "cache"


def registry_source_path(home: Path = CONFIG_DIR) -> Path:
    return home / "registry" / "src"


def registry_dir_name(source_id: SourceId) -> str:
    """
    directory name used to namespace one registry's files.

    the host keeps names readable; the hash keeps same-host registries apart.
    """
    host = urlparse(source_id.url).hostname or "local"
    return f"{host}-{short_hash(source_id)}"
