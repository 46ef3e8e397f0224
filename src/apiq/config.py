"""Configuration paths and the profile store.

This module handles all persistent state for apiq:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.apiq/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`. ``$APIQ_CONFIG`` overrides the config file path.
* **Profile store** -- :class:`ProfileStore` is the load/save/clear
  interface the CLI depends on. :class:`FileProfileStore` persists the
  :class:`~apiq.models.Config` as YAML; :class:`InMemoryProfileStore`
  keeps it in memory for tests and embedding.
* **Profile operations** -- :func:`set_profile_fields`, :func:`use_profile`
  and :func:`dump_config` implement ``config set``, ``config use`` and
  ``config show`` on top of any store.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`). There is no cross-process locking: two concurrent
writers race and the last one wins.
"""

from __future__ import annotations

import logging
import os
import platform
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional

import yaml
from pydantic import ValidationError

from apiq.exceptions import ConfigError, ProfileNotFoundError
from apiq.models import Config
from apiq.parsing import parse_assignment

logger = logging.getLogger(__name__)

_APP_NAME = "apiq"
_CONFIG_FILENAME = "config.yml"
_CONFIG_ENV_VAR = "APIQ_CONFIG"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/apiq/`` (default ``~/.config/apiq/``).
    On macOS/Windows: ``~/.apiq/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/apiq/`` (default ``~/.local/share/apiq/``).
    On macOS/Windows: ``~/.apiq/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_path() -> Path:
    """Return the path of the YAML config document.

    ``$APIQ_CONFIG`` wins when set; otherwise ``config.yml`` inside
    :func:`get_config_dir`.
    """
    override = os.environ.get(_CONFIG_ENV_VAR, "")
    if override:
        return Path(override).expanduser()
    return get_config_dir() / _CONFIG_FILENAME


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and *path* is left as it was.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Profile stores ---


class ProfileStore(ABC):
    """Persistence interface for the :class:`~apiq.models.Config` document.

    The CLI receives a store instead of touching the filesystem directly, so
    tests can substitute :class:`InMemoryProfileStore`.
    """

    @abstractmethod
    def load(self) -> Config:
        """Return the persisted config, or an empty ``Config()`` if there is none.

        Raises:
            ConfigError: If the stored document cannot be read or parsed.
        """

    @abstractmethod
    def save(self, config: Config) -> None:
        """Replace the persisted config with *config*.

        Readers never observe a partially written document.

        Raises:
            ConfigError: If the document cannot be written.
        """

    @abstractmethod
    def clear(self) -> None:
        """Delete the persisted config. A no-op when nothing is stored."""

    @property
    def location(self) -> str:
        """Human-readable description of where the config lives."""
        return "<memory>"


class FileProfileStore(ProfileStore):
    """YAML-backed store, one document per user.

    Args:
        path: The config file. Defaults to :func:`get_config_path`.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path if path is not None else get_config_path()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def location(self) -> str:
        return str(self._path)

    def load(self) -> Config:
        if not self._path.is_file():
            logger.debug("No config at %s, using empty config", self._path)
            return Config()
        try:
            text = self._path.read_text(encoding="utf-8")
            data = yaml.safe_load(text)
        except OSError as exc:
            raise ConfigError(f"Cannot read config at {self._path}: {exc}") from exc
        except (yaml.YAMLError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Invalid config at {self._path}: {exc}") from exc

        if data is None:
            return Config()
        if not isinstance(data, dict):
            raise ConfigError(
                f"Invalid config at {self._path}: expected a mapping, "
                f"got {type(data).__name__}"
            )
        # Older files may carry ``profiles:`` with no entries.
        if data.get("profiles") is None:
            data["profiles"] = {}
        try:
            return Config.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid config at {self._path}: {exc}") from exc

    def save(self, config: Config) -> None:
        data = config.model_dump(mode="json")
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
        try:
            _atomic_write(self._path, text)
        except OSError as exc:
            raise ConfigError(f"Cannot write config at {self._path}: {exc}") from exc
        logger.debug("Saved config to %s", self._path)

    def clear(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise ConfigError(f"Cannot delete config at {self._path}: {exc}") from exc
        logger.debug("Deleted config at %s", self._path)


class InMemoryProfileStore(ProfileStore):
    """Store that keeps the config in memory. ``save`` stores a deep copy."""

    def __init__(self, config: Optional[Config] = None) -> None:
        self._config = config.model_copy(deep=True) if config is not None else None
        self.save_count = 0

    def load(self) -> Config:
        if self._config is None:
            return Config()
        return self._config.model_copy(deep=True)

    def save(self, config: Config) -> None:
        self._config = config.model_copy(deep=True)
        self.save_count += 1

    def clear(self) -> None:
        self._config = None


# --- Profile operations ---


def set_profile_fields(store: ProfileStore, name: str, pairs: Iterable[str]) -> Config:
    """Create or update profile *name* with ``key=value`` *pairs*.

    Pairs are applied in order, so a key repeated within one call ends up with
    its last value. All pairs are parsed before anything is written.

    Args:
        store: Where the config lives.
        name: Profile name; created if absent.
        pairs: Raw ``key=value`` strings from the command line.

    Returns:
        The saved config.

    Raises:
        InvalidUsageError: If any pair lacks ``=``. Nothing is saved.
        ConfigError: If the store cannot be read or written.
    """
    assignments = [parse_assignment(pair) for pair in pairs]

    config = store.load()
    fields = config.profiles.setdefault(name, {})
    for key, value in assignments:
        fields[key] = value
    store.save(config)
    return config


def use_profile(store: ProfileStore, name: str) -> Config:
    """Make *name* the default profile.

    Raises:
        ProfileNotFoundError: If *name* is not a known profile. The stored
            config is left untouched.
    """
    config = store.load()
    if name not in config.profiles:
        raise ProfileNotFoundError(f"Profile '{name}' does not exist")
    config.default = name
    store.save(config)
    return config


def dump_config(config: Config) -> str:
    """Render the whole config as YAML, tokens included."""
    data = config.model_dump(mode="json")
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
