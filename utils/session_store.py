"""Durable key/value storage for saved game sessions.

Entries live in one JSON object on disk (``data/fastball_session.json`` by
default) under fixed keys such as ``fastball_team``.  Every write holds an
exclusive lock on a sibling ``.lock`` file.  A missing or corrupt session
file reads as an empty store.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import time
from pathlib import Path
from typing import Any, Dict

if os.name == "nt":  # pragma: no cover - Windows specific
    import msvcrt

    @contextlib.contextmanager
    def _locked(lock_file):
        # msvcrt locks a byte range, so the lock file must not be empty.
        lock_file.seek(0, os.SEEK_END)
        if lock_file.tell() == 0:
            lock_file.write("\n")
            lock_file.flush()
        lock_file.seek(0)
        while True:
            try:
                msvcrt.locking(lock_file.fileno(), msvcrt.LK_NBLCK, 1)
                break
            except PermissionError:
                time.sleep(0.01)
        try:
            yield
        finally:
            lock_file.seek(0)
            msvcrt.locking(lock_file.fileno(), msvcrt.LK_UNLCK, 1)
else:
    import fcntl

    @contextlib.contextmanager
    def _locked(lock_file):
        fcntl.flock(lock_file, fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file, fcntl.LOCK_UN)

from utils.path_utils import get_base_dir, get_data_dir


logger = logging.getLogger(__name__)

GAME_STATE_KEY = "fastball_game_state"
TEAM_KEY = "fastball_team"
STATS_KEY = "fastball_stats"

DEFAULT_SESSION_FILE = "fastball_session.json"


def _resolve_path(path: str | Path | None) -> Path:
    if path is None:
        return get_data_dir() / DEFAULT_SESSION_FILE
    p = Path(path)
    if not p.is_absolute():
        p = get_base_dir() / p
    return p


class SessionStore:
    """JSON file backed store addressed by string keys."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = _resolve_path(path)
        self.lock_path = self.path.with_suffix(self.path.suffix + ".lock")

    # ------------------------------------------------------------------
    # Raw file access
    # ------------------------------------------------------------------
    def _read_all(self) -> Dict[str, Any]:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring session file %s: expected a JSON object", self.path)
            return {}
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2)
        os.replace(tmp_path, self.path)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key`` or ``default``."""

        return self._read_all().get(key, default)

    def update(self, entries: Dict[str, Any]) -> None:
        """Write several entries in one locked read-modify-write cycle."""

        self.path.parent.mkdir(parents=True, exist_ok=True)
        # ``"a+"`` keeps the lock file intact while other processes hold it.
        with self.lock_path.open("a+") as lock_file:
            with _locked(lock_file):
                data = self._read_all()
                data.update(entries)
                self._write_all(data)

    def set(self, key: str, value: Any) -> None:
        """Persist ``value`` under ``key``."""

        self.update({key: value})

    def remove(self, key: str) -> None:
        """Delete ``key`` from the store if present."""

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.lock_path.open("a+") as lock_file:
            with _locked(lock_file):
                data = self._read_all()
                if key in data:
                    del data[key]
                    self._write_all(data)


class MemoryStore:
    """In-process stand-in for :class:`SessionStore` used by batch runs."""

    def __init__(self, initial: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = json.loads(json.dumps(initial or {}))

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def update(self, entries: Dict[str, Any]) -> None:
        # Round-trip through JSON so callers see the same shapes as on disk.
        self.data.update(json.loads(json.dumps(entries)))

    def set(self, key: str, value: Any) -> None:
        self.update({key: value})

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


__all__ = [
    "SessionStore",
    "MemoryStore",
    "GAME_STATE_KEY",
    "TEAM_KEY",
    "STATS_KEY",
]
