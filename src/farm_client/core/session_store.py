"""
Session Store for Farm Client

Keeps farmer and admin sessions in a persistent key-value storage and manages
their lifecycle (login, logout, server-signaled invalidation).
"""

import json
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from .session import AdminSession, FarmerSession, SessionKind, ADMIN_KEYS, FARMER_KEYS
from ..utils.logging_setup import get_logger

logger = get_logger('session_store')

Session = Union[FarmerSession, AdminSession]


class KeyValueStorage(ABC):
    """String key-value storage that outlives the process"""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key; removing a missing key is a no-op"""

    @abstractmethod
    def keys(self) -> List[str]:
        ...


def _require_value(key: str, value) -> str:
    if value is None:
        raise ValueError(f"Cannot store None for '{key}'; remove the key instead")
    return str(value)


def _string_items(data: Dict) -> Dict[str, str]:
    """Stringify values, dropping nulls so they read back as absent keys"""
    return {str(k): str(v) for k, v in data.items() if v is not None}


class MemoryStorage(KeyValueStorage):
    """Dict-backed storage, mostly for tests and short-lived scripts"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = _string_items(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = _require_value(key, value)

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data.keys())


class JsonFileStorage(KeyValueStorage):
    """Storage persisted as a flat JSON object; every mutation is written back

    Writes go to a temporary file in the same directory that then replaces
    the target, so a crash never leaves a half-written session file. A file
    that cannot be parsed is treated as empty and overwritten on next write.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._data: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}

        with open(self.path, 'r', encoding='utf-8') as f:
            content = f.read()

        if not content.strip():
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring session file {self.path}: not a JSON object")
            return {}
        return _string_items(data)

    def _save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(self._data, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = _require_value(key, value)
        self._save()

    def remove_item(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._save()

    def keys(self) -> List[str]:
        return list(self._data.keys())


class SessionStore:
    """Reads and writes farmer and admin sessions over a KeyValueStorage"""

    def __init__(self, storage: Optional[KeyValueStorage] = None):
        self.storage = storage if storage is not None else MemoryStorage()
        self._lock = threading.RLock()

        # Callbacks for session events
        self.session_set_callback: Optional[Callable[[Session], None]] = None
        self.session_cleared_callback: Optional[Callable[[SessionKind], None]] = None

    def _read(self, keys) -> Dict[str, Optional[str]]:
        return {key: self.storage.get_item(key) for key in keys}

    def get_farmer(self) -> Optional[FarmerSession]:
        """Get the stored farmer session, if any"""
        with self._lock:
            return FarmerSession.from_storage(self._read(FARMER_KEYS))

    def get_admin(self) -> Optional[AdminSession]:
        """Get the stored admin session, if any"""
        with self._lock:
            return AdminSession.from_storage(self._read(ADMIN_KEYS))

    def get(self, kind: SessionKind) -> Optional[Session]:
        if kind == SessionKind.FARMER:
            return self.get_farmer()
        if kind == SessionKind.ADMIN:
            return self.get_admin()
        return None

    def snapshot(self) -> Tuple[Optional[FarmerSession], Optional[AdminSession]]:
        """Read both sessions under one lock acquisition"""
        with self._lock:
            return self.get_farmer(), self.get_admin()

    def has_token(self, kind: SessionKind) -> bool:
        """Check if the token key of a session kind is present"""
        if kind == SessionKind.FARMER:
            key = FARMER_KEYS[0]
        elif kind == SessionKind.ADMIN:
            key = ADMIN_KEYS[0]
        else:
            return False
        return bool(self.storage.get_item(key))

    def _set(self, session: Session):
        with self._lock:
            for key, value in session.to_dict().items():
                if value is None:
                    self.storage.remove_item(key)
                else:
                    self.storage.set_item(key, value)

        logger.info(f"Stored {session.kind.value} session")

        if self.session_set_callback:
            try:
                self.session_set_callback(session)
            except Exception as e:
                logger.error(f"Error in session set callback: {e}")

    def set_farmer(self, session: FarmerSession):
        """Store a farmer session, replacing any previous one"""
        self._set(session)

    def set_admin(self, session: AdminSession):
        """Store an admin session, replacing any previous one"""
        self._set(session)

    def clear(self, kind: SessionKind) -> bool:
        """
        Remove every key of a session kind.

        Returns True if a token was present before clearing. Clearing an
        absent session is a no-op.
        """
        if kind == SessionKind.FARMER:
            keys = FARMER_KEYS
        elif kind == SessionKind.ADMIN:
            keys = ADMIN_KEYS
        else:
            return False

        with self._lock:
            was_present = self.has_token(kind)
            for key in keys:
                self.storage.remove_item(key)

        if was_present:
            logger.info(f"Cleared {kind.value} session")
            if self.session_cleared_callback:
                try:
                    self.session_cleared_callback(kind)
                except Exception as e:
                    logger.error(f"Error in session cleared callback: {e}")

        return was_present

    def clear_farmer(self) -> bool:
        return self.clear(SessionKind.FARMER)

    def clear_admin(self) -> bool:
        return self.clear(SessionKind.ADMIN)

    def get_stats(self) -> dict:
        """Get session presence summary (never includes tokens)"""
        farmer, admin = self.snapshot()
        return {
            'farmer_present': farmer is not None,
            'admin_present': admin is not None,
            'farmer_name': farmer.farmer_name if farmer else None,
            'admin_username': admin.username if admin else None,
            'admin_role': admin.role.value if admin and admin.role else None,
        }

    def set_session_set_callback(self, callback: Callable[[Session], None]):
        """Set callback for session store events"""
        self.session_set_callback = callback

    def set_session_cleared_callback(self, callback: Callable[[SessionKind], None]):
        """Set callback for session clear events"""
        self.session_cleared_callback = callback
