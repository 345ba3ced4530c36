"""
Session invalidation for Farm Client

Clears the active session, shows a blocking message, and forces navigation
back to the root path whenever the server says the client must log in again.
"""

from typing import Callable, Optional

from ..core.credentials import resolve_invalidated_kind
from ..core.session import SessionKind
from ..core.session_store import SessionStore
from ..utils.error_handler import InvalidationInfo
from ..utils.logging_setup import get_logger

logger = get_logger('invalidation')

ROOT_PATH = "/"


def _log_alert(message: str):
    logger.warning(f"Session alert: {message}")


def _log_redirect(path: str):
    logger.info(f"Redirecting to {path}")


class SessionInvalidationHandler:
    """Applies the side effects of a server-signaled invalidation"""

    def __init__(self, store: SessionStore,
                 alert: Optional[Callable[[str], None]] = None,
                 redirect: Optional[Callable[[str], None]] = None):
        self.store = store
        self.alert_callback: Callable[[str], None] = alert or _log_alert
        self.redirect_callback: Callable[[str], None] = redirect or _log_redirect

    def handle(self, info: InvalidationInfo) -> SessionKind:
        """
        Clear the active session and notify the user.

        Returns the kind that was cleared, or SessionKind.NONE when no session
        was present (e.g. a second request failing after the first one
        already logged out). Never raises.
        """
        kind = resolve_invalidated_kind(
            self.store.has_token(SessionKind.FARMER),
            self.store.has_token(SessionKind.ADMIN)
        )

        if kind == SessionKind.NONE:
            logger.debug(f"Ignoring {info.reason.value} signal, no session is present")
            return kind

        self.store.clear(kind)
        logger.warning(
            f"{kind.value.title()} session invalidated by server "
            f"({info.reason.value}, HTTP {info.status_code})"
        )

        self._notify(self.alert_callback, info.message, "alert")
        self._notify(self.redirect_callback, ROOT_PATH, "redirect")
        return kind

    def _notify(self, callback: Callable[[str], None], value: str, name: str):
        try:
            callback(value)
        except Exception as e:
            logger.error(f"Error in {name} callback: {e}")

    def set_alert_callback(self, callback: Callable[[str], None]):
        """Set the blocking message callback"""
        self.alert_callback = callback

    def set_redirect_callback(self, callback: Callable[[str], None]):
        """Set the forced navigation callback"""
        self.redirect_callback = callback
