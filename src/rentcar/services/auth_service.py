import logging
from typing import Any, Callable, Dict, List, Optional

from rentcar.models.session import SIGNED_IN, SIGNED_OUT, Session

logger = logging.getLogger(__name__)

AuthListener = Callable[[str, Optional[Session]], None]


class AuthService:
    """
    Single owner of authentication state.

    Sessions are explicit objects handed to callers; the user's role travels
    on the session instead of being mirrored into client storage. Backend
    failures are logged and reported as "not authenticated".
    """

    def __init__(self, backend):
        self.backend = backend
        self._sessions: Dict[str, Session] = {}
        self._listeners: List[AuthListener] = []

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: str, session: Optional[Session]) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception:
                logger.exception("Auth listener failed for %s", event)

    def sign_up(self, email: str, password: str, metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Create the auth account. Errors propagate to the registration flow."""
        user = self.backend.sign_up(email, password, metadata or {})
        logger.info("Signed up user %s", user.get("id"))
        return user

    def _resolve_role(self, user: Dict[str, Any]) -> Optional[str]:
        role = (user.get("user_metadata") or {}).get("role")
        if role:
            return role
        rows = self.backend.select("users", "role", match={"id": user["id"]})
        return rows[0].get("role") if rows else None

    def sign_in(self, email: str, password: str) -> Optional[Session]:
        try:
            result = self.backend.sign_in(email, password)
            user = result["user"]
            session = Session(
                user_id=user["id"],
                email=user.get("email") or email,
                role=self._resolve_role(user),
                access_token=result["access_token"],
                refresh_token=result.get("refresh_token", ""),
            )
        except Exception as e:
            logger.error("Error signing in %s: %s", email, e)
            return None

        self._sessions[session.access_token] = session
        self._notify(SIGNED_IN, session)
        return session

    def get_session(self, access_token: Optional[str]) -> Optional[Session]:
        """
        Resolve a bearer token to a Session.

        The token is checked with the backend on every call, so an expired or
        revoked token stops authenticating at once and its cached session
        (kept for the refresh token) is dropped.
        """
        if not access_token:
            return None
        try:
            user = self.backend.get_user(access_token)
            if user is None:
                self._sessions.pop(access_token, None)
                return None
            cached = self._sessions.get(access_token)
            return Session(
                user_id=user["id"],
                email=user.get("email", ""),
                role=self._resolve_role(user),
                access_token=access_token,
                refresh_token=cached.refresh_token if cached else "",
            )
        except Exception as e:
            logger.error("Error checking auth: %s", e)
            return None

    def sign_out(self, access_token: Optional[str]) -> bool:
        session = self.get_session(access_token)
        self._sessions.pop(access_token, None)
        if session is None:
            return False
        try:
            self.backend.sign_out(access_token)
        except Exception as e:
            logger.error("Error signing out: %s", e)
        self._notify(SIGNED_OUT, None)
        return True
