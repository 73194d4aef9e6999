import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from supabase import Client, ClientOptions, create_client

from rentcar.config.config import Config

logger = logging.getLogger(__name__)

PLACEHOLDER_URL = "https://placeholder-project.supabase.co"
PLACEHOLDER_KEY = "placeholder-key"


class BackendError(Exception):
    """Raised when a call to the persistence/auth/storage backend fails."""


def has_valid_credentials(url: Optional[str], key: Optional[str]) -> bool:
    """
    Check that Supabase credentials are present and are not the placeholders
    shipped in .env.example.
    """
    if not url or not key:
        return False
    if not url.startswith(("http://", "https://")):
        return False
    return url != PLACEHOLDER_URL and key != PLACEHOLDER_KEY


def init_backend(config_object=None):
    """
    Initialize the persistence backend for use throughout the app.

    Args:
        config_object: Config class (or object) holding SUPABASE_URL / SUPABASE_ANON_KEY.

    Returns:
        SupabaseBackend when the credentials are valid, otherwise an in-memory
        LocalBackend so the app can still boot for local development.
    """
    cfg = config_object or Config
    url = getattr(cfg, "SUPABASE_URL", None)
    key = getattr(cfg, "SUPABASE_ANON_KEY", None)
    bucket = getattr(cfg, "STORAGE_BUCKET", "documents")

    if has_valid_credentials(url, key):
        logger.info("Using Supabase URL: %s", url)
        return SupabaseBackend(
            create_client(url, key),
            bucket=bucket,
            auth_client_factory=lambda: create_client(url, key, options=stateless_auth_options()),
        )

    # imported here to keep the module graph one-directional
    from rentcar.services.local_backend import LocalBackend

    logger.warning("Using in-memory backend. Data will not be persisted.")
    return LocalBackend(bucket=bucket)


def stateless_auth_options() -> ClientOptions:
    """Options for a throwaway client that never keeps or refreshes a session."""
    return ClientOptions(persist_session=False, auto_refresh_token=False)


class SupabaseBackend:
    """
    Thin wrapper over the Supabase client exposing the table, function,
    storage and auth operations the services need.

    Every failure is re-raised as BackendError so callers handle a single
    exception type regardless of which SDK layer failed.
    """

    def __init__(self, client: Client, bucket: str = "documents",
                 auth_client_factory: Optional[Callable[[], Client]] = None):
        self.client = client
        self.bucket = bucket
        self.auth_client_factory = auth_client_factory

    # ------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------
    def _execute(self, query, action: str):
        try:
            return query.execute()
        except Exception as exc:
            raise BackendError(f"{action} failed: {exc}") from exc

    @staticmethod
    def _apply_filters(query, match: Optional[Dict[str, Any]], in_filter: Optional[Tuple[str, List[Any]]] = None):
        for column, value in (match or {}).items():
            query = query.eq(column, value)
        if in_filter:
            column, values = in_filter
            query = query.in_(column, list(values))
        return query

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        response = self._execute(self.client.table(table).insert(row), f"insert into {table}")
        if not response.data:
            raise BackendError(f"insert into {table} returned no row")
        return response.data[0]

    def update(
        self,
        table: str,
        values: Dict[str, Any],
        match: Optional[Dict[str, Any]] = None,
        in_filter: Optional[Tuple[str, List[Any]]] = None,
    ) -> List[Dict[str, Any]]:
        query = self._apply_filters(self.client.table(table).update(values), match, in_filter)
        return self._execute(query, f"update {table}").data or []

    def select(self, table: str, columns: str = "*", match: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        query = self._apply_filters(self.client.table(table).select(columns), match)
        return self._execute(query, f"select from {table}").data or []

    def select_one(self, table: str, columns: str = "*", match: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        query = self._apply_filters(self.client.table(table).select(columns), match).single()
        data = self._execute(query, f"select single from {table}").data
        if not data:
            raise BackendError(f"No row found in {table} for {match}")
        return data

    # ------------------------------------------------------------
    # Functions
    # ------------------------------------------------------------
    def invoke(self, function_name: str, body: Dict[str, Any]) -> Any:
        try:
            return self.client.functions.invoke(
                function_name,
                invoke_options={"body": body, "responseType": "json"},
            )
        except Exception as exc:
            raise BackendError(f"Function error: {exc}") from exc

    # ------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------
    def upload(self, path: str, content: bytes, content_type: str) -> str:
        storage = self.client.storage.from_(self.bucket)
        try:
            storage.upload(path=path, file=content, file_options={"content-type": content_type})
            return storage.get_public_url(path)
        except Exception as exc:
            raise BackendError(f"upload of {path} failed: {exc}") from exc

    # ------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------
    # Auth runs on a fresh client per call; the shared data client never holds
    # a user session and keeps the anon key on its table and storage headers.
    def _auth_client(self) -> Client:
        if self.auth_client_factory is None:
            raise BackendError("auth client factory is not configured")
        return self.auth_client_factory()

    @staticmethod
    def _user_to_dict(user) -> Dict[str, Any]:
        return {
            "id": str(user.id),
            "email": user.email,
            "user_metadata": dict(user.user_metadata or {}),
        }

    def sign_up(self, email: str, password: str, metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        auth_client = self._auth_client()
        try:
            response = auth_client.auth.sign_up(
                {"email": email, "password": password, "options": {"data": metadata or {}}}
            )
        except Exception as exc:
            raise BackendError(f"sign up failed: {exc}") from exc
        if response.user is None:
            raise BackendError("sign up returned no user")
        return self._user_to_dict(response.user)

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        auth_client = self._auth_client()
        try:
            response = auth_client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as exc:
            raise BackendError(f"sign in failed: {exc}") from exc
        if response.session is None or response.user is None:
            raise BackendError("sign in returned no session")
        return {
            "user": self._user_to_dict(response.user),
            "access_token": response.session.access_token,
            "refresh_token": response.session.refresh_token,
        }

    def get_user(self, access_token: str) -> Optional[Dict[str, Any]]:
        auth_client = self._auth_client()
        try:
            response = auth_client.auth.get_user(access_token)
        except Exception as exc:
            raise BackendError(f"get user failed: {exc}") from exc
        if response is None or response.user is None:
            return None
        return self._user_to_dict(response.user)

    def sign_out(self, access_token: str) -> None:
        """Revoke the given token only; other users' sessions are untouched."""
        auth_client = self._auth_client()
        try:
            auth_client.auth.admin.sign_out(access_token)
        except Exception as exc:
            raise BackendError(f"sign out failed: {exc}") from exc
