import copy
import itertools
import re
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple

from rentcar.services.database import BackendError


def _matches(row: Dict[str, Any], match: Optional[Dict[str, Any]]) -> bool:
    # ids arrive as str from URLs and as int from JSON bodies
    return all(str(row.get(column)) == str(value) for column, value in (match or {}).items())


# "col", "*" or an embedded many-to-one table such as "bookings(*)"
COLUMN_PAT = re.compile(r"\s*(\w+)\s*\(([^)]*)\)\s*|\s*([\w*]+)\s*")


def _foreign_key(table: str) -> str:
    # bookings -> booking_id
    return (table[:-1] if table.endswith("s") else table) + "_id"


class LocalBackend:
    """
    In-memory stand-in for the hosted backend.

    Used when no Supabase credentials are configured and as the persistence
    double in tests. Functions must be registered explicitly; invoking an
    unregistered function fails the same way an undeployed edge function does.
    """

    def __init__(self, bucket: str = "documents"):
        self.bucket = bucket
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.functions: Dict[str, Callable[[Dict[str, Any]], Any]] = {}
        self.files: Dict[str, Tuple[bytes, str]] = {}
        self._ids: Dict[str, itertools.count] = {}
        self._accounts: Dict[str, Dict[str, Any]] = {}
        self._tokens: Dict[str, str] = {}

    # ------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------
    def _rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def seed(self, table: str, rows: List[Dict[str, Any]]) -> None:
        """Load fixture rows, keeping their ids."""
        for row in rows:
            self.insert(table, row)

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        counter = self._ids.setdefault(table, itertools.count(1))
        stored = copy.deepcopy(row)
        if stored.get("id") is None:
            stored["id"] = next(counter)
            while any(r["id"] == stored["id"] for r in self._rows(table)):
                stored["id"] = next(counter)
        self._rows(table).append(stored)
        return copy.deepcopy(stored)

    def update(
        self,
        table: str,
        values: Dict[str, Any],
        match: Optional[Dict[str, Any]] = None,
        in_filter: Optional[Tuple[str, List[Any]]] = None,
    ) -> List[Dict[str, Any]]:
        updated = []
        for row in self._rows(table):
            if not _matches(row, match):
                continue
            if in_filter:
                column, accepted = in_filter
                if str(row.get(column)) not in {str(v) for v in accepted}:
                    continue
            row.update(copy.deepcopy(values))
            updated.append(copy.deepcopy(row))
        return updated

    def _project(self, row: Dict[str, Any], columns: str) -> Dict[str, Any]:
        """Apply a select list, resolving embedded tables through their <table>_id column."""
        result: Dict[str, Any] = {}
        for part in (p for p in re.findall(r"\s*\w+\s*\([^)]*\)|[^,]+", columns) if p.strip()):
            embedded, embedded_columns, column = COLUMN_PAT.fullmatch(part).groups()
            if embedded:
                key = str(row.get(_foreign_key(embedded)))
                parents = [r for r in self._rows(embedded) if str(r.get("id")) == key]
                result[embedded] = self._project(parents[0], embedded_columns or "*") if parents else None
            elif column == "*":
                result.update(copy.deepcopy(row))
            else:
                result[column] = copy.deepcopy(row.get(column))
        return result

    def select(self, table: str, columns: str = "*", match: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return [self._project(row, columns) for row in self._rows(table) if _matches(row, match)]

    def select_one(self, table: str, columns: str = "*", match: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        rows = self.select(table, columns, match)
        if len(rows) != 1:
            raise BackendError(f"Expected exactly one row in {table} for {match}, found {len(rows)}")
        return rows[0]

    # ------------------------------------------------------------
    # Functions
    # ------------------------------------------------------------
    def register_function(self, function_name: str, handler: Callable[[Dict[str, Any]], Any]) -> None:
        self.functions[function_name] = handler

    def invoke(self, function_name: str, body: Dict[str, Any]) -> Any:
        handler = self.functions.get(function_name)
        if handler is None:
            raise BackendError(f"Function error: {function_name} is not deployed")
        return handler(copy.deepcopy(body))

    # ------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------
    def upload(self, path: str, content: bytes, content_type: str) -> str:
        self.files[path] = (content, content_type)
        return f"memory://{self.bucket}/{path}"

    # ------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------
    @staticmethod
    def _public(account: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": account["id"],
            "email": account["email"],
            "user_metadata": copy.deepcopy(account["user_metadata"]),
        }

    def sign_up(self, email: str, password: str, metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        key = email.lower()
        if key in self._accounts:
            raise BackendError("User already registered")
        account = {
            "id": str(uuid.uuid4()),
            "email": email,
            "password": password,
            "user_metadata": dict(metadata or {}),
        }
        self._accounts[key] = account
        return self._public(account)

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        account = self._accounts.get(email.lower())
        if account is None or account["password"] != password:
            raise BackendError("Invalid login credentials")
        access_token = uuid.uuid4().hex
        self._tokens[access_token] = account["email"].lower()
        return {
            "user": self._public(account),
            "access_token": access_token,
            "refresh_token": uuid.uuid4().hex,
        }

    def get_user(self, access_token: str) -> Optional[Dict[str, Any]]:
        key = self._tokens.get(access_token)
        if key is None:
            return None
        return self._public(self._accounts[key])

    def sign_out(self, access_token: str) -> None:
        self._tokens.pop(access_token, None)
