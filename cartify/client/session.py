# cartify/client/session.py
import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class SessionStore:
    """
    Client-side session context: who is logged in and their cart mirror.

    Passed explicitly to the API client and checkout flow. `path` is
    optional; without it the session lives in memory only.

    Lifecycle:
      - load()  : read a previously saved session (missing file -> empty)
      - save()  : persist the current state
      - clear() : forget token, user and cart (logout)
    """

    path: Path | None = None
    token: str | None = None
    user_id: str | None = None
    name: str | None = None
    email: str | None = None
    is_admin: bool = False
    cart: list[dict[str, Any]] = field(default_factory=list)

    _FIELDS = ("token", "user_id", "name", "email", "is_admin", "cart")

    @property
    def logged_in(self) -> bool:
        return bool(self.token)

    def remember(self, auth: dict[str, Any]) -> None:
        """Store a login/register response ({token, user, isAdmin?})."""
        user = auth.get("user") or {}
        self.token = auth["token"]
        self.user_id = user.get("userId")
        self.name = user.get("name")
        self.email = user.get("email")
        self.is_admin = bool(auth.get("isAdmin", False))

    def load(self) -> "SessionStore":
        if self.path is None or not self.path.exists():
            return self
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt session file %s", self.path)
            return self
        for name in self._FIELDS:
            if name in data:
                setattr(self, name, data[name])
        return self

    def save(self) -> None:
        if self.path is None:
            return
        data = {k: v for k, v in asdict(self).items() if k in self._FIELDS}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def clear(self) -> None:
        self.token = None
        self.user_id = None
        self.name = None
        self.email = None
        self.is_admin = False
        self.cart = []
        if self.path is not None and self.path.exists():
            self.path.unlink()
