"""Role gate in front of the admin pages.

States move ``loading -> checking -> resolved``:

* no session: resolved straight away with a redirect to sign-in that carries
  the admin URL as ``callbackUrl``;
* session present: ``checking`` while the caller's role is looked up;
* lookup fails or the role is not ``ADMIN``: ``is_admin = False`` and a
  redirect home; otherwise ``is_admin = True`` and the page renders.

This only decides what to render. The admin API rejects non-admin callers on
its own.
"""

import enum
import logging
from typing import Awaitable, Callable, Optional
from urllib.parse import urlencode

from offmarket.models.user import Role
from offmarket.schemas.user import TokenClaims

logger = logging.getLogger(__name__)

SIGN_IN_URL = "/auth/signin"
HOME_URL = "/"

RoleLookup = Callable[[TokenClaims], Awaitable[Optional[str]]]


class GateState(str, enum.Enum):
    LOADING = "loading"
    CHECKING = "checking"
    RESOLVED = "resolved"


class AdminGate:
    def __init__(self, callback_url: str = "/admin"):
        self.callback_url = callback_url
        self.state = GateState.LOADING
        self.is_admin: Optional[bool] = None
        self.redirect_url: Optional[str] = None
        self.claims: Optional[TokenClaims] = None

    def session_loaded(self, claims: Optional[TokenClaims]) -> None:
        if self.state is not GateState.LOADING:
            raise RuntimeError(f"session already loaded (state={self.state.value})")
        if claims is None:
            query = urlencode({"callbackUrl": self.callback_url}, safe="/")
            self.redirect_url = f"{SIGN_IN_URL}?{query}"
            self.state = GateState.RESOLVED
            return
        self.claims = claims
        self.state = GateState.CHECKING

    async def check_role(self, lookup: RoleLookup) -> None:
        if self.state is not GateState.CHECKING:
            raise RuntimeError(f"no role check pending (state={self.state.value})")
        try:
            role = await lookup(self.claims)
        except Exception:
            logger.warning("Admin role check failed for %s", self.claims.sub, exc_info=True)
            role = None

        self.is_admin = role == Role.ADMIN.value
        if not self.is_admin:
            self.redirect_url = HOME_URL
        self.state = GateState.RESOLVED

    async def resolve(self, claims: Optional[TokenClaims], lookup: RoleLookup) -> "AdminGate":
        self.session_loaded(claims)
        if self.state is GateState.CHECKING:
            await self.check_role(lookup)
        return self

    @property
    def should_render(self) -> bool:
        return self.state is GateState.RESOLVED and bool(self.is_admin)
