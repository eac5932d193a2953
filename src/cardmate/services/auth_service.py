"""
Signed-in identity for a cardmate session.
"""

from collections.abc import Callable

from cardmate.error_codes import ErrorCode
from cardmate.exceptions import AuthError
from cardmate.store.base import RemoteStore
from cardmate.utils.logging_utils import EnhancedLoggerMixin

IdentityListener = Callable[[str | None], None]


class Session(EnhancedLoggerMixin):
    """Holds the current user id and tells listeners when it changes.

    Services receive the session at construction; presence of a user id is
    the only thing they rely on.
    """

    def __init__(self, store: RemoteStore, user_id: str | None = None):
        super().__init__()
        self.store = store
        self._user_id: str | None = None
        self._listeners: list[IdentityListener] = []
        if user_id:
            self.sign_in(user_id)

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def is_signed_in(self) -> bool:
        return self._user_id is not None

    def require_user(self) -> str:
        """Current user id, or AuthError when signed out."""
        if self._user_id is None:
            raise AuthError("You need to sign in first.", ErrorCode.NOT_SIGNED_IN)
        return self._user_id

    def add_listener(self, listener: IdentityListener) -> Callable[[], None]:
        """Register ``listener``; returns a function that removes it."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return remove

    def sign_in(self, user_id: str, email: str | None = None) -> None:
        """Sign in as ``user_id``, creating the profile row if missing."""
        user_id = user_id.strip()
        if not user_id:
            raise AuthError("A user id is required to sign in.")
        profile = {'id': user_id}
        if email:
            profile['email'] = email
        self.store.upsert('profiles', profile)
        self._set_user(user_id)

    def sign_out(self) -> None:
        self._set_user(None)

    def profile_exists(self) -> bool:
        if self._user_id is None:
            return False
        return bool(self.store.select('profiles', {'id': self._user_id}))

    def _set_user(self, user_id: str | None) -> None:
        if user_id == self._user_id:
            return
        self._user_id = user_id
        self.info("Identity changed", user_id=user_id or "-")
        for listener in list(self._listeners):
            listener(user_id)
