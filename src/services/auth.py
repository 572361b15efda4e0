import hmac
from collections.abc import Iterable


class ApiKeyAuthorizer:
    def __init__(self, valid_keys: Iterable[str]) -> None:
        self._valid_keys = frozenset(valid_keys)

    def is_authorized(self, key: str | None) -> bool:
        if not key:
            return False
        return any(hmac.compare_digest(key.encode(), valid.encode()) for valid in self._valid_keys)
