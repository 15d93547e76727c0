import hashlib
from typing import Any, Dict, Tuple

GLOBAL_SCOPE = "global"


def fingerprint(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


class ResultCache:
    """Flow results for one user, keyed by the fingerprint of the input document.

    Results derived from a résumé are stored under that résumé's fingerprint;
    results that do not depend on a document use ``GLOBAL_SCOPE``.
    """

    def __init__(self):
        self._entries: Dict[Tuple[str, str], Any] = {}

    def get(self, scope: str, key: str) -> Any | None:
        return self._entries.get((scope, key))

    def put(self, scope: str, key: str, value: Any) -> None:
        self._entries[(scope, key)] = value

    def invalidate(self, scope: str | None = None) -> int:
        if scope is None:
            dropped = len(self._entries)
            self._entries.clear()
            return dropped
        keys = [entry for entry in self._entries if entry[0] == scope]
        for entry in keys:
            del self._entries[entry]
        return len(keys)

    def __len__(self) -> int:
        return len(self._entries)
