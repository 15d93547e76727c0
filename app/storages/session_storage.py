from typing import Dict, Generic, List, TypeVar

T = TypeVar("T")


class SessionStorage(Generic[T]):
    def __init__(self):
        self._sessions: Dict[str, T] = {}

    def save(self, session_id: str, state: T) -> None:
        self._sessions[session_id] = state

    def get(self, session_id: str) -> T | None:
        return self._sessions.get(session_id)

    def delete(self, session_id: str) -> None:
        if session_id in self._sessions:
            del self._sessions[session_id]

    def exists(self, session_id: str) -> bool:
        return session_id in self._sessions

    def ids(self) -> List[str]:
        return list(self._sessions)
