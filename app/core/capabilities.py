"""Optional client capabilities: speech capture and camera/microphone preview.

Speech-to-text and media capture run in the user's browser. The server only
sees their effects: transcript increments pushed over the socket and the
permission outcome the client reports. Both are injected into the interview
controller so tests and text-only clients can swap them out.
"""
from dataclasses import dataclass
from typing import Callable, List, Protocol

from app.core.errors import CapabilityUnavailableError


@dataclass(frozen=True)
class TranscriptIncrement:
    text: str
    is_final: bool


TranscriptListener = Callable[[TranscriptIncrement], None]


class SpeechCapture(Protocol):
    @property
    def is_available(self) -> bool: ...

    @property
    def is_active(self) -> bool: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def subscribe(self, listener: TranscriptListener) -> None: ...


class MediaPreview(Protocol):
    kind: str | None

    @property
    def is_open(self) -> bool: ...

    def open(self) -> None: ...

    def close(self) -> None: ...


class BrowserSpeechCapture:
    """Speech capture driven by the browser's recognition engine.

    Increments pushed while capture is stopped are dropped, mirroring a
    recognizer that has been switched off.
    """

    def __init__(self, available: bool = True):
        self._available = available
        self._active = False
        self._listeners: List[TranscriptListener] = []

    @property
    def is_available(self) -> bool:
        return self._available

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self) -> None:
        if not self._available:
            raise CapabilityUnavailableError("speech", "Speech recognition is not supported by this browser")
        self._active = True

    def stop(self) -> None:
        self._active = False

    def subscribe(self, listener: TranscriptListener) -> None:
        self._listeners.append(listener)

    def push(self, increment: TranscriptIncrement) -> bool:
        if not self._active:
            return False
        for listener in self._listeners:
            listener(increment)
        return True


class UnavailableSpeechCapture(BrowserSpeechCapture):
    def __init__(self):
        super().__init__(available=False)


class BrowserMediaPreview:
    """Camera or microphone preview whose permission is granted client-side."""

    def __init__(self, kind: str, permitted: bool = True):
        self.kind = kind
        self.permitted = permitted
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        if not self.permitted:
            raise CapabilityUnavailableError(self.kind, f"{self.kind.capitalize()} access denied")
        self._open = True

    def close(self) -> None:
        self._open = False


class NoMediaPreview:
    kind = None

    @property
    def is_open(self) -> bool:
        return False

    def open(self) -> None:
        return None

    def close(self) -> None:
        return None
