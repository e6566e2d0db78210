# image_fusion/states/session.py
import secrets
import time
from collections import OrderedDict
from collections.abc import Callable

from pydantic import BaseModel, Field

from image_fusion.data.constants import FusionAction, ImageSlot
from image_fusion.dto.image_payload import ImagePayload
from image_fusion.dto.outcome import Idle, Loading, RequestOutcome


class FusionSession(BaseModel):
    """
    Everything one browser session has picked so far, plus the outcome of
    its most recent fusion request.
    """
    first_image: ImagePayload | None = None
    second_image: ImagePayload | None = None
    action: FusionAction | None = Field(default_factory=FusionAction.default)
    outcome: RequestOutcome = Field(default_factory=Idle)

    # Per-slot intake failures; they never touch `outcome`.
    slot_errors: dict[ImageSlot, str] = Field(default_factory=dict)

    @property
    def is_loading(self) -> bool:
        return isinstance(self.outcome, Loading)

    @property
    def has_both_images(self) -> bool:
        return self.first_image is not None and self.second_image is not None

    def get_image(self, slot: ImageSlot) -> ImagePayload | None:
        return self.first_image if slot is ImageSlot.FIRST else self.second_image

    def set_image(self, slot: ImageSlot, payload: ImagePayload) -> None:
        """Replaces the payload of one slot; the other slot is left alone."""
        if slot is ImageSlot.FIRST:
            self.first_image = payload
        else:
            self.second_image = payload
        self.slot_errors.pop(slot, None)

    def set_slot_error(self, slot: ImageSlot, message: str) -> None:
        self.slot_errors[slot] = message


class MemorySessionStorage:
    """
    Keeps sessions in process memory, keyed by an opaque id.
    Nothing survives a restart.

    The store is bounded: a session idle for longer than `ttl_seconds` is
    dropped, and once `max_sessions` are held the least recently used one
    makes room for a new session.
    """

    def __init__(
        self,
        max_sessions: int = 1000,
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.max_sessions = max_sessions
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        # Ordered from least to most recently used
        self._sessions: OrderedDict[str, tuple[float, FusionSession]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    @staticmethod
    def new_id() -> str:
        return secrets.token_urlsafe(24)

    def get(self, session_id: str | None) -> FusionSession | None:
        if not session_id:
            return None
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        last_seen, session = entry
        now = self._clock()
        if now - last_seen > self.ttl_seconds:
            del self._sessions[session_id]
            return None
        self._sessions[session_id] = (now, session)
        self._sessions.move_to_end(session_id)
        return session

    def get_or_create(self, session_id: str | None) -> tuple[str, FusionSession]:
        session = self.get(session_id)
        if session is not None:
            return session_id, session
        self._evict()
        new_id = self.new_id()
        session = FusionSession()
        self._sessions[new_id] = (self._clock(), session)
        return new_id, session

    def _evict(self) -> None:
        """Drops expired sessions and makes room for one more."""
        now = self._clock()
        while self._sessions:
            oldest_id, (last_seen, _) = next(iter(self._sessions.items()))
            if now - last_seen <= self.ttl_seconds and len(self._sessions) < self.max_sessions:
                break
            del self._sessions[oldest_id]
