"""
In-memory deck session store.

Sessions live only as long as the process; nothing is persisted.
"""

import logging
import uuid

from talingchan.models.failure import FailureKind, KnownError
from talingchan.models.rules import DEFAULT_RULES, DeckRules
from talingchan.services.deck_session import DeckSession

logger = logging.getLogger(__name__)


class SessionNotFoundError(KnownError):
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Deck session '{session_id}' not found",
            suggestion="Create a new deck session.",
            status_code=404,
        )


class SessionStore:
    """Deck sessions keyed by an opaque id."""

    def __init__(self, rules: DeckRules = DEFAULT_RULES) -> None:
        self.rules = rules
        self._sessions: dict[str, DeckSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, deck_name: str = "", player_name: str = "") -> tuple[str, DeckSession]:
        session_id = uuid.uuid4().hex
        session = DeckSession(rules=self.rules, deck_name=deck_name, player_name=player_name)
        self._sessions[session_id] = session
        logger.info("Created deck session %s", session_id)
        return session_id, session

    def get(self, session_id: str) -> DeckSession:
        """
        Raises:
            SessionNotFoundError: If the id is unknown
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
        logger.info("Deleted deck session %s", session_id)
