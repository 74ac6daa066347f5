"""
Failure envelope: unified response classification.

Every outcome the deck builder reports to a client is classified here.
Legality rejections are refusals: the deck is left untouched and the
client is told exactly which rule stopped the action.

Response types:
- Refusal: A deck rule or confirmation step stopped the action
- KnownFailure: The system knows why it failed (bad input, upstream error)
- UnknownFailure: The system does not know why it failed

All user-visible envelopes pass through `finalize_response()`.
"""

from enum import Enum

from pydantic import BaseModel, Field, PrivateAttr


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Request problems
    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED = "missing_required"
    NOT_FOUND = "not_found"

    # Main deck legality
    LIFE_CARD_IN_MAIN_DECK = "life_card_in_main_deck"
    EXCLUSIVE_AVATAR_CONFLICT = "exclusive_avatar_conflict"
    MAIN_DECK_FULL = "main_deck_full"
    BANNED_CARD = "banned_card"
    COPY_LIMIT_EXCEEDED = "copy_limit_exceeded"
    ONLY_ONE_CONFLICT = "only_one_conflict"
    RESTRICTION_GROUP_CONFLICT = "restriction_group_conflict"

    # Life deck legality
    NOT_A_LIFE_CARD = "not_a_life_card"
    LIFE_DECK_FULL = "life_deck_full"
    LIFE_DECK_DUPLICATE = "life_deck_duplicate"

    # Session actions
    CONFIRMATION_REQUIRED = "confirmation_required"
    EXPORT_PRECONDITION = "export_precondition"

    # Card data service
    SERVICE_UNAVAILABLE = "service_unavailable"
    EXTERNAL_API_ERROR = "external_api_error"

    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    REFUSAL = "refusal"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


class FailureDetail(BaseModel):
    """What went wrong, in terms the client can show to a player."""

    kind: FailureKind
    message: str = Field(..., description="User-appropriate explanation")
    detail: str | None = Field(default=None, description="Technical detail, e.g. the rule name")
    suggestion: str | None = Field(default=None, description="What the player can do next")


class ApiResponse(BaseModel):
    """
    Envelope returned to clients for every failed request.

    Successful requests return their own response models.
    """

    outcome: OutcomeType
    failure: FailureDetail | None = None

    _finalized: bool = PrivateAttr(default=False)

    @classmethod
    def _failed(
        cls,
        outcome: OutcomeType,
        kind: FailureKind,
        message: str,
        detail: str | None,
        suggestion: str | None,
    ) -> "ApiResponse":
        failure = FailureDetail(kind=kind, message=message, detail=detail, suggestion=suggestion)
        return cls(outcome=outcome, failure=failure)

    @classmethod
    def refusal(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse":
        """A deck rule stopped the action, e.g. a fifth copy of a four-copy card."""
        return cls._failed(OutcomeType.REFUSAL, kind, message, detail, suggestion)

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse":
        """The action failed for a known reason, e.g. an unknown card or session."""
        return cls._failed(OutcomeType.KNOWN_FAILURE, kind, message, detail, suggestion)

    @classmethod
    def unknown_failure(cls, detail: str | None = None) -> "ApiResponse":
        """
        Catch-all for unexpected exceptions.

        The message is fixed so internals never leak to the client.
        Prefer create_unknown_failure(), which also finalizes.
        """
        return cls._failed(
            OutcomeType.UNKNOWN_FAILURE,
            FailureKind.UNKNOWN,
            STANDARD_MESSAGES[OutcomeType.UNKNOWN_FAILURE],
            detail,
            STANDARD_SUGGESTIONS[OutcomeType.UNKNOWN_FAILURE],
        )


class KnownError(Exception):
    """
    A failure the service can explain.

    Raised from services; the app's exception handler turns it into a
    known-failure envelope with `status_code`.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse:
        return ApiResponse.known_failure(self.kind, self.message, self.detail, self.suggestion)


class RefusalError(Exception):
    """
    A rule refused to change state.

    Always reported as 409 Conflict: the request was well formed but the
    deck, as it stands, does not allow it.
    """

    status_code = 409

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)

    def to_response(self) -> ApiResponse:
        return ApiResponse.refusal(self.kind, self.message, self.detail, self.suggestion)


STANDARD_MESSAGES: dict[OutcomeType, str] = {
    OutcomeType.REFUSAL: "The deck rules do not allow this action.",
    OutcomeType.KNOWN_FAILURE: "The operation failed due to a known issue.",
    OutcomeType.UNKNOWN_FAILURE: (
        "I failed and I don't know why. Try simplifying the request or retrying."
    ),
}

STANDARD_SUGGESTIONS: dict[OutcomeType, str] = {
    OutcomeType.REFUSAL: "Adjust the deck so the rule is satisfied, then try again.",
    OutcomeType.KNOWN_FAILURE: "Check the error details and adjust your request.",
    OutcomeType.UNKNOWN_FAILURE: "If this persists, please report the issue.",
}


def finalize_response(response: ApiResponse) -> ApiResponse:
    """
    Check an envelope's shape and mark it as ready for a client.

    Raises:
        ValueError: If the envelope has no failure details
    """
    if response.failure is None:
        raise ValueError(f"{response.outcome.value} response must have failure details")

    response._finalized = True
    return response


def is_finalized(response: ApiResponse) -> bool:
    return response._finalized


def create_unknown_failure(exception: Exception, include_type: bool = True) -> ApiResponse:
    """Finalized unknown failure for an exception; only its type name is reported."""
    detail = type(exception).__name__ if include_type else None
    return finalize_response(ApiResponse.unknown_failure(detail=detail))
