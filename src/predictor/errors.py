"""
Classified failures of the prediction request path.

Every error carries the same user-facing message; the underlying cause is
logged and chained, never exposed in the message.
"""

PREDICTION_FAILED_MESSAGE = (
    "Failed to get prediction from the AI model. "
    "Please check the input values and try again."
)


class PredictionError(Exception):
    """Base class: the prediction could not be produced."""

    kind = "prediction_failed"

    def __init__(self, detail: str = ""):
        super().__init__(PREDICTION_FAILED_MESSAGE)
        self.detail = detail

    @property
    def message(self) -> str:
        return PREDICTION_FAILED_MESSAGE


class TransportFailure(PredictionError):
    """The external service call could not complete (network, auth, service error)."""

    kind = "transport_failure"


class MalformedResponse(PredictionError):
    """The service payload could not be parsed as JSON."""

    kind = "malformed_response"


class InvalidSchema(PredictionError):
    """The parsed payload is missing required fields or has the wrong types."""

    kind = "invalid_schema"
