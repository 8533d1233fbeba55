"""Outbound message shape and correlation-id handling."""

from uuid import uuid4

from pydantic import BaseModel, ConfigDict

from sbpush.push.validation import Destination

JSON_CONTENT_TYPE = "application/json"


class OutboundMessage(BaseModel):
    """The single message published per invocation."""

    model_config = ConfigDict(frozen=True)

    body: bytes
    content_type: str = JSON_CONTENT_TYPE
    correlation_id: str


class PublishReceipt(BaseModel):
    """What was sent and where, reported back to the user."""

    destination: Destination
    correlation_id: str

    def describe(self) -> str:
        """Render the confirmation line printed after a successful send."""

        return (
            f"Message sent successfully to {self.destination.label}: "
            f"{self.destination.name} (correlationId={self.correlation_id})"
        )


def resolve_correlation_id(value: str | None) -> str:
    """Return the trimmed user value, or a fresh UUID v4 when it is blank."""

    correlation_id = (value or "").strip()
    if not correlation_id:
        correlation_id = str(uuid4())
    return correlation_id
