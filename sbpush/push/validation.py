"""Push configuration record and destination-mode validation.

Two mutually exclusive ways of naming the target exist: the unified mode
(`--destination` plus `--type`) and the legacy mode (exactly one of
`--queue` / `--topic`).
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from sbpush.common.errors import ArgumentError

DESTINATION_TYPES = ("queue", "topic")


class DestinationKind(str, Enum):
    """Broker entity kinds a message can be published to."""

    QUEUE = "queue"
    TOPIC = "topic"


class PushConfig(BaseModel):
    """Flags collected from the command line for one invocation."""

    model_config = ConfigDict(frozen=True)

    queue: str = ""
    topic: str = ""
    destination: str = ""
    type: str = ""
    payload: str = ""
    correlation_id: str = ""

    @field_validator("queue", "topic", "destination", "type")
    @classmethod
    def strip_destination_fields(cls, value: str) -> str:
        """Treat whitespace-only names as unset."""

        return value.strip()

    @property
    def using_unified(self) -> bool:
        """True when --destination or --type was given."""

        return bool(self.destination or self.type)

    @property
    def using_legacy(self) -> bool:
        """True when --queue or --topic was given."""

        return bool(self.queue or self.topic)


class Destination(BaseModel):
    """Resolved broker entity a message is published to."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: DestinationKind

    @property
    def label(self) -> str:
        """Human-readable kind used in the confirmation line."""

        return self.kind.value


def validate_config(config: PushConfig) -> None:
    """Raise `ArgumentError` when the flag combination is not usable."""

    if not config.payload:
        raise ArgumentError("missing required parameter: --payload")

    if config.using_unified and config.using_legacy:
        raise ArgumentError("do not mix --destination/--type with --queue/--topic")

    if config.using_unified:
        if not config.destination or not config.type:
            raise ArgumentError("unified mode requires both --destination and --type")
        if config.type.lower() not in DESTINATION_TYPES:
            raise ArgumentError("--type must be 'queue' or 'topic'")
        return

    if not config.queue and not config.topic:
        raise ArgumentError("provide --queue or --topic (only one)")
    if config.queue and config.topic:
        raise ArgumentError("use only one destination: --queue or --topic")


def resolve_destination(config: PushConfig) -> Destination:
    """Map a validated config to the final destination name and kind."""

    if config.destination:
        kind = DestinationKind.QUEUE if config.type.lower() == "queue" else DestinationKind.TOPIC
        return Destination(name=config.destination, kind=kind)
    if config.queue:
        return Destination(name=config.queue, kind=DestinationKind.QUEUE)
    return Destination(name=config.topic, kind=DestinationKind.TOPIC)
