"""Broker client abstraction and its Azure Service Bus implementation.

The publish flow only talks to `BrokerClient` / `BrokerSender`, so tests can
swap in an in-memory client.
"""

from typing import Callable, Protocol

from azure.servicebus import ServiceBusMessage
from azure.servicebus.aio import ServiceBusClient, ServiceBusSender

from sbpush.push.message import OutboundMessage
from sbpush.push.validation import Destination, DestinationKind


class BrokerSender(Protocol):
    async def send(self, message: OutboundMessage) -> None: ...

    async def close(self) -> None: ...


class BrokerClient(Protocol):
    def open_sender(self, destination: Destination) -> BrokerSender: ...

    async def close(self) -> None: ...


ClientFactory = Callable[[str], BrokerClient]


class ServiceBusBrokerSender:
    """Sender bound to one queue or topic."""

    def __init__(self, sender: ServiceBusSender) -> None:
        self._sender = sender

    async def send(self, message: OutboundMessage) -> None:
        await self._sender.send_messages(
            ServiceBusMessage(
                message.body,
                content_type=message.content_type,
                correlation_id=message.correlation_id,
            )
        )

    async def close(self) -> None:
        await self._sender.close()


class ServiceBusBrokerClient:
    """Thin wrapper over the async `ServiceBusClient`."""

    def __init__(self, client: ServiceBusClient) -> None:
        self._client = client

    @classmethod
    def from_connection_string(cls, connection_string: str) -> "ServiceBusBrokerClient":
        return cls(ServiceBusClient.from_connection_string(connection_string))

    def open_sender(self, destination: Destination) -> ServiceBusBrokerSender:
        if destination.kind is DestinationKind.QUEUE:
            sender = self._client.get_queue_sender(queue_name=destination.name)
        else:
            sender = self._client.get_topic_sender(topic_name=destination.name)
        return ServiceBusBrokerSender(sender)

    async def close(self) -> None:
        await self._client.close()
