"""Open a client/sender pair, publish one message, close both."""

from sbpush.common.errors import BrokerError, InvalidJSONError
from sbpush.common.logging import destination_ctx, logger
from sbpush.push.message import OutboundMessage, PublishReceipt
from sbpush.push.payload import PARSE_ERRORS, parse_json
from sbpush.push.transport import BrokerClient, BrokerSender, ClientFactory, ServiceBusBrokerClient
from sbpush.push.validation import Destination, PushConfig, resolve_destination


def _open_client(client_factory: ClientFactory, connection_string: str) -> BrokerClient:
    try:
        return client_factory(connection_string)
    except Exception as exc:
        raise BrokerError(f"could not create Service Bus client: {exc}") from exc


def _open_sender(client: BrokerClient, destination: Destination) -> BrokerSender:
    try:
        return client.open_sender(destination)
    except Exception as exc:
        raise BrokerError(f"could not create sender: {exc}") from exc


async def _send(sender: BrokerSender, body: bytes, correlation_id: str) -> None:
    try:
        parse_json(body)
    except PARSE_ERRORS as exc:
        raise InvalidJSONError(f"could not parse JSON: {exc}") from exc

    message = OutboundMessage(body=body, correlation_id=correlation_id)
    try:
        await sender.send(message)
    except Exception as exc:
        raise BrokerError(f"could not send message: {exc}") from exc


async def publish(
    config: PushConfig,
    connection_string: str,
    body: bytes,
    correlation_id: str,
    client_factory: ClientFactory = ServiceBusBrokerClient.from_connection_string,
) -> PublishReceipt:
    """Publish `body` to the destination named by `config`.

    The sender is always closed before the client, on success and on every
    failure path.
    """

    destination = resolve_destination(config)
    destination_token = destination_ctx.set(f"{destination.label}:{destination.name}")
    try:
        client = _open_client(client_factory, connection_string)
        try:
            sender = _open_sender(client, destination)
            try:
                await _send(sender, body, correlation_id)
            finally:
                await sender.close()
        finally:
            await client.close()
        logger.info("message_sent kind=%s name=%s bytes=%s", destination.label, destination.name, len(body))
    finally:
        destination_ctx.reset(destination_token)

    return PublishReceipt(destination=destination, correlation_id=correlation_id)
