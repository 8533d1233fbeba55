"""Publish one JSON payload to an Azure Service Bus queue or topic.

Reads the connection string from SB_CONNECTION_STRING (or SB_ENDPOINT),
optionally from a local `.env` file, and validates flags, the payload file
and its JSON before sending.
"""

import argparse
import asyncio
import sys

from sbpush.common.config import PushSettings, load_settings
from sbpush.common.errors import PushError
from sbpush.common.logging import configure_logging, correlation_id_ctx, logger
from sbpush.common.startup import log_startup_config
from sbpush.push.message import PublishReceipt, resolve_correlation_id
from sbpush.push.payload import load_payload
from sbpush.push.sender import publish
from sbpush.push.transport import ClientFactory, ServiceBusBrokerClient
from sbpush.push.validation import PushConfig, validate_config

EXAMPLES = """examples:
  push --destination sq.onboarding.succeeded --type queue --payload payload.json
  push --queue sq.onboarding.succeeded --payload payload.json
  push -D st.onboarding.events -Y topic -P payload.json --cid 7d3c2f4e
"""

STARTUP_KEYS = ["SERVICE_NAME", "LOG_LEVEL", "SB_CONNECTION_STRING", "SB_ENDPOINT"]


class PushArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors with exit code 1."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = PushArgumentParser(
        prog="push",
        description="Publish a JSON message to an Azure Service Bus queue or topic.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-q", "-Q", "--queue", default="", help="Service Bus queue name")
    parser.add_argument("-t", "-T", "--topic", default="", help="Service Bus topic name")
    parser.add_argument("-d", "-D", "--destination", default="", help="Unified destination (queue or topic name)")
    parser.add_argument("-y", "-Y", "--type", default="", help="Unified destination type: queue or topic")
    parser.add_argument("-p", "-P", "--payload", default="", help="Path to the JSON file to send")
    parser.add_argument(
        "--correlation-id",
        "--cid",
        dest="correlation_id",
        default="",
        help="Correlation ID for tracing; a UUID v4 is generated when omitted",
    )
    return parser


def parse_config(argv: list[str] | None = None) -> PushConfig:
    """Parse command-line flags into an immutable `PushConfig`."""

    args = build_parser().parse_args(argv)
    return PushConfig(
        queue=args.queue,
        topic=args.topic,
        destination=args.destination,
        type=args.type,
        payload=args.payload,
        correlation_id=args.correlation_id,
    )


async def run(
    config: PushConfig,
    settings: PushSettings,
    client_factory: ClientFactory = ServiceBusBrokerClient.from_connection_string,
) -> PublishReceipt:
    """Validate inputs, load the payload and publish it once."""

    validate_config(config)
    connection_string = settings.connection_string()
    body = load_payload(config.payload)
    correlation_id = resolve_correlation_id(config.correlation_id)

    token = correlation_id_ctx.set(correlation_id)
    try:
        return await publish(config, connection_string, body, correlation_id, client_factory)
    finally:
        correlation_id_ctx.reset(token)


def main(
    argv: list[str] | None = None,
    client_factory: ClientFactory = ServiceBusBrokerClient.from_connection_string,
) -> None:
    """CLI entrypoint: exit 0 on success, 1 on any push failure."""

    config = parse_config(argv)

    try:
        settings = load_settings()
        configure_logging(settings)
        log_startup_config(settings, STARTUP_KEYS)
        receipt = asyncio.run(run(config, settings, client_factory))
    except PushError as exc:
        logger.info("push_failed error=%s", exc, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1)

    print(receipt.describe())


if __name__ == "__main__":
    main()
