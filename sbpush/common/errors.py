"""Error taxonomy for the push CLI.

Every failure that should end the run with exit code 1 derives from
`PushError`; the CLI reports it as a single line on stderr.
"""


class PushError(Exception):
    """Base class for terminal, user-facing push failures."""


class ArgumentError(PushError, ValueError):
    """Missing or conflicting command-line flags."""


class ConfigurationError(PushError):
    """Broker connection settings are absent or blank."""


class PayloadFileError(PushError):
    """Payload path cannot be resolved, found, or read."""


class InvalidJSONError(PushError):
    """Payload bytes are not well-formed JSON."""


class BrokerError(PushError):
    """Client/sender construction or send failed on the broker side."""
