"""Payload file loading and JSON canonicalization."""

import json
import stat
from pathlib import Path

from sbpush.common.errors import InvalidJSONError, PayloadFileError
from sbpush.common.logging import logger

# RecursionError covers payloads nested deeper than the interpreter stack allows.
PARSE_ERRORS = (ValueError, RecursionError)


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant: {name}")


def parse_json(raw: bytes):
    """Parse strict UTF-8 JSON from bytes; raises `ValueError` on bad input.

    A byte order mark or a UTF-16/32 encoding is rejected.
    """

    return json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)


def compact_json(value) -> bytes:
    """Serialize without insignificant whitespace, keeping key order."""

    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode("utf-8")
    except UnicodeEncodeError:
        # lone surrogates from \uXXXX escapes have no UTF-8 form; keep them escaped
        return json.dumps(value, separators=(",", ":"), ensure_ascii=True, allow_nan=False).encode("ascii")


def canonicalize_json(raw: bytes, source: str = "<payload>") -> bytes:
    """Parse raw JSON bytes and return their compact form."""

    try:
        value = parse_json(raw)
    except PARSE_ERRORS as exc:
        raise InvalidJSONError(f"content is not valid JSON: {source}") from exc

    try:
        return compact_json(value)
    except (TypeError, ValueError, RecursionError) as exc:
        raise InvalidJSONError(f"could not compact JSON: {exc}") from exc


def load_payload(path: str) -> bytes:
    """Read the payload file at `path` and return canonical JSON bytes.

    Any JSON value is accepted (object, array or scalar). Relative paths are
    resolved against the current working directory.
    """

    try:
        resolved = Path(path).resolve()
    except (OSError, RuntimeError) as exc:
        raise PayloadFileError(f"could not resolve path: {exc}") from exc

    try:
        file_stat = resolved.stat()
    except OSError as exc:
        raise PayloadFileError(f"file not found: {resolved}") from exc
    if not stat.S_ISREG(file_stat.st_mode):
        raise PayloadFileError(f"not a regular file: {resolved}")

    try:
        raw = resolved.read_bytes()
    except OSError as exc:
        raise PayloadFileError(f"failed to read file: {resolved}") from exc

    body = canonicalize_json(raw, str(resolved))
    logger.debug("payload_loaded path=%s bytes=%s", resolved, len(body))
    return body
