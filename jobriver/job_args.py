"""
Job args capability and validation.

Any object can be inserted as job args if it exposes:

- `kind`: a non-empty string (attribute, property, or zero-argument method)
- `to_payload()`: JSON object text, as `bytes` or `str`
- optionally `insert_opts`: an InsertOpts (or None), either as an attribute or
  a zero-argument method returning one
"""

import json
from typing import Any, Dict, Optional, Protocol, Union

from .errors import InsertOptsError, InvalidPayloadError, MissingKindError
from .insert_opts import InsertOpts


class JobArgs(Protocol):
    kind: str

    def to_payload(self) -> Union[bytes, str]:
        ...


class JobArgsDict:
    """Job args built from a kind and a plain dict, for callers without a dedicated args class."""

    def __init__(self, kind: str, args: Dict[str, Any]):
        self.kind = kind
        self.args = args

    def to_payload(self) -> bytes:
        return json.dumps(self.args).encode("utf-8")

    def __repr__(self) -> str:
        return f"JobArgsDict(kind={self.kind!r}, args={self.args!r})"


def args_kind(args: Any) -> str:
    """
    Return the args' kind.

    Raises:
        MissingKindError: If kind is absent, not a string, or blank
    """
    kind = getattr(args, "kind", None)
    if callable(kind):
        kind = kind()
    if not isinstance(kind, str) or kind.strip() == "":
        raise MissingKindError(f"{type(args).__name__} must provide a non-empty string `kind`")
    return kind


def _reject_constant(name: str):
    raise InvalidPayloadError(f"`to_payload()` returned non-JSON constant {name}")


def args_payload(args: Any) -> bytes:
    """
    Return the args' payload as UTF-8 JSON object text.

    Raises:
        InvalidPayloadError: If the payload is missing, not text, not JSON,
            or not a JSON object at the top level
    """
    to_payload = getattr(args, "to_payload", None)
    if not callable(to_payload):
        raise InvalidPayloadError(f"{type(args).__name__} must provide `to_payload()`")

    payload = to_payload()
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    if not isinstance(payload, (bytes, bytearray)):
        raise InvalidPayloadError(
            f"`to_payload()` must return bytes or str, got {type(payload).__name__}"
        )

    try:
        decoded = json.loads(payload, parse_constant=_reject_constant)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidPayloadError(f"`to_payload()` returned invalid JSON: {e}") from e

    if not isinstance(decoded, dict):
        raise InvalidPayloadError(
            f"`to_payload()` must encode a JSON object, got {type(decoded).__name__}"
        )
    return bytes(payload)


def args_insert_opts(args: Any) -> Optional[InsertOpts]:
    """Return the args' own InsertOpts, or None when they don't provide any."""
    opts = getattr(args, "insert_opts", None)
    if callable(opts):
        opts = opts()
    if opts is not None and not isinstance(opts, InsertOpts):
        raise InsertOptsError(
            f"`insert_opts` must be an InsertOpts or None, got {type(opts).__name__}"
        )
    return opts


def validate_args(args: Any) -> bytes:
    """
    Check that args satisfy the args capability.

    Returns:
        The validated payload, so callers don't invoke `to_payload()` twice

    Raises:
        MissingKindError: If kind is unusable
        InvalidPayloadError: If the payload isn't JSON object text
    """
    args_kind(args)
    return args_payload(args)
