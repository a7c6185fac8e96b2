"""Wire format shared by the decode service and its client.

Requests are XML-RPC calls carrying one string argument (a path or URI).
Replies are a Result dict, a list of Result dicts, a string, or None.
Errors travel as XML-RPC faults; the fault code names the error kind.
"""

from __future__ import annotations

from typing import Any
from xmlrpc.client import Fault

from ..decoding.errors import (
    DecodeError,
    EngineFaultError,
    InvalidReferenceError,
    UndecodableError,
)
from ..decoding.result import Result

LOOPBACK = "127.0.0.1"

OPERATIONS = ("decode", "decode_strict", "decode_all", "decode_all_strict", "decode_qr")

FAULT_INVALID_REFERENCE = 1
FAULT_UNDECODABLE = 2
FAULT_ENGINE = 3
FAULT_INTERNAL = 4

_FAULT_CODES: dict[type[DecodeError], int] = {
    InvalidReferenceError: FAULT_INVALID_REFERENCE,
    UndecodableError: FAULT_UNDECODABLE,
    EngineFaultError: FAULT_ENGINE,
}

_ERROR_TYPES: dict[int, type[DecodeError]] = {code: kind for kind, code in _FAULT_CODES.items()}


class RemoteError(DecodeError):
    """An unexpected failure inside the decode service."""


def fault_for(exc: Exception) -> Fault:
    code = _FAULT_CODES.get(type(exc), FAULT_INTERNAL)
    message = str(exc) if code != FAULT_INTERNAL else f"{type(exc).__name__}: {exc}"
    return Fault(code, message)


def error_for(fault: Fault) -> DecodeError:
    kind = _ERROR_TYPES.get(fault.faultCode, RemoteError)
    return kind(fault.faultString)


def encode_value(value: Any) -> Any:
    if isinstance(value, Result):
        return value.to_dict()
    if isinstance(value, list):
        return [encode_value(item) for item in value]
    return value


def decode_value(value: Any) -> Any:
    if isinstance(value, dict):
        return Result.from_dict(value)
    if isinstance(value, list):
        return [decode_value(item) for item in value]
    return value
