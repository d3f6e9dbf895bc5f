"""Encoding and unit conversion helpers for contract values."""

import math
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from eth_typing import HexStr
from web3 import Web3

from .exceptions import ValidationError

BYTES32_SIZE = 32
DEFAULT_UNIT = "ether"
EMPTY_ADDRESS = "0x0000000000000000000000000000000000000000"


def to_bytes(text: str, size: int = BYTES32_SIZE) -> bytes:
    """Encode text into a fixed-size, right null-padded byte string."""
    encoded = text.encode("utf-8")
    if len(encoded) > size:
        raise ValidationError(
            f"Text exceeds {size} bytes once encoded", field="text", value=text
        )
    return encoded.ljust(size, b"\x00")


def to_ascii(value: bytes | str) -> str:
    """Decode a fixed-size byte string, dropping null padding."""
    if isinstance(value, str):
        try:
            value = Web3.to_bytes(hexstr=HexStr(value))
        except ValueError:
            raise ValidationError("Value is not a hex string", field="value", value=value)
    try:
        return bytes(value).replace(b"\x00", b"").decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValidationError(
            "Value is not valid UTF-8", field="value", value=value
        ) from exc


def to_unix_ts(moment: datetime | None) -> int:
    """Convert a datetime to a Unix timestamp; ``None`` means unset (0)."""
    if moment is None:
        return 0
    return math.floor(moment.timestamp())


def to_datetime(timestamp: int) -> datetime | None:
    """Convert a Unix timestamp to an aware UTC datetime; 0 means unset."""
    if int(timestamp) == 0:
        return None
    return datetime.fromtimestamp(int(timestamp), tz=timezone.utc)


def to_wei(value: int | float | str | Decimal, unit: str = DEFAULT_UNIT) -> int:
    """Convert a human-scaled amount into base units."""
    if isinstance(value, float):
        value = Decimal(str(value))
    try:
        return int(Web3.to_wei(value, unit))  # type: ignore[arg-type]
    except (ValueError, InvalidOperation) as exc:
        raise ValidationError(
            f"Cannot convert {value} {unit} to wei",
            field="unit",
            value=unit,
            details={"error": str(exc)},
        ) from exc


def from_wei(value: int, unit: str = DEFAULT_UNIT) -> Decimal:
    """Convert base units into a human-scaled Decimal."""
    try:
        return Decimal(Web3.from_wei(int(value), unit))  # type: ignore[arg-type]
    except (ValueError, InvalidOperation) as exc:
        raise ValidationError(
            f"Cannot convert {value} wei to {unit}",
            field="unit",
            value=unit,
            details={"error": str(exc)},
        ) from exc


def to_list(value: Any) -> list[Any]:
    """Flatten a struct-like contract output into a positional list."""
    if isinstance(value, Mapping):
        return list(value.values())
    return list(value)


def is_empty_address(value: str | bytes) -> bool:
    """Return True for the all-zero address."""
    if isinstance(value, bytes):
        return len(value) == 20 and not any(value)
    return value.lower() == EMPTY_ADDRESS
