"""Parental control master key algorithms for several Nintendo platforms."""

from __future__ import annotations

import hashlib
import hmac
from enum import Enum

__all__ = ["Platform", "calculate_v0_master_key", "calculate_hmac_master_key"]


class Platform(Enum):
    """Nintendo platforms that use a parental control master key."""

    WII = "wii"
    DSI = "dsi"
    THE_3DS = "3ds"
    WII_U = "wii_u"
    SWITCH = "switch"


_CRC_INIT = 0xFFFFFFFF
_CRC_XOROUT = 0xAAAA

_POLY_WII_AND_DSI = 0x04C11DB7
_POLY_WIIU_AND_3DS = 0x04C65DB7

_ADDOUT_WII_AND_DSI = 0x14C1
_ADDOUT_WIIU_AND_3DS = 0x1657


def _reflect32(value: int) -> int:
    return int(f"{value:032b}"[::-1], 2)


def _crc32(data: bytes, polynomial: int) -> int:
    """Reflected CRC-32 with the initial value and final XOR used by the v0 algorithm."""
    reflected_poly = _reflect32(polynomial)
    crc = _CRC_INIT
    for byte in data:
        crc ^= byte
        for _ in range(8):
            crc = (crc >> 1) ^ reflected_poly if crc & 1 else crc >> 1
    return (crc ^ _CRC_XOROUT) & 0xFFFFFFFF


def _crc_parameters(platform: Platform) -> tuple[int, int]:
    if platform in (Platform.WII, Platform.DSI):
        return _POLY_WII_AND_DSI, _ADDOUT_WII_AND_DSI
    if platform in (Platform.WII_U, Platform.THE_3DS):
        return _POLY_WIIU_AND_3DS, _ADDOUT_WIIU_AND_3DS
    raise ValueError(
        "The version 0 of the parental control master key algorithm "
        "is not available on the Nintendo Switch platform"
    )


def _check_date(day: int, month: int) -> None:
    if not 1 <= day <= 31:
        raise ValueError(f"Invalid day: {day}")
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")


def calculate_v0_master_key(platform: Platform, inquiry_number: int, day: int, month: int) -> int:
    """Calculate the master key with the v0 algorithm.

    The inquiry number has at most 8 digits. The result should be shown padded to 5 digits.
    Works on Wii, DSi, 3DS (1.0.0 to 6.3.0) and Wii U (1.0.0 to 4.1.0).
    """
    if not 0 <= inquiry_number <= 99_999_999:
        raise ValueError(f"The inquiry number must have at most 8 digits: {inquiry_number}")
    _check_date(day, month)

    polynomial, addout = _crc_parameters(platform)

    text = f"{month:02}{day:02}{inquiry_number % 10000:04}"
    checksum = (_crc32(text.encode("ascii"), polynomial) + addout) & 0xFFFFFFFF
    return checksum % 100000


def calculate_hmac_master_key(
    hmac_key: bytes, inquiry_number: int, day: int, month: int, big_endian: bool
) -> int:
    """Calculate the master key with the HMAC-SHA256 scheme shared by the v1 and v2 algorithms."""
    if len(hmac_key) != 32:
        raise ValueError(f"The HMAC key must be 32 bytes long, got {len(hmac_key)}")

    text = f"{month:02}{day:02}{inquiry_number:010}"
    digest = hmac.new(bytes(hmac_key), text.encode("ascii"), hashlib.sha256).digest()
    value = int.from_bytes(digest[:4], "big" if big_endian else "little")
    return value % 100000