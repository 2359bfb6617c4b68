"""Big-endian binary stream helpers."""

from __future__ import annotations

import struct
from typing import BinaryIO

__all__ = [
    "align_to_boundary",
    "read_exact",
    "read_u8",
    "read_u16",
    "read_u32",
    "read_u64",
    "read_padded_string",
    "write_padded",
    "skip_to_alignment",
    "pad_to_alignment",
]


def align_to_boundary(value: int, boundary: int) -> int:
    """Round ``value`` up to the next multiple of ``boundary``."""
    if boundary <= 0:
        raise ValueError(f"Boundary must be positive: {boundary}")
    return -(-value // boundary) * boundary


def read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes, raising EOFError if the stream ends first."""
    data = stream.read(size)
    if len(data) != size:
        raise EOFError(f"Expected {size} bytes, got {len(data)}")
    return data


def _read_struct(stream: BinaryIO, fmt: str) -> int:
    layout = struct.Struct(fmt)
    (value,) = layout.unpack(read_exact(stream, layout.size))
    return value


def read_u8(stream: BinaryIO) -> int:
    return _read_struct(stream, ">B")


def read_u16(stream: BinaryIO) -> int:
    return _read_struct(stream, ">H")


def read_u32(stream: BinaryIO) -> int:
    return _read_struct(stream, ">I")


def read_u64(stream: BinaryIO) -> int:
    return _read_struct(stream, ">Q")


def read_padded_string(stream: BinaryIO, size: int) -> str:
    """Read a NUL-padded UTF-8 string stored in a field of ``size`` bytes."""
    raw = read_exact(stream, size)
    return raw.split(b"\x00", 1)[0].decode("utf-8")


def write_padded(stream: BinaryIO, data: bytes, size: int) -> None:
    """Write ``data`` followed by zero bytes up to ``size`` bytes in total."""
    if len(data) > size:
        raise ValueError(f"Data of {len(data)} bytes does not fit in {size} bytes")
    stream.write(data)
    stream.write(bytes(size - len(data)))


def _aligned_target(stream: BinaryIO, origin: int, boundary: int) -> tuple[int, int]:
    position = stream.tell()
    return position, origin + align_to_boundary(position - origin, boundary)


def skip_to_alignment(stream: BinaryIO, origin: int, boundary: int) -> None:
    """Seek forward so the offset from ``origin`` is a multiple of ``boundary``."""
    _, target = _aligned_target(stream, origin, boundary)
    stream.seek(target)


def pad_to_alignment(stream: BinaryIO, origin: int, boundary: int) -> None:
    """Write zeros so the offset from ``origin`` is a multiple of ``boundary``."""
    position, target = _aligned_target(stream, origin, boundary)
    stream.write(bytes(target - position))