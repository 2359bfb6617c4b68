"""The V1 extension appended to pre-Switch tickets."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import BinaryIO, ClassVar, Union

from niitools.binio import read_exact, read_u16, read_u32

__all__ = [
    "TicketV1Error",
    "SectionKind",
    "ReferenceId",
    "PermanentRecord",
    "SubscriptionRecord",
    "ContentRecord",
    "ContentConsumptionRecord",
    "AccessTitleRecord",
    "TicketV1Section",
    "TicketV1",
]

HEADER_SIZE = 20
SECTION_HEADER_SIZE = 20
_SECTION_HEADER = struct.Struct(">IIIIHH")


class TicketV1Error(ValueError):
    """Raised when a V1 ticket extension cannot be parsed."""


class SectionKind(IntEnum):
    """Kinds of record a V1 section can hold, by their identifier on disk."""

    PERMANENT = 1
    SUBSCRIPTION = 2
    CONTENT = 3
    CONTENT_CONSUMPTION = 4
    ACCESS_TITLE = 5

    @property
    def record_type(self) -> type:
        return _RECORD_TYPES[self]


@dataclass(frozen=True)
class ReferenceId:
    """A reference ID; its meaning is still unknown."""

    id: bytes
    attributes: int

    SIZE: ClassVar[int] = 16 + 4

    def __post_init__(self) -> None:
        if len(self.id) != 16:
            raise ValueError(f"Reference ID must be 16 bytes, got {len(self.id)}")

    @classmethod
    def _read(cls, stream: BinaryIO) -> ReferenceId:
        reference = read_exact(stream, 16)
        return cls(reference, read_u32(stream))

    def _pack(self) -> bytes:
        return self.id + struct.pack(">I", self.attributes)


@dataclass(frozen=True)
class PermanentRecord:
    """A "permanent" record."""

    reference_id: ReferenceId

    SIZE: ClassVar[int] = 16 + 4

    @classmethod
    def _read(cls, stream: BinaryIO) -> PermanentRecord:
        return cls(ReferenceId._read(stream))

    def _pack(self) -> bytes:
        return self.reference_id._pack()


@dataclass(frozen=True)
class SubscriptionRecord:
    """A "subscription" record; the expiration time is in UNIX time."""

    expiration_time: int
    reference_id: ReferenceId

    SIZE: ClassVar[int] = 16 + 4 + 4

    @classmethod
    def _read(cls, stream: BinaryIO) -> SubscriptionRecord:
        expiration_time = read_u32(stream)
        return cls(expiration_time, ReferenceId._read(stream))

    def _pack(self) -> bytes:
        return struct.pack(">I", self.expiration_time) + self.reference_id._pack()


@dataclass(frozen=True)
class ContentRecord:
    """A "content" record."""

    offset_content_index: int
    access_mask: bytes

    SIZE: ClassVar[int] = 128 + 4

    def __post_init__(self) -> None:
        if len(self.access_mask) != 128:
            raise ValueError(f"Access mask must be 128 bytes, got {len(self.access_mask)}")

    @classmethod
    def _read(cls, stream: BinaryIO) -> ContentRecord:
        offset_content_index = read_u32(stream)
        return cls(offset_content_index, read_exact(stream, 128))

    def _pack(self) -> bytes:
        return struct.pack(">I", self.offset_content_index) + self.access_mask


@dataclass(frozen=True)
class ContentConsumptionRecord:
    """A "content consumption" record."""

    content_index: int
    limit_code: int
    limit_value: int

    SIZE: ClassVar[int] = 2 + 2 + 4
    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(">HHI")

    @classmethod
    def _read(cls, stream: BinaryIO) -> ContentConsumptionRecord:
        return cls(*cls._LAYOUT.unpack(read_exact(stream, cls._LAYOUT.size)))

    def _pack(self) -> bytes:
        return self._LAYOUT.pack(self.content_index, self.limit_code, self.limit_value)


@dataclass(frozen=True)
class AccessTitleRecord:
    """An "access title" record: a title ID and a mask over title IDs."""

    title_id: int
    title_mask: int

    SIZE: ClassVar[int] = 8 + 8
    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(">QQ")

    @classmethod
    def _read(cls, stream: BinaryIO) -> AccessTitleRecord:
        return cls(*cls._LAYOUT.unpack(read_exact(stream, cls._LAYOUT.size)))

    def _pack(self) -> bytes:
        return self._LAYOUT.pack(self.title_id, self.title_mask)


Record = Union[
    PermanentRecord,
    SubscriptionRecord,
    ContentRecord,
    ContentConsumptionRecord,
    AccessTitleRecord,
]

_RECORD_TYPES = {
    SectionKind.PERMANENT: PermanentRecord,
    SectionKind.SUBSCRIPTION: SubscriptionRecord,
    SectionKind.CONTENT: ContentRecord,
    SectionKind.CONTENT_CONSUMPTION: ContentConsumptionRecord,
    SectionKind.ACCESS_TITLE: AccessTitleRecord,
}


@dataclass
class TicketV1Section:
    """A section of a V1 ticket; every record in it has the same kind."""

    kind: SectionKind
    records: list = field(default_factory=list)
    flags: int = 0

    def __post_init__(self) -> None:
        self.kind = SectionKind(self.kind)
        expected = self.kind.record_type
        for record in self.records:
            if not isinstance(record, expected):
                raise ValueError(
                    f"A {self.kind.name} section cannot hold a {type(record).__name__}"
                )

    def record_size(self) -> int:
        """Size in bytes of one record of this section."""
        return self.kind.record_type.SIZE

    def size(self) -> int:
        """Size in bytes of all the records of this section."""
        return self.record_size() * len(self.records)

    @classmethod
    def _read(cls, stream: BinaryIO, origin: int) -> TicketV1Section:
        records_offset, count, _record_size, _total_size, kind_id, flags = (
            _SECTION_HEADER.unpack(read_exact(stream, _SECTION_HEADER.size))
        )
        next_section = stream.tell()
        try:
            kind = SectionKind(kind_id)
        except ValueError:
            raise TicketV1Error(f"Unknown ticket v1 section type: {kind_id}") from None

        stream.seek(origin + records_offset)
        record_type = kind.record_type
        records = [record_type._read(stream) for _ in range(count)]
        stream.seek(next_section)
        return cls(kind, records, flags)

    def _header(self, records_offset: int) -> bytes:
        return _SECTION_HEADER.pack(
            records_offset,
            len(self.records),
            self.record_size(),
            SECTION_HEADER_SIZE,
            self.kind,
            self.flags,
        )


@dataclass
class TicketV1:
    """Extra data carried by V1 tickets."""

    sections: list = field(default_factory=list)
    flags: int = 0

    @classmethod
    def read(cls, stream: BinaryIO) -> TicketV1:
        """Parse the extension starting at the current stream position."""
        origin = stream.tell()
        try:
            version = read_u16(stream)
            if version != 1:
                raise TicketV1Error(f"Unknown ticket v1 version: {version}")

            header_size = read_u16(stream)
            if header_size != HEADER_SIZE:
                raise TicketV1Error(f"Unknown ticket v1 header size: {header_size}")

            data_size = read_u32(stream)
            first_section_offset = read_u32(stream)
            number_of_sections = read_u16(stream)

            section_header_size = read_u16(stream)
            if section_header_size != SECTION_HEADER_SIZE:
                raise TicketV1Error(
                    f"Unknown ticket v1 section header size: {section_header_size}"
                )

            flags = read_u32(stream)

            stream.seek(origin + first_section_offset)
            sections = [
                TicketV1Section._read(stream, origin) for _ in range(number_of_sections)
            ]
        except EOFError as error:
            raise TicketV1Error(f"IO error: {error}") from error

        ticket = cls(sections, flags)
        if data_size != ticket.size():
            raise TicketV1Error(f"Unknown ticket v1 total size: {data_size}")
        return ticket

    def dump(self, stream: BinaryIO) -> None:
        """Write the extension: header, then all records, then the section headers."""
        origin = stream.tell()
        stream.write(struct.pack(">HHI", 1, HEADER_SIZE, self.size()))

        # Patched once the position of the first section header is known.
        first_offset_field = stream.tell()
        stream.write(bytes(4))

        stream.write(struct.pack(">HHI", len(self.sections), SECTION_HEADER_SIZE, self.flags))

        records_offsets = []
        for section in self.sections:
            records_offsets.append(stream.tell() - origin)
            stream.write(b"".join(record._pack() for record in section.records))

        headers_start = stream.tell()
        if self.sections:
            stream.seek(first_offset_field)
            stream.write(struct.pack(">I", headers_start - origin))
            stream.seek(headers_start)

        for section, records_offset in zip(self.sections, records_offsets):
            stream.write(section._header(records_offset))

    def size(self) -> int:
        """Size of the extension in bytes."""
        return (
            HEADER_SIZE
            + SECTION_HEADER_SIZE * len(self.sections)
            + sum(section.size() for section in self.sections)
        )