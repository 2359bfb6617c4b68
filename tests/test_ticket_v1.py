import io

import pytest

from niitools.ticket_v1 import (
    AccessTitleRecord,
    ContentConsumptionRecord,
    ContentRecord,
    PermanentRecord,
    ReferenceId,
    SectionKind,
    SubscriptionRecord,
    TicketV1,
    TicketV1Error,
    TicketV1Section,
)


def _sample_ticket() -> TicketV1:
    return TicketV1(
        sections=[
            TicketV1Section(
                SectionKind.PERMANENT,
                [PermanentRecord(ReferenceId(bytes(range(16)), 7))],
                flags=1,
            ),
            TicketV1Section(
                SectionKind.SUBSCRIPTION,
                [SubscriptionRecord(1700000000, ReferenceId(b"\xaa" * 16, 2))],
            ),
            TicketV1Section(SectionKind.CONTENT, [ContentRecord(3, b"\xff" * 128)]),
            TicketV1Section(
                SectionKind.CONTENT_CONSUMPTION,
                [ContentConsumptionRecord(1, 2, 3), ContentConsumptionRecord(4, 5, 6)],
                flags=9,
            ),
            TicketV1Section(
                SectionKind.ACCESS_TITLE,
                [AccessTitleRecord(0x0001000148414141, 0xFFFFFFFF00000000)],
            ),
        ],
        flags=0x12345678,
    )


def _dump(ticket: TicketV1) -> bytes:
    buffer = io.BytesIO()
    ticket.dump(buffer)
    return buffer.getvalue()


def test_round_trip():
    ticket = _sample_ticket()
    assert TicketV1.read(io.BytesIO(_dump(ticket))) == ticket


def test_dumped_length_matches_size():
    ticket = _sample_ticket()
    assert len(_dump(ticket)) == ticket.size()


def test_read_leaves_stream_after_section_headers():
    data = _dump(_sample_ticket())
    stream = io.BytesIO(data)
    TicketV1.read(stream)
    assert stream.tell() == len(data)


def test_round_trip_with_nonzero_origin():
    ticket = _sample_ticket()
    buffer = io.BytesIO()
    buffer.write(b"prefix-bytes")
    ticket.dump(buffer)
    buffer.seek(len(b"prefix-bytes"))
    assert TicketV1.read(buffer) == ticket


def test_empty_ticket_wire_bytes():
    data = _dump(TicketV1(flags=0))
    assert data[:4] == b"\x00\x01\x00\x14"
    assert data[8:16] == b"\x00\x00\x00\x00\x00\x00\x00\x14"
    assert len(data) == 20
    assert TicketV1.read(io.BytesIO(data)) == TicketV1()


def test_first_section_offset_points_after_records():
    ticket = _sample_ticket()
    data = _dump(ticket)
    first_offset = int.from_bytes(data[8:12], "big")
    assert first_offset == ticket.size() - 20 * len(ticket.sections)
    assert int.from_bytes(data[4:8], "big") == ticket.size()


@pytest.mark.parametrize(
    ("kind", "size"),
    [
        (SectionKind.PERMANENT, 16 + 4),
        (SectionKind.SUBSCRIPTION, 16 + 4 + 4),
        (SectionKind.CONTENT, 128 + 4),
        (SectionKind.CONTENT_CONSUMPTION, 2 + 2 + 4),
        (SectionKind.ACCESS_TITLE, 8 + 8),
    ],
)
def test_record_sizes(kind, size):
    assert TicketV1Section(kind).record_size() == size


def test_section_size_is_records_times_record_size():
    section = _sample_ticket().sections[3]
    assert section.size() == 2 * section.record_size()


def test_section_rejects_mismatched_records():
    with pytest.raises(ValueError):
        TicketV1Section(SectionKind.CONTENT, [ContentConsumptionRecord(1, 2, 3)])


def test_reference_id_requires_16_bytes():
    with pytest.raises(ValueError):
        ReferenceId(b"\x00" * 15, 0)


def test_content_record_requires_128_byte_mask():
    with pytest.raises(ValueError):
        ContentRecord(0, b"\x00" * 64)


def _mutated(offset: int, value: bytes) -> io.BytesIO:
    data = bytearray(_dump(_sample_ticket()))
    data[offset : offset + len(value)] = value
    return io.BytesIO(bytes(data))


def test_unknown_version():
    with pytest.raises(TicketV1Error, match="version: 2"):
        TicketV1.read(_mutated(0, b"\x00\x02"))


def test_unknown_header_size():
    with pytest.raises(TicketV1Error, match="header size: 21"):
        TicketV1.read(_mutated(2, b"\x00\x15"))


def test_unknown_section_header_size():
    with pytest.raises(TicketV1Error, match="section header size"):
        TicketV1.read(_mutated(14, b"\x00\x10"))


def test_unknown_total_size():
    with pytest.raises(TicketV1Error, match="total size"):
        TicketV1.read(_mutated(4, b"\x00\x00\x00\x01"))


def test_unknown_section_kind():
    data = _dump(_sample_ticket())
    first_offset = int.from_bytes(data[8:12], "big")
    with pytest.raises(TicketV1Error, match="section type: 9"):
        TicketV1.read(_mutated(first_offset + 16, b"\x00\x09"))


def test_truncated_stream():
    data = _dump(_sample_ticket())
    with pytest.raises(TicketV1Error, match="IO error"):
        TicketV1.read(io.BytesIO(data[:-5]))