"""
Record decoder for the legacy PowerPoint binary format.

The ``PowerPoint Document`` stream is a sequence of records, each starting
with an 8-byte little-endian header:

    u16  recVer (low 4 bits) | recInstance (high 12 bits)
    u16  recType
    u32  recLen

``recVer == 0xF`` marks a container whose payload is more records; anything
else is an atom with an opaque payload. Text lives in TextBytesAtom
(latin-1) and TextCharsAtom (UTF-16LE) atoms.

Dependencies: None
System role: Text recovery for .ppt uploads
"""

import struct
from collections.abc import Iterator
from dataclasses import dataclass

HEADER = struct.Struct("<HHI")
HEADER_SIZE = HEADER.size

CONTAINER_VERSION = 0xF
TEXT_CHARS_ATOM = 0x0FA0
TEXT_BYTES_ATOM = 0x0FA8


@dataclass(frozen=True)
class RecordHeader:
    rec_ver: int
    rec_instance: int
    rec_type: int
    rec_len: int

    @property
    def is_container(self) -> bool:
        return self.rec_ver == CONTAINER_VERSION


@dataclass(frozen=True)
class ContainerRecord:
    """Record whose payload holds child records."""

    header: RecordHeader
    offset: int


@dataclass(frozen=True)
class AtomRecord:
    """Leaf record with its payload bytes."""

    header: RecordHeader
    offset: int
    payload: bytes

    def text(self) -> str | None:
        """Decoded text for text atoms, None for every other atom type."""
        if self.header.rec_type == TEXT_BYTES_ATOM and self.payload:
            return self.payload.decode("latin-1")
        if self.header.rec_type == TEXT_CHARS_ATOM and len(self.payload) > 1:
            even = len(self.payload) - len(self.payload) % 2
            return self.payload[:even].decode("utf-16-le", errors="replace")
        return None


Record = ContainerRecord | AtomRecord


def read_header(data: bytes, offset: int) -> RecordHeader | None:
    """Header at ``offset``, or None when fewer than 8 bytes remain."""
    if offset < 0 or offset + HEADER_SIZE > len(data):
        return None
    ver_instance, rec_type, rec_len = HEADER.unpack_from(data, offset)
    return RecordHeader(
        rec_ver=ver_instance & 0xF,
        rec_instance=ver_instance >> 4,
        rec_type=rec_type,
        rec_len=rec_len,
    )


def iter_records(data: bytes) -> Iterator[Record]:
    """
    Walk the stream depth-first in file order.

    Containers are entered by skipping only their header, so their children
    follow immediately. The walk stops at a truncated header or at an atom
    whose payload would run past the end of the stream.
    """
    offset = 0
    while True:
        header = read_header(data, offset)
        if header is None:
            return
        if header.is_container:
            yield ContainerRecord(header=header, offset=offset)
            offset += HEADER_SIZE
            continue

        payload_start = offset + HEADER_SIZE
        payload_end = payload_start + header.rec_len
        if payload_end > len(data):
            return
        yield AtomRecord(header=header, offset=offset, payload=data[payload_start:payload_end])
        offset = payload_end


def extract_text_runs(data: bytes) -> list[str]:
    """Non-blank, stripped text from every text atom in the stream."""
    runs = []
    for record in iter_records(data):
        if isinstance(record, AtomRecord):
            text = record.text()
            if text and text.strip():
                runs.append(text.strip())
    return runs
