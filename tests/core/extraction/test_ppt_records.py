"""
Test suite for the legacy PowerPoint record decoder.

Streams are assembled by hand from 8-byte record headers.

System role: Verification of .ppt text recovery
"""

import struct

from course_rag.core.document_processing.extraction.ppt_records import (
    TEXT_BYTES_ATOM,
    TEXT_CHARS_ATOM,
    AtomRecord,
    ContainerRecord,
    extract_text_runs,
    iter_records,
    read_header,
)

DOCUMENT_CONTAINER = 0x03E8
SLIDE_PERSIST_ATOM = 0x03F3


def atom(rec_type: int, payload: bytes, instance: int = 0) -> bytes:
    return struct.pack("<HHI", instance << 4, rec_type, len(payload)) + payload


def container(rec_type: int, children: bytes) -> bytes:
    return struct.pack("<HHI", 0xF, rec_type, len(children)) + children


class TestReadHeader:
    """Test suite for read_header."""

    def test_header_fields_should_be_unpacked(self):
        # Arrange
        data = struct.pack("<HHI", (0x12 << 4) | 0x3, 0x0FA0, 10)

        # Act
        header = read_header(data, 0)

        # Assert
        assert (header.rec_ver, header.rec_instance, header.rec_type, header.rec_len) == (
            0x3,
            0x12,
            0x0FA0,
            10,
        )
        assert not header.is_container

    def test_short_data_should_return_none(self):
        # Act / Assert
        assert read_header(b"\x0f\x00\xe8\x03", 0) is None


class TestIterRecords:
    """Test suite for iter_records and extract_text_runs."""

    def test_text_atoms_inside_containers_should_be_found(self):
        # Arrange
        stream = container(
            DOCUMENT_CONTAINER,
            atom(TEXT_CHARS_ATOM, "Hello".encode("utf-16-le"))
            + atom(SLIDE_PERSIST_ATOM, b"\x01\x02\x03\x04")
            + atom(TEXT_BYTES_ATOM, b"World"),
        )

        # Act
        records = list(iter_records(stream))

        # Assert
        assert isinstance(records[0], ContainerRecord)
        assert all(isinstance(r, AtomRecord) for r in records[1:])
        assert extract_text_runs(stream) == ["Hello", "World"]

    def test_blank_runs_should_be_skipped(self):
        # Arrange
        stream = atom(TEXT_BYTES_ATOM, b"   ") + atom(TEXT_BYTES_ATOM, b"  Graphs  ")

        # Act / Assert
        assert extract_text_runs(stream) == ["Graphs"]

    def test_odd_utf16_payload_should_drop_last_byte(self):
        # Arrange
        stream = atom(TEXT_CHARS_ATOM, "Hi".encode("utf-16-le") + b"\x00")

        # Act / Assert
        assert extract_text_runs(stream) == ["Hi"]

    def test_overrunning_atom_should_stop_walk(self):
        # Arrange
        truncated = struct.pack("<HHI", 0, TEXT_BYTES_ATOM, 255) + b"cut off"
        stream = atom(TEXT_BYTES_ATOM, b"Kept") + truncated + atom(TEXT_BYTES_ATOM, b"Lost")

        # Act / Assert
        assert extract_text_runs(stream) == ["Kept"]

    def test_latin1_bytes_should_decode(self):
        # Arrange
        stream = atom(TEXT_BYTES_ATOM, "Café".encode("latin-1"))

        # Act / Assert
        assert extract_text_runs(stream) == ["Café"]
