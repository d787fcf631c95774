"""
Intel HEX Codec
===============

Converts between binary images and Intel HEX text.

Record format:

    :LLAAAATT[DD...]CC

    LL    number of data bytes
    AAAA  load address of the first data byte (16-bit, big-endian)
    TT    record type: 00 = data, 01 = end of file
    DD    data bytes
    CC    checksum: two's complement of the sum of all preceding bytes,
          so that the sum of every byte in the record is 0 mod 256

The encoder writes 16 data bytes per record and ends with the fixed
end-of-file record ":00000001FF". The decoder accepts one contiguous
block of data records; extended address records (types 02-05) are
skipped with a warning since they cannot address memory beyond 64K on
these CPUs.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import logging
from typing import Optional

from .cpu import ADDRESS_MAX
from .errors import IntelHexChecksumError, IntelHexError, IntelHexFormatError

logger = logging.getLogger(__name__)


BYTES_PER_RECORD = 16

RECORD_DATA = 0x00
RECORD_EOF = 0x01
# Extended segment/linear address and start address records
IGNORED_RECORD_TYPES = frozenset({0x02, 0x03, 0x04, 0x05})

EOF_RECORD = ":00000001FF"


def checksum(record: bytes) -> int:
    """Two's complement of the byte sum of a record (without checksum)."""
    return (-sum(record)) & 0xFF


def format_record(address: int, record_type: int, data: bytes = b"") -> str:
    """Format one record as ":LLAAAATT...CC" in uppercase."""
    body = bytes([len(data), (address >> 8) & 0xFF, address & 0xFF, record_type]) + data
    return f":{body.hex().upper()}{checksum(body):02X}"


def encode_intel_hex(data: bytes, base_address: int = 0) -> str:
    """
    Encode a binary image as Intel HEX.

    Args:
        data: Bytes to encode
        base_address: Load address of the first byte

    Returns:
        Records joined with newlines, ending with the EOF record

    Raises:
        IntelHexError: If the base address is outside 0x0000-0xFFFF or the
                       data would extend past 0xFFFF
    """
    if not 0 <= base_address <= ADDRESS_MAX:
        raise IntelHexError(f"base address {base_address:#x} outside 0x0000-0xFFFF")
    if data and base_address + len(data) - 1 > ADDRESS_MAX:
        raise IntelHexError(
            f"{len(data)} bytes at {base_address:04X}h extend past FFFFh"
        )

    records = []
    for offset in range(0, len(data), BYTES_PER_RECORD):
        chunk = bytes(data[offset:offset + BYTES_PER_RECORD])
        records.append(format_record(base_address + offset, RECORD_DATA, chunk))
    records.append(EOF_RECORD)
    return "\n".join(records)


def _parse_record(line: str, line_number: int) -> tuple[int, int, bytes]:
    """
    Parse and verify one record.

    Returns:
        Tuple of (address, record type, data)
    """
    if not line.startswith(":"):
        raise IntelHexFormatError("record does not start with ':'", line_number)
    try:
        body = bytes.fromhex(line[1:])
    except ValueError:
        raise IntelHexFormatError("invalid hex digits in record", line_number) from None

    if len(body) < 5:
        raise IntelHexFormatError("record too short", line_number)

    length = body[0]
    if len(body) != length + 5:
        raise IntelHexFormatError(
            f"length field says {length} data bytes, record has {len(body) - 5}",
            line_number,
        )

    expected = checksum(body[:-1])
    if expected != body[-1]:
        raise IntelHexChecksumError(expected, body[-1], line_number)

    address = (body[1] << 8) | body[2]
    return address, body[3], body[4:-1]


def decode_intel_hex(text: str) -> tuple[int, bytes]:
    """
    Decode Intel HEX text into a binary image.

    Args:
        text: Intel HEX records, one per line (blank lines are ignored)

    Returns:
        Tuple of (base address, data)

    Raises:
        IntelHexFormatError: Malformed records, unknown record types, or data
                             records that are not contiguous
        IntelHexChecksumError: A record whose checksum does not match
    """
    base_address: Optional[int] = None
    data = bytearray()

    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue

        address, record_type, payload = _parse_record(line, line_number)

        if record_type == RECORD_EOF:
            logger.debug(f"EOF record at line {line_number}")
            break
        if record_type in IGNORED_RECORD_TYPES:
            logger.warning(f"Ignoring record type {record_type:02X} at line {line_number}")
            continue
        if record_type != RECORD_DATA:
            raise IntelHexFormatError(f"unsupported record type {record_type:02X}", line_number)

        if base_address is None:
            base_address = address
        elif address != base_address + len(data):
            raise IntelHexFormatError(
                f"non-contiguous data at {address:04X}h "
                f"(expected {base_address + len(data):04X}h)",
                line_number,
            )
        data.extend(payload)

    return (base_address or 0), bytes(data)
