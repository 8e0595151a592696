"""
CRC16-CCITT (FALSE) — the checksum closing every PIX payload.

Polynomial 0x1021, initial value 0xFFFF, MSB first, no final XOR.
"""

from __future__ import annotations

POLYNOMIAL = 0x1021
INITIAL = 0xFFFF


def crc16(data: bytes) -> int:
    """
    Compute CRC16-CCITT over raw bytes.

    Example:
        crc16(b"123456789")  # 0x29B1
    """
    crc = INITIAL
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ POLYNOMIAL) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc


def checksum(text: str) -> str:
    """CRC16 of the UTF-8 encoding, as 4 uppercase hex digits."""
    return f"{crc16(text.encode('utf-8')):04X}"


__all__ = ("POLYNOMIAL", "INITIAL", "crc16", "checksum")
