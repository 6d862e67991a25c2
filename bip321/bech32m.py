"""Bech32 (BIP-173) and Bech32m (BIP-350) string decoding.

The `bech32` distribution caps strings at 90 characters, which is fine
for segwit addresses but too short for silent payment addresses and
Lightning payloads; decoding here is parameterized by a maximum length
and built on that package's checksum primitives.

Decoders never raise: on any failure they return a tuple of Nones.
"""

from typing import List, Optional, Tuple

from bech32 import CHARSET, bech32_hrp_expand, bech32_polymod, convertbits

BECH32 = "bech32"
BECH32M = "bech32m"

_CHECKSUM_CONSTANTS = {BECH32: 1, BECH32M: 0x2BC830A3}

SEGWIT_MAX_LENGTH = 90
EXTENDED_MAX_LENGTH = 1023


def _verify_checksum(hrp: str, data: List[int], encoding: str) -> bool:
    return (bech32_polymod(bech32_hrp_expand(hrp) + list(data)) ==
            _CHECKSUM_CONSTANTS[encoding])


def _split(bech: str, max_length: int) -> Tuple[Optional[str],
                                                Optional[List[int]]]:
    """ Validates the character set and case of a bech32 string
    and returns (hrp, data words including checksum).
    """
    if any(ord(x) < 33 or ord(x) > 126 for x in bech):
        return (None, None)
    if bech.lower() != bech and bech.upper() != bech:
        return (None, None)
    bech = bech.lower()
    pos = bech.rfind("1")
    if pos < 1 or pos + 7 > len(bech) or len(bech) > max_length:
        return (None, None)
    if not all(x in CHARSET for x in bech[pos + 1:]):
        return (None, None)
    return (bech[:pos], [CHARSET.find(x) for x in bech[pos + 1:]])


def decode(bech: str, encoding: str,
           max_length: int = SEGWIT_MAX_LENGTH) -> Tuple[Optional[str],
                                                         Optional[List[int]]]:
    """ Decodes using exactly one checksum variant.
    Returns (hrp, data words without checksum) or (None, None).
    """
    hrp, data = _split(bech, max_length)
    if hrp is None:
        return (None, None)
    if not _verify_checksum(hrp, data, encoding):
        return (None, None)
    return (hrp, data[:-6])


def words_to_bytes(words: List[int]) -> Optional[bytes]:
    """ Regroups 5-bit words into bytes; None if the trailing
    padding is not canonical.
    """
    converted = convertbits(words, 5, 8, False)
    if converted is None:
        return None
    return bytes(converted)


def has_valid_checksum(hrp: str, data: List[int]) -> Optional[str]:
    """ Returns the checksum variant that verifies for already split
    data, or None. Used for formats (BOLT12) where the checksum is
    optional.
    """
    if len(data) < 6:
        return None
    for encoding in (BECH32, BECH32M):
        if _verify_checksum(hrp, data, encoding):
            return encoding
    return None
