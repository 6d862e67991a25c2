"""BOLT12 offer string decoding.

Only decodability is checked here: the string must be a bech32-style
payload with a known prefix whose bytes form a well formed TLV stream.
No semantic checks on the individual records are made.
"""

import re
import struct
from typing import List, Tuple

from bech32 import CHARSET

from bip321.bech32m import has_valid_checksum, words_to_bytes

# offer, invoice request, invoice
BOLT12_PREFIXES = frozenset(["lno", "lnr", "lni"])

# BOLT12 strings may be split with '+' followed by optional whitespace
_CONTINUATION_RE = re.compile(r"\+\s*")


class OfferDecodeError(Exception):
    pass


def read_bigsize(data: bytes, pos: int) -> Tuple[int, int]:
    """ Reads a BigSize integer (big-endian, minimally encoded)
    at pos; returns (value, new position).
    """
    if pos >= len(data):
        raise OfferDecodeError("truncated bigsize")
    first = data[pos]
    if first < 0xfd:
        return first, pos + 1
    fmt, width, minimum = {0xfd: (">H", 2, 0xfd),
                           0xfe: (">I", 4, 0x10000),
                           0xff: (">Q", 8, 0x100000000)}[first]
    if pos + 1 + width > len(data):
        raise OfferDecodeError("truncated bigsize")
    value = struct.unpack(fmt, data[pos + 1:pos + 1 + width])[0]
    if value < minimum:
        raise OfferDecodeError("non-minimal bigsize")
    return value, pos + 1 + width


def parse_tlv_stream(data: bytes) -> List[Tuple[int, bytes]]:
    records = []
    pos = 0
    while pos < len(data):
        tlv_type, pos = read_bigsize(data, pos)
        length, pos = read_bigsize(data, pos)
        if pos + length > len(data):
            raise OfferDecodeError("tlv record length exceeds data")
        records.append((tlv_type, data[pos:pos + length]))
        pos += length
    return records


def decode_offer(offer: str) -> Tuple[str, List[Tuple[int, bytes]]]:
    """ Returns (prefix, tlv records) or raises OfferDecodeError.
    """
    s = _CONTINUATION_RE.sub("", offer.strip())
    if s.lower() != s and s.upper() != s:
        raise OfferDecodeError("mixed case")
    s = s.lower()
    pos = s.rfind("1")
    if pos < 1:
        raise OfferDecodeError("missing separator")
    hrp, payload = s[:pos], s[pos + 1:]
    if hrp not in BOLT12_PREFIXES:
        raise OfferDecodeError("unknown prefix " + hrp)
    if not payload:
        raise OfferDecodeError("empty payload")
    if not all(c in CHARSET for c in payload):
        raise OfferDecodeError("invalid character in payload")
    words = [CHARSET.find(c) for c in payload]
    # BOLT12 defines no checksum, but some encoders append one anyway
    if has_valid_checksum(hrp, words):
        words = words[:-6]
    data = words_to_bytes(words)
    if data is None:
        raise OfferDecodeError("invalid padding")
    records = parse_tlv_stream(data)
    if not records:
        raise OfferDecodeError("no tlv records")
    return hrp, records
