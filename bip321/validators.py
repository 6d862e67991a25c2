import re
from urllib.parse import unquote

import bolt11
from bitcointx import ChainParams
from bitcointx.wallet import CCoinAddress

from bip321 import bech32m
from bip321.offers import decode_offer
from bip321.types import (Validation, MAINNET, TESTNET, REGTEST, SIGNET)

FORBIDDEN_POP_SCHEMES = frozenset(
    ["http", "https", "file", "javascript", "mailto"])

# (address prefix, bitcointx chain, network); signet uses the tb hrp
SEGWIT_HRPS = (("bc1", "bitcoin", MAINNET),
               ("tb1", "bitcoin/testnet", TESTNET),
               ("bcrt1", "bitcoin/regtest", REGTEST))

# regtest base58 addresses share the testnet versions
BASE58_CHAINS = (("bitcoin", MAINNET), ("bitcoin/testnet", TESTNET))

BOLT11_CURRENCIES = {"bc": MAINNET, "tb": TESTNET,
                     "tbs": SIGNET, "bcrt": REGTEST}

SILENT_PAYMENT_HRPS = (("sp1", "sp", MAINNET), ("tsp1", "tsp", TESTNET))
ARK_HRPS = (("ark1", "ark", MAINNET), ("tark1", "tark", TESTNET))

SILENT_PAYMENT_V0_LENGTH = 66

_POP_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.-]*):?")


def _match_prefix(value, table):
    lower = value.lower()
    for prefix, hrp, network in table:
        if lower.startswith(prefix):
            return prefix, hrp, network
    return None


def _is_valid_on_chain(address, chain):
    """ True if bitcointx accepts the address under the
    given chain params and can build its scriptPubKey.
    """
    with ChainParams(chain):
        try:
            addr = CCoinAddress(address)
            addr.to_scriptPubKey()
        except Exception:
            return False
    return True


def detect_address_network(address):
    """ Returns the network an on-chain address belongs to,
    or None if it cannot be decoded. Signet addresses share
    the testnet encodings and are reported as testnet.
    """
    matched = _match_prefix(address, SEGWIT_HRPS)
    if matched:
        # a segwit prefix never falls back to base58
        _, chain, network = matched
        if not _is_valid_on_chain(address, chain):
            return None
        return network
    for chain, network in BASE58_CHAINS:
        if _is_valid_on_chain(address, chain):
            return network
    return None


def validate_bitcoin_address(address):
    if not address:
        return Validation(False, error="Empty address")
    network = detect_address_network(address)
    if network is None:
        return Validation(False, error="Invalid bitcoin address")
    return Validation(True, network)


def validate_lightning_invoice(invoice):
    try:
        decoded = bolt11.decode(invoice, ignore_exceptions=True)
    except Exception as e:
        return Validation(False,
                          error="Invalid lightning invoice: " + str(e))
    # an unrecognized currency tag leaves the network undetermined
    network = BOLT11_CURRENCIES.get(getattr(decoded, "currency", None))
    return Validation(True, network)


def validate_bolt12_offer(offer):
    if not offer or not isinstance(offer, str):
        return Validation(False, error="Empty or invalid offer")
    if not offer.lower().startswith("ln"):
        return Validation(False, error="Invalid BOLT12 offer format")
    try:
        decode_offer(offer)
    except Exception as e:
        return Validation(False, error="Invalid BOLT12 offer: " + str(e))
    # offers are not tied to a network
    return Validation(True)


def validate_silent_payment_address(address):
    matched = _match_prefix(address, SILENT_PAYMENT_HRPS)
    if not matched:
        return Validation(False,
                          error="Invalid silent payment address prefix")
    _, expected_hrp, network = matched
    hrp, words = bech32m.decode(address, bech32m.BECH32M,
                                bech32m.EXTENDED_MAX_LENGTH)
    if hrp is None:
        return Validation(False, error="Invalid silent payment address: "
                          "invalid bech32m encoding")
    if hrp != expected_hrp:
        return Validation(False,
                          error="Invalid silent payment address prefix")
    # only v0 ('q') is defined
    if not words or words[0] != 0:
        return Validation(False, error="Unsupported silent payment version")
    # non-zero padding bits are rejected rather than ignored
    data = bech32m.words_to_bytes(words[1:])
    if data is None:
        return Validation(False,
                          error="Invalid silent payment address data")
    # 33 byte scan key followed by 33 byte spend key
    if len(data) != SILENT_PAYMENT_V0_LENGTH:
        return Validation(False,
                          error="Invalid silent payment address length")
    if data[0] not in (0x02, 0x03) or data[33] not in (0x02, 0x03):
        return Validation(False, error="Invalid public key format in "
                          "silent payment address")
    return Validation(True, network)


def validate_ark_address(address):
    matched = _match_prefix(address, ARK_HRPS)
    if not matched:
        return Validation(False, error="Invalid Ark address format")
    _, expected_hrp, network = matched
    hrp, _ = bech32m.decode(address, bech32m.BECH32M,
                            bech32m.EXTENDED_MAX_LENGTH)
    if hrp is None:
        return Validation(False, error="Invalid Ark address: "
                          "invalid bech32m encoding")
    if hrp != expected_hrp:
        return Validation(False, error="Invalid Ark address format")
    return Validation(True, network)


def validate_pop_uri(pop_uri):
    try:
        decoded = unquote(pop_uri, errors="strict")
    except UnicodeDecodeError:
        return Validation(False, error="Invalid pop URI encoding")
    match = _POP_SCHEME_RE.match(decoded)
    if match:
        scheme = match.group(1).lower()
        if scheme in FORBIDDEN_POP_SCHEMES:
            return Validation(False, error="Forbidden pop scheme: " + scheme)
    return Validation(True)
