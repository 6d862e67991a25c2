# https://github.com/bitcoin/bips/blob/master/bip-0321.mediawiki
# bitcoin:[<address>][?amount=<amount>][&label=<label>][&message=<message>]
#     [&lightning=<bolt11>][&lno=<bolt12>][&sp=<silent payment address>]
#     [&ark=<ark address>][&bc|tb|bcrt|tbs=<address>][&pop|req-pop=<uri>]
# Unlike BIP21, the path address is optional as long as at least one
# payment method is given as a query parameter, and every payment
# method found is validated here.

from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote, unquote, urlencode

from bip321 import validators
from bip321.amount import amount_to_uri_str, parse_amount, to_amount
from bip321.support import get_log
from bip321.types import (EncodeRequest, EncodeResult, ParseResult,
                          PaymentMethod, Validation, validate_network,
                          NETWORKS, UNKNOWN, MAINNET, TESTNET, REGTEST,
                          SIGNET, ONCHAIN, LIGHTNING, OFFER, SILENT_PAYMENT,
                          ARK)

log = get_log()

BIP321_SCHEME = "bitcoin:"

SINGLE_VALUE_PARAMS = ("label", "message", "amount")
POP_PARAMS = ("pop", "req-pop")

PAYMENT_METHOD_PARAMS = {
    "lightning": LIGHTNING,
    "lno": OFFER,
    "sp": SILENT_PAYMENT,
    "ark": ARK,
}

# on-chain address parameters and the network each one promises
NETWORK_ADDRESS_PARAMS = {
    "bc": MAINNET,
    "tb": TESTNET,
    "bcrt": REGTEST,
    "tbs": SIGNET,
}


def is_bip321_uri(uri: Any) -> bool:
    return isinstance(uri, str) and uri[:len(BIP321_SCHEME)].lower() == \
        BIP321_SCHEME


def split_uri(uri: str) -> Tuple[str, str]:
    """ Splits a URI already known to carry the bitcoin scheme into
    (bare address, query string); either may be empty.
    """
    address, _, query = uri[len(BIP321_SCHEME):].partition("?")
    return address, query


def tokenize_query(query: str) -> List[Tuple[str, str]]:
    """ Returns the ordered (key, value) pairs of a query string.
    Keys are percent-decoded but keep their case; values are
    returned exactly as they appear, as the pop parameter must
    keep its encoding.
    """
    pairs = []
    for pair in query.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        pairs.append((unquote(key), value))
    return pairs


def networks_compatible(kind: str, detected: str, expected: str) -> bool:
    if detected == expected:
        return True
    if kind in (SILENT_PAYMENT, ARK):
        # these formats only distinguish mainnet from "not mainnet"
        return detected == TESTNET and expected in (TESTNET, SIGNET, REGTEST)
    if kind == ONCHAIN:
        # testnet and signet share address encodings
        return {detected, expected} == {TESTNET, SIGNET}
    return False


def _classify(kind: str, value: str) -> Validation:
    if kind == LIGHTNING:
        return validators.validate_lightning_invoice(value)
    elif kind == OFFER:
        return validators.validate_bolt12_offer(value)
    elif kind == SILENT_PAYMENT:
        return validators.validate_silent_payment_address(value)
    elif kind == ARK:
        return validators.validate_ark_address(value)
    raise ValueError("Unknown payment method kind " + kind)


def _parse_path_address(result: ParseResult, address: str) -> None:
    validation = validators.validate_bitcoin_address(address)
    if not validation.valid:
        result.add_error("Invalid address: " + validation.error)
        return
    result.address = address
    result.network = validation.network
    result.payment_methods.append(
        PaymentMethod(ONCHAIN, address, validation.network, True))


def _parse_network_address(result: ParseResult, key: str,
                           value: str) -> None:
    expected = NETWORK_ADDRESS_PARAMS[key]
    validation = validators.validate_bitcoin_address(value)
    if not validation.valid:
        result.payment_methods.append(PaymentMethod(
            ONCHAIN, value, None, False, validation.error))
        result.add_error(validation.error)
        return
    if not networks_compatible(ONCHAIN, validation.network, expected):
        result.payment_methods.append(PaymentMethod(
            ONCHAIN, value, validation.network, False,
            "Address network mismatch: expected " + expected))
        result.add_error(
            "Address network mismatch for {} parameter".format(key))
        return
    result.payment_methods.append(
        PaymentMethod(ONCHAIN, value, validation.network, True))


def _parse_param(result: ParseResult, key: str, raw_value: str,
                 count: int) -> None:
    lower_key = key.lower()
    if lower_key in SINGLE_VALUE_PARAMS:
        if count > 1:
            result.add_error(
                "Multiple {} parameters not allowed".format(lower_key))
            return
        value = unquote(raw_value)
        if lower_key == "amount":
            amount = parse_amount(value)
            if amount is None:
                result.add_error("Invalid amount format")
            else:
                result.amount = amount
        else:
            setattr(result, lower_key, value)
    elif lower_key in POP_PARAMS:
        if result.pop_required is not None:
            result.add_error("Multiple pop/req-pop parameters not allowed")
            return
        required = lower_key == "req-pop"
        validation = validators.validate_pop_uri(raw_value)
        if not validation.valid:
            # a bad optional pop callback can be ignored by the payer
            result.add_error(validation.error, blocking=required)
        result.pop = raw_value
        result.pop_required = required
    elif lower_key in PAYMENT_METHOD_PARAMS:
        kind = PAYMENT_METHOD_PARAMS[lower_key]
        value = unquote(raw_value)
        validation = _classify(kind, value)
        result.payment_methods.append(PaymentMethod(
            kind, value, validation.network, validation.valid,
            validation.error))
        if not validation.valid:
            result.add_error(validation.error, blocking=False)
    elif lower_key in NETWORK_ADDRESS_PARAMS:
        _parse_network_address(result, lower_key, unquote(raw_value))
    elif lower_key.startswith("req-"):
        result.required_params.append(key)
        result.add_error("Unknown required parameter: " + key)
    else:
        result.optional_params.setdefault(lower_key, []).append(
            unquote(raw_value))


def _reconcile_networks(result: ParseResult, expected: str) -> None:
    for i, method in enumerate(result.payment_methods):
        # offers carry no network and are never in conflict
        if method.network is None:
            continue
        if networks_compatible(method.kind, method.network, expected):
            continue
        msg = "Payment method network mismatch ({}): expected {}, " \
              "got {}".format(method.kind, expected, method.network)
        result.payment_methods[i] = method._replace(valid=False, error=msg)
        result.add_error(msg)


def parse_bip321(uri: str, network: Optional[str] = None) -> ParseResult:
    """ Parses a BIP321 URI, validating every payment method in it.

    If `network` is given, every payment method that is tied to a
    different network makes the result invalid.
    Problems with the URI are never raised; they are listed in the
    `errors` of the returned ParseResult. Only an unknown `network`
    argument raises ValueError.
    """
    if network is not None:
        validate_network(network)
    result = ParseResult()

    if not uri or not isinstance(uri, str):
        result.add_error("Invalid URI: must be a non-empty string")
        return result
    if not is_bip321_uri(uri):
        result.add_error("Invalid URI: must start with bitcoin:")
        return result

    address, query = split_uri(uri)
    if address:
        _parse_path_address(result, address)

    seen_keys = {}  # type: Dict[str, int]
    for key, raw_value in tokenize_query(query):
        lower_key = key.lower()
        seen_keys[lower_key] = seen_keys.get(lower_key, 0) + 1
        _parse_param(result, key, raw_value, seen_keys[lower_key])

    if not result.payment_methods:
        result.add_error("No valid payment methods found")

    if network is not None:
        _reconcile_networks(result, network)

    if result.pop_required and result.pop:
        if not get_valid_payment_methods(result):
            result.add_error("req-pop specified but no valid payment "
                             "method available", blocking=False)

    log.debug("Parsed BIP321 URI with {} payment method(s), valid: {}".format(
        len(result.payment_methods), result.valid))
    return result


def encode_bip321(request: Union[None, EncodeRequest,
                                 Mapping[str, Any]] = None,
                  **kwargs: Any) -> EncodeResult:
    """ Builds a BIP321 URI and validates it by parsing it back.

    Accepts an EncodeRequest, a mapping of its fields, or the fields
    as keyword arguments. Raises ValueError if the amount is not a
    finite non-negative number, or if the resulting URI does not
    parse as valid with at least one usable payment method.
    """
    if request is None:
        request = EncodeRequest(**kwargs)
    elif not isinstance(request, EncodeRequest):
        request = EncodeRequest.from_dict(request)

    params = []  # type: List[Tuple[str, str]]
    if request.amount is not None:
        params.append(("amount", amount_to_uri_str(to_amount(request.amount))))
    if request.label is not None:
        params.append(("label", request.label))
    if request.message is not None:
        params.append(("message", request.message))
    if request.pop is not None:
        params.append(("req-pop" if request.pop.required else "pop",
                       request.pop.value))
    for field in EncodeRequest.METHOD_FIELDS:
        for value in getattr(request, field):
            params.append((field, value))
    for key, values in request.optional_params:
        for value in values:
            params.append((key, value))

    uri = BIP321_SCHEME + (request.address or "")
    if len(params) > 0:
        uri += '?' + urlencode(params, safe="", quote_via=quote)

    parsed = parse_bip321(uri)
    if not parsed.valid or not get_valid_payment_methods(parsed):
        raise ValueError("; ".join(parsed.errors) or
                         "No valid payment methods found")
    log.debug("Encoded BIP321 URI: " + uri)
    return EncodeResult(parsed, uri)


def get_payment_methods_by_network(
        result: ParseResult) -> Dict[str, List[PaymentMethod]]:
    by_network = {n: [] for n in NETWORKS + (UNKNOWN,)}
    for method in result.payment_methods:
        by_network[method.network or UNKNOWN].append(method)
    return by_network


def get_valid_payment_methods(result: ParseResult) -> List[PaymentMethod]:
    return [pm for pm in result.payment_methods if pm.valid]


def format_payment_methods_summary(result: ParseResult) -> str:
    lines = ["Valid: " + str(result.valid)]
    if result.errors:
        lines.append("Errors: " + ", ".join(result.errors))
    if result.address:
        lines.append("Address: {} ({})".format(result.address,
                                               result.network))
    if result.amount is not None:
        lines.append("Amount: {} BTC".format(amount_to_uri_str(result.amount)))
    if result.label:
        lines.append("Label: " + result.label)
    if result.message:
        lines.append("Message: " + result.message)
    lines.append("Payment Methods: {}".format(len(result.payment_methods)))
    for method in result.payment_methods:
        status = "✓" if method.valid else "✗"
        network = " ({})".format(method.network) if method.network else ""
        lines.append("  {} {}{}".format(status, method.kind, network))
    return "\n".join(lines)
