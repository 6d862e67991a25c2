'''Encoding of BIP321 URIs.'''

from decimal import Decimal

import pytest

from bip321 import (encode_bip321, parse_bip321, EncodeRequest,
                    ProofOfPayment)
from bip321_test_data import (addresses, lightning, ark, silent_payment,
                              offer, p2pkh)


@pytest.mark.parametrize(
    "address, network",
    [
        (addresses['mainnet']['p2pkh'], "mainnet"),
        (addresses['mainnet']['bech32'], "mainnet"),
        (addresses['mainnet']['taproot'], "mainnet"),
        (addresses['testnet']['bech32'], "testnet"),
    ])
def test_encode_address(address, network):
    result = encode_bip321(address=address)
    assert result.valid
    assert result.network == network
    assert result.uri == 'bitcoin:' + address


def test_encode_query_parameters():
    result = encode_bip321(address=p2pkh, label="bip321")
    assert result.uri == 'bitcoin:' + p2pkh + '?label=bip321'

    result = encode_bip321(address=p2pkh, message="bip321")
    assert result.uri == 'bitcoin:' + p2pkh + '?message=bip321'

    result = encode_bip321(address=p2pkh, amount=20.3)
    assert result.valid
    assert result.amount == Decimal('20.3')
    assert result.uri == 'bitcoin:' + p2pkh + '?amount=20.3'

    result = encode_bip321(address=p2pkh, amount=0)
    assert result.valid
    assert result.amount == Decimal('0')
    assert result.uri == 'bitcoin:' + p2pkh + '?amount=0'

    result = encode_bip321(address=p2pkh, amount=50, label="Luke-Jr",
                           message="Donation for project xyz")
    assert result.valid
    assert result.amount == Decimal('50')
    assert result.label == "Luke-Jr"
    assert result.message == "Donation for project xyz"
    assert result.uri == 'bitcoin:' + p2pkh + \
        '?amount=50&label=Luke-Jr&message=Donation%20for%20project%20xyz'

    result = encode_bip321(address=p2pkh, label="Test & Label")
    assert result.label == "Test & Label"
    assert result.uri == 'bitcoin:' + p2pkh + '?label=Test%20%26%20Label'


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal('0.00000001'), "0.00000001"),
        (Decimal('1E-8'), "0.00000001"),
        ("0.5", "0.5"),
        (21000000, "21000000"),
        (0.1, "0.1"),
    ])
def test_encode_amount_formats(amount, expected):
    result = encode_bip321(address=p2pkh, amount=amount)
    assert result.uri == 'bitcoin:' + p2pkh + '?amount=' + expected


def test_encode_lightning():
    result = encode_bip321(address=p2pkh, lightning=lightning['mainnet'])
    assert result.valid
    assert any(pm.kind == "lightning" for pm in result.payment_methods)
    assert result.uri == 'bitcoin:' + p2pkh + '?lightning=' + \
        lightning['mainnet']

    result = encode_bip321(lightning=[lightning['mainnet'],
                                      lightning['mainnet']])
    assert result.valid
    assert len([pm for pm in result.payment_methods
                if pm.kind == "lightning"]) == 2
    assert result.uri == 'bitcoin:?lightning=' + lightning['mainnet'] + \
        '&lightning=' + lightning['mainnet']

    result = encode_bip321(lightning=lightning['testnet'])
    assert result.valid
    assert result.payment_methods[0].network == "testnet"
    assert result.payment_methods[0].value == lightning['testnet']
    assert result.uri == 'bitcoin:?lightning=' + lightning['testnet']


def test_encode_alternative_methods():
    result = encode_bip321(sp=silent_payment['mainnet'])
    assert result.valid
    assert result.payment_methods[0].kind == "silent-payment"
    assert result.payment_methods[0].network == "mainnet"
    assert result.uri == 'bitcoin:?sp=' + silent_payment['mainnet']

    result = encode_bip321(sp=silent_payment['testnet'])
    assert result.payment_methods[0].network == "testnet"

    result = encode_bip321(sp=[silent_payment['mainnet']] * 2)
    assert len(result.payment_methods) == 2
    assert result.uri == 'bitcoin:?sp=' + silent_payment['mainnet'] + \
        '&sp=' + silent_payment['mainnet']

    result = encode_bip321(ark=ark['mainnet'])
    assert result.payment_methods[0].kind == "ark"
    assert result.payment_methods[0].network == "mainnet"
    assert result.uri == 'bitcoin:?ark=' + ark['mainnet']

    result = encode_bip321(ark=ark['testnet'])
    assert result.payment_methods[0].network == "testnet"

    result = encode_bip321(lno=offer)
    assert result.valid
    assert result.payment_methods[0].kind == "offer"
    assert result.uri == 'bitcoin:?lno=' + offer


def test_encode_network_addresses():
    result = encode_bip321(bc=addresses['mainnet']['bech32'])
    assert result.payment_methods[0].network == "mainnet"
    assert result.uri == 'bitcoin:?bc=' + addresses['mainnet']['bech32']

    result = encode_bip321(tb=addresses['testnet']['bech32'])
    assert result.payment_methods[0].network == "testnet"
    assert result.uri == 'bitcoin:?tb=' + addresses['testnet']['bech32']

    result = encode_bip321(bcrt=addresses['regtest']['bech32'])
    assert result.payment_methods[0].network == "regtest"
    assert result.uri == 'bitcoin:?bcrt=' + addresses['regtest']['bech32']

    result = encode_bip321(tbs=addresses['testnet']['bech32'])
    assert result.valid
    assert result.uri == 'bitcoin:?tbs=' + addresses['testnet']['bech32']

    result = encode_bip321(bc=[addresses['mainnet']['bech32'],
                               addresses['mainnet']['taproot']])
    assert len(result.payment_methods) == 2
    assert result.uri == 'bitcoin:?bc=' + addresses['mainnet']['bech32'] + \
        '&bc=' + addresses['mainnet']['taproot']


def test_encode_pop():
    result = encode_bip321(address=p2pkh, pop="customapp:")
    assert result.valid
    assert result.pop == "customapp%3A"
    assert result.pop_required is False
    assert result.uri == 'bitcoin:' + p2pkh + '?pop=customapp%3A'

    result = encode_bip321(address=p2pkh, req_pop="customapp:")
    assert result.valid
    assert result.pop_required is True
    assert result.uri == 'bitcoin:' + p2pkh + '?req-pop=customapp%3A'

    with pytest.raises(ValueError):
        encode_bip321(address=p2pkh, pop="a:", req_pop="b:")


def test_encode_optional_params():
    result = encode_bip321(address=p2pkh, optional_params={"custom": "value"})
    assert result.valid
    assert result.optional_params == {"custom": ["value"]}
    assert result.uri == 'bitcoin:' + p2pkh + '?custom=value'

    result = encode_bip321(address=p2pkh,
                           optional_params={"foo": "bar",
                                            "baz": ["one", "two"]})
    assert result.optional_params == {"foo": ["bar"], "baz": ["one", "two"]}
    assert result.uri == 'bitcoin:' + p2pkh + '?foo=bar&baz=one&baz=two'


def test_encode_combined():
    result = encode_bip321(address=p2pkh, lightning=lightning['mainnet'],
                           sp=silent_payment['mainnet'])
    assert result.valid
    assert [pm.kind for pm in result.payment_methods] == [
        "onchain", "lightning", "silent-payment"]
    assert result.uri == 'bitcoin:' + p2pkh + '?lightning=' + \
        lightning['mainnet'] + '&sp=' + silent_payment['mainnet']

    result = encode_bip321(address=p2pkh, amount=0.5, label="Test",
                           message="Payment", lightning=lightning['mainnet'],
                           sp=silent_payment['mainnet'], ark=ark['mainnet'])
    assert result.valid
    assert result.amount == Decimal('0.5')
    assert len(result.payment_methods) == 4
    assert result.uri == 'bitcoin:' + p2pkh + \
        '?amount=0.5&label=Test&message=Payment&lightning=' + \
        lightning['mainnet'] + '&sp=' + silent_payment['mainnet'] + \
        '&ark=' + ark['mainnet']


def test_encode_request_forms():
    request = EncodeRequest(address=p2pkh, amount="1.5", req_pop="app:")
    assert request.pop == ProofOfPayment("app:", True)
    assert request.lightning == []
    from_object = encode_bip321(request)

    from_mapping = encode_bip321({'address': p2pkh, 'amount': "1.5",
                                  'req_pop': "app:"})
    assert from_object.uri == from_mapping.uri
    assert from_object.uri == 'bitcoin:' + p2pkh + \
        '?amount=1.5&req-pop=app%3A'
    assert from_object.to_dict()['uri'] == from_object.uri
    assert EncodeRequest(pop="app:").pop == ProofOfPayment("app:")
    assert EncodeRequest().pop is None


@pytest.mark.parametrize(
    "amount",
    [-1, float('nan'), float('inf'), Decimal('-0'), True, "1,000", "abc",
     [1]])
def test_encode_invalid_amount(amount):
    with pytest.raises(ValueError) as e_info:
        encode_bip321(address=p2pkh, amount=amount)
    assert e_info.match("Invalid amount format")


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({'address': "invalid_bitcoin_address"}, "Invalid address"),
        ({'lightning': "invalid_invoice"}, "lightning"),
        ({'sp': "sp1invalid"}, "silent payment"),
        ({'ark': "ark1invalid"}, "Ark"),
        ({'address': p2pkh, 'req_pop': "https://example.com"},
         "Forbidden pop scheme"),
        ({'bc': addresses['testnet']['bech32']}, "network mismatch"),
        ({'label': "test"}, "No valid payment methods found"),
        ({}, "No valid payment methods found"),
    ])
def test_encode_invalid(kwargs, message):
    with pytest.raises(ValueError) as e_info:
        encode_bip321(**kwargs)
    assert message in str(e_info.value)


def test_encode_roundtrip():
    encoded = encode_bip321(address=p2pkh, amount=1.5, label="Test Label",
                            message="Test Message")
    assert encoded.uri == 'bitcoin:' + p2pkh + \
        '?amount=1.5&label=Test%20Label&message=Test%20Message'
    parsed = parse_bip321(encoded.uri)
    assert parsed.valid
    assert parsed.address == p2pkh
    assert parsed.amount == Decimal('1.5')
    assert parsed.label == "Test Label"
    assert parsed.message == "Test Message"
