from collections import namedtuple
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Union

from bip321.amount import btc_to_sat

MAINNET = "mainnet"
TESTNET = "testnet"
REGTEST = "regtest"
SIGNET = "signet"
UNKNOWN = "unknown"

NETWORKS = (MAINNET, TESTNET, REGTEST, SIGNET)

ONCHAIN = "onchain"
LIGHTNING = "lightning"
OFFER = "offer"
SILENT_PAYMENT = "silent-payment"
ARK = "ark"

# result of every classifier in bip321.validators
Validation = namedtuple('Validation', ['valid', 'network', 'error'])
Validation.__new__.__defaults__ = (None, None)

PaymentMethod = namedtuple('PaymentMethod',
                           ['kind', 'value', 'network', 'valid', 'error'])
PaymentMethod.__new__.__defaults__ = (None,)

# pop=ProofOfPayment(value, False), req-pop=ProofOfPayment(value, True);
# absence of either is simply None.
ProofOfPayment = namedtuple('ProofOfPayment', ['value', 'required'])
ProofOfPayment.__new__.__defaults__ = (False,)


def validate_network(network: str) -> str:
    if network not in NETWORKS:
        raise ValueError("Unknown network: " + str(network))
    return network


class ParseResult(object):
    """ Aggregate outcome of parsing one BIP321 URI.

    `valid` starts out True and is only ever switched off;
    `errors` accumulates every problem found, in order.
    """

    def __init__(self):
        self.address = None  # type: Optional[str]
        self.network = None  # type: Optional[str]
        self.amount = None  # type: Optional[Decimal]
        self.label = None  # type: Optional[str]
        self.message = None  # type: Optional[str]
        self.pop = None  # type: Optional[str]
        self.pop_required = None  # type: Optional[bool]
        self.payment_methods = []  # type: List[PaymentMethod]
        self.required_params = []  # type: List[str]
        self.optional_params = {}  # type: Dict[str, List[str]]
        self.valid = True
        self.errors = []  # type: List[str]

    def add_error(self, msg: str, blocking: bool = True) -> None:
        self.errors.append(msg)
        if blocking:
            self.valid = False

    @property
    def amount_sat(self) -> Optional[int]:
        if self.amount is None:
            return None
        return btc_to_sat(self.amount)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'address': self.address,
            'network': self.network,
            'amount': self.amount,
            'label': self.label,
            'message': self.message,
            'pop': self.pop,
            'pop_required': self.pop_required,
            'payment_methods': [pm._asdict() for pm in self.payment_methods],
            'required_params': list(self.required_params),
            'optional_params': {k: list(v) for k, v in
                                self.optional_params.items()},
            'valid': self.valid,
            'errors': list(self.errors),
        }

    def __repr__(self):
        return "ParseResult(valid={}, methods={}, errors={})".format(
            self.valid, len(self.payment_methods), self.errors)


class EncodeResult(ParseResult):
    """ A ParseResult for the URI an encoder built, plus the URI.
    """

    def __init__(self, parsed: ParseResult, uri: str):
        super().__init__()
        self.__dict__.update(parsed.__dict__)
        self.uri = uri

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d['uri'] = self.uri
        return d


ParamValues = Union[None, str, List[str]]


def _as_list(values: ParamValues) -> List[str]:
    if values is None:
        return []
    if isinstance(values, str):
        return [values]
    return list(values)


class EncodeRequest(object):
    """ Structured input for encode_bip321.

    Every payment method field accepts a single string or a list of
    strings; `pop` and `req_pop` are mutually exclusive.
    """

    METHOD_FIELDS = ("lightning", "lno", "sp", "ark", "bc", "tb", "bcrt", "tbs")

    def __init__(self, address: Optional[str] = None,
                 amount: Union[None, int, float, Decimal, str] = None,
                 label: Optional[str] = None,
                 message: Optional[str] = None,
                 pop: Optional[str] = None,
                 req_pop: Optional[str] = None,
                 lightning: ParamValues = None,
                 lno: ParamValues = None,
                 sp: ParamValues = None,
                 ark: ParamValues = None,
                 bc: ParamValues = None,
                 tb: ParamValues = None,
                 bcrt: ParamValues = None,
                 tbs: ParamValues = None,
                 optional_params: Optional[Mapping[str, ParamValues]] = None):
        if pop is not None and req_pop is not None:
            raise ValueError("pop and req_pop are mutually exclusive")
        self.address = address
        self.amount = amount
        self.label = label
        self.message = message
        if pop is not None:
            self.pop = ProofOfPayment(pop, False)
        elif req_pop is not None:
            self.pop = ProofOfPayment(req_pop, True)
        else:
            self.pop = None
        self.lightning = _as_list(lightning)
        self.lno = _as_list(lno)
        self.sp = _as_list(sp)
        self.ark = _as_list(ark)
        self.bc = _as_list(bc)
        self.tb = _as_list(tb)
        self.bcrt = _as_list(bcrt)
        self.tbs = _as_list(tbs)
        self.optional_params = [(k, _as_list(v)) for k, v in
                                (optional_params or {}).items()]

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "EncodeRequest":
        return cls(**d)
