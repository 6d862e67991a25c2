
from .support import (get_log, bip321print, set_logging_level,
                      set_logging_color, BIP321_VERSION)
from .amount import (btc_to_sat, sat_to_btc, is_amount_str, parse_amount,
                     to_amount, amount_to_uri_str)
from .types import (PaymentMethod, ParseResult, EncodeResult, EncodeRequest,
                    ProofOfPayment, Validation, validate_network, NETWORKS,
                    MAINNET, TESTNET, REGTEST, SIGNET, UNKNOWN,
                    ONCHAIN, LIGHTNING, OFFER, SILENT_PAYMENT, ARK)
from .validators import (detect_address_network, validate_bitcoin_address,
                         validate_lightning_invoice, validate_bolt12_offer,
                         validate_silent_payment_address,
                         validate_ark_address, validate_pop_uri,
                         FORBIDDEN_POP_SCHEMES)
from .offers import decode_offer, OfferDecodeError
from .uri import (is_bip321_uri, parse_bip321, encode_bip321,
                  tokenize_query, networks_compatible,
                  get_payment_methods_by_network, get_valid_payment_methods,
                  format_payment_methods_summary)
from .configure import (load_program_config, load_test_config,
                        bip321_single, get_network, set_config)
