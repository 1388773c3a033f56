import logging

from .BGN import BGN, BGNPrivateKey, BGNPublicKey
from .Benaloh import Benaloh, BenalohPrivateKey, BenalohPublicKey
from .Paillier import Paillier, PaillierPrivateKey, PaillierPublicKey
from .config import DEFAULT_CONFIG, SchemeConfig
from .errors import (DecryptionExhaustedError, ErrorKind,
                     InvalidCiphertextError, InvalidPlaintextError,
                     KeyGenerationError, NonInvertibleElementError, PHEError,
                     PlaintextOutOfRangeError)
from .pairing import BilinearGroup, GElement, GTElement, TypeA1Group
from .scheme import HomomorphicScheme, KeyPair, Result

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
