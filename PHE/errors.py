import enum


class ErrorKind(enum.Enum):
    INVALID_PLAINTEXT = "InvalidPlaintext"
    INVALID_CIPHERTEXT = "InvalidCiphertext"
    DECRYPTION_EXHAUSTED = "DecryptionExhausted"
    NON_INVERTIBLE_ELEMENT = "NonInvertibleElement"


class PHEError(ValueError):
    """Base class of every failure a scheme operation can report."""
    kind = None


class InvalidPlaintextError(PHEError):
    kind = ErrorKind.INVALID_PLAINTEXT


class PlaintextOutOfRangeError(InvalidPlaintextError):
    """Plaintext above the bound of a search-decrypted scheme (BGN)."""


class InvalidCiphertextError(PHEError):
    kind = ErrorKind.INVALID_CIPHERTEXT


class DecryptionExhaustedError(PHEError):
    kind = ErrorKind.DECRYPTION_EXHAUSTED


class NonInvertibleElementError(PHEError):
    kind = ErrorKind.NON_INVERTIBLE_ELEMENT


class KeyGenerationError(RuntimeError):
    """
    Raised when a key-generation rejection loop hits its attempt ceiling.
    This is a configuration problem (bad parameters or a broken random
    source), not something the caller should retry.
    """


_ERRORS_BY_KIND = {
    ErrorKind.INVALID_PLAINTEXT: InvalidPlaintextError,
    ErrorKind.INVALID_CIPHERTEXT: InvalidCiphertextError,
    ErrorKind.DECRYPTION_EXHAUSTED: DecryptionExhaustedError,
    ErrorKind.NON_INVERTIBLE_ELEMENT: NonInvertibleElementError,
}


def error_for(kind):
    """
    Map an error kind to its exception class.
    :param kind: ErrorKind
    :return: the PHEError subclass raised by Result.unwrap()
    """
    return _ERRORS_BY_KIND[kind]
