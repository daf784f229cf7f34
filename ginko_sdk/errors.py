"""Custom exceptions for the Ginko SDK."""

from typing import Optional


class GinkoError(Exception):
    """Base exception for all Ginko SDK errors."""

    pass


class ValidationError(GinkoError):
    """Raised when caller-supplied parameters violate a protocol invariant."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Invalid parameter `{field}`: {message}")


class EncodingError(GinkoError):
    """Raised when a nonce or fixed-width field cannot be encoded or decoded."""

    def __init__(self, message: str, value: Optional[str] = None):
        self.message = message
        self.value = value
        super().__init__(message)


class ParseError(GinkoError):
    """Raised when a human-entered value cannot be parsed."""

    def __init__(self, value: str, message: str):
        self.value = value
        self.message = message
        super().__init__(f"Cannot parse {value!r}: {message}")


class ChainReadError(GinkoError):
    """Base class for account fetch and decode failures."""

    pass


class AccountNotFoundError(ChainReadError):
    """Raised when an account is not found on-chain."""

    def __init__(self, address: str, kind: str = "Account"):
        self.address = address
        self.kind = kind
        super().__init__(f"{kind} not found: {address}")


class InvalidDiscriminatorError(ChainReadError):
    """Raised when account data has an invalid discriminator."""

    def __init__(self, expected: bytes, actual: bytes):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Invalid discriminator: expected {expected!r}, got {actual!r}"
        )


class InvalidAccountDataError(ChainReadError):
    """Raised when account data cannot be deserialized."""

    def __init__(self, message: str):
        super().__init__(f"Invalid account data: {message}")


class SimulationError(GinkoError):
    """Raised when transaction simulation reports a program failure."""

    def __init__(self, message: str, logs: Optional[list] = None):
        self.message = message
        self.logs = logs or []
        super().__init__(f"Simulation failed: {message}")


class TransactionFailedError(GinkoError):
    """Raised when a submitted transaction definitively failed."""

    def __init__(self, signature: str, err: object):
        self.signature = signature
        self.err = err
        super().__init__(f"Transaction {signature} failed: {err}")


class ConfirmationTimeoutError(GinkoError):
    """Raised when the blockhash expired before the transaction confirmed.

    This is not a definite failure: the transaction may still land. Callers
    decide whether to resubmit.
    """

    def __init__(self, signature: str, last_valid_block_height: int, elapsed: float):
        self.signature = signature
        self.last_valid_block_height = last_valid_block_height
        self.elapsed = elapsed
        super().__init__(
            f"Blockhash expired before {signature} was confirmed "
            f"(last valid height {last_valid_block_height}, {elapsed:.1f}s elapsed)"
        )


class BuildError(GinkoError):
    """Raised when an external collaborator cannot produce an instruction."""

    def __init__(self, message: str):
        super().__init__(message)


class ConfigError(GinkoError):
    """Raised when required configuration is missing or malformed."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"{key}: {message}")
