"""
Errors - Failure taxonomy for the contribution proof workflow
Role: Gives every terminal condition of a proof request its own exception type

Callers catch ProofRequestError for anything the workflow raises on purpose.
Any other exception is an unknown failure and propagates unchanged.
"""

from typing import Any, Optional


class ProofRequestError(RuntimeError):
    """Base class for expected proof request failures"""


class ConfigurationError(ProofRequestError):
    """Required setting (contract address, RPC URL, ...) is missing or invalid"""


class UnauthenticatedError(ProofRequestError):
    """No wallet identity available when the workflow starts"""


class TransactionError(ProofRequestError):
    """Submission failed, timed out or reverted"""

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        super().__init__(message)
        self.tx_hash = tx_hash


class ChainReadError(ProofRequestError):
    """A contract read raised"""


class NotFoundError(ProofRequestError):
    pass


class NoJobsFoundError(NotFoundError):
    pass


class JobNotFoundError(NotFoundError):
    pass


class TeeNotFoundError(NotFoundError):
    pass


class RemoteServiceError(ProofRequestError):
    """TEE executor answered with a non-2xx status or could not be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
