"""Exception hierarchy for the contract proxy layer."""

from typing import Any


class ContractProxyError(Exception):
    """Base exception for all contract proxy errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(ContractProxyError):
    """Raised when the proxy cannot be configured for the active network."""

    pass


class NotDeployedError(ConfigurationError):
    """Raised when no address is known for the active network."""

    def __init__(self, network_id: str | int, details: dict | None = None):
        super().__init__(f"Contract is not deployed to the network {network_id}", details)
        self.network_id = network_id


class NetworkError(ContractProxyError):
    """Raised when network/connection issues occur."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint


class ValidationError(ContractProxyError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class TransactionError(ContractProxyError):
    """Raised when a state-changing call cannot be completed."""

    def __init__(
        self,
        message: str,
        method: str | None = None,
        tx_hash: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.method = method
        self.tx_hash = tx_hash


class EstimationError(TransactionError):
    """Raised when gas estimation fails."""

    pass


class DryRunError(TransactionError):
    """Raised when the simulated call rejects the transaction."""

    pass


class SubmissionError(TransactionError):
    """Raised when the node refuses the transaction."""

    pass


class ReceiptTimeoutError(TransactionError):
    """Raised when the receipt does not arrive in time."""

    pass


class TransactionFailedError(TransactionError):
    """Raised when a mined transaction reports a failure status."""

    def __init__(
        self,
        message: str = "Transaction failed",
        method: str | None = None,
        tx_hash: str | None = None,
        receipt: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, method=method, tx_hash=tx_hash, details=details)
        self.receipt = receipt
