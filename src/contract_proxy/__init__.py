"""Contract Proxy - ABI-driven access to deployed EVM contracts.

This library turns a contract build artifact into an object whose attributes
are the contract's functions: reads are plain calls, writes go through gas
estimation, a dry run, submission and receipt verification.
"""

from .contract import NATIVE_OPERATIONS, ContractProxy
from .evm.config import ClientConfig, NetworkParams
from .evm.connections import Web3Connections
from .evm.methods import MethodEntry, MethodKind, MethodRegistry
from .evm.transactions import GAS_SAFETY_MULTIPLIER, TransactionGuard, TxState, is_failed_status
from .exceptions import (
    ConfigurationError,
    ContractProxyError,
    DryRunError,
    EstimationError,
    NetworkError,
    NotDeployedError,
    ReceiptTimeoutError,
    SubmissionError,
    TransactionError,
    TransactionFailedError,
    ValidationError,
)
from .types import (
    Address,
    Artifact,
    MethodDescriptor,
    OutputParam,
    StateMutability,
    TxParams,
    Wei,
)
from .utils import (
    from_wei,
    is_empty_address,
    to_ascii,
    to_bytes,
    to_datetime,
    to_list,
    to_unix_ts,
    to_wei,
)

__version__ = "0.1.0"

__all__ = [
    # Proxy
    "ContractProxy",
    "NATIVE_OPERATIONS",
    # Configuration and transport
    "ClientConfig",
    "NetworkParams",
    "Web3Connections",
    # Dispatch
    "MethodEntry",
    "MethodKind",
    "MethodRegistry",
    "TransactionGuard",
    "TxState",
    "GAS_SAFETY_MULTIPLIER",
    "is_failed_status",
    # Types
    "Address",
    "Artifact",
    "MethodDescriptor",
    "OutputParam",
    "StateMutability",
    "TxParams",
    "Wei",
    # Exceptions
    "ContractProxyError",
    "ConfigurationError",
    "NotDeployedError",
    "NetworkError",
    "ValidationError",
    "TransactionError",
    "EstimationError",
    "DryRunError",
    "SubmissionError",
    "ReceiptTimeoutError",
    "TransactionFailedError",
    # Utility functions
    "to_bytes",
    "to_ascii",
    "to_unix_ts",
    "to_datetime",
    "to_wei",
    "from_wei",
    "to_list",
    "is_empty_address",
]
