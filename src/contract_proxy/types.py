"""Type definitions and data models for contract interface descriptions."""

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from .exceptions import ValidationError


class StateMutability(str, Enum):
    """Solidity function state mutability."""

    VIEW = "view"
    PURE = "pure"
    NONPAYABLE = "nonpayable"
    PAYABLE = "payable"


READ_ONLY_MUTABILITY = frozenset({StateMutability.VIEW, StateMutability.PURE})

Address = str  # Ethereum address
Wei = int  # Amount in base units


@dataclass(frozen=True)
class OutputParam:
    """A single named/typed output of a contract function."""

    name: str
    type: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OutputParam":
        return cls(name=str(data.get("name") or ""), type=str(data.get("type") or ""))


@dataclass(frozen=True)
class MethodDescriptor:
    """Function entry of an ABI."""

    name: str
    state_mutability: StateMutability
    inputs: tuple[OutputParam, ...] = ()
    outputs: tuple[OutputParam, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MethodDescriptor":
        """Construct a descriptor from one ABI entry."""

        name = data.get("name")
        if not name:
            raise ValidationError("ABI function entry has no name", field="name", value=data)

        return cls(
            name=str(name),
            state_mutability=_parse_mutability(data),
            inputs=tuple(OutputParam.from_dict(item) for item in data.get("inputs") or ()),
            outputs=tuple(OutputParam.from_dict(item) for item in data.get("outputs") or ()),
        )

    @property
    def is_read_only(self) -> bool:
        return self.state_mutability in READ_ONLY_MUTABILITY

    @property
    def has_bool_success_output(self) -> bool:
        """Whether the function follows the ``returns (bool)`` success convention."""

        if len(self.outputs) != 1:
            return False
        output = self.outputs[0]
        return output.name == "" and output.type == "bool"


@dataclass(frozen=True)
class Artifact:
    """Contract build artifact: ABI plus per-network deployment records."""

    abi: tuple[Mapping[str, Any], ...]
    networks: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    contract_name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "abi", tuple(MappingProxyType(dict(e)) for e in self.abi))
        object.__setattr__(
            self,
            "networks",
            MappingProxyType(
                {str(key): MappingProxyType(dict(value)) for key, value in self.networks.items()}
            ),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Artifact":
        """Construct an artifact from a Truffle-style JSON mapping."""

        abi = data.get("abi")
        if not isinstance(abi, Sequence) or isinstance(abi, str | bytes):
            raise ValidationError("Artifact must contain an 'abi' list", field="abi", value=abi)

        networks = data.get("networks") or {}
        if not isinstance(networks, Mapping):
            raise ValidationError(
                "Artifact 'networks' must be a mapping", field="networks", value=networks
            )

        return cls(
            abi=tuple(abi),
            networks=networks,
            contract_name=data.get("contractName") or data.get("contract_name"),
        )

    @property
    def functions(self) -> Iterator[MethodDescriptor]:
        """Iterate function descriptors in declaration order."""

        for entry in self.abi:
            if entry.get("type", "function") == "function":
                yield MethodDescriptor.from_dict(entry)

    def deployment_address(self, network_id: str | int) -> Address | None:
        record = self.networks.get(str(network_id))
        if not record:
            return None
        address = record.get("address")
        return str(address) if address else None


@dataclass
class TxParams:
    """Transient transaction parameters for a single guarded call."""

    sender: Address
    value: Wei | None = None
    gas: int | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return the params in the shape web3 expects."""

        params: dict[str, Any] = {"from": self.sender}
        if self.value is not None:
            params["value"] = self.value
        if self.gas is not None:
            params["gas"] = self.gas
        return params


def _parse_mutability(data: Mapping[str, Any]) -> StateMutability:
    raw = data.get("stateMutability")
    if raw is None:
        # Pre-0.4.16 ABIs only carry the constant/payable flags
        if data.get("constant"):
            return StateMutability.VIEW
        if data.get("payable"):
            return StateMutability.PAYABLE
        return StateMutability.NONPAYABLE

    try:
        return StateMutability(str(raw))
    except ValueError:
        raise ValidationError(
            f"Unknown state mutability: {raw}", field="stateMutability", value=raw
        )
