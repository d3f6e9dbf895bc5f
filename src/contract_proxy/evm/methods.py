"""Classification of ABI functions into reads and guarded writes."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from ..types import Artifact, MethodDescriptor

logger = logging.getLogger(__name__)


class MethodKind(Enum):
    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class MethodEntry:
    name: str
    kind: MethodKind
    descriptor: MethodDescriptor


class MethodRegistry:
    """Name -> :class:`MethodEntry` lookup built once from an artifact.

    Overloaded functions share a name in the ABI; only the first declaration
    is reachable.
    """

    def __init__(self, entries: dict[str, MethodEntry]):
        self._entries = entries

    @classmethod
    def from_artifact(cls, artifact: Artifact) -> MethodRegistry:
        entries: dict[str, MethodEntry] = {}
        for descriptor in artifact.functions:
            if descriptor.name in entries:
                logger.debug("Ignoring overload of %s", descriptor.name)
                continue
            kind = MethodKind.READ if descriptor.is_read_only else MethodKind.WRITE
            entries[descriptor.name] = MethodEntry(descriptor.name, kind, descriptor)
        return cls(entries)

    def get(self, name: str) -> MethodEntry | None:
        return self._entries.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[MethodEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
