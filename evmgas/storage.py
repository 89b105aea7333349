"""Gas metering and execution of the SLOAD and SSTORE instructions."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from enum import IntEnum

WARM_STORAGE_READ_COST = 100
COLD_SLOAD_COST = 2100

_ZERO32 = bytes(32)


class Revision(IntEnum):
    """Protocol revisions, in chronological order."""

    FRONTIER = 0
    HOMESTEAD = 1
    TANGERINE_WHISTLE = 2
    SPURIOUS_DRAGON = 3
    BYZANTIUM = 4
    CONSTANTINOPLE = 5
    PETERSBURG = 6
    ISTANBUL = 7
    BERLIN = 8
    LONDON = 9
    PARIS = 10
    SHANGHAI = 11
    CANCUN = 12


class StorageStatus(IntEnum):
    """Effect of a storage write relative to the original and current values."""

    ASSIGNED = 0
    ADDED = 1
    DELETED = 2
    MODIFIED = 3
    DELETED_ADDED = 4
    MODIFIED_DELETED = 5
    DELETED_RESTORED = 6
    ADDED_DELETED = 7
    MODIFIED_RESTORED = 8


class AccessStatus(IntEnum):
    WARM = 0
    COLD = 1


@dataclass(frozen=True)
class StorageCostSpec:
    """Gas cost parameters of storage instructions for one revision."""

    net_cost: bool
    warm_access: int
    set: int
    reset: int
    clear: int


@dataclass(frozen=True)
class StorageStoreCost:
    gas_cost: int
    gas_refund: int


class EVMError(Exception):
    """Base class of instruction execution failures."""


class OutOfGasError(EVMError):
    pass


class StaticModeViolationError(EVMError):
    pass


_LEGACY = StorageCostSpec(False, 200, 20000, 5000, 15000)
_BERLIN = StorageCostSpec(True, WARM_STORAGE_READ_COST, 20000, 5000 - COLD_SLOAD_COST, 15000)
_LONDON = StorageCostSpec(True, WARM_STORAGE_READ_COST, 20000, 5000 - COLD_SLOAD_COST, 4800)

_COST_SPECS = {rev: _LEGACY for rev in Revision}
_COST_SPECS.update({
    Revision.CONSTANTINOPLE: StorageCostSpec(True, 200, 20000, 5000, 15000),
    Revision.ISTANBUL: StorageCostSpec(True, 800, 20000, 5000, 15000),
    Revision.BERLIN: _BERLIN,
    Revision.LONDON: _LONDON,
    Revision.PARIS: _LONDON,
    Revision.SHANGHAI: _LONDON,
    Revision.CANCUN: _LONDON,
})


def _store_costs(c: StorageCostSpec) -> dict[StorageStatus, StorageStoreCost]:
    S, C = StorageStatus, StorageStoreCost
    added, deleted, modified = C(c.set, 0), C(c.reset, c.clear), C(c.reset, 0)
    if not c.net_cost:
        return {
            S.ASSIGNED: modified, S.ADDED: added, S.DELETED: deleted,
            S.MODIFIED: modified, S.DELETED_ADDED: added, S.MODIFIED_DELETED: deleted,
            S.DELETED_RESTORED: added, S.ADDED_DELETED: deleted, S.MODIFIED_RESTORED: modified,
        }
    w = c.warm_access
    return {
        S.ASSIGNED: C(w, 0), S.ADDED: added, S.DELETED: deleted, S.MODIFIED: modified,
        S.DELETED_ADDED: C(w, -c.clear), S.MODIFIED_DELETED: C(w, c.clear),
        S.DELETED_RESTORED: C(w, c.reset - w - c.clear),
        S.ADDED_DELETED: C(w, c.set - w), S.MODIFIED_RESTORED: C(w, c.reset - w),
    }


_SSTORE_COSTS = {rev: _store_costs(spec) for rev, spec in _COST_SPECS.items()}


def storage_cost_spec(rev: Revision) -> StorageCostSpec:
    """Return the storage gas cost parameters of a revision."""
    return _COST_SPECS[Revision(rev)]


def sstore_cost(rev: Revision, status: StorageStatus) -> StorageStoreCost:
    """Return the warm gas cost and refund of an SSTORE with the given outcome."""
    return _SSTORE_COSTS[Revision(rev)][StorageStatus(status)]


class Host(abc.ABC):
    """Access to account storage, as seen by the interpreter."""

    @abc.abstractmethod
    def access_storage(self, address: bytes, key: bytes) -> AccessStatus:
        """Mark a slot as accessed and report whether it was cold before."""

    @abc.abstractmethod
    def get_storage(self, address: bytes, key: bytes) -> bytes:
        """Return the 32-byte value of a slot."""

    @abc.abstractmethod
    def set_storage(self, address: bytes, key: bytes, value: bytes) -> StorageStatus:
        """Write a slot and report the kind of change made."""


class InMemoryHost(Host):
    """A host keeping storage of a single transaction in a dictionary."""

    def __init__(self, storage: dict[tuple[bytes, bytes], bytes] | None = None) -> None:
        self._original = dict(storage or {})
        self._current = dict(self._original)
        self._accessed: set[tuple[bytes, bytes]] = set()

    def access_storage(self, address: bytes, key: bytes) -> AccessStatus:
        if (address, key) in self._accessed:
            return AccessStatus.WARM
        self._accessed.add((address, key))
        return AccessStatus.COLD

    def get_storage(self, address: bytes, key: bytes) -> bytes:
        return self._current.get((address, key), _ZERO32)

    def set_storage(self, address: bytes, key: bytes, value: bytes) -> StorageStatus:
        o = self._original.get((address, key), _ZERO32)
        c = self.get_storage(address, key)
        self._current[(address, key)] = value
        S, z = StorageStatus, _ZERO32
        if value == c:
            return S.ASSIGNED
        if o == c:
            return S.ADDED if o == z else S.DELETED if value == z else S.MODIFIED
        if o == z:
            return S.ADDED_DELETED if value == z else S.ASSIGNED
        if c == z:
            return S.DELETED_RESTORED if value == o else S.DELETED_ADDED
        if value == z:
            return S.MODIFIED_DELETED
        return S.MODIFIED_RESTORED if value == o else S.ASSIGNED


@dataclass
class ExecutionState:
    """The parts of an execution frame the storage instructions use."""

    host: Host
    rev: Revision
    gas_left: int
    recipient: bytes = bytes(20)
    is_static: bool = False
    gas_refund: int = 0

    def in_static_mode(self) -> bool:
        return self.is_static


def _word(value: int) -> bytes:
    return (value % (1 << 256)).to_bytes(32, "big")


def _is_cold(state: ExecutionState, key: bytes) -> bool:
    return (
        state.rev >= Revision.BERLIN
        and state.host.access_storage(state.recipient, key) == AccessStatus.COLD
    )


def _charge(state: ExecutionState, gas: int) -> None:
    state.gas_left -= gas
    if state.gas_left < 0:
        raise OutOfGasError("out of gas")


def sload(stack: list[int], state: ExecutionState) -> None:
    """Replace the key on top of the stack with the stored value.

    Only the extra cold access cost is charged; the warm cost is charged by the caller.
    """
    key = _word(stack[-1])
    if _is_cold(state, key):
        _charge(state, COLD_SLOAD_COST - WARM_STORAGE_READ_COST)
    stack[-1] = int.from_bytes(state.host.get_storage(state.recipient, key), "big")


def sstore(stack: list[int], state: ExecutionState) -> None:
    """Pop a key and a value from the stack and store the value."""
    if state.in_static_mode():
        raise StaticModeViolationError("static mode violation")
    if state.rev >= Revision.ISTANBUL and state.gas_left <= 2300:
        raise OutOfGasError("out of gas")
    key = _word(stack.pop())
    value = _word(stack.pop())
    cold = COLD_SLOAD_COST if _is_cold(state, key) else 0
    cost = sstore_cost(state.rev, state.host.set_storage(state.recipient, key, value))
    _charge(state, cost.gas_cost + cold)
    state.gas_refund += cost.gas_refund