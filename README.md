# evmgas

Gas accounting for the EVM storage instructions `SLOAD` and `SSTORE`,
following the cost schedules of every protocol revision from Frontier to
Cancun: the legacy schedule, the net-metering schedule of Constantinople and
Istanbul, and the warm/cold access model of Berlin and later.

Everything lives in the module `evmgas.storage`.

## Installation

```
pip install evmgas
```

## Cost tables

`storage_cost_spec(rev)` returns a `StorageCostSpec` with the fields
`net_cost`, `warm_access`, `set`, `reset` and `clear` for a `Revision`.
`sstore_cost(rev, status)` returns a `StorageStoreCost` (`gas_cost`,
`gas_refund`) for the outcome of a write, given as a `StorageStatus`.

```python
from evmgas.storage import Revision, StorageStatus, storage_cost_spec, sstore_cost

spec = storage_cost_spec(Revision.LONDON)
print(spec.warm_access, spec.set, spec.reset, spec.clear)

cost = sstore_cost(Revision.LONDON, StorageStatus.ADDED)
print(cost.gas_cost, cost.gas_refund)
```

The cost returned by `sstore_cost` is the warm cost; `sstore` adds the cold
access cost on top when the slot was not yet accessed (Berlin and later).

## Executing storage instructions

`sload` and `sstore` operate on a stack (a Python list of integers, top of
stack last) and an `ExecutionState` holding the host, the revision
(`rev`), the remaining gas (`gas_left`), the account address (`recipient`),
the static flag (`is_static`) and the refund counter (`gas_refund`).
`InMemoryHost` is a ready-made host that keeps storage in a dictionary,
tracks the original value of each slot and reports warm/cold access.

```python
from evmgas.storage import ExecutionState, InMemoryHost, Revision, sload, sstore

host = InMemoryHost()
state = ExecutionState(host=host, rev=Revision.CANCUN, gas_left=100_000)

stack = [42, 1]      # value 42, key 1 (key on top)
sstore(stack, state)
print(state.gas_left, state.gas_refund)

stack = [1]
sload(stack, state)
print(stack)         # [42]
```

`sload` charges only the extra cost of a cold access; the base warm read
cost is left for the caller to charge.

`sstore` raises `StaticModeViolationError` when the state is static, and
from Istanbul onwards raises `OutOfGasError` if 2300 gas or less remains.
Any instruction whose cost exceeds `gas_left` raises `OutOfGasError`. Both
errors derive from `EVMError`.

## Custom hosts

Subclass `Host` and implement `access_storage` (returning an
`AccessStatus`), `get_storage` (returning 32 bytes) and `set_storage`
(returning a `StorageStatus`) to connect the instructions to your own state
backend.

## What this package does not do

It is not an interpreter: it does not decode or run bytecode, and it covers
no instruction other than `SLOAD` and `SSTORE`. It has no command-line
tool and no persistent storage; `InMemoryHost` holds state only for the
lifetime of the object.

## Running the tests

```
pip install -e ".[test]"
pytest
```