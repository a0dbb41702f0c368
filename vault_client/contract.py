"""
Statically typed view of the SimpleVault contract interface.

The client talks to the contract through a handful of functions and two
events. validate_abi() checks a compiled ABI against that list once, at
startup, so call sites can use the names below without re-checking.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .exceptions import ContractInterfaceError

BALANCE_OF = "balanceOf"
LOCK_PERIOD = "lockPeriod"
LAST_DEPOSIT_TIME = "lastDepositTime"
DEPOSIT = "deposit"
WITHDRAW = "withdraw"

DEPOSITED = "Deposited"
WITHDRAWN = "Withdrawn"


@dataclass(frozen=True)
class FunctionSpec:
    """Contract function the client calls"""
    name: str
    inputs: Tuple[str, ...]
    outputs: Tuple[str, ...]
    mutability: str


@dataclass(frozen=True)
class EventParam:
    name: str
    type: str
    indexed: bool = False


@dataclass(frozen=True)
class EventSpec:
    """Contract event the client scans for"""
    name: str
    params: Tuple[EventParam, ...]

    def signature(self) -> str:
        """Human-readable signature, e.g. 'event Deposited(address indexed user, uint256 amount)'"""
        rendered = []
        for param in self.params:
            parts = [param.type]
            if param.indexed:
                parts.append("indexed")
            parts.append(param.name)
            rendered.append(" ".join(parts))
        return f"event {self.name}({', '.join(rendered)})"


@dataclass(frozen=True)
class VaultInterface:
    functions: Tuple[FunctionSpec, ...]
    events: Tuple[EventSpec, ...]

    def function(self, name: str) -> FunctionSpec:
        for spec in self.functions:
            if spec.name == name:
                return spec
        raise KeyError(name)

    def event(self, name: str) -> EventSpec:
        for spec in self.events:
            if spec.name == name:
                return spec
        raise KeyError(name)


VAULT_INTERFACE = VaultInterface(
    functions=(
        FunctionSpec(BALANCE_OF, ("address",), ("uint256",), "view"),
        FunctionSpec(LOCK_PERIOD, (), ("uint256",), "view"),
        FunctionSpec(LAST_DEPOSIT_TIME, ("address",), ("uint256",), "view"),
        FunctionSpec(DEPOSIT, (), (), "payable"),
        FunctionSpec(WITHDRAW, ("uint256",), (), "nonpayable"),
    ),
    events=(
        EventSpec(DEPOSITED, (EventParam("user", "address", True), EventParam("amount", "uint256"))),
        EventSpec(WITHDRAWN, (EventParam("user", "address", True), EventParam("amount", "uint256"))),
    ),
)


def event_signature(name: str) -> str:
    return VAULT_INTERFACE.event(name).signature()


def load_abi(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Read an ABI list from a JSON file (plain ABI or Hardhat artifact)"""
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    return _abi_entries(data)


def _abi_entries(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, dict):
        data = data.get('abi')
    if not isinstance(data, list):
        raise ContractInterfaceError(["artifact does not contain an ABI list"])
    return [entry for entry in data if isinstance(entry, dict)]


def _types(params: Optional[list]) -> Tuple[str, ...]:
    return tuple(p.get('type', '') for p in params or [])


def _state_mutability(entry: Dict[str, Any]) -> str:
    if 'stateMutability' in entry:
        return entry['stateMutability']
    # pre-0.5 solc output
    if entry.get('constant'):
        return "view"
    return "payable" if entry.get('payable') else "nonpayable"


def validate_abi(abi: Any, interface: VaultInterface = VAULT_INTERFACE) -> List[Dict[str, Any]]:
    """Check that a compiled ABI exposes every function and event the client uses.

    Accepts either the ABI list itself or an artifact dict with an 'abi' key.
    Returns the ABI entries; raises ContractInterfaceError listing every
    problem found.
    """
    entries = _abi_entries(abi)
    functions = {e.get('name'): e for e in entries if e.get('type') == 'function'}
    events = {e.get('name'): e for e in entries if e.get('type') == 'event'}
    problems = []

    for spec in interface.functions:
        entry = functions.get(spec.name)
        if entry is None:
            problems.append(f"missing function {spec.name}")
            continue
        if _types(entry.get('inputs')) != spec.inputs:
            problems.append(f"function {spec.name} takes {_types(entry.get('inputs'))}, expected {spec.inputs}")
        if _types(entry.get('outputs')) != spec.outputs:
            problems.append(f"function {spec.name} returns {_types(entry.get('outputs'))}, expected {spec.outputs}")
        mutability = _state_mutability(entry)
        if mutability != spec.mutability:
            problems.append(f"function {spec.name} is {mutability}, expected {spec.mutability}")

    for spec in interface.events:
        entry = events.get(spec.name)
        if entry is None:
            problems.append(f"missing event {spec.name}")
            continue
        params = tuple(
            EventParam(p.get('name', ''), p.get('type', ''), bool(p.get('indexed')))
            for p in entry.get('inputs') or []
        )
        if params != spec.params:
            problems.append(f"event {spec.name} has signature {EventSpec(spec.name, params).signature()}, "
                            f"expected {spec.signature()}")

    if problems:
        raise ContractInterfaceError(problems)
    return entries
