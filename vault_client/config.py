"""
Client configuration: which vault to talk to and how to scan its history.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv

from .amounts import ETHER_DECIMALS
from .contract import load_abi, validate_abi

# Address Hardhat assigns to the first contract deployed on a fresh local node
LOCAL_DEV_VAULT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"

_ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")


@dataclass(frozen=True)
class VaultConfig:
    """Immutable configuration handed to the vault client at construction"""
    contract_address: str
    from_block: int = 0
    to_block: Union[int, str] = "latest"
    decimals: int = ETHER_DECIMALS
    abi_path: Optional[Path] = None
    abi: List[dict] = field(default_factory=list, repr=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.contract_address, str) or not _ADDRESS_RE.fullmatch(self.contract_address):
            raise ValueError(f"Invalid vault contract address: {self.contract_address!r}")
        if self.from_block < 0:
            raise ValueError("from_block must not be negative")
        if self.decimals < 0:
            raise ValueError("decimals must not be negative")

        # the ABI is checked here, once, so no call site has to
        if self.abi_path is not None:
            object.__setattr__(self, 'abi_path', Path(self.abi_path))
            object.__setattr__(self, 'abi', validate_abi(load_abi(self.abi_path)))
        elif self.abi:
            object.__setattr__(self, 'abi', validate_abi(self.abi))

    @classmethod
    def local_dev(cls, abi_path: Optional[Union[str, Path]] = None) -> 'VaultConfig':
        """Vault deployed on a fresh local Hardhat node"""
        return cls(
            contract_address=LOCAL_DEV_VAULT_ADDRESS,
            abi_path=Path(abi_path) if abi_path else None,
        )

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> 'VaultConfig':
        """Build the configuration from VAULT_* environment variables (and .env)"""
        load_dotenv(env_file)

        abi_path = (os.getenv("VAULT_ABI_PATH") or "").strip()
        from_block = (os.getenv("VAULT_FROM_BLOCK") or "").strip()
        return cls(
            contract_address=(os.getenv("VAULT_CONTRACT_ADDRESS") or LOCAL_DEV_VAULT_ADDRESS).strip(),
            from_block=int(from_block) if from_block else 0,
            abi_path=Path(abi_path) if abi_path else None,
        )
