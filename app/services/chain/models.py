"""
Chain call results.

``TransactionOutcome`` is what a mutation gets back from transaction sourcing:
either a ``Confirmed`` receipt from a real provider call or a
``LocalFallback`` hash generated when no provider identity is connected or the
call failed. Callers branch on the type instead of checking for ``None``.
"""
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class ChainIdentity:
    address: str
    provider: str


@dataclass(frozen=True)
class ChainReceipt:
    transaction_hash: str
    external_id: Optional[str] = None
    block_number: Optional[int] = None
    gas_used: Optional[str] = None


@dataclass(frozen=True)
class Confirmed:
    transaction_hash: str
    from_address: str
    block_number: Optional[int] = None
    gas_used: Optional[str] = None
    external_id: Optional[str] = None


@dataclass(frozen=True)
class LocalFallback:
    transaction_hash: str
    reason: str


TransactionOutcome = Union[Confirmed, LocalFallback]
