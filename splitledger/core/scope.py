from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from splitledger.core.ledger import (
    DEFAULT_DUST_THRESHOLD,
    ExpenseRecord,
    SettlementRecord,
    Transfer,
    aggregate_balances,
    net_balances,
)

ACCEPTED_SETTLEMENT_STATUSES = frozenset({"completed", "confirmed"})


@dataclass
class ScopeRecords:
    expenses: List[ExpenseRecord] = field(default_factory=list)
    settlements: List[SettlementRecord] = field(default_factory=list)


@dataclass
class ScopeResult:
    balances: Dict[int, int]
    transfers: List[Transfer]
    total_spent: int


def select_records(
    expenses: Iterable[ExpenseRecord],
    settlements: Iterable[SettlementRecord] = (),
) -> ScopeRecords:
    """Drop soft-deleted records and settlements that were never completed."""
    return ScopeRecords(
        expenses=[e for e in expenses if e.deleted_at is None],
        settlements=[
            s
            for s in settlements
            if s.deleted_at is None and s.status in ACCEPTED_SETTLEMENT_STATUSES
        ],
    )


def merge_scopes(scopes: Iterable[ScopeRecords]) -> ScopeRecords:
    """
    Union several trip scopes into one record set.

    Each trip's settlements are carried alongside that trip's expenses, so a
    payment recorded in one trip is never matched against another trip's
    records before aggregation; the union only sums what each trip contributes.
    """
    merged = ScopeRecords()
    for scope in scopes:
        merged.expenses.extend(scope.expenses)
        merged.settlements.extend(scope.settlements)
    return merged


def compute_scope(
    records: ScopeRecords,
    dust_threshold: int = DEFAULT_DUST_THRESHOLD,
) -> ScopeResult:
    balances = aggregate_balances(records.expenses, records.settlements)
    return ScopeResult(
        balances=balances,
        transfers=net_balances(balances, dust_threshold),
        total_spent=sum(e.amount for e in records.expenses),
    )
