from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from splitledger.core.exceptions import BalanceOverflowError

# Balances are stored and serialized as signed 64-bit integers
INT64_MAX = 2**63 - 1
INT64_MIN = -(2**63)

DEFAULT_DUST_THRESHOLD = 1


@dataclass(frozen=True)
class SplitRecord:
    member_id: int
    amount: int


@dataclass(frozen=True)
class ExpenseRecord:
    id: int
    payer_id: int
    amount: int
    splits: Tuple[SplitRecord, ...] = ()
    created_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


@dataclass(frozen=True)
class SettlementRecord:
    id: int
    from_id: int
    to_id: int
    amount: int
    status: str
    created_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


@dataclass(frozen=True)
class Transfer:
    from_id: int
    to_id: int
    amount: int


@dataclass
class SettlementPlan:
    transfers: List[Transfer] = field(default_factory=list)
    optimization_savings: int = 0


def _credit(balances: Dict[int, int], member_id: int, delta: int):
    value = balances[member_id] + delta
    if value > INT64_MAX or value < INT64_MIN:
        raise BalanceOverflowError(member_id, value)
    balances[member_id] = value


def aggregate_balances(
    expenses: Iterable[ExpenseRecord],
    settlements: Iterable[SettlementRecord] = (),
) -> Dict[int, int]:
    """
    Fold expenses and settlements into a signed balance per member.

    Positive means the member is owed money, negative means they owe.
    Records are assumed to be pre-filtered (in scope, not soft-deleted,
    accepted settlement status); nothing is validated here.
    """
    balances: Dict[int, int] = defaultdict(int)

    for expense in expenses:
        _credit(balances, expense.payer_id, expense.amount)
        for split in expense.splits:
            _credit(balances, split.member_id, -split.amount)

    # A payment shrinks the payer's debt and the payee's credit
    for settlement in settlements:
        _credit(balances, settlement.from_id, settlement.amount)
        _credit(balances, settlement.to_id, -settlement.amount)

    return dict(balances)


def _partition(balances: Dict[int, int], dust_threshold: int):
    debtors = []
    creditors = []

    for uid, bal in balances.items():
        if bal < -dust_threshold:
            debtors.append([uid, -bal])
        elif bal > dust_threshold:
            creditors.append([uid, bal])

    # sort() is stable, ties keep the map's iteration order
    debtors.sort(key=lambda x: x[1], reverse=True)
    creditors.sort(key=lambda x: x[1], reverse=True)

    return debtors, creditors


def _greedy_match(debtors, creditors, dust_threshold: int) -> List[Transfer]:
    transfers: List[Transfer] = []
    # with a zero threshold a side is only exhausted at exactly 0
    floor = max(dust_threshold, 1)
    di = ci = 0

    while di < len(debtors) and ci < len(creditors):
        debt_id, debt_amt = debtors[di]
        cred_id, cred_amt = creditors[ci]

        pay_amt = min(debt_amt, cred_amt)
        if pay_amt > dust_threshold:
            transfers.append(Transfer(debt_id, cred_id, round(pay_amt)))

        debtors[di][1] = debt_amt - pay_amt
        creditors[ci][1] = cred_amt - pay_amt

        if debtors[di][1] < floor:
            di += 1
        if creditors[ci][1] < floor:
            ci += 1

    return transfers


def net_balances(
    balances: Dict[int, int],
    dust_threshold: int = DEFAULT_DUST_THRESHOLD,
) -> List[Transfer]:
    """
    Greedy two-pointer netting: the largest debtor pays the largest creditor
    until one of them is cleared. Emits at most N-1 transfers for N non-zero
    balances; not a proven minimum.
    """
    debtors, creditors = _partition(balances, dust_threshold)
    return _greedy_match(debtors, creditors, dust_threshold)


def optimize_transfers(
    balances: Dict[int, int],
    dust_threshold: int = DEFAULT_DUST_THRESHOLD,
) -> List[Transfer]:
    """Pair exactly matching debtor/creditor amounts first, then net the rest greedily."""
    debtors, creditors = _partition(balances, dust_threshold)

    transfers: List[Transfer] = []
    used_creditors = set()
    used_debtors = set()

    for di, (debt_id, debt_amt) in enumerate(debtors):
        for ci, (cred_id, cred_amt) in enumerate(creditors):
            if ci in used_creditors:
                continue
            if debt_amt == cred_amt:
                transfers.append(Transfer(debt_id, cred_id, debt_amt))
                used_debtors.add(di)
                used_creditors.add(ci)
                break

    rem_debtors = [d for i, d in enumerate(debtors) if i not in used_debtors]
    rem_creditors = [c for i, c in enumerate(creditors) if i not in used_creditors]

    transfers.extend(_greedy_match(rem_debtors, rem_creditors, dust_threshold))
    return transfers


def plan_settlement(
    balances: Dict[int, int],
    dust_threshold: int = DEFAULT_DUST_THRESHOLD,
) -> SettlementPlan:
    greedy = net_balances(balances, dust_threshold)
    optimized = optimize_transfers(balances, dust_threshold)

    if len(optimized) < len(greedy):
        return SettlementPlan(optimized, len(greedy) - len(optimized))
    return SettlementPlan(greedy, 0)


def equal_split(total: int, count: int) -> List[int]:
    # extra minor units go to the first shares
    if count <= 0:
        return []

    base, remainder = divmod(total, count)
    return [base + 1 if i < remainder else base for i in range(count)]
