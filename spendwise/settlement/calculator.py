"""
Settlement Calculator

DESIGN DECISION: Settlement is a pure derivation of a LedgerSnapshot.
Nothing is cached and nothing is mutated; the session recomputes it
after every change. Recomputing is linear in the number of expenses.

Even split is the only policy:
    fair_share = grand_total / participant_count
    balance    = total_spent - fair_share

so the balances of all participants always sum to zero (up to
floating-point drift). Positive balance = overpaid, should receive.
Negative balance = underpaid, owes.
"""

from collections.abc import Iterable
from uuid import UUID

from spendwise.models.ledger import Expense, LedgerSnapshot
from spendwise.models.settlement import (
    BalanceStatus,
    ParticipantSettlement,
    Settlement,
    Transfer,
)


DEFAULT_TOLERANCE = 1e-9


class SettlementPreconditionError(ValueError):
    """The snapshot cannot be settled (e.g., nobody to split with)."""
    pass


def total_spent(expenses: Iterable[Expense], participant_id: UUID) -> float:
    """Sum of the amounts paid by one participant. 0.0 if none."""
    return sum(
        (e.amount for e in expenses if e.participant_id == participant_id),
        0.0,
    )


def grand_total(expenses: Iterable[Expense]) -> float:
    """Sum of every expense amount."""
    return sum((e.amount for e in expenses), 0.0)


def fair_share(expenses: Iterable[Expense], participant_count: int) -> float:
    """
    What each participant should have paid under an even split.

    Raises:
        SettlementPreconditionError: If participant_count is less than 1
    """
    if participant_count < 1:
        raise SettlementPreconditionError(
            f"Cannot split expenses between {participant_count} participants"
        )
    return grand_total(expenses) / participant_count


def scaled_tolerance(tolerance: float, total: float) -> float:
    """
    Tolerance for balances derived from `total`.

    Float summation error grows with the size of the amounts, so the
    configured tolerance is relative to the grand total and becomes an
    absolute floor for totals below 1.
    """
    return tolerance * max(1.0, total)


def _status_for(balance: float, tolerance: float) -> BalanceStatus:
    if abs(balance) <= tolerance:
        return BalanceStatus.SETTLED
    return BalanceStatus.CREDIT if balance > 0 else BalanceStatus.DEBIT


def calculate_settlement(
    snapshot: LedgerSnapshot,
    tolerance: float = DEFAULT_TOLERANCE,
) -> Settlement:
    """
    Derive every participant's total and balance.

    Args:
        snapshot: The ledger to settle
        tolerance: Balances within this distance of zero count as settled,
                   scaled by the grand total once it exceeds 1

    Returns:
        Settlement with one row per participant, in participant order.
        Its tolerance is the scaled one.

    Raises:
        SettlementPreconditionError: If the snapshot has no participants
    """
    if tolerance <= 0:
        raise SettlementPreconditionError("Tolerance must be positive")

    total = grand_total(snapshot.expenses)
    share = fair_share(snapshot.expenses, len(snapshot.participants))
    tolerance = scaled_tolerance(tolerance, total)

    # One pass over the expenses instead of one per participant
    spent: dict[UUID, float] = {p.id: 0.0 for p in snapshot.participants}
    for expense in snapshot.expenses:
        spent[expense.participant_id] += expense.amount

    rows = []
    for participant in snapshot.participants:
        paid = spent[participant.id]
        balance = paid - share
        status = _status_for(balance, tolerance)
        rows.append(ParticipantSettlement(
            participant_id=participant.id,
            name=participant.name,
            total_spent=paid,
            balance=balance,
            owes=status == BalanceStatus.DEBIT,
            amount_settled=abs(balance),
            status=status,
        ))

    return Settlement(
        participants=rows,
        grand_total=total,
        fair_share=share,
        tolerance=tolerance,
    )


def suggest_transfers(settlement: Settlement) -> list[Transfer]:
    """
    Suggest who should pay whom to settle up.

    Greedy matching: the largest debtor pays the largest creditor as much
    as either side needs, repeated until one side runs out. This is not
    guaranteed to use the fewest possible payments, but never more than
    (participants - 1).
    """
    debtors = [
        [row, row.amount_settled]
        for row in settlement.participants
        if row.status == BalanceStatus.DEBIT
    ]
    creditors = [
        [row, row.amount_settled]
        for row in settlement.participants
        if row.status == BalanceStatus.CREDIT
    ]
    debtors.sort(key=lambda item: -item[1])
    creditors.sort(key=lambda item: -item[1])

    transfers = []
    i, j = 0, 0
    while i < len(debtors) and j < len(creditors):
        debtor, owed = debtors[i]
        creditor, due = creditors[j]
        amount = min(owed, due)
        if amount > settlement.tolerance:
            transfers.append(Transfer(
                from_participant_id=debtor.participant_id,
                from_name=debtor.name,
                to_participant_id=creditor.participant_id,
                to_name=creditor.name,
                amount=amount,
            ))
        debtors[i][1] = owed - amount
        creditors[j][1] = due - amount
        if debtors[i][1] <= settlement.tolerance:
            i += 1
        if creditors[j][1] <= settlement.tolerance:
            j += 1

    return transfers


def summarize_settlement(settlement: Settlement, currency_symbol: str = "$") -> str:
    """
    One line per suggested payment, or the all-settled message.

    Payments that would print as 0.00 are left out.
    """
    lines = [
        f"{t.from_name} owes {t.to_name} {currency_symbol}{t.amount:.2f}"
        for t in suggest_transfers(settlement)
        if f"{t.amount:.2f}" != "0.00"
    ]
    if not lines:
        return "All expenses are currently split evenly!"
    return "\n".join(lines)
