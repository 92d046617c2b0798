"""
Settlement Models

Output of the settlement calculator and the dashboard read-model.
Nothing here is persisted: every instance is derived from a
LedgerSnapshot on demand.
"""

from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import Field

from spendwise.models.ledger import Expense, LedgerModel


class BalanceStatus(str, Enum):
    """Where a participant stands against their fair share."""
    CREDIT = "credit"    # Paid more than their share, should receive
    DEBIT = "debit"      # Paid less than their share, owes
    SETTLED = "settled"  # Within tolerance of zero


class ParticipantSettlement(LedgerModel):
    """One participant's row in a settlement."""

    participant_id: UUID
    name: str
    total_spent: float = Field(
        ...,
        ge=0,
        description="Sum of this participant's expenses"
    )
    balance: float = Field(
        ...,
        description="total_spent minus fair share; positive means they are owed"
    )
    owes: bool = Field(
        ...,
        description="True when the participant still has to pay"
    )
    amount_settled: float = Field(
        ...,
        ge=0,
        description="Absolute value of the balance"
    )
    status: BalanceStatus


class Settlement(LedgerModel):
    """
    Balances for every participant at one point in time.

    The balances always sum to zero (within floating-point drift).
    """

    participants: list[ParticipantSettlement] = Field(default_factory=list)
    grand_total: float = Field(..., ge=0)
    fair_share: float = Field(..., ge=0)
    tolerance: float = Field(
        ...,
        gt=0,
        description="Distance from zero treated as settled"
    )

    @property
    def balance_sum(self) -> float:
        return sum(row.balance for row in self.participants)

    @property
    def is_settled(self) -> bool:
        """True when nobody owes anything."""
        return all(row.status == BalanceStatus.SETTLED for row in self.participants)

    def for_participant(self, participant_id: UUID) -> Optional[ParticipantSettlement]:
        for row in self.participants:
            if row.participant_id == participant_id:
                return row
        return None


class Transfer(LedgerModel):
    """A suggested payment from a debtor to a creditor."""

    from_participant_id: UUID
    from_name: str
    to_participant_id: UUID
    to_name: str
    amount: float = Field(..., gt=0)


class LedgerDashboard(LedgerModel):
    """
    Everything a display needs after a mutation.

    Built by the session from the current snapshot, never cached.
    """

    participants: list[ParticipantSettlement] = Field(default_factory=list)
    recent_expenses: list[Expense] = Field(default_factory=list)
    grand_total: float = Field(..., ge=0)
    fair_share: float = Field(..., ge=0)
    summary: str
    transfers: list[Transfer] = Field(default_factory=list)
