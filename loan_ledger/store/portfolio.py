"""In-memory loan portfolio with referential integrity and dashboard reporting."""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from loan_ledger.config import LedgerConfig
from loan_ledger.engine.interest import pending_interest
from loan_ledger.engine.money import days_between
from loan_ledger.engine.status import derive_status
from loan_ledger.exceptions import LoanNotFoundError, ReferentialIntegrityError
from loan_ledger.models import (
    Customer,
    Direction,
    DirectionTotals,
    Loan,
    LoanKind,
    LoanStatus,
    PortfolioSummary,
    Reminder,
    ReminderPriority,
    ReminderType,
)

logger = logging.getLogger(__name__)


@dataclass
class LoanPortfolio:
    """In-memory store of customers and their loan snapshots."""

    customers: dict[str, Customer] = field(default_factory=dict)
    loans: dict[str, Loan] = field(default_factory=dict)

    _customer_loans: dict[str, list[str]] = field(default_factory=dict)

    def add_customer(self, customer: Customer) -> None:
        """Add a customer to the portfolio."""
        self.customers[customer.customer_id] = customer
        self._customer_loans.setdefault(customer.customer_id, [])

    def add_loan(self, loan: Loan) -> None:
        """Add a loan. Loans that name a customer must reference a known one."""
        if loan.customer_id is not None:
            if loan.customer_id not in self.customers:
                raise ReferentialIntegrityError(f"Customer {loan.customer_id} not found")
            if loan.loan_id not in self.loans:
                self._customer_loans[loan.customer_id].append(loan.loan_id)
        self.loans[loan.loan_id] = loan

    def get_loan(self, loan_id: str) -> Loan:
        """Get a loan by id."""
        try:
            return self.loans[loan_id]
        except KeyError:
            raise LoanNotFoundError(f"Loan {loan_id} not found") from None

    def get_customer_loans(self, customer_id: str) -> list[Loan]:
        """Get all loans for a customer, in the order they were added."""
        if customer_id not in self.customers:
            raise ReferentialIntegrityError(f"Customer {customer_id} not found")
        return [self.loans[loan_id] for loan_id in self._customer_loans.get(customer_id, [])]

    def loans_by_status(self, status: LoanStatus) -> list[Loan]:
        return [loan for loan in self.loans.values() if loan.status == status]

    def open_loans(self) -> list[Loan]:
        return [loan for loan in self.loans.values() if not loan.is_terminal]

    def summarize(self, as_of: date, config: LedgerConfig | None = None) -> PortfolioSummary:
        """Totals per direction, status counts and collateral still held.

        Loans that started after ``as_of`` are left out.

        Parameters
        ----------
        as_of : date
            Evaluation date for pending interest and derived status.
        config : LedgerConfig | None
            Engine configuration.

        Returns
        -------
        PortfolioSummary
            Dashboard totals.
        """
        summary = PortfolioSummary(as_of=as_of)

        for loan in self.loans.values():
            if loan.start_date > as_of:
                continue

            totals = summary.totals.setdefault(loan.direction, DirectionTotals())
            totals.loan_count += 1
            totals.principal_minor_units += loan.principal_minor_units
            totals.outstanding_principal_minor_units += loan.outstanding_principal_minor_units
            totals.interest_paid_minor_units += loan.total_interest_paid()
            if not loan.is_terminal:
                totals.pending_interest_minor_units += pending_interest(loan, as_of, config)

            status = derive_status(loan, as_of)
            summary.status_counts[status] = summary.status_counts.get(status, 0) + 1

            for item in loan.held_items():
                summary.collateral_grams_held[item.metal] = (
                    summary.collateral_grams_held.get(item.metal, Decimal("0")) + item.weight_grams
                )

        logger.debug("Summarized %d loans as of %s", len(self.loans), as_of.isoformat())
        return summary

    def due_reminders(self, as_of: date, config: LedgerConfig | None = None) -> list[Reminder]:
        """Reminders for every open loan that needs attention on ``as_of``."""
        config = config or LedgerConfig()
        reminders: list[Reminder] = []

        for loan in self.open_loans():
            if loan.start_date > as_of:
                continue
            days_open = days_between(loan.start_date, as_of)

            if loan.due_date is not None and as_of > loan.due_date:
                reminders.append(
                    Reminder(
                        reminder_type=ReminderType.OVERDUE,
                        loan_id=loan.loan_id,
                        customer_id=loan.customer_id,
                        amount_minor_units=loan.outstanding_principal_minor_units,
                        priority=ReminderPriority.URGENT,
                        due_date=loan.due_date,
                        days_since_start=days_open,
                    )
                )

            if loan.kind == LoanKind.UDHARI:
                reminder = self._udhari_reminder(loan, days_open, config)
                if reminder is not None:
                    reminders.append(reminder)
                continue

            interest = pending_interest(loan, as_of, config)
            if interest > 0:
                reminders.append(
                    Reminder(
                        reminder_type=ReminderType.INTEREST_DUE,
                        loan_id=loan.loan_id,
                        customer_id=loan.customer_id,
                        amount_minor_units=interest,
                        priority=ReminderPriority.HIGH,
                        due_date=as_of,
                        days_since_start=days_open,
                    )
                )

        logger.info("Generated %d reminders for %s", len(reminders), as_of.isoformat())
        return reminders

    def _udhari_reminder(self, loan: Loan, days_open: int, config: LedgerConfig) -> Reminder | None:
        """Given udhari is nudged once every interval after the first one."""
        interval = config.reminders.udhari_interval_days
        if loan.direction != Direction.GIVEN or days_open < interval or days_open % interval:
            return None

        priority = ReminderPriority.MEDIUM
        if days_open > config.reminders.urgent_after_days:
            priority = ReminderPriority.URGENT
        elif days_open > config.reminders.high_after_days:
            priority = ReminderPriority.HIGH

        return Reminder(
            reminder_type=ReminderType.UDHARI_REMINDER,
            loan_id=loan.loan_id,
            customer_id=loan.customer_id,
            amount_minor_units=loan.outstanding_principal_minor_units,
            priority=priority,
            due_date=loan.due_date,
            days_since_start=days_open,
        )
