"""Transaction recording, listing, search and monthly reporting."""
from datetime import date, datetime
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from expense_service.config import settings
from expense_service.database import storage_operation
from expense_service.logging import TimedOperation
from expense_service.models import Transaction
from expense_service.reporting import (
    MonthlyTotals,
    classify_amount,
    day_window,
    month_window,
    summarize,
)
from expense_service.reporting.periods import utcnow

logger = structlog.get_logger()


class TransactionService:
    """
    Service for a user's income and expense entries.

    Each public method issues a single query or mutation. The ``user_id``
    passed in is trusted as given.
    """

    def __init__(self, db: Session, list_limit: Optional[int] = None):
        self.db = db
        if list_limit is None:
            list_limit = settings.transaction_list_limit
        self.list_limit = list_limit

    def create(
        self,
        user_id: str,
        amount: float,
        description: Optional[str] = None,
        when: Optional[datetime] = None,
    ) -> Transaction:
        """
        Record a transaction.

        The ``type`` column is derived from the sign of ``amount`` here and
        never recomputed afterwards.
        """
        transaction = Transaction(
            user_id=user_id,
            amount=amount,
            description=description,
            date=when or utcnow(),
            type=classify_amount(amount),
        )
        with storage_operation(self.db, "create_transaction"):
            self.db.add(transaction)
            self.db.commit()
            self.db.refresh(transaction)

        logger.info(
            "transaction_created",
            transaction_id=transaction.id,
            user_id=user_id,
            type=transaction.type,
        )
        return transaction

    def list_recent(self, user_id: str) -> list[Transaction]:
        """The user's newest transactions, capped at ``list_limit``."""
        with storage_operation(self.db, "list_transactions"):
            return (
                self.db.query(Transaction)
                .filter(Transaction.user_id == user_id)
                .order_by(Transaction.date.desc())
                .limit(self.list_limit)
                .all()
            )

    def delete(self, transaction_id: str) -> bool:
        """
        Delete a transaction by id.

        Returns:
            True if a row was removed, False if no transaction had this id
        """
        with storage_operation(self.db, "delete_transaction"):
            deleted = (
                self.db.query(Transaction)
                .filter(Transaction.id == transaction_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        return deleted > 0

    def search_day(self, user_id: str, day: date) -> list[Transaction]:
        """All of the user's transactions on ``day``, newest first."""
        start, end = day_window(day)
        with storage_operation(self.db, "search_transactions"):
            return (
                self.db.query(Transaction)
                .filter(
                    Transaction.user_id == user_id,
                    Transaction.date >= start,
                    Transaction.date < end,
                )
                .order_by(Transaction.date.desc())
                .all()
            )

    def monthly_totals(self, user_id: str, year: int, month: int) -> MonthlyTotals:
        """
        Income and expense totals for one calendar month.

        Every transaction in the window is loaded; the listing cap does not
        apply here.
        """
        start, end = month_window(year, month)
        with TimedOperation("monthly_report", logger=logger, year=year, month=month):
            with storage_operation(self.db, "monthly_report"):
                transactions = (
                    self.db.query(Transaction)
                    .filter(
                        Transaction.user_id == user_id,
                        Transaction.date >= start,
                        Transaction.date <= end,
                    )
                    .all()
                )
            return summarize(transactions)
