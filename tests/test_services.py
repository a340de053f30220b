"""Tests for the service layer against an in-memory database."""
from datetime import date, datetime

import pytest

from expense_service.database import StorageError
from expense_service.models import Transaction, User
from expense_service.reporting.periods import utcnow
from expense_service.services import TransactionService, UsernameTakenError, UserService


class TestUserService:

    def setup_method(self):
        self.username = "bob"
        self.password = "hunter2"

    def test_create_user_stores_plain_password(self, db_session):
        user = UserService(db_session).create_user(self.username, self.password)

        stored = db_session.get(User, user.id)
        assert stored.username == self.username
        assert stored.password == self.password

    def test_duplicate_username(self, db_session):
        service = UserService(db_session)
        service.create_user(self.username, self.password)

        with pytest.raises(UsernameTakenError):
            service.create_user(self.username, "another")
        assert db_session.query(User).count() == 1

    def test_authenticate(self, db_session):
        service = UserService(db_session)
        user = service.create_user(self.username, self.password)

        assert service.authenticate(self.username, self.password).id == user.id
        assert service.authenticate(self.username, "HUNTER2") is None
        assert service.authenticate("alice", self.password) is None

    def test_storage_failure_rolls_back(self, broken_db):
        with pytest.raises(StorageError) as exc_info:
            UserService(broken_db).create_user(self.username, self.password)

        assert exc_info.value.operation == "find_user"
        broken_db.rollback.assert_called_once()


class TestTransactionService:

    def test_type_is_fixed_at_creation(self, db_session):
        service = TransactionService(db_session)
        txn = service.create("u1", -20.0, "groceries", datetime(2024, 3, 5, 9))
        assert txn.type == "expense"

        # Editing the amount afterwards does not re-derive the type
        txn.amount = 20.0
        db_session.commit()
        assert db_session.get(Transaction, txn.id).type == "expense"

    def test_default_date_is_now(self, db_session):
        before = utcnow().replace(microsecond=0)
        txn = TransactionService(db_session).create("u1", 1.0)
        assert txn.date >= before

    def test_list_limit_is_configurable(self, db_session):
        service = TransactionService(db_session, list_limit=3)
        for day in range(1, 6):
            service.create("u1", day, when=datetime(2024, 1, day))

        recent = service.list_recent("u1")
        assert [t.date.day for t in recent] == [5, 4, 3]

    def test_zero_list_limit_is_respected(self, db_session):
        service = TransactionService(db_session, list_limit=0)
        service.create("u1", 1.0)

        assert service.list_limit == 0
        assert service.list_recent("u1") == []

    def test_delete_reports_whether_found(self, db_session):
        service = TransactionService(db_session)
        txn_id = service.create("u1", 1.0).id

        assert service.delete(txn_id) is True
        assert service.delete(txn_id) is False
        assert service.delete("no-such-id") is False

    def test_search_day(self, db_session):
        service = TransactionService(db_session)
        service.create("u1", 1, when=datetime(2024, 3, 5, 8))
        service.create("u1", 2, when=datetime(2024, 3, 5, 20))
        service.create("u1", 3, when=datetime(2024, 3, 6, 8))

        found = service.search_day("u1", date(2024, 3, 5))
        assert [t.amount for t in found] == [2, 1]

    def test_monthly_totals_last_day_boundary(self, db_session):
        service = TransactionService(db_session)
        service.create("u1", 50, when=datetime(2024, 4, 30, 0, 0, 0))
        service.create("u1", -70, when=datetime(2024, 4, 30, 15, 0, 0))
        service.create("u1", -30, when=datetime(2024, 4, 1, 0, 0, 0))

        totals = service.monthly_totals("u1", 2024, 4)
        assert totals.income == 50
        assert totals.expense == 30
        assert totals.transaction_count == 2

    def test_storage_failure_on_commit(self, broken_db):
        with pytest.raises(StorageError) as exc_info:
            TransactionService(broken_db).create("u1", 5.0)

        assert exc_info.value.operation == "create_transaction"
        broken_db.rollback.assert_called_once()
