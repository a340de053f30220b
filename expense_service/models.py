"""SQLAlchemy ORM models for the expense tracker."""
import uuid

from sqlalchemy import Column, DateTime, Float, String, Text

from expense_service.database import Base
from expense_service.reporting.periods import utcnow


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """An account holder. Passwords are kept as submitted (plain text)."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    # Uniqueness is checked by the signup lookup, not by a constraint
    username = Column(Text, nullable=False)
    password = Column(Text, nullable=False)


class Transaction(Base):
    """A single income or expense entry belonging to a user."""
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False)  # Not a foreign key
    amount = Column(Float, nullable=False)
    description = Column(Text)
    date = Column(DateTime, nullable=False, default=utcnow)
    # Derived from the sign of amount once, at creation
    type = Column(String(16), nullable=False)
