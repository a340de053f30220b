"""Service layer for the expense tracker."""
from expense_service.services.transactions import TransactionService
from expense_service.services.users import UsernameTakenError, UserService

__all__ = ["TransactionService", "UserService", "UsernameTakenError"]
