"""HTTP routes for the expense tracker."""
from expense_service.api.routes import router

__all__ = ["router"]
