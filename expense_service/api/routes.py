"""API route handlers for the expense tracker."""
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session

from expense_service import metrics
from expense_service.database import StorageError, get_db
from expense_service.logging import get_logger, set_user_context
from expense_service.reporting import parse_day
from expense_service.schemas import (
    Credentials,
    LoginResponse,
    MonthlyReport,
    SignupResponse,
    StatusMessage,
    TransactionCreate,
    TransactionRead,
)
from expense_service.services import TransactionService, UsernameTakenError, UserService

logger = get_logger(__name__)

router = APIRouter(prefix="/api")


def _failure(status_code: int, message: str) -> JSONResponse:
    body = StatusMessage(success=False, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["users"],
)
def signup(credentials: Credentials, db: Session = Depends(get_db)):
    """Create an account if the username is free."""
    try:
        user = UserService(db).create_user(credentials.username, credentials.password)
    except UsernameTakenError:
        logger.warning("signup_rejected", reason="duplicate_username")
        metrics.record_signup(created=False)
        return _failure(status.HTTP_400_BAD_REQUEST, "Username already exists")
    except StorageError as e:
        logger.error("signup_failed", operation=e.operation, error=e.detail)
        return _failure(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error during signup",
        )

    set_user_context(user.id)
    metrics.record_signup(created=True)
    logger.info("signup_completed")
    return SignupResponse(user_id=user.id)


@router.post("/login", response_model=LoginResponse, tags=["users"])
def login(credentials: Credentials, db: Session = Depends(get_db)):
    """Exchange a username and password for the user's id."""
    try:
        user = UserService(db).authenticate(credentials.username, credentials.password)
    except StorageError as e:
        logger.error("login_failed", operation=e.operation, error=e.detail)
        return PlainTextResponse("Error logging in", status_code=500)

    metrics.record_login(success=user is not None)
    if user is None:
        logger.info("login_rejected")
        return PlainTextResponse("Invalid username or password", status_code=400)

    set_user_context(user.id)
    logger.info("login_completed")
    return LoginResponse(user_id=user.id)


@router.post(
    "/transactions",
    response_model=TransactionRead,
    status_code=status.HTTP_201_CREATED,
    tags=["transactions"],
)
def add_transaction(body: TransactionCreate, db: Session = Depends(get_db)):
    """Record an income (amount >= 0) or expense (amount < 0)."""
    set_user_context(body.user_id)
    try:
        transaction = TransactionService(db).create(
            user_id=body.user_id,
            amount=body.amount,
            description=body.description,
            when=body.date,
        )
    except StorageError as e:
        logger.error("add_transaction_failed", operation=e.operation, error=e.detail)
        return PlainTextResponse("Error adding transaction", status_code=500)

    metrics.record_transaction_created(transaction.type)
    return transaction


@router.get(
    "/transactions/search/{user_id}",
    response_model=list[TransactionRead],
    tags=["transactions"],
)
def search_transactions(
    user_id: str,
    date: str = Query(..., description="Calendar day, YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    """Transactions stamped on a single day, newest first."""
    set_user_context(user_id)
    try:
        day = parse_day(date)
        transactions = TransactionService(db).search_day(user_id, day)
    except ValueError as e:
        logger.error("search_failed", date=date, error=str(e))
        return _failure(500, "Error searching transactions")
    except StorageError as e:
        logger.error("search_failed", operation=e.operation, error=e.detail)
        return _failure(500, "Error searching transactions")

    logger.info("search_completed", day=day.isoformat(), result_count=len(transactions))
    return transactions


@router.get(
    "/transactions/report/{user_id}",
    response_model=MonthlyReport,
    tags=["transactions"],
)
def monthly_report(
    user_id: str,
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=1, le=9999),
    db: Session = Depends(get_db),
):
    """Income and expense totals for one calendar month."""
    set_user_context(user_id)
    try:
        totals = TransactionService(db).monthly_totals(user_id, year, month)
    except StorageError as e:
        logger.error("report_failed", operation=e.operation, error=e.detail)
        return PlainTextResponse("Error generating report", status_code=500)

    metrics.record_report(totals.transaction_count)
    logger.info(
        "report_generated",
        year=year,
        month=month,
        transaction_count=totals.transaction_count,
    )
    return MonthlyReport(income=totals.income, expense=totals.expense)


@router.get(
    "/transactions/{user_id}",
    response_model=list[TransactionRead],
    tags=["transactions"],
)
def list_transactions(user_id: str, db: Session = Depends(get_db)):
    """The user's most recent transactions."""
    set_user_context(user_id)
    try:
        return TransactionService(db).list_recent(user_id)
    except StorageError as e:
        logger.error("list_transactions_failed", operation=e.operation, error=e.detail)
        return PlainTextResponse("Error fetching transactions", status_code=500)


@router.delete(
    "/transactions/{transaction_id}",
    response_model=StatusMessage,
    tags=["transactions"],
)
def delete_transaction(transaction_id: str, db: Session = Depends(get_db)):
    """Remove one transaction by id."""
    try:
        deleted = TransactionService(db).delete(transaction_id)
    except StorageError as e:
        logger.error(
            "delete_transaction_failed",
            transaction_id=transaction_id,
            operation=e.operation,
            error=e.detail,
        )
        return _failure(500, "Error deleting transaction")

    metrics.record_transaction_deleted(found=deleted)
    if not deleted:
        logger.warning("transaction_not_found", transaction_id=transaction_id)
        return _failure(status.HTTP_404_NOT_FOUND, "Transaction not found")

    logger.info("transaction_deleted", transaction_id=transaction_id)
    return StatusMessage(success=True, message="Transaction deleted")
