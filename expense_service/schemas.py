"""Pydantic schemas for request/response validation."""
from datetime import date, datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from expense_service.reporting.periods import to_naive_utc

# Accept both the JSON and the attribute spelling
USER_ID = AliasChoices("userId", "user_id")


class Credentials(BaseModel):
    """Request body for POST /api/signup and POST /api/login."""
    username: str = Field(..., description="Account name")
    password: str = Field(..., description="Password, compared verbatim")


class SignupResponse(BaseModel):
    """Response body for a successful signup."""
    success: bool = True
    message: str = "User created successfully"
    user_id: str = Field(..., validation_alias=USER_ID, serialization_alias="userId")


class LoginResponse(BaseModel):
    """Response body for a successful login."""
    user_id: str = Field(..., validation_alias=USER_ID, serialization_alias="userId")


class StatusMessage(BaseModel):
    """Generic success/failure envelope."""
    success: bool
    message: str


class TransactionCreate(BaseModel):
    """Request body for POST /api/transactions."""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    amount: float
    description: Optional[str] = None
    date: Optional[datetime] = Field(None, description="Defaults to now when omitted")

    @field_validator("date", mode="before")
    @classmethod
    def accept_bare_dates(cls, value):
        """Let callers send a calendar day such as 2024-03-05; blank means now."""
        if isinstance(value, str) and not value.strip():
            return None
        if isinstance(value, str) and len(value.strip()) == 10:
            return datetime.combine(date.fromisoformat(value.strip()), datetime.min.time())
        return value

    @field_validator("date")
    @classmethod
    def store_as_naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value) if value is not None else None


class TransactionRead(BaseModel):
    """A stored transaction as returned by the API."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str = Field(..., validation_alias=USER_ID, serialization_alias="userId")
    amount: float
    description: Optional[str] = None
    date: datetime
    type: str


class MonthlyReport(BaseModel):
    """Response body for GET /api/transactions/report/{userId}."""
    income: float
    expense: float
