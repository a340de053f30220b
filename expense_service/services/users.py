"""Account signup and login."""
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from expense_service.database import storage_operation
from expense_service.models import User

logger = structlog.get_logger()


class UsernameTakenError(Exception):
    """Raised when signing up with a username that already exists."""
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username already exists: {username}")


class UserService:
    """
    Service for user accounts.

    Passwords are stored and compared exactly as submitted. There is no
    hashing and no session or token issued on login; the caller receives
    the user id and presents it on later requests.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_user(self, username: str, password: str) -> User:
        """
        Register a new user.

        Uniqueness is checked with a lookup before the insert, so two
        concurrent signups for the same name can both succeed.

        Raises:
            UsernameTakenError: If a user with this username exists
            StorageError: If the lookup or insert fails
        """
        with storage_operation(self.db, "find_user"):
            existing = self.db.query(User).filter(User.username == username).first()
        if existing is not None:
            raise UsernameTakenError(username)

        user = User(username=username, password=password)
        with storage_operation(self.db, "create_user"):
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)

        logger.info("user_created", user_id=user.id)
        return user

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """Return the user matching both fields, or None."""
        with storage_operation(self.db, "find_user"):
            return (
                self.db.query(User)
                .filter(User.username == username, User.password == password)
                .first()
            )
