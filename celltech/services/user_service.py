from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional, List, Tuple
import logging

from celltech.models.user import User
from celltech.schemas.user import UserRegister, UserUpdate
from celltech.services.auth_service import create_access_token, hash_password, verify_password
from celltech.services.errors import DuplicateError, InvalidCredentialsError, UserNotFoundError

logger = logging.getLogger(__name__)


class UserService:
    """Registration, login and maintenance of user accounts."""

    DEFAULT_ROLE = "user"
    DEFAULT_STATUS = "active"

    def __init__(self, db: Session):
        self.db = db

    def register(self, user_data: UserRegister) -> User:
        """
        Create a new account with a hashed password.

        Raises:
            DuplicateError: If the email is already registered
        """
        if self.get_by_email(user_data.email):
            raise DuplicateError("Already Registered with this Email!")

        user = User(
            name=user_data.name,
            email=user_data.email,
            password=hash_password(user_data.password),
            role=self.DEFAULT_ROLE,
            status=self.DEFAULT_STATUS
        )
        self.db.add(user)
        self._commit_unique()
        self.db.refresh(user)

        logger.info(f"User #{user.id} registered")
        return user

    def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Check credentials and issue an access token.

        Returns:
            Tuple of (user, token)

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong
        """
        user = self.get_by_email(email)
        if not user:
            raise InvalidCredentialsError("User not found!")
        if not verify_password(password, user.password):
            raise InvalidCredentialsError("Password is wrong!")

        return user, create_access_token(user.email)

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_all(self) -> List[User]:
        return self.db.query(User).order_by(User.id.desc()).all()

    def update(self, user_id: int, user_data: UserUpdate) -> User:
        """
        Partially update a user. A new password is re-hashed before storing.

        Raises:
            UserNotFoundError: If the user doesn't exist
            DuplicateError: If the new email belongs to another user
        """
        user = self.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(f"User with ID {user_id} not found")

        update_data = user_data.model_dump(exclude_unset=True)
        if update_data.get("password"):
            update_data["password"] = hash_password(update_data["password"])

        for field, value in update_data.items():
            if value is not None:
                setattr(user, field, value)

        self._commit_unique()
        self.db.refresh(user)
        return user

    def _commit_unique(self) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateError("Already Registered with this Email!")
