# ayelearn/services/auth.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Tuple, Type, Union

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from ayelearn.core.config import settings
from ayelearn.core.decorator import db_exception
from ayelearn.core.hasher import PasswordHelper
from ayelearn.core.security import jwt_manager
from ayelearn.models.admin import Admin
from ayelearn.models.learner import Learner
from ayelearn.utils.mailer import mailer

logger = logging.getLogger(__name__)

Account = Union[Admin, Learner]

# Per-portal reset link path and email wording
RESET_TARGETS = {
    Admin: ("/reset-password", "ayeLearn Admin Panel"),
    Learner: ("/learner/reset-password", "ayeLearn Learner Portal"),
}


class AuthService:
    """Login and password reset for both portals."""

    def __init__(self, db: Session):
        self.db = db

    def _invalid_credentials(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    def admin_login(self, email: str, password: str) -> Tuple[Admin, str]:
        admin = self.db.query(Admin).filter(Admin.email == email).first()
        if not admin or not PasswordHelper.check_password(password, admin.password):
            logger.warning(f"Failed admin login attempt for {email}")
            raise self._invalid_credentials()

        logger.info(f"Admin logged in: {admin.email}")
        return admin, jwt_manager.create_admin_token(admin)

    def learner_login(self, email: str, password: str) -> Tuple[Learner, str]:
        learner = self.db.query(Learner).filter(Learner.email == email).first()
        # Learners created without a password cannot log in until they reset it
        if not learner or not PasswordHelper.check_password(password, learner.password):
            logger.warning(f"Failed learner login attempt for {email}")
            raise self._invalid_credentials()

        if learner.status != "active":
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Account is inactive"
            )

        logger.info(f"Learner logged in: {learner.email}")
        return learner, jwt_manager.create_learner_token(learner)

    @db_exception
    def forgot_password(self, model: Type[Account], email: str) -> None:
        """
        Store a fresh reset token on the account and email the reset link.
        The token is cleared again when the email cannot be sent.
        """
        account = self.db.query(model).filter(model.email == email).first()
        if not account:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Email not found"
            )

        token = PasswordHelper.generate_reset_token()
        account.reset_token = token
        account.reset_token_expires = datetime.now(timezone.utc) + timedelta(
            minutes=settings.password_reset_expiration_minutes
        )
        self.db.commit()

        path, portal = RESET_TARGETS[model]
        reset_link = f"{settings.frontend_url.rstrip('/')}{path}/{token}"

        if not mailer.send_password_reset_email(account.email, reset_link, portal):
            account.reset_token = None
            account.reset_token_expires = None
            self.db.commit()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to send reset email",
            )

        logger.info(f"Password reset requested for {model.__name__.lower()} {email}")

    @db_exception
    def reset_password(self, model: Type[Account], token: str, password: str) -> None:
        account = (
            self.db.query(model)
            .filter(
                model.reset_token == token,
                model.reset_token_expires > datetime.now(timezone.utc),
            )
            .first()
        )
        if not account:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid or expired reset token",
            )

        account.password = PasswordHelper.hash_password(password)
        account.reset_token = None
        account.reset_token_expires = None
        self.db.commit()

        logger.info(f"Password reset for {model.__name__.lower()} {account.email}")
