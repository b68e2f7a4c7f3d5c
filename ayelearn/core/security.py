# core/security.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from jose import ExpiredSignatureError, JWTError, jwt

from ayelearn.core.config import settings
from ayelearn.models.admin import Admin
from ayelearn.models.learner import Learner

logger = logging.getLogger(__name__)


class JWTManager:
    """JWT token management for the admin and learner portals"""

    def __init__(self):
        self.secret_key = settings.jwt_secret
        self.algorithm = settings.jwt_algorithm
        self.admin_token_expire = timedelta(hours=settings.jwt_admin_expiration_hours)
        self.learner_token_expire = timedelta(
            hours=settings.jwt_learner_expiration_hours
        )
        self.issuer = settings.jwt_issuer

    def _encode(self, payload: Dict[str, Any], expires_in: timedelta) -> str:
        current_time = datetime.now(timezone.utc)
        payload = {
            **payload,
            "exp": int((current_time + expires_in).timestamp()),
            "iat": int(current_time.timestamp()),
            "iss": self.issuer,
            "type": "access",
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def create_admin_token(
        self, admin: Admin, custom_expiration: Optional[timedelta] = None
    ) -> str:
        """
        Create JWT access token for an admin

        Args:
            admin: Admin model instance
            custom_expiration: Override default expiration

        Returns:
            JWT access token string
        """
        token = self._encode(
            {
                "sub": str(admin.id),
                "admin_id": admin.id,
                "email": admin.email,
                "role": "admin",
            },
            custom_expiration or self.admin_token_expire,
        )
        logger.info(f"Access token created for admin: {admin.email}")
        return token

    def create_learner_token(
        self, learner: Learner, custom_expiration: Optional[timedelta] = None
    ) -> str:
        """Create JWT access token for a learner"""
        token = self._encode(
            {
                "sub": str(learner.id),
                "learner_id": learner.id,
                "email": learner.email,
                "role": "learner",
            },
            custom_expiration or self.learner_token_expire,
        )
        logger.info(f"Access token created for learner: {learner.email}")
        return token

    def verify_token(self, token: str, token_type: str = "access") -> Dict[str, Any]:
        """
        Verify and decode JWT token
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": True},
            )
        except ExpiredSignatureError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token expired",
                headers={"WWW-Authenticate": "Bearer"},
            )
        except JWTError as e:
            logger.warning(f"JWT verification failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        # Verify token type (check 'type' field, not 'role')
        if payload.get("type") != token_type:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid token type. Expected {token_type}",
                headers={"WWW-Authenticate": "Bearer"},
            )

        if payload.get("iss") != self.issuer:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token issuer",
                headers={"WWW-Authenticate": "Bearer"},
            )

        return payload


# Global instance
jwt_manager = JWTManager()
