import logging
from typing import Union

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ayelearn.core.database import get_db
from ayelearn.core.security import jwt_manager
from ayelearn.models.admin import Admin
from ayelearn.models.learner import Learner

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _decode_credentials(credentials: HTTPAuthorizationCredentials) -> dict:
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return jwt_manager.verify_token(credentials.credentials, "access")


def _load_admin(payload: dict, db: Session) -> Admin:
    admin = db.query(Admin).filter(Admin.id == payload.get("admin_id")).first()
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return admin


def _load_learner(payload: dict, db: Session) -> Learner:
    learner = db.query(Learner).filter(Learner.id == payload.get("learner_id")).first()
    if not learner:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Learner not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if learner.status != "active":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Account is inactive"
        )
    return learner


async def get_current_admin(
    credentials: HTTPAuthorizationCredentials = Security(security),
    db: Session = Depends(get_db),
) -> Admin:
    """
    Dependency that requires a valid admin Bearer token.
    401 when the token is missing or invalid, 403 for a learner token.
    """
    payload = _decode_credentials(credentials)

    if payload.get("role") != "admin" or "admin_id" not in payload:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required"
        )

    return _load_admin(payload, db)


async def get_current_learner(
    credentials: HTTPAuthorizationCredentials = Security(security),
    db: Session = Depends(get_db),
) -> Learner:
    """Dependency that requires a valid learner Bearer token."""
    payload = _decode_credentials(credentials)

    if payload.get("role") != "learner" or "learner_id" not in payload:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Learner access required"
        )

    return _load_learner(payload, db)


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Security(security),
    db: Session = Depends(get_db),
) -> Union[Admin, Learner]:
    """
    Admin or learner. Routes that accept either check ownership themselves
    with `ensure_self_or_admin`.
    """
    payload = _decode_credentials(credentials)
    role = payload.get("role")

    if role == "admin" and "admin_id" in payload:
        return _load_admin(payload, db)
    if role == "learner" and "learner_id" in payload:
        return _load_learner(payload, db)

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid token",
        headers={"WWW-Authenticate": "Bearer"},
    )


def ensure_self_or_admin(principal: Union[Admin, Learner], learner_id: int) -> None:
    if isinstance(principal, Admin):
        return
    if principal.id != learner_id:
        logger.warning(
            f"Learner {principal.id} tried to access learner {learner_id} records"
        )
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
