"""
Application initialization module
Handles initial setup tasks like creating the default admin and storage folders
"""

import logging

from sqlalchemy.orm import Session

from ayelearn.core.config import settings
from ayelearn.core.hasher import PasswordHelper
from ayelearn.models.admin import Admin
from ayelearn.utils.file_upload import file_upload_service

logger = logging.getLogger(__name__)


def init_default_admin(db: Session) -> None:
    """
    Initialize the default admin if no admin exists yet.

    Credentials come from settings (ADMIN_DEFAULT_* environment variables).

    Args:
        db: Database session
    """
    try:
        existing_admin = db.query(Admin).first()

        if existing_admin:
            logger.info(
                f"✅ Admin user already exists (ID: {existing_admin.id}, Email: {existing_admin.email})"
            )
            return

        admin = Admin(
            email=settings.admin_default_email.lower(),
            password=PasswordHelper.hash_password(settings.admin_default_password),
            first_name=settings.admin_default_first_name,
            last_name=settings.admin_default_last_name,
            phone_number=settings.admin_default_phone or None,
        )

        db.add(admin)
        db.commit()
        db.refresh(admin)

        logger.info("=" * 60)
        logger.info("🎉 DEFAULT ADMIN CREATED SUCCESSFULLY!")
        logger.info("=" * 60)
        logger.info(f"Email: {settings.admin_default_email}")
        logger.info("=" * 60)
        logger.warning("⚠️  IMPORTANT: Change the default password immediately!")
        logger.info("=" * 60)

    except Exception as e:
        logger.error(f"❌ Failed to initialize default admin: {e}")
        db.rollback()
        raise


def initialize_application(db: Session) -> None:
    """
    Run all application initialization tasks.

    Args:
        db: Database session
    """
    logger.info("🚀 Starting application initialization...")

    init_default_admin(db)
    file_upload_service.ensure_storage_directories()

    logger.info("✅ Application initialization completed!")
