import secrets
from typing import Optional

import bcrypt


class PasswordHelper:
    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using bcrypt."""
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    @staticmethod
    def check_password(password: str, hashed_password: Optional[str]) -> bool:
        """Check if a password matches the hashed version."""
        if not hashed_password:
            return False
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))

    @staticmethod
    def generate_reset_token() -> str:
        """Random 32-byte token, hex encoded, for password reset links."""
        return secrets.token_hex(32)
