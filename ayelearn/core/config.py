from typing import List

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application Information
    app_name: str = Field(default="ayeLearn")
    app_description: str = Field(default="Learning Management System API")
    app_version: str = Field(default="1.0.0")
    app_url: str = Field(default="http://localhost:5000")
    frontend_url: str = Field(default="http://localhost:5173")
    debug: bool = Field(default=True)
    production: bool = Field(default=False)

    # Database Configuration
    db_connection: str = Field(default="mysql")  # mysql | sqlite
    db_host: str = Field(default="127.0.0.1")
    db_port: int = Field(default=3306)
    db_database: str = Field(default="ayelearn_db")
    db_username: str = Field(default="root")
    db_password: str = Field(default="")

    # Security Settings
    cors_allowed_origins: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"]
    )

    # JWT Configuration
    jwt_secret: str = Field(default="your-secret-key-change-in-production")
    jwt_algorithm: str = Field(default="HS256")
    jwt_admin_expiration_hours: int = Field(default=24)
    jwt_learner_expiration_hours: int = Field(default=24)
    jwt_issuer: str = Field(default="ayeLearn")
    password_reset_expiration_minutes: int = Field(default=60)

    # Rate limiting
    rate_limit_enabled: bool = Field(default=True)
    rate_limit_storage_uri: str = Field(default="memory://")
    rate_limit_default: str = Field(default="1000/15minutes")
    rate_limit_login: str = Field(default="10/minute")

    # Email (SMTP)
    mail_host: str = Field(default="smtp.example.com")
    mail_port: int = Field(default=587)
    mail_username: str = Field(default="")
    mail_password: str = Field(default="")
    mail_encryption: str = Field(default="tls")  # tls | ssl | none
    mail_from_address: str = Field(default="no-reply@example.com")
    mail_from_name: str = Field(default="ayeLearn")

    # File Uploads
    upload_dir: str = Field(default="storage")
    max_image_size_mb: int = Field(default=5)
    max_course_file_size_mb: int = Field(default=100)

    # Logging
    log_level: str = Field(default="info")
    log_file: str = Field(default="logs/app.log")

    # Pagination
    default_page_size: int = Field(default=20)
    max_page_size: int = Field(default=100)

    # Admin Defaults
    admin_default_email: str = Field(default="admin@example.com")
    admin_default_password: str = Field(default="Admin@123")
    admin_default_first_name: str = Field(default="Super")
    admin_default_last_name: str = Field(default="Admin")
    admin_default_phone: str = Field(default="")

    # ============================
    # Generic comma-separated parser
    # ============================
    @staticmethod
    def _parse_csv(value, default):
        if isinstance(value, str):
            items = [x.strip() for x in value.split(",") if x.strip()]
            return items if items else default
        if isinstance(value, list):
            return value
        return default

    @field_validator("cors_allowed_origins", mode="before")
    def validate_cors(cls, v):
        return cls._parse_csv(v, ["http://localhost:5173"])

    @field_validator("db_connection", "mail_encryption", mode="before")
    def lower_choice(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @property
    def database_url(self) -> str:
        if self.db_connection == "sqlite":
            return f"sqlite:///{self.db_database}"
        return "mysql+pymysql://{user}:{password}@{host}:{port}/{database}".format(
            user=self.db_username,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_database,
        )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def load_settings():
    try:
        settings = Settings()
        print("✅ Settings loaded successfully!")
        return settings
    except ValidationError as e:
        print("❌ Validation Error:", e)
        raise


settings = load_settings()
