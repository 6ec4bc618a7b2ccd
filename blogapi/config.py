"""Application configuration."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from environment variables."""

    app_name: str = "Community Blog API"
    environment: str = "development"  # "production" hides stack traces in error bodies
    debug: bool = False
    api_prefix: str = "/api"
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"
    database_url: str = "sqlite:///./blogapi.db"  # Use DATABASE_URL env for PostgreSQL
    jwt_secret: str = "dev-secret-change-in-production"
    jwt_algorithm: str = "HS256"
    token_ttl_days: int = 365
    # Cloudinary media storage
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    cloudinary_folder: str = "community_posts"
    upload_dir: str = "uploads"
    max_upload_bytes: int = 5 * 1024 * 1024
    # Optional admin account created on startup
    admin_email: str = ""
    admin_username: str = ""
    admin_password: str = ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


settings = Settings()
