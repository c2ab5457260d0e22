"""Runtime configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class ShipdeskConfig(BaseSettings):
    """Runtime config for the shipdesk application.

    Every field can be overridden with a ``SHIPDESK_``-prefixed environment
    variable or a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="SHIPDESK_",
        env_file=".env",
        extra="ignore",
    )

    database_url: str = "sqlite+aiosqlite:///./shipdesk.db"

    session_secret: str = "shipdesk-dev-secret"
    session_max_age: int = 24 * 60 * 60

    admin_username: str = "admin"
    admin_password: str = "admin"
    bcrypt_rounds: int = 10
    seed_demo_data: bool = False

    tracking_api_url: str = "https://api.uapis.cn/express"
    tracking_timeout: float | None = None

    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 3000
