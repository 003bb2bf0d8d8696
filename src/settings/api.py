"""HTTP layer settings: server, authentication and CORS."""

from pydantic import Field
from pydantic_settings import BaseSettings

from src.settings.base import ENV_CONFIG, split_csv

# HS256 keys shorter than this are accepted but reported at startup
MIN_SECRET_LENGTH = 32


class APISettings(BaseSettings):
    """Server configuration.

    Attributes:
        host: Bind address.
        port: Bind port.
        reload: Auto-reload on code changes (development only).
        public_url: Base URL clients use to reach the API; tracking
            URLs are built on it.
        title: OpenAPI title.
        version: API version reported by the health endpoint.
    """

    host: str = Field(default="0.0.0.0", alias="API_HOST")
    port: int = Field(default=8000, alias="API_PORT")
    reload: bool = Field(default=False, alias="API_RELOAD")
    public_url: str = Field(default="http://localhost:8000", alias="API_PUBLIC_URL")
    title: str = Field(default="Reelfake API", alias="API_TITLE")
    version: str = Field(default="1.0.0", alias="API_VERSION")

    model_config = ENV_CONFIG


class SecuritySettings(BaseSettings):
    """Token signing and demo accounts.

    The signing secret has no default: the application refuses to
    start without JWT_SECRET_KEY.

    Attributes:
        jwt_secret_key: HMAC secret for token signatures.
        jwt_algorithm: Signature algorithm.
        jwt_expire_minutes: Token lifetime.
        demo_users_raw: Accounts as "user:password,user:password".
        store_managers_raw: Usernames granted STORE_MANAGER, comma-separated.
    """

    jwt_secret_key: str = Field(alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expire_minutes: int = Field(default=30, alias="JWT_EXPIRE_MINUTES")
    demo_users_raw: str = Field(default="", alias="AUTH_DEMO_USERS")
    store_managers_raw: str = Field(default="", alias="AUTH_STORE_MANAGERS")

    model_config = ENV_CONFIG

    @property
    def is_secure(self) -> bool:
        """True when the signing secret is long enough for HS256."""
        return len(self.jwt_secret_key) >= MIN_SECRET_LENGTH

    @property
    def demo_users(self) -> dict[str, str]:
        """Username to password mapping; entries without ':' are skipped."""
        users = {}
        for entry in split_csv(self.demo_users_raw):
            username, sep, password = entry.partition(":")
            if sep:
                users[username.strip()] = password.strip()
        return users

    @property
    def store_managers(self) -> set[str]:
        """Usernames holding the store manager role."""
        return set(split_csv(self.store_managers_raw))


class CORSSettings(BaseSettings):
    """Cross-origin configuration.

    Attributes:
        origins_raw: Allowed origins, comma-separated.
    """

    origins_raw: str = Field(default="http://localhost:3000", alias="CORS_ORIGINS")

    model_config = ENV_CONFIG

    @property
    def origins(self) -> list[str]:
        """Allowed origins as a list."""
        return split_csv(self.origins_raw)
