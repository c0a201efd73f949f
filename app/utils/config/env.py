from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "mern-auth"
    environment: str = "local"
    debug: bool = True
    log_level: str = "INFO"

    mongo_url: str | None = None
    mongo_port: int = 27017
    mongo_host: str = "localhost"
    mongo_db: str = "mern_auth"
    mongo_password: str | None = None
    mongo_params: str | None = None
    mongo_user: str | None = None
    mongo_srv: bool = False

    jwt_algorithm: str = "HS256"
    jwt_secret_key: str = "very-secret-key"
    session_token_expires_days: int = 7
    session_cookie_name: str = "token"

    verification_token_expires_minutes: int = 60
    reset_token_expires_minutes: int = 60
    bcrypt_rounds: int = 10

    client_url: str = "http://localhost:5173"

    notification_backend: str = "console"
    email_from: str = "noreply@mern-auth.local"
    email_from_name: str = "MERN Auth"
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True

    redis_db: int = 0
    redis_port: int = 6379
    redis_host: str = "localhost"
    redis_password: str | None = None
    notification_queue: str = "notifications"

    model_config = SettingsConfigDict(env_file=(".env",), case_sensitive=False, extra="ignore")

    @property
    def mongo_uri(self) -> str:
        if self.mongo_url:
            return self.mongo_url
        auth = ""
        if self.mongo_user and self.mongo_password:
            auth = f"{self.mongo_user}:{self.mongo_password}@"
        if self.mongo_srv:
            params = self.mongo_params or "retryWrites=true&w=majority"
            return f"mongodb+srv://{auth}{self.mongo_host}/{self.mongo_db}?{params}"
        params = f"?{self.mongo_params}" if self.mongo_params else ""
        return f"mongodb://{auth}{self.mongo_host}:{self.mongo_port}/{self.mongo_db}{params}"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def session_max_age_seconds(self) -> int:
        return self.session_token_expires_days * 24 * 60 * 60


settings = Settings()
