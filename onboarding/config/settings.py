from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Bypasses RLS; used for owner-only writes

    # GitHub OAuth (handled by Supabase Auth)
    oauth_redirect_url: str = "http://localhost:3000/auth/callback"

    # Email verification
    company_email_domain: str = "masterfabric.co"
    otp_ttl_minutes: int = 10
    otp_code_length: int = 6
    otp_rate_limit: str = "5/minute"

    # Resend (transactional email)
    resend_api_key: Optional[str] = None
    resend_from: str = "no-reply@masterfabric.co"
    resend_api_url: str = "https://api.resend.com/emails"

    # Public event registration
    recaptcha_secret_key: Optional[str] = None
    recaptcha_verify_url: str = "https://www.google.com/recaptcha/api/siteverify"
    registration_rate_limit: str = "10/minute"

    # Markdown content served to the home page
    content_dir: str = "content"

    # App
    app_name: str = "onboarding-backend"
    app_url: str = "http://localhost:3000"
    app_version: Optional[str] = None
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
