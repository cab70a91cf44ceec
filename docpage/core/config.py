"""Application configuration"""
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    # Database Configuration
    DATABASE_USER = os.getenv("DATABASE_USER", "postgres")
    DATABASE_PASSWORD = os.getenv("DATABASE_PASSWORD", "postgres")
    DATABASE_HOST = os.getenv("DATABASE_HOST", "localhost")
    DATABASE_PORT = os.getenv("DATABASE_PORT", "5432")
    DATABASE_NAME = os.getenv("DATABASE_NAME", "docpage")

    @property
    def DATABASE_URL(self) -> str:
        """Explicit DATABASE_URL wins, otherwise build a PostgreSQL URL"""
        explicit = os.getenv("DATABASE_URL")
        if explicit:
            return explicit
        return f"postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"

    # Logging Configuration
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR = os.getenv("LOG_DIR", "docpage/logs")


    # Project Metadata
    PROJECT_NAME = "DocPage API"
    PROJECT_VERSION = "1.0.0"
    API_V1_STR = "/functions/v1"

    # JWT sessions
    SECRET_KEY = os.getenv("SECRET_KEY", "your-secret-key-change-this-in-production-min-32-chars")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60))
    REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", 30))
    MAGIC_LINK_EXPIRE_MINUTES = int(os.getenv("MAGIC_LINK_EXPIRE_MINUTES", 60))

    # Admin gate: when true, admin endpoints also require a bearer token
    # that resolves to the body userId.
    REQUIRE_BEARER_FOR_ADMIN = os.getenv("REQUIRE_BEARER_FOR_ADMIN", "false").lower() == "true"
    ADMIN_PAGES_LIMIT = int(os.getenv("ADMIN_PAGES_LIMIT", 300))

    # Admin bootstrap / admin-login credentials
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "").strip().lower()
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "").strip()
    ADMIN_LOGIN_FAILURE_DELAY_MS = int(os.getenv("ADMIN_LOGIN_FAILURE_DELAY_MS", 1000))

    # OTP
    OTP_EXPIRE_MINUTES = int(os.getenv("OTP_EXPIRE_MINUTES", 10))
    OTP_RESEND_COOLDOWN_SECONDS = int(os.getenv("OTP_RESEND_COOLDOWN_SECONDS", 60))
    OTP_INVALID_FORMAT_DELAY_MS = int(os.getenv("OTP_INVALID_FORMAT_DELAY_MS", 800))
    OTP_MISMATCH_DELAY_MS = int(os.getenv("OTP_MISMATCH_DELAY_MS", 1000))

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", 30))

    # Gemini (content generation)
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
    GEMINI_API_URL = os.getenv("GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

    # Domain availability
    RDAP_BASE_URL = os.getenv("RDAP_BASE_URL", "https://rdap.registro.br/domain")
    DNS_RESOLVER_URL = os.getenv("DNS_RESOLVER_URL", "https://dns.google/resolve")
    DOMAIN_SUFFIX = os.getenv("DOMAIN_SUFFIX", ".com.br")

    # Published sites
    SITE_BASE_DOMAIN = os.getenv("SITE_BASE_DOMAIN", "docpage.com.br")
    SITE_BASE_URL = os.getenv("SITE_BASE_URL", "https://docpage.com.br")
    STATIC_SITE_DIR = os.getenv("STATIC_SITE_DIR", "docpage/static_sites")
    STATIC_SITE_BASE_URL = os.getenv("STATIC_SITE_BASE_URL", "https://docpage.com.br/static")

    # SMTP / Email configuration
    SMTP_HOST = os.getenv("SMTP_HOST", "smtp.maileroo.com")
    SMTP_PORT = int(os.getenv("SMTP_PORT", 587))
    SMTP_USER = os.getenv("SMTP_USER", "")
    SMTP_PASS = os.getenv("SMTP_PASS", "")
    EMAIL_FROM = os.getenv("EMAIL_FROM", "noreply@docpage.com.br")
    EMAIL_FROM_NAME = os.getenv("EMAIL_FROM_NAME", "DocPage AI")
    SUPPORT_EMAIL = os.getenv("SUPPORT_EMAIL", "suporte@docpage.com.br")


settings = Settings()
