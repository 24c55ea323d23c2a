from pydantic_settings import BaseSettings, SettingsConfigDict


# tamanhos de página aceitos na listagem de clientes
LIST_PAGE_SIZES = (20, 50, 100)
LIST_DEFAULT_PAGE_SIZE = 20


def normalize_db_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL não configurada.")

    # Railway/Heroku: postgres://...
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg2://", 1)

    # Railway: postgresql://... (sem driver)
    if url.startswith("postgresql://") and "+psycopg2" not in url:
        url = url.replace("postgresql://", "postgresql+psycopg2://", 1)

    return url


class Settings(BaseSettings):
    DATABASE_URL: str

    APP_ENV: str = "production"  # development | production

    # limite de tempo das chamadas ao banco
    DB_STATEMENT_TIMEOUT_MS: int = 5000
    DB_CONNECT_TIMEOUT_S: int = 10

    PASSWORD_MIN_LENGTH: int = 6

    SEARCH_DEFAULT_LIMIT: int = 10
    SEARCH_MAX_LIMIT: int = 50

    FRONTEND_URLS: str = ""
    ALLOWED_ORIGINS: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",         # local
        env_ignore_empty=True,   # evita sobrescrever com vazio
        extra="ignore",
    )

    def __init__(self, **values):
        super().__init__(**values)
        self.DATABASE_URL = normalize_db_url(self.DATABASE_URL)

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.strip().lower() == "production"


settings = Settings()
