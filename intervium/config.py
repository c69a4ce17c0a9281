# intervium/config.py

from dotenv import load_dotenv
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()  # read .env before Settings() so plain os.getenv callers see it too

BASE_DIR = Path(__file__).resolve().parent.parent
PACKAGE_DIR = Path(__file__).resolve().parent

class Settings(BaseSettings):
    # 환경 구분
    app_name: str = "Intervium"
    app_env: str = "local"           # local|development|production
    api_version: str = "v1"

    # DB / Auth 필수 설정
    database_url: str                # DATABASE_URL
    jwt_secret: str                  # JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_audience: str | None = None  # JWT_AUDIENCE (None이면 aud 검증 생략)

    # 카탈로그 (characters.json / professions.json)
    catalog_dir: Path = PACKAGE_DIR / "data"
    popular_badge: str = "MOST POPULAR"

    log_level: str = "INFO"
    auto_create_tables: bool = True
    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

settings = Settings()

if __name__ == "__main__":
    print("BASE_DIR:", BASE_DIR)
    print("DATABASE_URL:", settings.database_url)
    print("CATALOG_DIR:", settings.catalog_dir)
