"""
Configuration de l'application / Application configuration.
Utilise pydantic-settings pour charger depuis .env ou variables d'environnement.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Diesel Tracker"
    APP_SLUG: str = "diesel-tracker"  # Prefixe des fichiers exportes / Export filename prefix
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = True

    # Database - SQLite par défaut pour le développement
    # Database - SQLite by default for development
    DATABASE_URL: str = "sqlite+aiosqlite:///./diesel_tracker.db"

    # CORS - origines autorisées / allowed origins
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Fuseau d'affichage et de saisie / Display and input timezone
    TIMEZONE: str = "Europe/Dublin"
    CSV_DATE_FORMAT: str = "%d/%m/%Y"

    # Fenetre de pleins chargee / Loaded window of fills
    FILL_WINDOW_LIMIT: int = 50

    # Stations suggerees / Suggested stations
    DEFAULT_STATIONS: list[str] = [
        "Kylemore Road",
        "Kinnegad Plaza",
        "Circle K Kinnegad",
        "Circle K Nass Road",
        "Emo Tullamore",
        "Circle K Citywest",
        "Applegreen Enfield",
        "Emo Kinnegad",
        "Top Oil Enfield",
    ]
    STATION_LOOKBACK_DAYS: int = 180
    STATION_TOP_N: int = 3

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "60/minute"
    RATE_LIMIT_EXPORT: str = "10/minute"

    # Keepalive base hebergee / Hosted database keepalive
    KEEPALIVE_ALERT_WEBHOOK_URL: str | None = None
    KEEPALIVE_LOG_SUCCESS: bool = False
    KEEPALIVE_CRON_HEADER: str = "x-vercel-cron"
    KEEPALIVE_TIMEOUT_SECONDS: float = 10.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
