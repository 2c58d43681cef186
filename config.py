import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Library identity
    library_name: str = os.getenv("LIBRARY_NAME", "Biblioteca Central")
    library_location: str = os.getenv("LIBRARY_LOCATION", "Av. Universidad 3000")

    # Lending rules
    loan_period_days: int = int(os.getenv("LOAN_PERIOD_DAYS", "14"))
    download_limit: int = int(os.getenv("DOWNLOAD_LIMIT", "3"))
    # Match returns by ISBN instead of popping the oldest in-flight loan
    strict_returns: bool = _env_bool("STRICT_RETURNS", "False")

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Library Lending")
    app_version: str = os.getenv("APP_VERSION", "1.1.0")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING").upper()
    output_mode: str = os.getenv("LIB_CLI_OUTPUT", "plain").lower()


settings = Settings()
