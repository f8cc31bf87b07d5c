import os

# Basic settings helper to read environment configuration.


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self) -> None:
        self.STORAGE_TYPE: str = os.getenv("STORAGE_TYPE", "volatile")
        self.STORAGE_FILE: str | None = os.getenv("STORAGE_FILE") or None
        self.NOTIFY_ENABLED: bool = _as_bool(os.getenv("NOTIFY_ENABLED"), True)
        self.NOTIFY_URL: str = os.getenv("NOTIFY_URL", "http://localhost:8080/api/notify")
        self.NOTIFY_TIMEOUT: float = float(os.getenv("NOTIFY_TIMEOUT", "5"))
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "55555"))
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
