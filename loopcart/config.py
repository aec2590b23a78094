# loopcart/config.py
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=ROOT_DIR / ".env")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _get_env(*keys: str, default: Optional[str] = None) -> Optional[str]:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int) -> int:
    v = _get_env(*keys)
    if v is None:
        return default
    return int(v)


def _get_list(*keys: str, default: str) -> Tuple[str, ...]:
    raw = _get_env(*keys, default=default) or default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    log_level: str
    frontend_dir: str
    cors_origins: Tuple[str, ...]


def load_settings() -> Settings:
    return Settings(
        host=_get_env("LOOPCART_HOST", default="0.0.0.0") or "0.0.0.0",
        port=_get_int("PORT", "LOOPCART_PORT", default=5000),
        log_level=(_get_env("LOG_LEVEL", default="INFO") or "INFO").upper(),
        frontend_dir=_get_env("LOOPCART_FRONTEND_DIR", default=str(ROOT_DIR / "frontend")) or "",
        cors_origins=_get_list("LOOPCART_CORS_ORIGINS", default="*"),
    )


@dataclass(frozen=True)
class ClientSettings:
    api_url: str
    storage_path: str
    timeout: int


def load_client_settings() -> ClientSettings:
    return ClientSettings(
        api_url=(_get_env("LOOPCART_API_URL", default="http://127.0.0.1:5000") or "").rstrip("/"),
        storage_path=_get_env(
            "LOOPCART_STORAGE",
            default=str(Path.home() / ".loopcart" / "storage.json"),
        ) or "",
        timeout=_get_int("LOOPCART_TIMEOUT", default=10),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
