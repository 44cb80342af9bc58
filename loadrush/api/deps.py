import hmac
import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, Header, HTTPException, status

from loadrush.adapters.clock import SystemClock
from loadrush.adapters.sqlite.handles import StoreHandle, db_path_for, init_store
from loadrush.adapters.sqlite.repos import SQLiteKeyValueStore, SQLiteLoadRepo
from loadrush.components.cache import TTLCache, create_ttl_cache
from loadrush.ports.clock import TimePort
from loadrush.rules.loader import load_rules
from loadrush.rules.models import Rules
from loadrush.services import event_log as event_log_service
from loadrush.services.event_log import EventLog


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = os.environ.get("LOADRUSH_DATA_DIR", "./data")
        self.db_path = db_path_for(self.data_dir)
        rules_env = os.environ.get("LOADRUSH_RULES_PATH")
        self.rules_path = Path(rules_env) if rules_env else self.base_dir / "rules.yaml"


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Store ---
def get_store_handle(settings: Settings = Depends(get_settings)) -> StoreHandle:
    return init_store(settings.db_path)


def get_load_repo(handle: StoreHandle = Depends(get_store_handle)) -> SQLiteLoadRepo:
    return handle.loads


def get_kv_store(handle: StoreHandle = Depends(get_store_handle)) -> SQLiteKeyValueStore:
    return handle.kv


# --- Services ---
def get_clock() -> TimePort:
    return SystemClock()


def get_analytics_cache(
    kv: SQLiteKeyValueStore = Depends(get_kv_store),
    clock: TimePort = Depends(get_clock),
) -> TTLCache:
    return create_ttl_cache(store=kv, time_port=clock)


def get_event_log(
    kv: SQLiteKeyValueStore = Depends(get_kv_store),
    rules: Rules = Depends(get_rules),
) -> EventLog:
    try:
        return event_log_service.get_event_log()
    except RuntimeError:
        return event_log_service.init_event_log(
            kv,
            max_entries=rules.event_log.max_entries,
            storage_key=rules.event_log.storage_key,
        )


# --- Cron Auth ---
def get_cron_secret(rules: Rules = Depends(get_rules)) -> str | None:
    return os.environ.get(rules.ops.cron_secret_env) or None


def require_cron_secret(
    x_cron_secret: str | None = Header(default=None),
    secret: str | None = Depends(get_cron_secret),
) -> None:
    if not secret:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Cron secret not configured",
        )
    if not x_cron_secret or not hmac.compare_digest(
        x_cron_secret.encode("utf-8"), secret.encode("utf-8")
    ):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
