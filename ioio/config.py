from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv


# ---------------------- DATA CLASSES ----------------------

@dataclass
class StoreConfig:
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    database_url: Optional[str] = None

    @property
    def uses_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


@dataclass
class ApiConfig:
    store: StoreConfig
    port: int = 5001
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    debug: bool = False


@dataclass
class SiteConfig:
    secret_key: str
    backend_url: str = "http://localhost:5001"
    port: int = 3000
    debug: bool = False


# ---------------------- LOADING ----------------------

def _debug_flag() -> bool:
    return os.getenv("FLASK_DEBUG", "False").lower() == "true"


def _require(names: List[str]) -> None:
    missing = [name for name in names if not os.getenv(name)]
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")


def load_api_config() -> ApiConfig:
    load_dotenv()

    store = StoreConfig(
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_key=os.getenv("SUPABASE_KEY"),
        database_url=os.getenv("DATABASE_URL"),
    )
    # Either a Supabase project or a SQL database must be reachable
    if not store.uses_supabase:
        if os.getenv("SUPABASE_URL") or os.getenv("SUPABASE_KEY"):
            _require(["SUPABASE_URL", "SUPABASE_KEY"])
        _require(["DATABASE_URL"])

    origins = os.getenv("CORS_ORIGINS", "*")
    return ApiConfig(
        store=store,
        port=int(os.getenv("API_PORT", "5001")),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        debug=_debug_flag(),
    )


def load_site_config() -> SiteConfig:
    load_dotenv()
    _require(["SECRET_KEY"])

    return SiteConfig(
        secret_key=os.environ["SECRET_KEY"],
        backend_url=os.getenv("BACKEND_URL", "http://localhost:5001").rstrip("/"),
        port=int(os.getenv("SITE_PORT", "3000")),
        debug=_debug_flag(),
    )
