from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {'1', 'true', 'yes', 'y', 'on'}


@dataclass(frozen=True)
class Settings:
    app_name: str
    environment: Literal['dev', 'prod', 'test']
    stage: str
    market_pair: str
    market_registry_path: str
    deployments_dir: str
    payloads_dir: str
    log_level: str
    cors_origins: str
    skip_delegate: bool


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    environment = os.getenv('ENVIRONMENT', 'dev').strip().lower()
    if environment not in {'dev', 'prod', 'test'}:
        environment = 'dev'

    return Settings(
        app_name=os.getenv('APP_NAME', 'mcx-wiring-planner'),
        environment=environment,  # type: ignore[arg-type]
        stage=os.getenv('WIRING_STAGE', 'mainnet').strip().lower(),
        market_pair=os.getenv('MARKET_PAIR', '').strip(),
        market_registry_path=os.getenv('MARKET_REGISTRY_PATH', '').strip(),
        deployments_dir=os.getenv('DEPLOYMENTS_DIR', 'deployments'),
        payloads_dir=os.getenv('PAYLOADS_DIR', 'payloads'),
        log_level=os.getenv('LOG_LEVEL', 'INFO').strip().upper(),
        cors_origins=os.getenv('CORS_ORIGINS', 'http://localhost:3300'),
        skip_delegate=_env_bool('SKIP_DELEGATE', False)
    )
