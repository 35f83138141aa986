"""
Runtime settings.

Settings come from 'STOREFRONT_*' environment variables with defaults that match
the storefront's routes and schema. 'configure_logging' points loguru at
stderr with the configured level; call it once at process start.
"""

import os
import sys
from collections.abc import Mapping

from loguru import logger
from pydantic import BaseModel, Field

ENV_PREFIX = "STOREFRONT_"


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


class StorefrontSettings(BaseModel):
    """
    Attributes:
        login_path: Where anonymous users are sent by the guard.
        landing_path: Where users without the required role are sent.
        admin_role: Role name that unlocks the admin area.
        likes_table: Remote table holding reaction rows.
        liked_items_limit: How many liked items the account page lists per kind.
        log_level: loguru level name.
    """

    login_path: str = "/login"
    landing_path: str = "/"
    admin_role: str = "admin"
    likes_table: str = "likes"
    liked_items_limit: int = Field(default=8, ge=1)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "StorefrontSettings":
        env = os.environ if env is None else env
        defaults = cls()
        return cls(
            login_path=env.get(f"{ENV_PREFIX}LOGIN_PATH") or defaults.login_path,
            landing_path=env.get(f"{ENV_PREFIX}DEFAULT_PATH") or defaults.landing_path,
            admin_role=env.get(f"{ENV_PREFIX}ADMIN_ROLE") or defaults.admin_role,
            likes_table=env.get(f"{ENV_PREFIX}LIKES_TABLE") or defaults.likes_table,
            liked_items_limit=_env_int(env, f"{ENV_PREFIX}LIKED_ITEMS_LIMIT", defaults.liked_items_limit),
            log_level=(env.get(f"{ENV_PREFIX}LOG_LEVEL") or defaults.log_level).upper(),
        )


def configure_logging(settings: StorefrontSettings) -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)
