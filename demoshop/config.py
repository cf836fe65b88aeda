from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "DEMOSHOP_"
DEFAULT_BASE_URL = "https://demowebshop.tricentis.com"

_TRUE = ("1", "true", "yes", "on")


def _lookup(env: Mapping[str, str], key: str) -> Optional[str]:
    # Prefixed name wins so CI can override a developer's plain variable.
    value = env.get(ENV_PREFIX + key)
    if value is None:
        value = env.get(key)
    return value


def _int(env: Mapping[str, str], key: str, default: Optional[int]) -> Optional[int]:
    raw = _lookup(env, key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None


def _bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = _lookup(env, key)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE


@dataclass(frozen=True)
class Settings:
    base_url: str = DEFAULT_BASE_URL
    default_timeout_ms: int = 10_000
    navigation_timeout_ms: int = 20_000
    viewport_width: int = 1280
    viewport_height: int = 720
    headless: bool = True
    is_ci: bool = False
    test_user_email: str = "test@example.com"
    test_user_password: str = "Test123!"
    seed: Optional[int] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        is_ci = _bool(env, "CI", False)
        return cls(
            base_url=(_lookup(env, "BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            default_timeout_ms=_int(env, "DEFAULT_TIMEOUT_MS", 10_000),
            navigation_timeout_ms=_int(env, "NAVIGATION_TIMEOUT_MS", 20_000),
            viewport_width=_int(env, "VIEWPORT_WIDTH", 1280),
            viewport_height=_int(env, "VIEWPORT_HEIGHT", 720),
            # CI machines have no display
            headless=True if is_ci else _bool(env, "HEADLESS", True),
            is_ci=is_ci,
            test_user_email=_lookup(env, "TEST_USER_EMAIL") or "test@example.com",
            test_user_password=_lookup(env, "TEST_USER_PASSWORD") or "Test123!",
            seed=_int(env, "SEED", None),
            log_level=(_lookup(env, "LOG_LEVEL") or "INFO").upper(),
        )

    def url(self, path: str = "/") -> str:
        return self.base_url + "/" + path.lstrip("/")
