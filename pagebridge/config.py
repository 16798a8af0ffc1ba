"""配置：从环境变量（及 .env 文件）读取"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

ENV_PREFIX = "PAGE_BRIDGE_"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass
class BridgeConfig:
    host: str = "localhost"
    port: int = 3001
    source: str = "MetaMask"  # hello 消息中的身份标识
    legacy_greeting: bool = False  # 额外发送已废弃的 walletType 字段
    max_attempts: int = 5
    base_delay_ms: int = 2000
    backoff_factor: float = 1.5
    open_timeout: float = 10.0
    screenshots: bool = True
    attach_pattern: str = ""
    log_level: str = "INFO"

    @property
    def url(self) -> str:
        return f"ws://{self.host}:{self.port}"

    def reconnect_delay_ms(self, attempt: int) -> float:
        """第 attempt 次重连（从 1 开始）前的等待时间"""
        return self.base_delay_ms * self.backoff_factor ** (attempt - 1)


def _env(name: str, default: str) -> str:
    return os.getenv(ENV_PREFIX + name, default).strip()


def _int(name: str, default: int) -> int:
    raw = _env(name, str(default))
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None


def _float(name: str, default: float) -> float:
    raw = _env(name, str(default))
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from None


def _bool(name: str, default: bool) -> bool:
    raw = _env(name, "1" if default else "0").lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got {raw!r}")


def load_config(dotenv: bool = True) -> BridgeConfig:
    """
    读取 PAGE_BRIDGE_* 环境变量生成配置。

    dotenv=True 时先加载当前目录下的 .env 文件（不覆盖已有环境变量）。
    """
    if dotenv:
        load_dotenv()

    defaults = BridgeConfig()
    return BridgeConfig(
        host=_env("HOST", defaults.host) or defaults.host,
        port=_int("PORT", defaults.port),
        source=_env("SOURCE", defaults.source) or defaults.source,
        legacy_greeting=_bool("LEGACY_GREETING", defaults.legacy_greeting),
        max_attempts=_int("MAX_ATTEMPTS", defaults.max_attempts),
        base_delay_ms=_int("BASE_DELAY_MS", defaults.base_delay_ms),
        backoff_factor=_float("BACKOFF_FACTOR", defaults.backoff_factor),
        open_timeout=_float("OPEN_TIMEOUT", defaults.open_timeout),
        screenshots=_bool("SCREENSHOTS", defaults.screenshots),
        attach_pattern=_env("ATTACH_PATTERN", defaults.attach_pattern),
        log_level=(_env("LOG_LEVEL", defaults.log_level) or defaults.log_level).upper(),
    )
