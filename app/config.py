"""
全局配置模块：通过 pydantic-settings 读取 .env 环境变量
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用全局配置，从 .env 文件加载"""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Redis ──
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_MAX_CONNECTIONS: int = 10

    # ── 访客身份 Cookie ──
    VISITOR_COOKIE_NAME: str = "id"
    VISITOR_COOKIE_TTL_DAYS: int = 365 * 10  # 10 年

    # ── 静态资源 / 压缩 ──
    STATIC_DIR: str = "public"
    GZIP_MINIMUM_SIZE: int = 500  # 小于该字节数的响应不压缩

    # ── 应用 ──
    ENV: str = "development"  # development | production
    LOG_LEVEL: str = "INFO"
    APP_NAME: str = "todo-sunny"
    APP_PORT: int = 6969

    @field_validator("VISITOR_COOKIE_TTL_DAYS")
    @classmethod
    def _check_cookie_ttl(cls, v: int) -> int:
        """Cookie 有效期必须为正数，否则浏览器会立即删除身份"""
        if v <= 0:
            raise ValueError("VISITOR_COOKIE_TTL_DAYS 必须大于 0")
        return v


@lru_cache
def get_settings() -> Settings:
    """单例获取配置（带缓存）"""
    return Settings()
