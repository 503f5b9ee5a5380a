"""live_config 自身的运行配置

从 JSON 文件加载日志与文件监听参数，文件不存在时使用默认值。
"""

import json
import os
from pathlib import Path

import aiofiles
from loguru import logger
from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_PATH = "config/live_config.json"
CONFIG_PATH_ENV = "LIVE_CONFIG_SETTINGS"

_VALID_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class LoggingConfig(BaseModel):
    """日志配置"""

    level: str = Field("INFO", description="日志级别")
    log_file: str | None = Field(None, description="日志文件路径，为空则只输出到控制台")
    rotation: str = Field("10 MB", description="日志文件轮转大小")
    retention: str = Field("1 day", description="日志文件保留时间")
    max_exception_chars: int = Field(1000, gt=0, description="文件日志中异常堆栈的最大字符数")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _VALID_LEVELS:
            raise ValueError(f"无效的日志级别: {v}")
        return level


class WatcherConfig(BaseModel):
    """配置文件监听参数"""

    enabled: bool = Field(True, description="是否监听配置文件变化")
    debounce_seconds: float = Field(0.1, gt=0, description="文件变化后延迟触发重载的秒数")


class Config(BaseModel):
    """live_config 配置"""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)

    @classmethod
    async def from_file(cls, config_path: str | None = None) -> "Config":
        """异步从 JSON 文件加载配置

        Args:
            config_path: 配置文件路径，为 None 时使用 get_config_file_path()

        Returns:
            Config: 配置实例，文件不存在时返回默认配置
        """
        path = Path(config_path or get_config_file_path())
        if not path.exists():
            logger.warning(f"配置文件不存在，使用默认配置: {path}")
            return cls()

        async with aiofiles.open(path, encoding="utf-8") as f:
            content = await f.read()
        return cls.model_validate(json.loads(content))

    @classmethod
    def from_file_sync(cls, config_path: str | None = None) -> "Config":
        """同步从 JSON 文件加载配置"""
        path = Path(config_path or get_config_file_path())
        if not path.exists():
            logger.warning(f"配置文件不存在，使用默认配置: {path}")
            return cls()

        with open(path, encoding="utf-8") as f:
            return cls.model_validate(json.load(f))


_config: Config | None = None


def get_config_file_path() -> str:
    """获取配置文件路径，优先使用环境变量 LIVE_CONFIG_SETTINGS"""
    return os.getenv(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH)


def get_config() -> Config:
    """获取缓存的配置实例，首次调用时同步加载"""
    global _config
    if _config is None:
        _config = Config.from_file_sync()
    return _config


async def reload_config(config_path: str | None = None) -> Config:
    """重新加载配置并替换缓存实例"""
    global _config
    _config = await Config.from_file(config_path)
    logger.info("live_config 配置已重新加载")
    return _config
