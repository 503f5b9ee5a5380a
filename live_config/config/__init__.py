"""
配置管理模块

提供 live_config 自身配置的加载，以及配置文件热重载监听。

主要功能:
- 配置文件加载和验证
- 配置热重载监听
- 配置实例管理

使用示例:
    from live_config.config import get_config

    config = get_config()
    print(config.watcher.debounce_seconds)
"""

from .settings import (
    Config,
    LoggingConfig,
    WatcherConfig,
    get_config,
    get_config_file_path,
    reload_config,
)
from .watcher import ConfigFileHandler, ConfigWatcher

__all__ = [
    # 配置管理函数
    "get_config",
    "reload_config",
    "get_config_file_path",
    # 配置模型
    "Config",
    "LoggingConfig",
    "WatcherConfig",
    # 配置监听器
    "ConfigWatcher",
    "ConfigFileHandler",
]
