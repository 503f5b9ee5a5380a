"""
live-config

可热重载的类型化配置单元。

主要功能:
- 从配置源读取配置节并解析为强类型对象（pydantic）
- 配置源变化时自动重新解析，失败时保留上一次的有效值
- 订阅配置变化，订阅时立即推送当前值
- JSON 配置文件监听（watchdog）
- 按 (类型, 配置节) 注册和获取配置

使用示例:
    from live_config import ConfigRegistry

    registry = ConfigRegistry.from_json_file("config/app.json")
    registry.add_live_config(FeatureFlags, "Feature", FeatureFlags(enabled=False))
    flags = registry.resolve(FeatureFlags)
"""

__version__ = "1.0.0"
__description__ = "Live-reloading typed configuration cells"

from .common import configure_logging, get_logger_with_section
from .config import Config, LoggingConfig, WatcherConfig, get_config, reload_config
from .core import (
    CallbackObserver,
    CellState,
    ConfigRegistry,
    LiveConfigCell,
    Observer,
    Subscription,
)
from .models import (
    CellDisposedError,
    LiveConfigError,
    NotConfiguredError,
    RegistrationError,
    ReloadFailureReport,
    ReloadParseError,
    ServiceNotRegisteredError,
    SourceLoadError,
)
from .sources import (
    ConfigurationSource,
    JsonFileConfigurationSource,
    MemoryConfigurationSource,
    WatchHandle,
)

__all__ = [
    # 核心
    "LiveConfigCell",
    "CellState",
    "ConfigRegistry",
    "Observer",
    "CallbackObserver",
    "Subscription",
    # 配置源
    "ConfigurationSource",
    "WatchHandle",
    "MemoryConfigurationSource",
    "JsonFileConfigurationSource",
    # 异常
    "LiveConfigError",
    "NotConfiguredError",
    "ReloadParseError",
    "CellDisposedError",
    "SourceLoadError",
    "RegistrationError",
    "ServiceNotRegisteredError",
    "ReloadFailureReport",
    # 配置与日志
    "Config",
    "LoggingConfig",
    "WatcherConfig",
    "get_config",
    "reload_config",
    "configure_logging",
    "get_logger_with_section",
    "__version__",
    "__description__",
]
