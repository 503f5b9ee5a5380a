"""
配置源模块

配置单元通过 ConfigurationSource 接口读取原始配置数据并接收变化通知。

主要实现:
- MemoryConfigurationSource: 基于字典，适合测试和程序内配置
- JsonFileConfigurationSource: 基于 JSON 文件，文件变化时自动重载
"""

from .base import (
    SECTION_DELIMITER,
    CallbackRegistration,
    ChangeNotifier,
    ConfigurationSource,
    WatchHandle,
    resolve_section,
)
from .file import JsonFileConfigurationSource
from .memory import MemoryConfigurationSource

__all__ = [
    "SECTION_DELIMITER",
    "ConfigurationSource",
    "WatchHandle",
    "CallbackRegistration",
    "ChangeNotifier",
    "resolve_section",
    "MemoryConfigurationSource",
    "JsonFileConfigurationSource",
]
