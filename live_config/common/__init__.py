"""
通用工具模块

主要功能:
- 日志配置和管理
- 绑定配置节的日志器

使用示例:
    from live_config.common import configure_logging
    from live_config.config import LoggingConfig

    configure_logging(LoggingConfig(level="DEBUG"))
"""

from .logging import (
    configure_logging,
    format_exception_truncated,
    get_logger_with_section,
)

__all__ = [
    "configure_logging",
    "format_exception_truncated",
    "get_logger_with_section",
]
