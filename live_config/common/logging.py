"""Loguru日志配置"""

import sys
import traceback
from pathlib import Path

from loguru import logger

DEFAULT_SECTION = "---"


def format_exception_truncated(record, limit: int = 1000) -> str:
    """格式化记录中的异常堆栈，超过 limit 个字符时截断"""
    exception = record["exception"]
    if not exception:
        return ""
    exc_text = "".join(traceback.format_exception(*exception))
    return exc_text if len(exc_text) <= limit else exc_text[:limit] + "..."


def _ensure_section(record) -> bool:
    record["extra"].setdefault("section", DEFAULT_SECTION)
    return True


def configure_logging(log_config) -> None:
    """配置Loguru日志系统

    Args:
        log_config: 日志配置对象 (LoggingConfig)
    """
    # 移除默认的handler
    logger.remove()

    # 控制台日志格式（包含配置节）
    console_format = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{extra[section]}</cyan> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"

    logger.add(
        sys.stdout,
        format=console_format,
        level=log_config.level,
        colorize=True,
        filter=_ensure_section,
    )

    if not log_config.log_file:
        return

    log_path = Path(log_config.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    # 文件日志（包含截取的异常堆栈），异常文本需转义格式占位符和颜色标签
    def file_format_with_truncated_exception(record):
        exc_info = (
            format_exception_truncated(record, log_config.max_exception_chars)
            .replace("{", "{{")
            .replace("}", "}}")
            .replace("<", r"\<")
        )
        return (
            "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[section]} | "
            "{name}:{line} | {message} | " + exc_info + "\n"
        )

    logger.add(
        str(log_path),
        format=file_format_with_truncated_exception,
        level=log_config.level,
        rotation=log_config.rotation,
        retention=log_config.retention,
        encoding="utf-8",
        filter=_ensure_section,
    )


def get_logger_with_section(section_key: str | None = None):
    """获取绑定了配置节的日志器实例

    Args:
        section_key: 配置节路径，为空时使用默认占位符

    Returns:
        绑定了配置节的logger实例
    """
    return logger.bind(section=section_key or DEFAULT_SECTION)
