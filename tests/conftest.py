import sys

import pytest
from loguru import logger

from live_config.sources import MemoryConfigurationSource


@pytest.fixture
def source():
    """空的内存配置源"""
    return MemoryConfigurationSource()


@pytest.fixture
def reports():
    """收集解析失败报告，可直接作为 error_handler 使用"""

    class _Reports(list):
        def __call__(self, report):
            self.append(report)

    return _Reports()


@pytest.fixture
def log_messages():
    """捕获 loguru 日志，格式为 "LEVEL message" """
    messages: list[str] = []
    handler_id = logger.add(
        lambda message: messages.append(message.rstrip("\n")),
        format="{level} {message}",
        level="DEBUG",
    )
    yield messages
    try:
        logger.remove(handler_id)
    except ValueError:
        # configure_logging 已移除了所有 handler
        pass


@pytest.fixture
def restore_logging():
    """测试结束后恢复 loguru 默认输出"""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    """每个测试使用独立的 live_config 配置缓存和配置路径"""
    from live_config.config import settings

    monkeypatch.setattr(settings, "_config", None)
    monkeypatch.delenv(settings.CONFIG_PATH_ENV, raising=False)
    yield
