"""配置注册表

按 (类型, 配置节) 注册配置单元，首次解析时创建单例配置单元，
对外提供当前值访问器、可订阅的配置流以及解析时刻的配置实例。
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

from loguru import logger

from ..config.settings import Config, get_config
from ..models.errors import RegistrationError, ReloadFailureReport, ServiceNotRegisteredError
from ..sources.base import ConfigurationSource
from ..sources.file import JsonFileConfigurationSource
from .cell import LiveConfigCell

T = TypeVar("T")


@dataclass
class _Registration:
    config_type: type
    section_key: str
    default: Any = None
    deserializer: Callable[[Any], Any] | None = None
    cell: LiveConfigCell | None = None


class ConfigRegistry:
    """配置注册表

    使用示例:
        registry = ConfigRegistry(source)
        registry.add_live_config(FeatureFlags, "Feature", FeatureFlags(enabled=False))

        flags = registry.resolve(FeatureFlags)
        registry.get_observable(FeatureFlags).subscribe(on_flags_changed)
    """

    def __init__(
        self,
        source: ConfigurationSource,
        *,
        error_handler: Callable[[ReloadFailureReport], None] | None = None,
        owns_source: bool = False,
    ):
        """
        Args:
            source: 所有配置单元共用的配置源
            error_handler: 传给每个配置单元的解析失败报告回调
            owns_source: 释放注册表时是否同时关闭配置源
        """
        self.source = source
        self._error_handler = error_handler
        self._owns_source = owns_source
        self._registrations: dict[tuple[type, str], _Registration] = {}
        self._built: list[LiveConfigCell] = []
        self._lock = threading.RLock()
        self._disposed = False

    @classmethod
    def from_json_file(
        cls,
        path: str | Path,
        settings: Config | None = None,
        *,
        optional: bool = True,
        error_handler: Callable[[ReloadFailureReport], None] | None = None,
    ) -> "ConfigRegistry":
        """基于 JSON 文件创建注册表，注册表释放时停止文件监听

        未传入 settings 时使用 get_config() 加载的 live_config 配置
        """
        settings = settings or get_config()
        source = JsonFileConfigurationSource(
            path,
            optional=optional,
            reload_on_change=settings.watcher.enabled,
            debounce_seconds=settings.watcher.debounce_seconds,
        )
        return cls(source, error_handler=error_handler, owns_source=True)

    def add_live_config(
        self,
        config_type: type[T],
        section_key: str,
        default: T | None = None,
        *,
        deserializer: Callable[[Any], T] | None = None,
    ) -> "ConfigRegistry":
        """注册一个可热重载的配置类型

        Raises:
            RegistrationError: 同一类型和配置节重复注册
        """
        key = (config_type, section_key)
        with self._lock:
            if self._disposed:
                raise RegistrationError("配置注册表已释放")
            if key in self._registrations:
                raise RegistrationError(
                    f'配置类型 "{config_type.__qualname__}" 已注册到配置节 "{section_key}"'
                )
            self._registrations[key] = _Registration(
                config_type, section_key, default, deserializer
            )
        logger.debug(f"已注册配置: {config_type.__qualname__} -> {section_key}")
        return self

    def _find(self, config_type: type, section_key: str | None) -> _Registration | None:
        if section_key is not None:
            return self._registrations.get((config_type, section_key))

        matches = [r for (t, _), r in self._registrations.items() if t is config_type]
        if len(matches) > 1:
            keys = ", ".join(r.section_key for r in matches)
            raise RegistrationError(
                f'配置类型 "{config_type.__qualname__}" 注册了多个配置节 ({keys})，请指定配置节'
            )
        return matches[0] if matches else None

    def try_get_cell(
        self, config_type: type[T], section_key: str | None = None
    ) -> LiveConfigCell[T] | None:
        """获取配置单元，未注册时返回 None"""
        with self._lock:
            if self._disposed:
                raise RegistrationError("配置注册表已释放")
            registration = self._find(config_type, section_key)
            if registration is None:
                return None
            if registration.cell is None:
                registration.cell = LiveConfigCell(
                    registration.section_key,
                    self.source,
                    registration.config_type,
                    registration.default,
                    deserializer=registration.deserializer,
                    error_handler=self._error_handler,
                )
                self._built.append(registration.cell)
            return registration.cell

    def get_cell(self, config_type: type[T], section_key: str | None = None) -> LiveConfigCell[T]:
        """获取配置单元

        Raises:
            ServiceNotRegisteredError: 配置类型未注册
        """
        cell = self.try_get_cell(config_type, section_key)
        if cell is None:
            target = f' (配置节 "{section_key}")' if section_key else ""
            raise ServiceNotRegisteredError(
                f'配置类型 "{config_type.__qualname__}"{target} 未注册'
            )
        return cell

    def get_options(self, config_type: type[T], section_key: str | None = None) -> Callable[[], T]:
        """获取当前值访问器，每次调用返回最新的配置值"""
        return self.get_cell(config_type, section_key).get_value

    def get_observable(
        self, config_type: type[T], section_key: str | None = None
    ) -> LiveConfigCell[T]:
        """获取可订阅的配置流"""
        return self.get_cell(config_type, section_key)

    def resolve(self, config_type: type[T], section_key: str | None = None) -> T:
        """获取解析时刻的配置实例"""
        return self.get_cell(config_type, section_key).get_value()

    def dispose(self) -> None:
        """按创建顺序释放所有配置单元，并关闭自有的配置源"""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            cells = list(self._built)
            self._built.clear()

        for cell in cells:
            cell.dispose()

        if self._owns_source:
            close = getattr(self.source, "close", None)
            if close is not None:
                close()

    close = dispose

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()
