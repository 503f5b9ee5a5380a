"""JSON 文件配置源

加载 JSON 文件作为配置树，文件变化时重新加载并通知所有监听者。
"""

import copy
import json
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from loguru import logger

from ..config.watcher import ConfigWatcher
from ..models.errors import SourceLoadError
from .base import CallbackRegistration, ChangeNotifier, resolve_section


class JsonFileConfigurationSource:
    """监听 JSON 文件的配置源

    文件内容无效时保留加载错误，get() 会抛出 SourceLoadError，
    由配置单元报告解析失败并保留上一次的有效值。
    """

    def __init__(
        self,
        path: str | Path,
        *,
        optional: bool = True,
        reload_on_change: bool = True,
        debounce_seconds: float = 0.1,
    ):
        """
        Args:
            path: JSON 配置文件路径
            optional: 文件不存在时是否视为空配置
            reload_on_change: 是否监听文件变化
            debounce_seconds: 文件变化后延迟重载的秒数
        """
        self.path = Path(path).resolve()
        self.optional = optional
        self._lock = threading.Lock()
        self._data: dict[str, Any] = {}
        self._error: SourceLoadError | None = None
        self._notifier = ChangeNotifier()
        self._watcher: ConfigWatcher | None = None

        if not self.path.exists() and not optional:
            raise SourceLoadError(f"配置文件不存在: {self.path}")

        self._load()
        if self._error is not None:
            logger.warning(f"配置文件加载失败: {self._error}")

        if reload_on_change:
            self._watcher = ConfigWatcher(self.path, debounce_seconds=debounce_seconds)
            self._watcher.add_reload_callback(self._on_file_changed)
            self._watcher.start_watching()

    @property
    def is_watching(self) -> bool:
        return self._watcher is not None and self._watcher.is_watching

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            if self.optional:
                return {}
            raise SourceLoadError(f"配置文件不存在: {self.path}")

        try:
            with open(self.path, encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            raise SourceLoadError(f"配置文件读取失败 {self.path}: {e}") from e

        if not content.strip():
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise SourceLoadError(f"配置文件格式无效 {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise SourceLoadError(f"配置文件顶层必须是 JSON 对象: {self.path}")
        return data

    def _load(self) -> None:
        try:
            data = self._read()
        except SourceLoadError as e:
            with self._lock:
                self._error = e
            return
        with self._lock:
            self._data = data
            self._error = None

    def _on_file_changed(self) -> None:
        self._load()
        if self._error is not None:
            logger.error(f"配置文件重新加载失败: {self._error}")
        self._notifier.notify()

    def get(self, section_key: str) -> Any | None:
        with self._lock:
            if self._error is not None:
                raise self._error
            return copy.deepcopy(resolve_section(self._data, section_key))

    def on_change(self, callback: Callable[[], None]) -> CallbackRegistration:
        return self._notifier.register(callback)

    def reload(self) -> None:
        """手动重新加载文件并通知监听者"""
        self._on_file_changed()

    def close(self) -> None:
        """停止监听文件变化"""
        if self._watcher is not None:
            self._watcher.stop_watching()
            self._watcher = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
