"""内存配置源"""

import copy
import threading
from collections.abc import Callable
from typing import Any

from .base import SECTION_DELIMITER, CallbackRegistration, ChangeNotifier, resolve_section


class MemoryConfigurationSource:
    """基于字典的配置源

    修改数据后默认立即在调用线程上触发变化通知。
    读取时返回深拷贝，调用方无法修改源中的数据。
    """

    def __init__(self, data: dict[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(data) if data else {}
        self._lock = threading.RLock()
        self._notifier = ChangeNotifier()

    @property
    def watcher_count(self) -> int:
        return len(self._notifier)

    def get(self, section_key: str) -> Any | None:
        with self._lock:
            return copy.deepcopy(resolve_section(self._data, section_key))

    def on_change(self, callback: Callable[[], None]) -> CallbackRegistration:
        return self._notifier.register(callback)

    def set(self, section_key: str, value: Any, notify: bool = True) -> None:
        """设置配置节的值，中间路径不存在时自动创建"""
        parts = section_key.split(SECTION_DELIMITER)
        with self._lock:
            node = self._data
            for part in parts[:-1]:
                child = node.get(part)
                if not isinstance(child, dict):
                    child = {}
                    node[part] = child
                node = child
            node[parts[-1]] = copy.deepcopy(value)
        if notify:
            self.reload()

    def remove(self, section_key: str, notify: bool = True) -> None:
        """删除配置节，不存在时忽略"""
        parts = section_key.split(SECTION_DELIMITER)
        with self._lock:
            node = self._data
            for part in parts[:-1]:
                node = node.get(part)
                if not isinstance(node, dict):
                    break
            else:
                node.pop(parts[-1], None)
        if notify:
            self.reload()

    def load(self, data: dict[str, Any], notify: bool = True) -> None:
        """整体替换配置数据"""
        with self._lock:
            self._data = copy.deepcopy(data)
        if notify:
            self.reload()

    def reload(self) -> None:
        """触发变化通知"""
        self._notifier.notify()
