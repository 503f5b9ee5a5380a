"""配置源接口

配置源提供两项能力：按配置节路径读取原始数据，以及注册变化通知回调。
"""

import threading
from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from loguru import logger

SECTION_DELIMITER = ":"


@runtime_checkable
class WatchHandle(Protocol):
    """变化通知的注册句柄"""

    def release(self) -> None:
        """注销回调，重复调用无副作用"""
        ...


@runtime_checkable
class ConfigurationSource(Protocol):
    """配置源接口"""

    def get(self, section_key: str) -> Any | None:
        """读取配置节的原始数据，不存在时返回 None"""
        ...

    def on_change(self, callback: Callable[[], None]) -> WatchHandle:
        """注册变化回调，回调可能被多次调用，也可能在任意线程上调用"""
        ...


class CallbackRegistration:
    """ChangeNotifier 返回的注册句柄"""

    def __init__(self, notifier: "ChangeNotifier", callback: Callable[[], None]):
        self._notifier = notifier
        self.callback = callback
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._notifier._unregister(self)


class ChangeNotifier:
    """线程安全的变化回调列表"""

    def __init__(self):
        self._registrations: list[CallbackRegistration] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._registrations)

    def register(self, callback: Callable[[], None]) -> CallbackRegistration:
        registration = CallbackRegistration(self, callback)
        with self._lock:
            self._registrations.append(registration)
        return registration

    def _unregister(self, registration: CallbackRegistration) -> None:
        with self._lock:
            if registration in self._registrations:
                self._registrations.remove(registration)

    def notify(self) -> None:
        """按注册顺序调用所有回调，单个回调失败不影响其余回调"""
        with self._lock:
            registrations = list(self._registrations)

        for registration in registrations:
            if registration.released:
                continue
            try:
                registration.callback()
            except Exception as e:
                logger.error(f"配置变化回调执行失败: {e}")


def _lookup(node: Mapping, key: str) -> Any | None:
    if key in node:
        return node[key]
    # 与常见配置系统一致，键名不区分大小写
    folded = key.casefold()
    for candidate, value in node.items():
        if isinstance(candidate, str) and candidate.casefold() == folded:
            return value
    return None


def resolve_section(data: Any, section_key: str) -> Any | None:
    """按 ':' 分隔的路径查找配置节

    Args:
        data: 配置树
        section_key: 配置节路径，例如 "Server:Logging"；空字符串表示整棵树

    Returns:
        配置节数据；路径不存在或配置节为空映射时返回 None
    """
    node = data
    if section_key:
        for part in section_key.split(SECTION_DELIMITER):
            if not isinstance(node, Mapping):
                return None
            node = _lookup(node, part)
            if node is None:
                return None

    if isinstance(node, Mapping) and not node:
        return None
    return node
