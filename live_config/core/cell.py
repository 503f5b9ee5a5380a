"""可热重载的类型化配置单元

配置单元持有某个配置节最近一次成功解析的对象，监听配置源的变化，
重新解析成功后替换当前值并按订阅顺序推送给所有观察者。
解析失败时保留上一次的有效值，只记录日志和诊断报告。
"""

import threading
from collections.abc import Callable
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter

from ..common.logging import get_logger_with_section
from ..models.errors import (
    CellDisposedError,
    NotConfiguredError,
    ReloadFailureReport,
    ReloadParseError,
)
from ..sources.base import ConfigurationSource
from .observers import Subscription, as_observer

T = TypeVar("T")

_UNSET: Any = object()


class CellState(str, Enum):
    """配置单元状态"""

    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    DISPOSED = "disposed"


def pydantic_deserializer(config_type: type[T]) -> Callable[[Any], T]:
    """使用 pydantic TypeAdapter 将原始数据校验并转换为目标类型"""
    adapter = TypeAdapter(config_type)
    return adapter.validate_python


class LiveConfigCell(Generic[T]):
    """可热重载的配置单元

    使用示例:
        source = MemoryConfigurationSource({"Feature": {"enabled": True}})
        cell = LiveConfigCell("Feature", source, FeatureFlags)

        cell.get_value().enabled
        subscription = cell.subscribe(lambda flags: print(flags))
    """

    def __init__(
        self,
        section_key: str,
        source: ConfigurationSource,
        config_type: type[T],
        default: T | None = None,
        *,
        deserializer: Callable[[Any], T] | None = None,
        error_handler: Callable[[ReloadFailureReport], None] | None = None,
    ):
        """
        初始化配置单元，立即读取并解析一次配置，然后注册变化监听

        Args:
            section_key: 配置节路径
            source: 配置源
            config_type: 目标配置类型
            default: 初次解析没有结果时使用的默认值
            deserializer: 自定义解析函数，默认使用 pydantic
            error_handler: 接收解析失败诊断报告的回调
        """
        self.section_key = section_key
        self.config_type = config_type
        self._source = source
        self._deserializer = deserializer or pydantic_deserializer(config_type)
        self._error_handler = error_handler
        self._logger = get_logger_with_section(section_key)

        # 值的替换、订阅列表的修改和推送都在这把锁内进行
        self._lock = threading.RLock()
        self._subscriptions: list[Subscription[T]] = []
        self._state = CellState.UNINITIALIZED
        self._publishing = False
        self._reload_pending = False
        self._generation = 0

        value = None
        try:
            value = self._parse()
        except ReloadParseError as e:
            self._logger.warning(f"初始配置解析失败，使用默认值: {e}")
            self._report(e, initial=True)

        if value is None:
            value = default
        self._value = _UNSET if value is None else value

        # 先进入 ACTIVE，注册期间到达的变化通知才会被处理
        self._state = CellState.ACTIVE
        self._watch = source.on_change(self.on_reload_signal)

    @property
    def state(self) -> CellState:
        return self._state

    @property
    def has_value(self) -> bool:
        return self._value is not _UNSET

    @property
    def generation(self) -> int:
        """成功重载的次数"""
        return self._generation

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def get_value(self) -> T:
        """获取当前配置值

        Raises:
            NotConfiguredError: 从未成功解析且没有默认值
            CellDisposedError: 配置单元已释放
        """
        value = self._value
        if self._state is CellState.DISPOSED:
            raise CellDisposedError(self.section_key)
        if value is _UNSET:
            raise NotConfiguredError(self.section_key, self.config_type)
        return value

    def subscribe(self, observer) -> Subscription[T]:
        """订阅配置变化

        当前已有值时，在返回之前同步推送一次当前值。

        Args:
            observer: 实现 on_next/on_complete 的观察者，或接收新值的函数

        Returns:
            Subscription: 释放后取消本次订阅
        """
        observer = as_observer(observer)
        with self._lock:
            if self._state is CellState.DISPOSED:
                raise CellDisposedError(self.section_key)

            subscription = Subscription(self, observer)
            self._subscriptions.append(subscription)

            if self._value is not _UNSET:
                self._replay(subscription)

        self._logger.info("已添加配置观察者")
        return subscription

    def _replay(self, subscription: Subscription[T]) -> None:
        # 回放期间触发的重载延后到回放返回之后执行
        was_publishing = self._publishing
        self._publishing = True
        try:
            try:
                subscription.observer.on_next(self._value)
            except Exception:
                self._subscriptions.remove(subscription)
                subscription._closed = True
                raise
            finally:
                self._publishing = was_publishing
        finally:
            if not was_publishing:
                self._drain_pending_reloads()

    def _unsubscribe(self, subscription: Subscription[T]) -> None:
        with self._lock:
            if subscription._closed:
                return
            subscription._closed = True
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
        self._logger.info("已移除配置观察者")

    def on_reload_signal(self) -> None:
        """配置源变化回调，任何异常都不会抛出到配置源"""
        try:
            self._reload()
        except Exception:
            self._logger.exception("配置重载出现未预期的异常")

    def _reload(self) -> None:
        with self._lock:
            if self._state is CellState.DISPOSED:
                return

            # 观察者在推送过程中触发了配置源变化，等当前推送完成后再重载
            if self._publishing:
                self._reload_pending = True
                return

            self._reload_pending = True
            self._drain_pending_reloads()

    def _drain_pending_reloads(self) -> None:
        while self._reload_pending and self._state is not CellState.DISPOSED:
            self._reload_pending = False
            self._reload_once()

    def _reload_once(self) -> None:
        try:
            value = self._parse()
            if value is None:
                raise ReloadParseError(
                    self.section_key, self.config_type, "配置节不存在或为空"
                )
        except ReloadParseError as e:
            self._logger.error(f"配置解析失败，保留当前值: {e}")
            self._report(e)
            return

        self._value = value
        self._generation += 1
        self._logger.info("已更新配置值")
        self._publish(value)

    def _parse(self) -> T | None:
        try:
            raw = self._source.get(self.section_key)
        except Exception as e:
            raise ReloadParseError(
                self.section_key, self.config_type, f"读取配置源失败: {e}", e
            ) from e

        if raw is None:
            return None

        try:
            return self._deserializer(raw)
        except Exception as e:
            raise ReloadParseError(self.section_key, self.config_type, str(e), e) from e

    def _publish(self, value: T) -> None:
        self._publishing = True
        try:
            for subscription in list(self._subscriptions):
                if not subscription.active:
                    continue
                try:
                    subscription.observer.on_next(value)
                except Exception:
                    self._logger.exception(
                        f"配置观察者处理更新失败: {subscription.observer!r}"
                    )
        finally:
            self._publishing = False

    def _report(self, error: ReloadParseError, initial: bool = False) -> None:
        if self._error_handler is None:
            return
        try:
            self._error_handler(ReloadFailureReport.from_error(error, initial=initial))
        except Exception:
            self._logger.exception("配置解析失败报告回调执行失败")

    def dispose(self) -> None:
        """释放配置单元：通知所有观察者完成，清空订阅并注销变化监听"""
        with self._lock:
            if self._state is CellState.DISPOSED:
                return
            self._state = CellState.DISPOSED
            self._reload_pending = False

            subscriptions = list(self._subscriptions)
            for subscription in subscriptions:
                subscription._closed = True
            for subscription in subscriptions:
                try:
                    subscription.observer.on_complete()
                except Exception:
                    self._logger.exception(
                        f"配置观察者处理完成通知失败: {subscription.observer!r}"
                    )
            self._subscriptions.clear()

        self._watch.release()
        self._logger.info("配置单元已释放")

    close = dispose

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()

    def __repr__(self) -> str:
        type_name = getattr(self.config_type, "__qualname__", repr(self.config_type))
        return f"<LiveConfigCell {self.section_key!r} {type_name} {self._state.value}>"
