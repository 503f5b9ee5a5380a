"""测试用配置模型、观察者和工具函数"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import BaseModel

__all__ = [
    "FeatureFlags",
    "DatabaseSettings",
    "RetryPolicy",
    "RecordingObserver",
    "FailingObserver",
    "BrokenSource",
    "wait_for",
]


class FeatureFlags(BaseModel):
    enabled: bool = False
    rollout: int = 0


class DatabaseSettings(BaseModel):
    host: str
    port: int = 5432


@dataclass
class RetryPolicy:
    attempts: int
    backoff_ms: int = 100


class RecordingObserver:
    """记录所有回调的观察者"""

    def __init__(self, name: str = "observer", on_value: Callable | None = None):
        self.name = name
        self.events: list[tuple] = []
        self._on_value = on_value
        self._lock = threading.Lock()

    def on_next(self, value) -> None:
        with self._lock:
            self.events.append(("next", value))
        if self._on_value is not None:
            self._on_value(value)

    def on_complete(self) -> None:
        with self._lock:
            self.events.append(("complete",))

    @property
    def values(self) -> list:
        with self._lock:
            return [event[1] for event in self.events if event[0] == "next"]

    @property
    def completed(self) -> int:
        with self._lock:
            return sum(1 for event in self.events if event[0] == "complete")

    def __repr__(self) -> str:
        return f"RecordingObserver({self.name})"


class FailingObserver:
    """每次回调都抛出异常的观察者"""

    def __init__(self):
        self.calls = 0

    def on_next(self, value) -> None:
        self.calls += 1
        raise RuntimeError("observer failure")

    def on_complete(self) -> None:
        self.calls += 1
        raise RuntimeError("observer failure")


class BrokenSource:
    """读取总是失败的配置源"""

    def __init__(self):
        self.callbacks: list[Callable[[], None]] = []
        self.released = 0

    def get(self, section_key: str):
        raise RuntimeError("source unavailable")

    def on_change(self, callback: Callable[[], None]):
        self.callbacks.append(callback)
        source = self

        class _Handle:
            def release(self) -> None:
                source.released += 1

        return _Handle()

    def fire(self) -> None:
        for callback in self.callbacks:
            callback()


def wait_for(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.02) -> bool:
    """轮询直到条件成立或超时"""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()
