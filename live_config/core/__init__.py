"""
核心模块

- LiveConfigCell: 可热重载的配置单元
- ConfigRegistry: 按 (类型, 配置节) 管理配置单元
- Observer / Subscription: 配置变化订阅
"""

from .cell import CellState, LiveConfigCell, pydantic_deserializer
from .observers import CallbackObserver, Observer, Subscription, as_observer
from .registry import ConfigRegistry

__all__ = [
    "LiveConfigCell",
    "CellState",
    "pydantic_deserializer",
    "ConfigRegistry",
    "Observer",
    "CallbackObserver",
    "Subscription",
    "as_observer",
]
