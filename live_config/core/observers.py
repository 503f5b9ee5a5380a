"""观察者与订阅"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from .cell import LiveConfigCell

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)


@runtime_checkable
class Observer(Protocol[T_contra]):
    """配置观察者接口"""

    def on_next(self, value: T_contra) -> None:
        """接收新的配置值"""
        ...

    def on_complete(self) -> None:
        """配置单元释放，之后不会再有任何调用"""
        ...


class CallbackObserver(Generic[T]):
    """将普通函数适配为观察者"""

    def __init__(
        self,
        on_next: Callable[[T], None],
        on_complete: Callable[[], None] | None = None,
    ):
        self._on_next = on_next
        self._on_complete = on_complete

    def on_next(self, value: T) -> None:
        self._on_next(value)

    def on_complete(self) -> None:
        if self._on_complete is not None:
            self._on_complete()

    def __repr__(self) -> str:
        name = getattr(self._on_next, "__qualname__", repr(self._on_next))
        return f"CallbackObserver({name})"


def as_observer(obj) -> Observer:
    """返回观察者对象本身，或将可调用对象包装为观察者"""
    if isinstance(obj, Observer):
        return obj
    if callable(obj):
        return CallbackObserver(obj)
    raise TypeError(f"无法作为配置观察者: {obj!r}")


class Subscription(Generic[T]):
    """一次订阅，释放后从所属配置单元中移除

    订阅不拥有观察者，只保存引用。重复释放无副作用。
    """

    def __init__(self, cell: "LiveConfigCell[T]", observer: Observer):
        self._cell = cell
        self.observer = observer
        self._closed = False

    @property
    def active(self) -> bool:
        return not self._closed

    def dispose(self) -> None:
        self._cell._unsubscribe(self)

    unsubscribe = dispose

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()

    def __repr__(self) -> str:
        state = "active" if self.active else "closed"
        return f"<Subscription {self._cell.section_key!r} {self.observer!r} {state}>"
