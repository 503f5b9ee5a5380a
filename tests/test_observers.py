"""测试观察者适配"""

import pytest

from live_config.core import CallbackObserver, Observer, as_observer
from tests.fixtures import RecordingObserver


class TestAsObserver:
    """测试观察者转换"""

    def test_observer_returned_unchanged(self):
        observer = RecordingObserver()
        assert as_observer(observer) is observer
        assert isinstance(observer, Observer)

    def test_callable_wrapped(self):
        received = []
        observer = as_observer(received.append)

        observer.on_next(1)
        observer.on_complete()

        assert isinstance(observer, CallbackObserver)
        assert received == [1]

    def test_non_callable_rejected(self):
        with pytest.raises(TypeError):
            as_observer("not an observer")


class TestCallbackObserver:
    """测试函数观察者"""

    def test_on_complete_callback(self):
        events = []
        observer = CallbackObserver(events.append, lambda: events.append("done"))

        observer.on_next("value")
        observer.on_complete()

        assert events == ["value", "done"]
        assert "CallbackObserver" in repr(observer)
