"""数据模型与异常定义"""

from .errors import (
    CellDisposedError,
    LiveConfigError,
    NotConfiguredError,
    RegistrationError,
    ReloadFailureReport,
    ReloadParseError,
    ServiceNotRegisteredError,
    SourceLoadError,
)

__all__ = [
    "LiveConfigError",
    "NotConfiguredError",
    "ReloadParseError",
    "CellDisposedError",
    "SourceLoadError",
    "RegistrationError",
    "ServiceNotRegisteredError",
    "ReloadFailureReport",
]
