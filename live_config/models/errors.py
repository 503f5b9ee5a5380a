"""异常类型与重载失败报告模型"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


def _type_name(config_type) -> str:
    return getattr(config_type, "__qualname__", None) or repr(config_type)


class LiveConfigError(Exception):
    """live_config 所有异常的基类"""


class NotConfiguredError(LiveConfigError):
    """配置值尚未成功解析且没有提供默认值"""

    def __init__(self, section_key: str, config_type=None):
        self.section_key = section_key
        self.type_name = _type_name(config_type) if config_type is not None else None
        target = f' 对应类型 "{self.type_name}"' if self.type_name else ""
        super().__init__(f'配置节 "{section_key}"{target} 的值当前未设置')


class ReloadParseError(LiveConfigError):
    """配置数据无法读取或无法解析为目标类型"""

    def __init__(
        self,
        section_key: str,
        config_type,
        message: str,
        cause: BaseException | None = None,
    ):
        self.section_key = section_key
        self.type_name = _type_name(config_type)
        self.cause = cause
        super().__init__(f'配置节 "{section_key}" 解析为 "{self.type_name}" 失败: {message}')


class CellDisposedError(LiveConfigError):
    """配置单元已被释放，不能再使用"""

    def __init__(self, section_key: str):
        self.section_key = section_key
        super().__init__(f'配置节 "{section_key}" 的配置单元已释放')


class SourceLoadError(LiveConfigError):
    """配置源加载失败（文件不存在、格式错误等）"""


class RegistrationError(LiveConfigError):
    """配置注册冲突或存在歧义"""


class ServiceNotRegisteredError(LiveConfigError, LookupError):
    """请求的配置类型没有注册"""


class ReloadFailureReport(BaseModel):
    """重载失败的诊断报告"""

    section_key: str = Field(description="配置节路径")
    type_name: str = Field(description="目标配置类型")
    error_type: str = Field(description="异常类型名称")
    message: str = Field(description="错误消息")
    initial: bool = Field(False, description="是否发生在构造时的初次解析")
    occurred_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="发生时间 (UTC)",
    )

    @classmethod
    def from_error(cls, error: ReloadParseError, initial: bool = False) -> "ReloadFailureReport":
        """根据解析异常构建报告"""
        source = error.cause if error.cause is not None else error
        return cls(
            section_key=error.section_key,
            type_name=error.type_name,
            error_type=type(source).__name__,
            message=str(error),
            initial=initial,
        )
