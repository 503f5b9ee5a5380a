"""测试日志配置"""

from loguru import logger

from live_config.common.logging import (
    configure_logging,
    format_exception_truncated,
    get_logger_with_section,
)
from live_config.config import LoggingConfig


class TestConfigureLogging:
    """测试 Loguru 日志配置"""

    def test_file_sink_includes_section(self, tmp_path, restore_logging):
        log_file = tmp_path / "logs" / "live_config.log"
        configure_logging(LoggingConfig(level="DEBUG", log_file=str(log_file)))

        get_logger_with_section("Feature").info("已更新配置值")
        logger.info("无配置节的消息")
        logger.remove()

        content = log_file.read_text(encoding="utf-8")
        assert "| Feature |" in content
        assert "已更新配置值" in content
        assert "| --- |" in content

    def test_level_filters_messages(self, tmp_path, restore_logging):
        log_file = tmp_path / "live_config.log"
        configure_logging(LoggingConfig(level="WARNING", log_file=str(log_file)))

        logger.info("hidden message")
        logger.warning("visible message")
        logger.remove()

        content = log_file.read_text(encoding="utf-8")
        assert "hidden message" not in content
        assert "visible message" in content

    def test_exception_text_in_file(self, tmp_path, restore_logging):
        log_file = tmp_path / "live_config.log"
        configure_logging(LoggingConfig(log_file=str(log_file)))

        try:
            raise ValueError("bad {value}")
        except ValueError:
            logger.exception("reload failed")
        logger.remove()

        content = log_file.read_text(encoding="utf-8")
        assert "reload failed" in content
        assert "ValueError: bad {value}" in content

    def test_exception_text_truncated_in_file(self, tmp_path, restore_logging):
        log_file = tmp_path / "live_config.log"
        configure_logging(LoggingConfig(log_file=str(log_file), max_exception_chars=50))

        try:
            raise ValueError("missing <section> " + "y" * 500)
        except ValueError:
            logger.exception("reload failed")
        logger.remove()

        content = log_file.read_text(encoding="utf-8")
        assert "reload failed" in content
        assert "Traceback" in content
        assert "y" * 500 not in content
        exc_text = content.split("reload failed | ", 1)[1].rstrip("\n")
        assert exc_text.startswith("Traceback")
        assert exc_text.endswith("...")
        assert len(exc_text) == 53

    def test_console_only(self, tmp_path, restore_logging, capsys):
        configure_logging(LoggingConfig(level="INFO"))

        get_logger_with_section("Server").info("console message")

        captured = capsys.readouterr()
        assert "console message" in captured.out
        assert "Server" in captured.out


class TestHelpers:
    """测试日志辅助函数"""

    def test_format_exception_truncated(self):
        assert format_exception_truncated({"exception": None}) == ""

        try:
            raise RuntimeError("x" * 2000)
        except RuntimeError as e:
            record = {"exception": (type(e), e, e.__traceback__)}

        text = format_exception_truncated(record)
        assert len(text) == 1003
        assert text.endswith("...")
        assert format_exception_truncated(record, limit=10) == text[:10] + "..."

    def test_section_binding(self, log_messages):
        messages = []
        handler_id = logger.add(
            lambda m: messages.append(m.record["extra"].get("section")), level="DEBUG"
        )
        try:
            get_logger_with_section("Feature").info("bound")
            get_logger_with_section(None).info("default")
        finally:
            logger.remove(handler_id)

        assert messages == ["Feature", "---"]
