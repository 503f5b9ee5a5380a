"""配置文件监听模块

监听单个配置文件的变化，文件被修改、创建或替换时触发重载回调。
使用 watchdog 库监听文件系统事件。
"""

import asyncio
import inspect
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer


class ConfigFileHandler(FileSystemEventHandler):
    """配置文件变化事件处理器"""

    def __init__(
        self,
        config_path: Path,
        callback: Callable[[], None],
        debounce_seconds: float = 0.1,
    ):
        """
        初始化配置文件处理器

        Args:
            config_path: 要监听的配置文件路径
            callback: 配置文件变化时的回调函数
            debounce_seconds: 延迟执行回调的秒数，确保文件写入完成
        """
        self.config_path = config_path.resolve()
        self.callback = callback
        self.debounce_seconds = debounce_seconds
        self._last_modified = 0.0
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    def on_modified(self, event: FileSystemEvent) -> None:
        """处理文件修改事件"""
        if not event.is_directory:
            self._handle(event.src_path)

    def on_created(self, event: FileSystemEvent) -> None:
        """处理文件创建事件"""
        if not event.is_directory:
            self._handle(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        """处理文件替换事件（编辑器通常先写临时文件再重命名）"""
        if not event.is_directory:
            self._handle(event.dest_path)

    def _handle(self, src_path) -> None:
        # 检查是否是我们监听的配置文件
        event_path = Path(src_path).resolve()
        if event_path != self.config_path:
            return

        # 防止重复触发
        try:
            current_modified = event_path.stat().st_mtime
        except OSError:
            return

        with self._lock:
            if current_modified == self._last_modified:
                return
            self._last_modified = current_modified

            logger.info(f"配置文件已修改: {self.config_path}")

            # 延迟一点执行，确保文件写入完成；连续变化只触发最后一次
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce_seconds, self._execute_callback)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        """取消尚未执行的延迟回调"""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _execute_callback(self) -> None:
        """执行回调函数"""
        try:
            self.callback()
        except Exception as e:
            logger.error(f"配置重载回调执行失败: {e}")


class ConfigWatcher:
    """配置文件监听器

    监听指定的配置文件，当文件发生变化时依次执行重载回调。
    回调在单线程执行器中运行，因此同一监听器的重载不会重叠。
    """

    def __init__(self, config_path: str | Path, debounce_seconds: float = 0.1):
        """
        初始化配置监听器

        Args:
            config_path: 配置文件路径
            debounce_seconds: 文件变化后延迟触发的秒数
        """
        self.config_path = Path(config_path).resolve()
        self.debounce_seconds = debounce_seconds
        self.observer: Observer | None = None
        self.handler: ConfigFileHandler | None = None
        self._reload_callbacks: list[Callable[[], Any]] = []
        self._callbacks_lock = threading.Lock()
        self._executor: ThreadPoolExecutor | None = None

    @property
    def is_watching(self) -> bool:
        return self.observer is not None

    def add_reload_callback(self, callback: Callable[[], Any]) -> None:
        """
        添加配置重载回调函数，支持同步函数和协程函数

        Args:
            callback: 回调函数
        """
        with self._callbacks_lock:
            self._reload_callbacks.append(callback)

    def remove_reload_callback(self, callback: Callable[[], Any]) -> None:
        """移除配置重载回调函数，未注册时忽略"""
        with self._callbacks_lock:
            if callback in self._reload_callbacks:
                self._reload_callbacks.remove(callback)

    def start_watching(self) -> None:
        """开始监听配置文件变化"""
        if self.observer is not None:
            logger.warning("配置监听器已在运行")
            return

        watch_dir = self.config_path.parent
        if not watch_dir.exists():
            logger.warning(f"配置文件目录不存在，跳过监听: {watch_dir}")
            return

        # 创建线程池执行器用于回调
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="config-watcher"
            )

        # 创建事件处理器
        self.handler = ConfigFileHandler(
            self.config_path, self._on_config_changed, self.debounce_seconds
        )

        # 创建观察者并开始监听（监听目录以便捕获文件的创建和替换）
        self.observer = Observer()
        self.observer.schedule(self.handler, str(watch_dir), recursive=False)
        self.observer.start()

        logger.info(f"开始监听配置文件: {self.config_path}")

    def stop_watching(self) -> None:
        """停止监听配置文件变化"""
        if self.observer is None:
            return

        logger.info("停止配置文件监听")
        if self.handler is not None:
            self.handler.cancel()
        self.observer.stop()
        self.observer.join()
        self.observer = None
        self.handler = None

        # 关闭线程池
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _on_config_changed(self) -> None:
        """配置文件变化时的处理逻辑"""
        logger.info("检测到配置文件变化，开始重新加载...")

        executor = self._executor
        if executor is None:
            logger.error("线程池执行器未初始化，跳过配置重载")
            return
        try:
            executor.submit(self._handle_config_change)
        except RuntimeError:
            # 执行器已在关闭
            logger.warning("配置监听器已停止，跳过配置重载")

    def _handle_config_change(self) -> None:
        """在线程池中处理配置变化"""
        try:
            # 在新线程中创建事件循环
            loop = asyncio.new_event_loop()
            asyncio.set_event_loop(loop)
            try:
                loop.run_until_complete(self._process_config_change())
            finally:
                asyncio.set_event_loop(None)
                loop.close()
        except Exception as e:
            logger.error(f"配置变化处理失败: {e}")

    async def _process_config_change(self) -> None:
        """依次执行同步和异步回调"""
        with self._callbacks_lock:
            callbacks = list(self._reload_callbacks)

        for callback in callbacks:
            name = getattr(callback, "__name__", repr(callback))
            try:
                if inspect.iscoroutinefunction(callback):
                    await callback()
                else:
                    callback()
                logger.debug(f"配置重载回调执行成功: {name}")
            except Exception as e:
                logger.error(f"配置重载回调执行失败 {name}: {e}")

        logger.info("配置重载完成")

    def __enter__(self):
        """上下文管理器入口"""
        self.start_watching()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """上下文管理器退出"""
        self.stop_watching()
