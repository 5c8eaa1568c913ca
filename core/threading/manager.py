"""
Thread Manager for the preferences library

Owns a single-worker STORAGE pool that serialises durable settings writes
in submission order, and dispatches callables onto the Qt UI thread.
"""
import threading
import time
from concurrent.futures import ThreadPoolExecutor, Future, wait as futures_wait
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional
from PySide6.QtCore import QObject, QThread, QCoreApplication, Signal
from core.logging.logger import get_logger, is_verbose_logging

logger = get_logger(__name__)


# UI-thread invoker for reliable main thread dispatch
class _UiInvoker(QObject):
    invoke = Signal(object, object, object)

    def __init__(self):
        super().__init__()
        self.invoke.connect(self._on_invoke)

    def _on_invoke(self, func, args, kwargs):
        try:
            func(*args, **(kwargs or {}))
        except Exception as e:
            logger.exception("UI invoker callable raised: %s", e)


_ui_invoker: Optional[_UiInvoker] = None


def _ensure_ui_invoker() -> Optional[_UiInvoker]:
    global _ui_invoker
    app = QCoreApplication.instance()
    if app is None:
        logger.error("run_on_ui_thread: No QCoreApplication instance")
        return None
    if _ui_invoker is None:
        inv = _UiInvoker()
        inv.moveToThread(app.thread())
        _ui_invoker = inv
    return _ui_invoker


class ThreadPoolType(Enum):
    """Thread pool types for preferences workloads"""
    STORAGE = "storage"     # Durable settings writes, strictly ordered


@dataclass
class TaskResult:
    """Container for task execution results"""
    success: bool
    result: Any = None
    error: Optional[Exception] = None
    execution_time: float = 0.0
    task_id: Optional[str] = None


class Task:
    """Wrapper for executable tasks with metadata"""
    def __init__(self, func: Callable, *args, task_id: str = None, **kwargs):
        self.func = func
        self.args = args
        self.kwargs = kwargs
        self.task_id = task_id or f"task_{id(self)}"
        self.created_at = time.time()
        self.future: Optional[Future] = None
        self.pool_type: Optional[ThreadPoolType] = None


class ThreadManager:
    """
    Centralized thread manager.

    Features:
    - Single-worker STORAGE pool; tasks run one at a time in FIFO order
    - Task callbacks with TaskResult
    - UI thread dispatch
    """
    def __init__(self):
        self._shutdown = False
        self._executors: Dict[ThreadPoolType, ThreadPoolExecutor] = {}
        self._active_tasks: Dict[str, Task] = {}
        self._lock = threading.Lock()

        self._initialize_pools()

        logger.info("ThreadManager initialized with %d pool(s)", len(self._executors))

    def _initialize_pools(self):
        """Initialize one single-worker executor per pool type."""
        for pool_type in ThreadPoolType:
            try:
                self._executors[pool_type] = ThreadPoolExecutor(
                    max_workers=1,
                    thread_name_prefix=f"{pool_type.value}_pool"
                )
                logger.debug("Initialized %s pool", pool_type.value)
            except Exception as e:
                logger.error("Failed to initialize %s pool: %s", pool_type.value, e)
                self.shutdown()
                raise RuntimeError(f"Failed to initialize {pool_type.value} thread pool")

    @property
    def is_shut_down(self) -> bool:
        return self._shutdown

    def submit_task(self, pool_type: ThreadPoolType, func: Callable, *args,
                    task_id: str = None,
                    callback: Callable[[TaskResult], None] = None, **kwargs) -> str:
        """
        Submit a task to the specified thread pool.

        Args:
            pool_type: Which thread pool to use
            func: Function to execute
            *args: Positional arguments for func
            task_id: Optional unique identifier
            callback: Optional callback for result, invoked on the worker thread
            **kwargs: Keyword arguments for func

        Returns:
            str: Task ID for tracking

        Raises:
            RuntimeError: If the manager has been shut down
        """
        if self._shutdown:
            raise RuntimeError("Thread manager is shut down")

        task = Task(func, *args, task_id=task_id, **kwargs)
        task.pool_type = pool_type
        executor = self._executors[pool_type]

        def wrapped_func():
            start_time = time.time()
            try:
                result = task.func(*task.args, **task.kwargs)
                task_result = TaskResult(
                    success=True,
                    result=result,
                    execution_time=time.time() - start_time,
                    task_id=task.task_id
                )
            except Exception as e:
                task_result = TaskResult(
                    success=False,
                    error=e,
                    execution_time=time.time() - start_time,
                    task_id=task.task_id
                )
                logger.exception("Task %s failed: %s", task.task_id, e)
            finally:
                with self._lock:
                    self._active_tasks.pop(task.task_id, None)

            if callback:
                try:
                    callback(task_result)
                except Exception as e:
                    logger.error("Callback for task %s failed: %s", task.task_id, e)

            return task_result

        with self._lock:
            self._active_tasks[task.task_id] = task
        task.future = executor.submit(wrapped_func)

        if is_verbose_logging():
            logger.debug("Submitted task %s to %s pool", task.task_id, pool_type.value)
        return task.task_id

    def submit_storage_task(self, func: Callable, *args, **kwargs) -> str:
        """Convenience method for STORAGE pool submissions.

        Tasks submitted here run one after another in submission order.
        """
        return self.submit_task(ThreadPoolType.STORAGE, func, *args, **kwargs)

    def wait_for_idle(self, pool_type: Optional[ThreadPoolType] = None,
                      timeout: Optional[float] = None) -> bool:
        """Block until every tracked task (optionally of one pool) finished.

        Returns False if the timeout expired first.
        """
        with self._lock:
            futures = [t.future for t in self._active_tasks.values()
                       if t.future is not None
                       and (pool_type is None or t.pool_type == pool_type)]
        if not futures:
            return True
        _done, not_done = futures_wait(futures, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True):
        """
        Shutdown all thread pools.

        Args:
            wait: Whether to wait for queued tasks. When False, queued tasks
                that have not started are cancelled.
        """
        if self._shutdown:
            return
        self._shutdown = True
        logger.info("Shutting down thread manager...")

        for pool_type, executor in self._executors.items():
            pending = [t.task_id for t in list(self._active_tasks.values())
                       if t.pool_type == pool_type]
            if pending:
                logger.info("Pool %s has %d pending tasks during shutdown",
                            pool_type.value, len(pending))
            try:
                executor.shutdown(wait=wait, cancel_futures=not wait)
            except Exception as e:
                logger.error("Error shutting down %s pool: %s", pool_type.value, e)

        self._executors.clear()
        with self._lock:
            self._active_tasks.clear()

        logger.info("Thread manager shut down complete")

    # UI dispatch utilities ----------------------------------------------
    @staticmethod
    def run_on_ui_thread(func: Callable, *args, **kwargs) -> None:
        """Dispatch a callable to the Qt UI thread"""
        try:
            app = QCoreApplication.instance()
            if app is None:
                logger.debug("run_on_ui_thread called without QCoreApplication")
                return

            if QThread.currentThread() is app.thread():
                func(*args, **(kwargs or {}))
                return

            inv = _ensure_ui_invoker()
            if inv is None:
                raise RuntimeError("UI invoker unavailable")
            inv.invoke.emit(func, args, kwargs or {})
        except Exception as e:
            logger.exception("run_on_ui_thread dispatch failed: %s", e)
