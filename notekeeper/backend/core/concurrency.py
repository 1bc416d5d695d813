"""
Concurrency Infrastructure.

Thread pool for blocking file I/O, plus the per-file mutation locks that
serialize every read-modify-write cycle against the notes file.

Pools:
    _io_pool - TracedThreadPoolExecutor for blocking I/O

Locks:
    One asyncio.Lock per resolved data file path. Every store mutation holds
    its file's lock from load to save, so in-process writers never interleave.
    Writers in other processes are not coordinated.

Usage:
    from notekeeper.backend.core.concurrency import get_io_pool, get_write_lock

    # Run blocking code in thread pool (preserves structlog context)
    result = await loop.run_in_executor(get_io_pool(), blocking_fn, arg)

    # Serialize a read-modify-write cycle
    async with get_write_lock(path):
        ...
"""

import asyncio
import contextvars
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from notekeeper.backend.core.logging import get_logger

logger = get_logger(__name__)

_io_pool: ThreadPoolExecutor | None = None
_write_locks: dict[str, asyncio.Lock] = {}


class TracedThreadPoolExecutor(ThreadPoolExecutor):
    """ThreadPoolExecutor that propagates contextvars to worker threads.

    Standard ThreadPoolExecutor does not carry structlog context or the
    request_id into worker threads. This subclass copies the current context
    before dispatching, so log records from file I/O keep their request_id.
    """

    def submit(self, fn, /, *args, **kwargs):
        ctx = contextvars.copy_context()
        return super().submit(ctx.run, fn, *args, **kwargs)


def get_io_pool() -> TracedThreadPoolExecutor:
    """Get the shared thread pool for blocking I/O operations.

    Creates the pool lazily on first call using config from concurrency.yaml.
    """
    global _io_pool
    if _io_pool is None:
        from notekeeper.backend.core.config import get_app_config
        max_workers = get_app_config().concurrency.thread_pool.max_workers
        _io_pool = TracedThreadPoolExecutor(max_workers=max_workers)
        logger.info("Thread pool created", extra={"max_workers": max_workers})
    return _io_pool


def get_write_lock(path: Path) -> asyncio.Lock:
    """Get the mutation lock guarding one data file.

    Locks are keyed by resolved path so two stores pointed at the same file
    share a lock.
    """
    key = str(Path(path).resolve())
    if key not in _write_locks:
        _write_locks[key] = asyncio.Lock()
        logger.debug("Write lock created", extra={"path": key})
    return _write_locks[key]


async def shutdown_pools() -> None:
    """Shut down the I/O pool gracefully. Called during application shutdown.

    Pool shutdown is blocking, so we run it in a thread to avoid stalling
    the event loop during graceful shutdown.
    """
    global _io_pool

    if _io_pool is not None:
        await asyncio.to_thread(_io_pool.shutdown, wait=True)
        logger.info("Thread pool shut down")
        _io_pool = None

    _write_locks.clear()
    logger.debug("Write locks cleared")
