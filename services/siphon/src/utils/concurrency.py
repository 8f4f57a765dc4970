import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, TypeVar

T = TypeVar("T")


async def run_blocking(func: Callable[..., T], *args, **kwargs) -> T:
    """Run blocking function in default executor.

    All boto3 and filesystem calls go through here so the thread pool installed
    by install_executor bounds real parallelism.
    """
    return await asyncio.to_thread(func, *args, **kwargs)


def install_executor(
    loop: asyncio.AbstractEventLoop, max_workers: int
) -> ThreadPoolExecutor:
    """Size the loop's default executor to the worker count."""
    executor = ThreadPoolExecutor(
        max_workers=max_workers, thread_name_prefix="siphon-io"
    )
    loop.set_default_executor(executor)
    return executor
