"""Typer subclass that accepts coroutine functions as commands."""

import asyncio
import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

import typer


def _run_coroutine(f: Callable) -> Callable:
    """Wrap an async function so Click can call it synchronously."""

    @wraps(f)
    def runner(*args: Any, **kwargs: Any) -> Any:
        coro = f(*args, **kwargs)
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(coro)
        # Called from inside a loop (tests); let the caller await it
        return coro

    return runner


class ATyper(typer.Typer):
    """Typer app whose commands and callbacks may be ``async def``."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("no_args_is_help", False)
        super().__init__(*args, **kwargs)

    def command(self, name: str | None = None, **kwargs: Any) -> Any:  # type: ignore[override]
        parent = super().command(name, **kwargs)

        def decorator(f: Callable) -> Callable:
            if inspect.iscoroutinefunction(f):
                parent(_run_coroutine(f))
                return f
            return parent(f)

        return decorator
