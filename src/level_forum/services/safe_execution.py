"""Failure capture around every service operation.

Service methods are decorated with :func:`safe_operation`. When the wrapped
coroutine raises, the failure is written to the ``app_error`` table through a
separate unit of work and then re-raised unchanged. Writing the error row can
never raise. ``asyncio.CancelledError`` is not an ``Exception`` and therefore
passes through without being recorded.
"""

from __future__ import annotations

import functools
import inspect
import json
import logging
import traceback
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

from sqlalchemy.ext.asyncio import async_sessionmaker

from level_forum.core.errors import ForumError
from level_forum.db.time import utcnow
from level_forum.models import AppError

logger = logging.getLogger(__name__)

T = TypeVar("T")

REDACTED = "***"
SENSITIVE_PARAMETERS = frozenset({"password", "password_hash", "new_password_hash"})


class SafeExecutor:
    """Error sink writer shared by all services."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def record(
        self,
        exc: BaseException,
        operation: str,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        """Persist ``exc`` as an ``AppError`` row. Never raises."""
        try:
            if isinstance(exc, ForumError):
                logger.warning("%s failed: %s", operation, exc)
            else:
                logger.error("%s failed unexpectedly: %s", operation, exc, exc_info=exc)

            row = AppError(
                source=operation,
                error_type=type(exc).__name__,
                message=str(exc),
                stack_trace="".join(traceback.format_exception(exc)),
                context=json.dumps(dict(context or {}), default=str, sort_keys=True),
                created_at=utcnow(),
            )
            async with self._session_factory() as db, db.begin():
                db.add(row)
        except Exception:  # noqa: BLE001 - recording never raises
            pass


def snapshot_arguments(
    signature: inspect.Signature,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> dict[str, Any]:
    """Return the bound call parameters with ``self`` dropped and secrets masked."""
    try:
        bound = signature.bind_partial(*args, **kwargs)
    except TypeError:
        return {"args": [repr(arg) for arg in args[1:]], "kwargs": dict(kwargs)}
    snapshot: dict[str, Any] = {}
    for name, value in bound.arguments.items():
        if name == "self":
            continue
        snapshot[name] = REDACTED if name in SENSITIVE_PARAMETERS else value
    return snapshot


def safe_operation(
    name: str | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorate an async service method so failures reach the error sink.

    The instance must expose the shared :class:`SafeExecutor` as ``self.safe``.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        operation = name or func.__qualname__
        signature = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
            try:
                return await func(self, *args, **kwargs)
            except Exception as exc:
                context = snapshot_arguments(signature, (self, *args), kwargs)
                await self.safe.record(exc, operation, context)
                raise

        return wrapper

    return decorator
