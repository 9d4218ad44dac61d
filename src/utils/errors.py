"""Error taxonomy and graceful-degradation helpers for Recipe Finder.

Exception classes:
- InvalidRequest: missing/blank ingredient input (HTTP 400)
- UpstreamError: recipe search or detail API failure (HTTP 500 when it is the search call)
- PartialEnrichmentFailure: a per-recipe or suggestion AI failure; never surfaced, always degraded
- ClientFetchFailure: the terminal client could not reach or parse the service

safe_execute_async / safe_execute_sync consolidate the try/except/log pattern for
operations whose failure should degrade into a default value.
"""

from typing import Any, Awaitable, Callable, Optional, TypeVar

from src.utils.logger import logger

T = TypeVar("T")


class RecipeFinderError(Exception):
    """Base class for all Recipe Finder errors."""


class InvalidRequest(RecipeFinderError):
    """Raised when the ingredient query is absent or blank."""


class UpstreamError(RecipeFinderError):
    """Raised when a Spoonacular call fails or returns an unusable body."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class PartialEnrichmentFailure(RecipeFinderError):
    """Raised by generative calls; callers replace the result with a placeholder."""


class ClientFetchFailure(RecipeFinderError):
    """Raised by the terminal client on network, status or parse failures."""


def _log_error(operation_name: str, exception: Exception, log_level: str = "warning", **extra: Any) -> None:
    """Log error with appropriate level."""
    msg = f"{operation_name}: {exception}"
    if log_level == "debug":
        logger.debug(msg, extra=extra)
    elif log_level == "error":
        logger.error(msg, extra=extra)
    else:
        logger.warning(msg, extra=extra)


async def safe_execute_async(
    coro: Awaitable[T],
    operation_name: str,
    log_level: str = "warning",
    default_return: Any = None,
    reraise: bool = False,
    **extra: Any,
) -> Any:
    """Safely execute async operation with consistent error logging.

    Args:
        coro: Awaitable to execute.
        operation_name: Description for logging (e.g., "Generate instructions").
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        default_return: Value returned on exception. Default: None.
        reraise: If True, re-raise after logging. Default: False.
        **extra: Context fields attached to the log record (query, recipe_id).

    Returns:
        Result of the awaitable, or default_return on exception when reraise is False.

    Example:
        text = await safe_execute_async(
            gemini.generate(prompt), "Generate instructions", default_return=PLACEHOLDER
        )
    """
    try:
        return await coro
    except Exception as e:
        _log_error(operation_name, e, log_level, **extra)
        if reraise:
            raise
        return default_return


def safe_execute_sync(
    func: Callable[[], T],
    operation_name: str,
    log_level: str = "warning",
    default_return: Any = None,
    reraise: bool = False,
    **extra: Any,
) -> Any:
    """Synchronous version of safe_execute_async. Same behavior and patterns."""
    try:
        return func()
    except Exception as e:
        _log_error(operation_name, e, log_level, **extra)
        if reraise:
            raise
        return default_return
