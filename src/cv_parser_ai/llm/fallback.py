"""Model fallback within a single provider.

Hosted model names get retired or gated without a reliable way to ask which
ones are live, so candidates are probed in priority order. Models that are
missing or access-denied are skipped at once; any other failure waits a
short delay before moving on.
"""

import logging
import re
import time
from collections.abc import Callable, Iterable
from typing import Generic, NamedTuple, TypeVar

from cv_parser_ai.exceptions import CVParserError, ModelFallbackExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNAVAILABLE_STATUS_CODES = {403, 404}
UNAVAILABLE_MESSAGE_PATTERN = re.compile(
    r"404|not found|access denied|does not exist|permission",
    re.IGNORECASE,
)


class FallbackResult(NamedTuple, Generic[T]):
    value: T
    model: str
    attempt_index: int
    attempted_models: list[str]


def _status_code(exc: BaseException) -> int | None:
    for attr in ("status_code", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def is_model_unavailable_error(exc: BaseException) -> bool:
    """Whether an error means the model itself is missing or not accessible.

    Checks an HTTP status on the exception (or its cause) first, then the
    message text.
    """
    for candidate in (exc, getattr(exc, "cause", None), exc.__cause__):
        if candidate is None:
            continue
        if _status_code(candidate) in UNAVAILABLE_STATUS_CODES:
            return True
        if UNAVAILABLE_MESSAGE_PATTERN.search(str(candidate)):
            return True
    return False


def build_candidate_models(primary: str | None, candidates: Iterable[str]) -> list[str]:
    """Put the configured model first and drop duplicates, keeping order.

    Examples:
        >>> build_candidate_models("b", ["a", "b", "c"])
        ['b', 'a', 'c']
    """
    ordered = [primary] if primary else []
    ordered.extend(candidates)
    return list(dict.fromkeys(model for model in ordered if model))


def run_with_model_fallback(
    candidates: Iterable[str],
    attempt: Callable[[str], T],
    delay_seconds: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> FallbackResult[T]:
    """Call ``attempt(model)`` for each candidate until one succeeds.

    Args:
        candidates: Model ids in priority order.
        attempt: Callable run with each model id.
        delay_seconds: Wait after a failure that is not a missing-model error.
        sleep: Sleep function, injectable for tests.

    Returns:
        FallbackResult with the first successful value and the model used.

    Raises:
        ModelFallbackExhaustedError: If every candidate failed.
    """
    models = list(candidates)
    attempted: list[str] = []
    last_error: BaseException | None = None

    for index, model in enumerate(models):
        attempted.append(model)
        try:
            value = attempt(model)
        except Exception as e:
            if isinstance(e, CVParserError) and not e.retryable:
                raise
            last_error = e
            if is_model_unavailable_error(e):
                logger.warning(f"Model {model} unavailable, trying next: {e}")
                continue
            logger.warning(f"Model {model} failed, retrying with next model: {e}")
            if index < len(models) - 1 and delay_seconds > 0:
                sleep(delay_seconds)
            continue

        if index > 0:
            logger.info(f"Succeeded with fallback model {model}")
        return FallbackResult(value, model, index, attempted)

    raise ModelFallbackExhaustedError(attempted, last_error)
