"""Conditional edge functions for the parse graph."""

from typing import Literal

from cv_parser_ai.models.state import ParseState


def should_retry_extraction(
    state: ParseState,
) -> Literal["continue", "retry", "fail"]:
    """Decide what follows an extraction attempt.

    Args:
        state: Current pipeline state.

    Returns:
        "continue" if the reply parsed, "retry" if another attempt is allowed,
        "fail" once retries are exhausted or disabled.
    """
    if state.get("extraction") is not None and state.get("last_error") is None:
        return "continue"

    options = state["options"]
    if options.retry_on_failure and state.get("attempt", 1) <= options.max_retries:
        return "retry"
    return "fail"
