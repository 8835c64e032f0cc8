"""Parse pipeline assembly.

One graph runs one document through extraction (with retry and backoff),
schema validation and enrichment.
"""

import time
from collections.abc import Callable

from langgraph.graph import END, START, StateGraph

from cv_parser_ai.graph.edges import should_retry_extraction
from cv_parser_ai.graph.nodes import create_nodes
from cv_parser_ai.llm.base import LLMProvider
from cv_parser_ai.models.options import ParseOptions
from cv_parser_ai.models.results import ExtractedDocument
from cv_parser_ai.models.state import ParseState
from cv_parser_ai.schemas.cv_schema import CVSchema


def create_parse_graph(
    schema: CVSchema,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
):
    """Create and compile the parse graph for a schema.

    Returns:
        Compiled StateGraph.
    """
    nodes = create_nodes(schema, sleep=sleep, clock=clock)

    workflow = StateGraph(ParseState)

    workflow.add_node("extract_llm", nodes["extract_llm"])
    workflow.add_node("backoff", nodes["backoff"])
    workflow.add_node("validate", nodes["validate"])
    workflow.add_node("enrich", nodes["enrich"])

    workflow.add_edge(START, "extract_llm")

    # Retry loop around the whole prompt -> call -> parse unit
    workflow.add_conditional_edges(
        "extract_llm",
        should_retry_extraction,
        {
            "continue": "validate",
            "retry": "backoff",
            "fail": END,
        },
    )
    workflow.add_edge("backoff", "extract_llm")

    workflow.add_edge("validate", "enrich")
    workflow.add_edge("enrich", END)

    return workflow.compile()


def recursion_limit_for(options: ParseOptions) -> int:
    """Graph step limit: two steps per attempt plus the linear tail."""
    return 10 + 2 * (options.max_retries + 1)


def run_parse_graph(
    graph,
    document: ExtractedDocument,
    options: ParseOptions,
    llm_provider: LLMProvider,
    clock: Callable[[], float] = time.monotonic,
) -> ParseState:
    """Run one document through a compiled parse graph.

    Returns:
        Final state. When extraction failed for good, ``data`` is None and
        ``last_error`` holds the last failure.
    """
    initial_state: ParseState = {
        "document": document,
        "options": options,
        "llm_provider": llm_provider,
        "started_at": clock(),
        "attempt": 0,
        "extraction": None,
        "last_error": None,
        "validation": None,
        "data": None,
        "confidence": 0.0,
        "low_confidence": False,
    }
    return graph.invoke(initial_state, config={"recursion_limit": recursion_limit_for(options)})
