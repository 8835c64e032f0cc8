"""LangGraph pipeline for CV parsing."""

from cv_parser_ai.graph.workflow import create_parse_graph, run_parse_graph

__all__ = ["create_parse_graph", "run_parse_graph"]
