"""History ranking pipeline with lazy exports."""

from __future__ import annotations

from importlib import import_module
from typing import Dict, Tuple

_EXPORTS: Dict[str, Tuple[str, str]] = {
    "AnalysisSession": ("sitesleuth.ranking.pipeline", "AnalysisSession"),
    "QueryOutcome": ("sitesleuth.ranking.pipeline", "QueryOutcome"),
    "analyze_history": ("sitesleuth.ranking.pipeline", "analyze_history"),
    "extract_concepts": ("sitesleuth.ranking.concepts", "extract_concepts"),
    "get_domain_score": ("sitesleuth.ranking.domain_score", "get_domain_score"),
    "smart_keyword_filter": (
        "sitesleuth.ranking.keyword_filter",
        "smart_keyword_filter",
    ),
    "select_candidates": ("sitesleuth.ranking.candidates", "select_candidates"),
    "rank_candidates": ("sitesleuth.ranking.ai_rank", "rank_candidates"),
    "grounded_analysis": ("sitesleuth.ranking.grounded", "grounded_analysis"),
    "add_citations": ("sitesleuth.ranking.citations", "add_citations"),
    "fallback_analysis": ("sitesleuth.ranking.fallback", "fallback_analysis"),
    "candidate_based_fallback": (
        "sitesleuth.ranking.fallback",
        "candidate_based_fallback",
    ),
}


def __getattr__(name: str):
    if name not in _EXPORTS:
        raise AttributeError(f"module 'sitesleuth.ranking' has no attribute {name!r}")
    module_name, attr_name = _EXPORTS[name]
    module = import_module(module_name)
    return getattr(module, attr_name)


__all__ = sorted(_EXPORTS.keys())
