"""Primer design modules for phyloprimer."""

from .search import PrimerSearchEngine, SearchState, finalize_pairs

__all__ = [
    "PrimerSearchEngine",
    "SearchState",
    "finalize_pairs",
]
