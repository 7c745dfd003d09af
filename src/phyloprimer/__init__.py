"""phyloprimer.

Sequence distance, UPGMA tree building and PCR primer pair search for DNA
sequences. The package exposes plain data structures (trees, ranked primer
pairs) for a presentation layer to draw.
"""

__version__ = "1.0.0"

from .config import ToolkitConfig
from .models import Sequence, ClusterNode, PrimerCandidate, PrimerPair, SearchParameters
from .core import (
    FastaParser,
    SequenceAligner,
    DistanceMatrixBuilder,
    TreeBuilder,
    build_tree,
    reverse_complement,
    prepare_sequences,
)
from .primers import PrimerSearchEngine, SearchState
from .main import run_tree, run_primer_search

__all__ = [
    "__version__",
    "ToolkitConfig",
    "Sequence",
    "ClusterNode",
    "PrimerCandidate",
    "PrimerPair",
    "SearchParameters",
    "FastaParser",
    "SequenceAligner",
    "DistanceMatrixBuilder",
    "TreeBuilder",
    "build_tree",
    "reverse_complement",
    "prepare_sequences",
    "PrimerSearchEngine",
    "SearchState",
    "run_tree",
    "run_primer_search",
]
