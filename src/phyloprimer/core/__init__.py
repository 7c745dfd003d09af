"""Core processing modules for phyloprimer."""

from .parser import FastaParser
from .alignment import SequenceAligner
from .distance import DistanceMatrixBuilder
from .tree import TreeBuilder, build_tree
from .sequence import (
    clean_sequence,
    parse_fasta_text,
    reverse_complement,
    gc_content,
    melting_temperature,
    prepare_sequences,
    resolve_target_region,
)

__all__ = [
    "FastaParser",
    "SequenceAligner",
    "DistanceMatrixBuilder",
    "TreeBuilder",
    "build_tree",
    "clean_sequence",
    "parse_fasta_text",
    "reverse_complement",
    "gc_content",
    "melting_temperature",
    "prepare_sequences",
    "resolve_target_region",
]
