#!/usr/bin/env python3
"""
Main module for phyloprimer.

This module provides the command line entry point for building UPGMA trees
and searching primer pairs.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from Bio import Phylo
from loguru import logger

from .config import ToolkitConfig
from .core.parser import FastaParser
from .core.sequence import prepare_sequences, resolve_target_region
from .core.tree import build_tree
from .exceptions import ToolkitError, ParseError
from .models import ClusterNode, PrimerPair, SearchParameters

TABLE_COLUMNS = [
    "#", "Fwd Start", "Rev Start", "Fwd Primer", "Rev Primer", "Fwd Len", "Rev Len",
    "Fwd Tm", "Rev Tm", "Fwd GC", "Rev GC", "PCR Len",
]


def setup_logging(log_level: str = "INFO") -> None:
    """Setup logging configuration."""
    logger.remove()
    logger.add(
        sys.stdout,
        level=log_level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss} - {name} - {level} - {message}",
    )


def run_tree(
    config: ToolkitConfig,
    input_file: Path,
    newick_out: Optional[Path] = None,
) -> ClusterNode:
    """
    Build a UPGMA tree from a FASTA file.

    Args:
        config: Toolkit configuration
        input_file: Multi-record FASTA file
        newick_out: Optional file the Newick tree is written to

    Returns:
        Root of the tree
    """
    parser = FastaParser(input_file)
    sequences = prepare_sequences(parser.parse(), config.min_sequence_length)

    root = build_tree(sequences)

    if newick_out is not None:
        newick_out = Path(newick_out)
        newick_out.parent.mkdir(parents=True, exist_ok=True)
        Phylo.write(root.to_phylo(), str(newick_out), "newick")
        logger.info(f"Wrote Newick tree to {newick_out}")

    return root


def run_primer_search(
    config: ToolkitConfig,
    input_file: Path,
    region_start: Optional[int] = None,
    region_end: Optional[int] = None,
) -> List[PrimerPair]:
    """
    Search primer pairs flanking a target region.

    Args:
        config: Toolkit configuration
        input_file: Raw or FASTA sequence file, only the first record is used
        region_start: 1-based first base of the target region
        region_end: 1-based last base of the target region

    Returns:
        Ranked primer pairs
    """
    records = FastaParser(input_file).parse()
    template = records[0]
    if len(records) > 1:
        logger.warning(f"{input_file} holds {len(records)} records, searching {template.name} only")
    if not template.bases:
        raise ParseError("No DNA sequence found", input_file=str(input_file), record_name=template.name)
    dna = template.bases

    start, end = resolve_target_region(
        len(dna),
        region_start - 1 if region_start is not None else None,
        region_end - 1 if region_end is not None else None,
    )

    params = SearchParameters(
        region_start=start,
        region_end=end,
        desired_tm=config.desired_tm,
        max_tm_diff=config.max_tm_diff,
        pair_count=config.pair_count,
        min_product_length=config.min_product_length,
    )

    logger.info(
        f"Searching {params.pair_count} primer pairs around {start + 1}-{end + 1} "
        f"in a {len(dna)} bp sequence"
    )

    engine = config.create_engine()
    return engine.search(
        dna,
        params,
        on_progress=lambda found: logger.info(f"Searching... {found} found so far"),
    )


def format_primer_table(pairs: List[PrimerPair]) -> str:
    """Tab-separated table of primer pairs with 1-based coordinates."""
    if not pairs:
        return "No primers found."

    lines = ["\t".join(TABLE_COLUMNS)]
    for number, pair in enumerate(pairs, start=1):
        row = [
            number,
            pair.forward.start + 1,
            pair.reverse.start + 1,
            pair.forward.sequence,
            pair.reverse.sequence,
            pair.forward.length,
            pair.reverse.length,
            f"{pair.forward.melting_temp:.2f}",
            f"{pair.reverse.melting_temp:.2f}",
            f"{pair.forward.gc_percent:.2f}",
            f"{pair.reverse.gc_percent:.2f}",
            pair.product_length,
        ]
        lines.append("\t".join(str(value) for value in row))
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        description="phyloprimer - UPGMA trees and PCR primer pairs from DNA sequences"
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="YAML configuration file"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    tree_parser = subparsers.add_parser("tree", help="Build a UPGMA tree from a FASTA file")
    tree_parser.add_argument(
        "input_file",
        type=Path,
        help="Input FASTA file with two or more sequences"
    )
    tree_parser.add_argument(
        "--min-length",
        type=int,
        help="Minimum sequence length kept for the tree (default: 5)"
    )
    tree_parser.add_argument(
        "--newick-out",
        type=Path,
        help="Write the Newick tree to this file"
    )

    primer_parser = subparsers.add_parser("primers", help="Search primer pairs around a region")
    primer_parser.add_argument(
        "input_file",
        type=Path,
        help="Input sequence, raw or FASTA"
    )
    primer_parser.add_argument(
        "--region-start",
        type=int,
        help="First base of the target region, 1-based (default: centred 300 bp)"
    )
    primer_parser.add_argument(
        "--region-end",
        type=int,
        help="Last base of the target region, 1-based"
    )
    primer_parser.add_argument(
        "--tm",
        type=float,
        help="Desired primer Tm (default: 60.0)"
    )
    primer_parser.add_argument(
        "--tm-diff",
        type=float,
        help="Allowed Tm deviation (default: 3.0)"
    )
    primer_parser.add_argument(
        "--pairs",
        type=int,
        help="Number of primer pairs to report (default: 5)"
    )
    primer_parser.add_argument(
        "--min-product",
        type=int,
        help="Minimum PCR product length (default: no limit)"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for command line interface."""
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level or "INFO")

    try:
        base = ToolkitConfig.from_yaml(args.config) if args.config else None
        config = ToolkitConfig.from_args(vars(args), base)
        setup_logging(config.log_level)

        if args.command == "tree":
            root = run_tree(config, args.input_file, args.newick_out)
            print(root.to_newick())
        else:
            pairs = run_primer_search(config, args.input_file, args.region_start, args.region_end)
            print(format_primer_table(pairs))

    except ToolkitError as e:
        logger.error(f"phyloprimer failed: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
