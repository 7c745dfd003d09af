"""DNA sequence helpers shared by the tree builder and the primer search."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple, Union

from loguru import logger

from ..exceptions import InputError
from ..models import Sequence

COMPLEMENT_MAP = {"A": "T", "T": "A", "C": "G", "G": "C"}

# Sequences shorter than this are left out of tree building
MIN_SEQUENCE_LENGTH = 5

# Width of the fallback target region
DEFAULT_REGION_SIZE = 300

_NON_DNA = re.compile(r"[^ACGT]")


def clean_sequence(raw: str) -> str:
    """Upper-case ``raw`` and drop every symbol outside A/C/G/T."""
    return _NON_DNA.sub("", raw.upper())


def parse_fasta_text(text: str) -> str:
    """Read a single DNA sequence from raw or FASTA-formatted text.

    Only the first line is treated as a header; the remaining lines are
    joined and cleaned.
    """
    lines = text.strip().splitlines()
    if lines and lines[0].startswith(">"):
        lines = lines[1:]
    return clean_sequence("".join(lines))


def reverse_complement(seq: str) -> str:
    """Reverse complement; symbols without a complement are kept as-is."""
    return "".join(COMPLEMENT_MAP.get(base, base) for base in reversed(seq))


def gc_count(seq: str) -> int:
    return sum(1 for base in seq if base in "GC")


def gc_content(seq: str) -> float:
    """GC content in percent."""
    if not seq:
        return 0.0
    return gc_count(seq) / len(seq) * 100


def melting_temperature(seq: str) -> float:
    """Estimate Tm with the Wallace rule below 14 bases, salt-adjusted above."""
    gc = gc_count(seq)
    at = sum(1 for base in seq if base in "AT")
    if len(seq) < 14:
        return float(4 * gc + 2 * at)
    return 64.9 + 41 * (gc - 16.4) / len(seq)


def prepare_sequences(
    entries: Iterable[Union[Sequence, Tuple[str, str]]],
    min_length: int = MIN_SEQUENCE_LENGTH,
) -> List[Sequence]:
    """
    Turn user entries into sequences ready for tree building.

    Args:
        entries: Sequence objects or (name, raw text) tuples
        min_length: Shortest sequence kept, shorter ones are skipped

    Returns:
        Usable sequences in input order

    Raises:
        InputError: If fewer than two usable sequences remain
    """
    usable = []
    for entry in entries:
        if not isinstance(entry, Sequence):
            name, raw = entry
            entry = Sequence.from_raw(name, raw)

        if len(entry) < min_length:
            logger.debug(f"Skipping {entry.name}: {len(entry)} bp is below {min_length} bp")
            continue
        usable.append(entry)

    if len(usable) < 2:
        raise InputError(
            f"At least two sequences of {min_length} bp or more are required, got {len(usable)}"
        )

    logger.info(f"Prepared {len(usable)} sequences for tree building")
    return usable


def resolve_target_region(
    length: int,
    start: Optional[int] = None,
    end: Optional[int] = None,
) -> Tuple[int, int]:
    """
    Validate a 0-based target region against a sequence of ``length`` bases.

    A missing or invalid region is replaced by a region of
    ``DEFAULT_REGION_SIZE`` bases centred on the sequence.
    """
    if (
        start is not None and end is not None
        and 0 <= start < end < length
    ):
        return start, end

    middle = length // 2
    half = DEFAULT_REGION_SIZE // 2
    fallback = (max(0, middle - half), middle + half)
    logger.warning(
        f"Target region {start}-{end} is not usable for a {length} bp sequence, "
        f"using {fallback[0]}-{fallback[1]}"
    )
    return fallback
