#!/usr/bin/env python3
"""
Primer pair search module for phyloprimer.

This module scans the sequence around a target region for forward and
reverse primers that pass the GC clamp, GC content and melting temperature
filters, and pairs them into PCR products flanking the region.

The scan is cooperative: ``PrimerSearchEngine.step`` advances a
``SearchState`` to the next checkpoint and returns, so a caller can report
progress, interleave other work or cancel between checkpoints.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Event
from typing import Callable, Iterator, List, Optional

from loguru import logger

from ..core.sequence import gc_content, melting_temperature, reverse_complement
from ..models import PrimerCandidate, PrimerPair, SearchParameters

ProgressCallback = Callable[[int], None]
CompletionCallback = Callable[[List[PrimerPair]], None]


@dataclass
class SearchState:
    """Resumable state of one primer search.

    Checkpoints fall between forward start positions, so the forward cursor
    and the pairs accepted so far are all that needs to survive a suspension.
    """

    dna: str
    params: SearchParameters
    forward_range: range
    reverse_range: range
    next_forward_start: int
    pairs: List[PrimerPair] = field(default_factory=list)
    checkpoints: int = 0
    done: bool = False
    cancelled: bool = False
    result: Optional[List[PrimerPair]] = None

    @property
    def found(self) -> int:
        """Number of pairs accepted so far."""
        return len(self.pairs)


def finalize_pairs(pairs: List[PrimerPair], pair_count: int) -> List[PrimerPair]:
    """
    Rank accumulated pairs.

    Pairs are sorted by product length (stable, so scan order breaks ties),
    deduplicated on (forward start, reverse start) keeping the first
    occurrence and truncated to ``pair_count``.
    """
    unique: List[PrimerPair] = []
    seen = set()
    for pair in sorted(pairs, key=lambda p: p.product_length):
        if pair.key in seen:
            continue
        seen.add(pair.key)
        unique.append(pair)
        if len(unique) >= pair_count:
            break
    return unique


class PrimerSearchEngine:
    """Exhaustive primer pair search around a target region."""

    def __init__(
        self,
        min_primer_length: int = 18,
        max_primer_length: int = 30,
        search_window: int = 2000,
        min_gc: float = 40.0,
        max_gc: float = 60.0,
        checkpoint_interval: int = 100,
    ):
        """
        Initialize search engine.

        Args:
            min_primer_length: Shortest primer considered
            max_primer_length: Longest primer considered
            search_window: Distance from the region scanned on each side
            min_gc: Lowest accepted GC percent
            max_gc: Highest accepted GC percent
            checkpoint_interval: Forward start positions between checkpoints
        """
        self.min_primer_length = min_primer_length
        self.max_primer_length = max_primer_length
        self.search_window = search_window
        self.min_gc = min_gc
        self.max_gc = max_gc
        self.checkpoint_interval = checkpoint_interval

    def start(self, dna: str, params: SearchParameters) -> SearchState:
        """
        Create the state for a new search.

        Args:
            dna: Template sequence over A/C/G/T
            params: Target region and primer constraints

        Returns:
            Fresh search state positioned at the first forward start
        """
        forward_range = range(
            max(0, params.region_start - self.search_window),
            params.region_start - self.min_primer_length + 1,
        )
        reverse_range = range(
            params.region_end + self.min_primer_length,
            min(len(dna) - self.min_primer_length, params.region_end + self.search_window) + 1,
        )

        logger.debug(
            f"Forward starts {forward_range.start}-{forward_range.stop - 1}, "
            f"reverse starts {reverse_range.start}-{reverse_range.stop - 1}"
        )

        return SearchState(
            dna=dna,
            params=params,
            forward_range=forward_range,
            reverse_range=reverse_range,
            next_forward_start=forward_range.start,
        )

    def step(self, state: SearchState, cancel_event: Optional[Event] = None) -> bool:
        """
        Advance the search to the next checkpoint.

        Args:
            state: Search state, updated in place
            cancel_event: When set, the search stops with the pairs found so far

        Returns:
            True once the search is finished and ``state.result`` is set
        """
        if state.done:
            return True

        if cancel_event is not None and cancel_event.is_set():
            logger.info(f"Primer search cancelled with {state.found} pairs found")
            state.cancelled = True
            self._finish(state)
            return True

        while state.next_forward_start < state.forward_range.stop:
            if self._scan_forward_start(state, state.next_forward_start):
                self._finish(state)
                return True

            state.next_forward_start += 1
            if state.next_forward_start % self.checkpoint_interval == 0:
                state.checkpoints += 1
                return False

        self._finish(state)
        return True

    def iter_checkpoints(
        self, state: SearchState, cancel_event: Optional[Event] = None
    ) -> Iterator[int]:
        """Run ``state`` to completion, yielding the pair count at each checkpoint."""
        while not self.step(state, cancel_event):
            yield state.found

    def search(
        self,
        dna: str,
        params: SearchParameters,
        on_progress: Optional[ProgressCallback] = None,
        on_complete: Optional[CompletionCallback] = None,
        cancel_event: Optional[Event] = None,
    ) -> List[PrimerPair]:
        """
        Run a complete search.

        Args:
            dna: Template sequence over A/C/G/T
            params: Target region and primer constraints
            on_progress: Called with the number of pairs found at each checkpoint
            on_complete: Called with the ranked pairs when the search ends
            cancel_event: Checked at every checkpoint

        Returns:
            Ranked, deduplicated pairs; empty when nothing qualifies
        """
        state = self.start(dna, params)
        for found in self.iter_checkpoints(state, cancel_event):
            if on_progress is not None:
                on_progress(found)

        if on_complete is not None:
            on_complete(state.result)
        return state.result

    def evaluate(self, primer: str, start: int, params: SearchParameters) -> Optional[PrimerCandidate]:
        """
        Apply the per-primer filters to a 5'->3' primer sequence.

        Returns:
            The candidate, or None when a filter rejects it
        """
        if primer[-1] not in "GC":
            return None

        gc = gc_content(primer)
        if gc < self.min_gc or gc > self.max_gc:
            return None

        tm = melting_temperature(primer)
        if abs(tm - params.desired_tm) > params.max_tm_diff:
            return None

        return PrimerCandidate(
            start=start,
            length=len(primer),
            sequence=primer,
            melting_temp=tm,
            gc_percent=gc,
        )

    def _lengths(self, dna: str, start: int) -> Iterator[int]:
        for length in range(self.min_primer_length, self.max_primer_length + 1):
            if start + length > len(dna):
                break
            yield length

    def _scan_forward_start(self, state: SearchState, start: int) -> bool:
        """Try every forward length at ``start``; True once enough pairs are found."""
        dna = state.dna
        params = state.params

        for length in self._lengths(dna, start):
            forward = self.evaluate(dna[start:start + length], start, params)
            if forward is None:
                continue

            # Primers must not overlap the target region
            if forward.end >= params.region_start:
                continue

            for rev_start in state.reverse_range:
                if rev_start <= params.region_end:
                    continue

                for rev_length in self._lengths(dna, rev_start):
                    window = dna[rev_start:rev_start + rev_length]
                    reverse = self.evaluate(reverse_complement(window), rev_start, params)
                    if reverse is None:
                        continue

                    pair = PrimerPair(forward=forward, reverse=reverse)
                    if (
                        params.min_product_length is not None
                        and pair.product_length < params.min_product_length
                    ):
                        continue

                    state.pairs.append(pair)
                    if len(state.pairs) >= params.pair_count:
                        return True

        return False

    def _finish(self, state: SearchState) -> None:
        state.done = True
        state.result = finalize_pairs(state.pairs, state.params.pair_count)
        logger.info(
            f"Primer search finished: {len(state.result)} of {state.found} pairs kept "
            f"after {state.checkpoints} checkpoints"
        )
