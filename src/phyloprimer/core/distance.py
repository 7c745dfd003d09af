"""Pairwise distance matrix construction."""

from __future__ import annotations

from typing import Optional, Sequence as SequenceType, Union

import numpy as np
from loguru import logger

from ..models import Sequence
from .alignment import SequenceAligner


def _bases(entry: Union[Sequence, str]) -> str:
    return entry.bases if isinstance(entry, Sequence) else entry


class DistanceMatrixBuilder:
    """Apply a SequenceAligner to every pair of an ordered sequence set.

    Each of the n(n-1)/2 pairs costs one O(L^2) alignment, so a full build is
    O(n^2 L^2) in time.
    """

    def __init__(self, aligner: Optional[SequenceAligner] = None):
        self.aligner = aligner or SequenceAligner()

    def build(self, sequences: SequenceType[Union[Sequence, str]]) -> np.ndarray:
        """
        Build the symmetric distance matrix.

        Args:
            sequences: Sequence objects or plain base strings

        Returns:
            Read-only n x n matrix with a zero diagonal
        """
        n = len(sequences)
        matrix = np.zeros((n, n), dtype=float)

        for i in range(n):
            for j in range(i + 1, n):
                distance = self.aligner.align(_bases(sequences[i]), _bases(sequences[j]))
                matrix[i, j] = matrix[j, i] = distance
                logger.debug(f"Distance {i}-{j}: {distance:.4f}")

        matrix.setflags(write=False)
        return matrix
