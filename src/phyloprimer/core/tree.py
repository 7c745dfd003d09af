#!/usr/bin/env python3
"""
UPGMA tree building module for phyloprimer.

This module clusters sequences into a rooted binary tree using average
linkage over a pairwise distance matrix.
"""

from __future__ import annotations

from typing import List, Optional, Sequence as SequenceType, Tuple

import numpy as np
from loguru import logger

from ..exceptions import InputError
from ..models import ClusterNode, Sequence
from .alignment import SequenceAligner
from .distance import DistanceMatrixBuilder


class TreeBuilder:
    """Agglomerative average-linkage (UPGMA) clustering.

    Every iteration recomputes all inter-cluster averages from the original
    matrix, which is O(n^3) overall and fine for a few dozen sequences.
    """

    def cluster(self, sequences: SequenceType[Sequence], matrix) -> ClusterNode:
        """
        Cluster sequences into a tree.

        Args:
            sequences: Sequences in matrix order
            matrix: n x n pairwise distance matrix

        Returns:
            Root node of the tree

        Raises:
            InputError: If fewer than two sequences are given or the matrix
                does not match them
        """
        n = len(sequences)
        if n < 2:
            raise InputError(f"At least two sequences are required to build a tree, got {n}")

        distances = np.asarray(matrix, dtype=float)
        if distances.shape != (n, n):
            raise InputError(
                f"Distance matrix shape {distances.shape} does not match {n} sequences"
            )

        clusters: List[ClusterNode] = [
            ClusterNode.leaf(index, sequence) for index, sequence in enumerate(sequences)
        ]

        while len(clusters) > 1:
            (i, j), min_distance = self._closest_pair(clusters, distances)
            merged = ClusterNode.merge(clusters[i], clusters[j], min_distance / 2)
            logger.debug(
                f"Merging clusters {list(clusters[i].indices)} and "
                f"{list(clusters[j].indices)} at {min_distance / 2:.4f}"
            )

            # j > i, so removing j first keeps i valid
            del clusters[j]
            del clusters[i]
            clusters.append(merged)

        return clusters[0]

    @staticmethod
    def average_distance(a: ClusterNode, b: ClusterNode, distances: np.ndarray) -> float:
        """Mean original distance between every member of ``a`` and ``b``."""
        total = 0.0
        for x in a.indices:
            for y in b.indices:
                total += float(distances[x, y])
        return total / (len(a.indices) * len(b.indices))

    def _closest_pair(
        self, clusters: List[ClusterNode], distances: np.ndarray
    ) -> Tuple[Tuple[int, int], float]:
        # Strict comparison: the first minimal pair in row-major order wins ties
        min_distance = float("inf")
        pair = (0, 1)

        for i in range(len(clusters)):
            for j in range(i + 1, len(clusters)):
                d = self.average_distance(clusters[i], clusters[j], distances)
                if d < min_distance:
                    min_distance = d
                    pair = (i, j)

        return pair, min_distance


def build_tree(
    sequences: SequenceType[Sequence],
    aligner: Optional[SequenceAligner] = None,
) -> ClusterNode:
    """Build the distance matrix for ``sequences`` and cluster them."""
    if len(sequences) < 2:
        raise InputError(
            f"At least two sequences are required to build a tree, got {len(sequences)}"
        )

    logger.info(f"Computing pairwise distances for {len(sequences)} sequences")
    matrix = DistanceMatrixBuilder(aligner).build(sequences)
    root = TreeBuilder().cluster(sequences, matrix)
    logger.info(f"Built tree with {root.size} leaves")
    return root
