#!/usr/bin/env python3
"""
Tests for UPGMA tree building.
"""

from io import StringIO
from itertools import permutations

import numpy as np
import pytest
from Bio import Phylo

from phyloprimer.core.tree import TreeBuilder, build_tree
from phyloprimer.exceptions import InputError
from phyloprimer.models import ClusterNode, Sequence


def _sequences(n):
    return [Sequence(f"s{i}", "ACGT") for i in range(n)]


class TestTreeBuilder:
    """UPGMA clustering on hand-built matrices."""

    def test_exact_tie_merges_first_pair_in_row_major_order(self):
        # d(0,1) == d(2,3) == 0.2, everything else 0.8
        matrix = [
            [0.0, 0.2, 0.8, 0.8],
            [0.2, 0.0, 0.8, 0.8],
            [0.8, 0.8, 0.0, 0.2],
            [0.8, 0.8, 0.2, 0.0],
        ]
        root = TreeBuilder().cluster(_sequences(4), matrix)

        first, second = root.children
        assert first.indices == (0, 1)
        assert second.indices == (2, 3)
        assert root.indices == (0, 1, 2, 3)
        assert first.distance == pytest.approx(0.1)
        assert second.distance == pytest.approx(0.1)
        assert root.distance == pytest.approx(0.4)

    def test_tie_between_non_adjacent_pairs(self):
        # d(0,2) == d(1,3) == 0.1: (0,2) is met first in the scan
        matrix = [
            [0.0, 0.9, 0.1, 0.9],
            [0.9, 0.0, 0.9, 0.1],
            [0.1, 0.9, 0.0, 0.9],
            [0.9, 0.1, 0.9, 0.0],
        ]
        root = TreeBuilder().cluster(_sequences(4), matrix)

        # After merging (0,2) the working set is [1, 3, {0,2}]; (1,3) is next
        first, second = root.children
        assert first.indices == (0, 2)
        assert second.indices == (1, 3)

    def test_merged_node_is_appended_after_remaining_clusters(self):
        matrix = [
            [0.0, 0.5, 0.1],
            [0.5, 0.0, 0.5],
            [0.1, 0.5, 0.0],
        ]
        root = TreeBuilder().cluster(_sequences(3), matrix)

        leaf, merged = root.children
        assert leaf.is_leaf
        assert leaf.indices == (1,)
        assert merged.indices == (0, 2)
        assert merged.distance == pytest.approx(0.05)
        assert root.distance == pytest.approx(0.25)

    def test_average_linkage(self):
        matrix = [
            [0.0, 0.1, 0.4, 0.6],
            [0.1, 0.0, 0.5, 0.7],
            [0.4, 0.5, 0.0, 0.9],
            [0.6, 0.7, 0.9, 0.0],
        ]
        a = ClusterNode.merge(ClusterNode.leaf(0, Sequence("a", "A")),
                              ClusterNode.leaf(1, Sequence("b", "A")), 0.05)
        b = ClusterNode.leaf(2, Sequence("c", "A"))

        assert TreeBuilder.average_distance(a, b, np.asarray(matrix)) == pytest.approx(0.45)

    @pytest.mark.parametrize("n", [2, 3, 5, 8])
    def test_node_counts(self, n):
        sequences = [Sequence(f"s{i}", "ACGT" + "A" * i + "CG" * (n - i)) for i in range(n)]
        root = build_tree(sequences)

        assert len(root.leaves()) == n
        assert len(root.internal_nodes()) == n - 1
        assert all(len(node.children) == 2 for node in root.internal_nodes())
        assert sorted(root.indices) == list(range(n))

    def test_rejects_single_sequence(self):
        with pytest.raises(InputError):
            TreeBuilder().cluster(_sequences(1), [[0.0]])

    def test_rejects_mismatched_matrix(self):
        with pytest.raises(InputError):
            TreeBuilder().cluster(_sequences(3), [[0.0, 0.1], [0.1, 0.0]])


class TestBuildTree:
    """Alignment, distance matrix and clustering together."""

    def test_near_identical_pair_merges_first(self, three_sequences):
        root = build_tree(three_sequences)

        outgroup, pair = root.children
        assert outgroup.is_leaf
        assert outgroup.name == "C"
        assert pair.indices == (0, 1)
        assert [leaf.name for leaf in pair.children] == ["A", "B"]
        assert pair.distance == pytest.approx(0.05)
        assert root.distance > pair.distance

    def test_identical_sequences_merge_at_zero(self):
        root = build_tree([Sequence("x", "ACGT"), Sequence("y", "ACGT")])

        assert root.distance == 0
        assert root.to_newick().startswith("(x:0.00000,y:0.00000)")

    def test_leaves_keep_their_sequences(self, three_sequences):
        root = build_tree(three_sequences)

        by_name = {leaf.name: leaf.sequence for leaf in root.leaves()}
        assert by_name["A"] == three_sequences[0]
        assert by_name["C"].bases == "TTTTTTTTTT"

    def test_tree_is_immutable(self, three_sequences):
        root = build_tree(three_sequences)

        with pytest.raises(AttributeError):
            root.distance = 1.0

    def test_too_few_sequences(self):
        with pytest.raises(InputError):
            build_tree([Sequence("only", "ACGTACGT")])


# Five taxa with distinct distances: (a,b) and (d,e) merge first, then c joins (a,b)
_FIVE_NAMES = ["a", "b", "c", "d", "e"]
_FIVE_MATRIX = np.array([
    [0.0, 0.1, 0.4, 0.7, 0.8],
    [0.1, 0.0, 0.45, 0.72, 0.82],
    [0.4, 0.45, 0.0, 0.75, 0.85],
    [0.7, 0.72, 0.75, 0.0, 0.3],
    [0.8, 0.82, 0.85, 0.3, 0.0],
])


def _clades(root):
    return {
        frozenset(leaf.name for leaf in node.leaves())
        for node in root.internal_nodes()
    }


class TestInputOrder:
    """Relabelling the input consistently gives the same tree shape."""

    @pytest.mark.parametrize("order", list(permutations(range(5))))
    def test_permuted_input(self, order):
        order = list(order)
        sequences = [Sequence(_FIVE_NAMES[i], "ACGT") for i in order]
        matrix = _FIVE_MATRIX[np.ix_(order, order)]

        root = TreeBuilder().cluster(sequences, matrix)

        assert len(root.leaves()) == 5
        assert len(root.internal_nodes()) == 4
        left, right = root.children
        partition = {frozenset(leaf.name for leaf in left.leaves()),
                     frozenset(leaf.name for leaf in right.leaves())}
        assert partition == {frozenset("abc"), frozenset("de")}
        assert _clades(root) == {
            frozenset("abcde"), frozenset("abc"), frozenset("ab"), frozenset("de"),
        }
        assert root.distance == pytest.approx(4.64 / 12)


class TestNewick:
    """Newick output through Bio.Phylo."""

    def test_branch_lengths_are_merge_distance_differences(self):
        matrix = [
            [0.0, 0.5, 0.1],
            [0.5, 0.0, 0.5],
            [0.1, 0.5, 0.0],
        ]
        root = TreeBuilder().cluster(_sequences(3), matrix)

        tree = Phylo.read(StringIO(root.to_newick()), "newick")

        leaf, merged = tree.root.clades
        assert leaf.name == "s1"
        assert leaf.branch_length == pytest.approx(0.25)
        assert merged.branch_length == pytest.approx(0.2)
        assert [clade.name for clade in merged.clades] == ["s0", "s2"]
        assert all(clade.branch_length == pytest.approx(0.05) for clade in merged.clades)

    def test_to_phylo(self, three_sequences):
        tree = build_tree(three_sequences).to_phylo()

        assert tree.rooted
        assert tree.count_terminals() == 3
        assert [clade.name for clade in tree.get_terminals()] == ["C", "A", "B"]

    def test_labels_with_reserved_characters_are_quoted(self):
        root = build_tree([Sequence("human mito", "ACGTACGT"), Sequence("mouse", "ACGTACGA")])

        text = root.to_newick()
        tree = Phylo.read(StringIO(text), "newick")

        assert "'human mito'" in text
        assert [clade.name for clade in tree.get_terminals()] == ["human mito", "mouse"]

    def test_precision(self):
        root = build_tree([Sequence("x", "ACGT"), Sequence("y", "ACGT")])

        assert root.to_newick(precision=2).startswith("(x:0.00,y:0.00)")
        assert root.to_newick().endswith(";")
