"""Data models for the phyloprimer toolkit."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from io import StringIO
from typing import Dict, Iterator, List, Optional, Tuple

from Bio import Phylo
from Bio.Phylo.BaseTree import Clade, Tree

from .exceptions import InputError

DNA_ALPHABET = frozenset("ACGT")


@dataclass(frozen=True)
class Sequence:
    """Named DNA sequence over the four canonical bases."""

    name: str
    bases: str

    def __post_init__(self):
        invalid = set(self.bases) - DNA_ALPHABET
        if invalid:
            raise InputError(
                f"unexpected symbols {''.join(sorted(invalid))}",
                sequence_name=self.name,
            )

    def __len__(self) -> int:
        return len(self.bases)

    @classmethod
    def from_raw(cls, name: str, raw: str) -> "Sequence":
        """Create a sequence from user input, dropping non-ACGT symbols."""
        from .core.sequence import clean_sequence

        name = (name or "").strip() or "Unnamed"
        return cls(name=name, bases=clean_sequence(raw))

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "Sequence":
        """Create from dictionary."""
        return cls(**data)


@dataclass(frozen=True)
class ClusterNode:
    """Node of a UPGMA tree.

    Leaves carry the original sequence and no children. Internal nodes carry
    exactly two children, the merge distance (half the average linkage
    distance at the time of the merge) and the indices of every input
    sequence beneath them, in merge order.

    Average linkage can place a child slightly above its parent when
    floating-point ties occur, so merge distances are not guaranteed to be
    non-decreasing from the leaves to the root.
    """

    name: str
    indices: Tuple[int, ...]
    distance: float = 0.0
    children: Tuple["ClusterNode", ...] = ()
    sequence: Optional[Sequence] = None

    @classmethod
    def leaf(cls, index: int, sequence: Sequence) -> "ClusterNode":
        return cls(name=sequence.name, indices=(index,), sequence=sequence)

    @classmethod
    def merge(cls, left: "ClusterNode", right: "ClusterNode", distance: float) -> "ClusterNode":
        return cls(
            name="",
            indices=left.indices + right.indices,
            distance=distance,
            children=(left, right),
        )

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def size(self) -> int:
        """Number of leaves under this node."""
        return len(self.indices)

    def iter_nodes(self) -> Iterator["ClusterNode"]:
        """Yield every node of the subtree in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def leaves(self) -> List["ClusterNode"]:
        """Leaves from top to bottom, the order a renderer lays them out."""
        return [node for node in self.iter_nodes() if node.is_leaf]

    def internal_nodes(self) -> List["ClusterNode"]:
        return [node for node in self.iter_nodes() if not node.is_leaf]

    def to_phylo(self) -> Tree:
        """Convert to a rooted ``Bio.Phylo`` tree.

        Branch lengths are the difference between the parent and child merge
        distances, leaves sitting at distance zero.
        """
        return Tree(root=self._to_clade(None), rooted=True)

    def _to_clade(self, parent_distance: Optional[float]) -> Clade:
        branch_length = None if parent_distance is None else parent_distance - self.distance
        if self.is_leaf:
            return Clade(branch_length=branch_length, name=self.name)
        return Clade(
            branch_length=branch_length,
            clades=[child._to_clade(self.distance) for child in self.children],
        )

    def to_newick(self, precision: int = 5) -> str:
        """Serialize the tree in Newick format."""
        handle = StringIO()
        Phylo.write(self.to_phylo(), handle, "newick", format_branch_length=f"%1.{precision}f")
        return handle.getvalue().strip()

    def to_dict(self) -> Dict:
        """Convert to a nested dictionary."""
        data = {
            "name": self.name,
            "distance": self.distance,
            "indices": list(self.indices),
            "children": [child.to_dict() for child in self.children],
        }
        if self.sequence is not None:
            data["sequence"] = self.sequence.bases
        return data


@dataclass(frozen=True)
class PrimerCandidate:
    """Single primer that passed every per-primer filter."""

    start: int  # 0-based position of the scanned window
    length: int
    sequence: str  # 5'->3' primer sequence
    melting_temp: float
    gc_percent: float

    @property
    def end(self) -> int:
        """Exclusive end of the scanned window."""
        return self.start + self.length

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class PrimerPair:
    """Forward/reverse primer pair flanking the target region."""

    forward: PrimerCandidate
    reverse: PrimerCandidate
    product_length: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "product_length", self.reverse.end - self.forward.start)

    @property
    def key(self) -> Tuple[int, int]:
        """Identity used for deduplication."""
        return (self.forward.start, self.reverse.start)

    def to_dict(self) -> Dict:
        """Flat record for tabulation."""
        return {
            "forward_start": self.forward.start,
            "reverse_start": self.reverse.start,
            "forward_primer": self.forward.sequence,
            "reverse_primer": self.reverse.sequence,
            "forward_length": self.forward.length,
            "reverse_length": self.reverse.length,
            "forward_tm": self.forward.melting_temp,
            "reverse_tm": self.reverse.melting_temp,
            "forward_gc": self.forward.gc_percent,
            "reverse_gc": self.reverse.gc_percent,
            "product_length": self.product_length,
        }


@dataclass(frozen=True)
class SearchParameters:
    """Primer search request around a 0-based target region."""

    region_start: int
    region_end: int
    desired_tm: float = 60.0
    max_tm_diff: float = 3.0
    pair_count: int = 5
    min_product_length: Optional[int] = None

    def __post_init__(self):
        if self.region_start < 0 or self.region_end < 0:
            raise InputError(f"Negative target region: {self.region_start}-{self.region_end}")
        if self.region_start > self.region_end:
            raise InputError(
                f"Target region start {self.region_start} is after end {self.region_end}"
            )
        if self.max_tm_diff < 0:
            raise InputError(f"Invalid Tm tolerance: {self.max_tm_diff}")
        if self.pair_count < 1:
            raise InputError(f"Invalid pair count: {self.pair_count}")

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return asdict(self)
