"""
Merge forest for deferred label equivalences.

An array of parent indices where every union links the larger root under the
smaller one, so each component resolves to its earliest-discovered label.
"""

from typing import List


class DisjointSet:
    """Disjoint-set over labels ``0..n-1`` with union toward the smaller index."""

    def __init__(self, size: int = 0):
        self._parent: List[int] = list(range(size))

    def __len__(self) -> int:
        return len(self._parent)

    def make_set(self) -> int:
        """Add a new singleton label and return it."""
        label = len(self._parent)
        self._parent.append(label)
        return label

    def find(self, label: int) -> int:
        """Root of ``label``, compressing the path walked."""
        parent = self._parent
        root = label
        while parent[root] != root:
            root = parent[root]
        while parent[label] != root:
            parent[label], label = root, parent[label]
        return root

    def union(self, first: int, second: int) -> int:
        """
        Merge the sets holding ``first`` and ``second``.

        Returns:
            The surviving root, always the smaller of the two roots
        """
        root_a = self.find(first)
        root_b = self.find(second)
        if root_a == root_b:
            return root_a
        if root_b < root_a:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        return root_a

    def resolve(self) -> List[int]:
        """
        Flatten the forest so that ``forest[i] == forest[forest[i]]`` for all i.

        Returns:
            The resolved parent list (each entry is its label's root)
        """
        for label in range(len(self._parent)):
            self.find(label)
        return list(self._parent)

    def roots(self) -> List[int]:
        """Distinct roots in ascending order; their count is the true region count."""
        return sorted({self.find(label) for label in range(len(self._parent))})
