"""
Weighted prefix-tree node.

A path of words from a root spells out a context, and the weighted children of
the node at the end of that path are the words observed to follow that
context. Weights only ever grow: training adds to them and nothing removes
them.
"""

from bisect import bisect
from itertools import accumulate


def fold(word, ignore_case):
    """Return the storage key for ``word``."""
    return word.lower() if ignore_case else word


class TrieNode:
    """
    A node in a weighted prefix tree of words.

    Attributes:
        weight_sum (int): Sum of every value in ``child_weights``
        children (dict): Storage key -> child TrieNode
        child_weights (dict): Storage key -> accumulated edge weight
        surface (str or None): Spelling last inserted for the edge leading here
    """

    __slots__ = ("weight_sum", "children", "child_weights", "surface")

    def __init__(self, surface=None):
        self.weight_sum = 0
        self.children = {}
        self.child_weights = {}
        self.surface = surface

    def add_weighted_child(self, word, weight, ignore_case):
        """
        Add ``weight`` to the edge from this node to ``word``.

        The child is created on first insertion. Under ``ignore_case`` the
        edge is keyed by the lower-cased word and the child remembers the
        spelling of the most recent insertion.

        Args:
            word (str): Word to add
            weight (int): Non-negative amount to add to the edge
            ignore_case (bool): Whether keys are case-folded

        Returns:
            TrieNode: The child node for ``word``
        """
        if weight < 0:
            raise ValueError(f"Edge weights cannot decrease (got {weight})")

        key = fold(word, ignore_case)

        self.weight_sum += weight

        child = self.children.get(key)
        if child is None:
            child = TrieNode()
            self.children[key] = child
            self.child_weights[key] = 0

        self.child_weights[key] += weight
        child.surface = word
        return child

    def add_child(self, word, ignore_case):
        return self.add_weighted_child(word, 1, ignore_case)

    def add_weighted_children(self, words, weights, index, ignore_case):
        """
        Insert ``words[index:]`` as a path below this node.

        Each step adds ``words[i]`` as a child of the node reached so far with
        ``weights[i]`` and then moves into that child. Nothing happens when
        ``index`` is out of range (negative or past the end).

        Args:
            words (Sequence[str]): Path to insert
            weights (Sequence[int]): Edge weight for each word in ``words``
            index (int): Position in ``words`` to start from
            ignore_case (bool): Whether keys are case-folded

        Returns:
            int: Number of nodes created by this insertion
        """
        if len(weights) != len(words):
            raise ValueError(
                f"Got {len(weights)} weights for {len(words)} words")

        if index < 0:
            return 0

        created = 0
        node = self
        for i in range(index, len(words)):
            if fold(words[i], ignore_case) not in node.children:
                created += 1
            node = node.add_weighted_child(words[i], weights[i], ignore_case)
        return created

    def add_children(self, words, index, ignore_case):
        return self.add_weighted_children(words, [1] * len(words), index, ignore_case)

    def seek(self, words, index, ignore_case):
        """
        Follow ``words[index:]`` down from this node.

        Args:
            words (Sequence[str]): Context to look up
            index (int): Position in ``words`` to start from
            ignore_case (bool): Whether keys are case-folded

        Returns:
            TrieNode or None: The node at the end of the path, this node when
            the remaining slice is empty or ``index`` is negative, or None if
            some word has no edge.
        """
        if index < 0:
            return self

        node = self
        for i in range(index, len(words)):
            node = node.children.get(fold(words[i], ignore_case))
            if node is None:
                return None
        return node

    def next_word(self, rng):
        """
        Pick a child at random with probability proportional to its weight.

        Args:
            rng: Random source providing ``randrange`` (e.g. random.Random)

        Returns:
            str or None: Surface form of the chosen child, or None when this
            node has no weighted children.
        """
        if self.weight_sum <= 0:
            return None

        # Snapshot in insertion order so a given draw always maps to the same child
        keys = list(self.child_weights)
        cumulative = list(accumulate(self.child_weights[k] for k in keys))

        decision = rng.randrange(self.weight_sum)
        key = keys[bisect(cumulative, decision)]
        return self.children[key].surface

    def weight_of(self, word, ignore_case):
        """Edge weight from this node to ``word`` (0 if there is no such edge)."""
        return self.child_weights.get(fold(word, ignore_case), 0)

    def iter_nodes(self):
        """Yield this node and every descendant, parents before children."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.children.values())))

    def depth(self):
        """Number of edges on the longest path below this node."""
        deepest = 0
        stack = [(self, 0)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in node.children.values())
        return deepest

    def __len__(self):
        return len(self.children)

    def __contains__(self, key):
        return key in self.children

    def __repr__(self):
        return (f"TrieNode(surface={self.surface!r}, children={len(self.children)}, "
                f"weight_sum={self.weight_sum})")
