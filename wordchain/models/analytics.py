import math
import time
import logging

import numpy as np


class ChainAnalytics:
    """
    Statistics and sequence scoring for a trained Chain.

    All probabilities are read straight from the chain's trie: the share of a
    node's weight held by one child edge.
    """

    def __init__(self, chain, logger=None):
        """
        Args:
            chain (Chain): The chain to analyze
            logger (logging.Logger, optional): Logger for analytics results
        """
        self.chain = chain
        self.logger = logger or logging.getLogger(__name__)

    def analyze_model(self):
        """
        Summarize the shape of the trained model.

        Returns:
            dict: Statistics including:
                - max_depth / ignore_case: the chain's settings
                - node_count: nodes in the context tree
                - tree_depth: longest path in the context tree, in edges
                - vocabulary_size: distinct stored words anywhere in the tree
                - sentence_starts: distinct opening words
                - start_entropy: entropy (nats) of the opening-word distribution
                - avg_branching: mean weighted-child count of context nodes
                - top_starts: up to five most frequent opening words
        """
        start_time = time.time()
        chain = self.chain
        starts = chain.sentence_start_tree_root

        branching = np.array([
            sum(1 for w in node.child_weights.values() if w > 0)
            for node in chain.word_tree_root.iter_nodes()
            if node.weight_sum > 0
        ], dtype=float)

        start_weights = np.array(list(starts.child_weights.values()), dtype=float)
        if start_weights.size:
            p = start_weights / start_weights.sum()
            start_entropy = float(-(p * np.log(p)).sum())
        else:
            start_entropy = 0.0

        top_starts = sorted(starts.child_weights.items(), key=lambda kv: kv[1], reverse=True)[:5]

        stats = {
            "max_depth": chain.max_depth,
            "ignore_case": chain.ignore_case,
            "node_count": chain.node_count(),
            "tree_depth": chain.word_tree_root.depth(),
            "vocabulary_size": len({key for node in chain.word_tree_root.iter_nodes()
                                    for key in node.children}),
            "sentence_starts": len(starts.children),
            "start_entropy": start_entropy,
            "avg_branching": float(branching.mean()) if branching.size else 0.0,
            "top_starts": [
                {"word": starts.children[key].surface, "count": count}
                for key, count in top_starts
            ],
        }

        self.logger.info("Model analysis completed", extra={
            "metrics": {**stats, "execution_time": time.time() - start_time}
        })
        return stats

    def transition_probability(self, context, word):
        """
        Probability that ``word`` follows ``context``.

        Args:
            context (Sequence[str]): Preceding words; only the last ``max_depth`` are used
            word (str): Candidate next word

        Returns:
            float: Probability in [0, 1]; 0.0 for unseen contexts or words
        """
        chain = self.chain
        if context:
            node = chain.word_tree_root.seek(list(context)[-chain.max_depth:], 0, chain.ignore_case)
        else:
            node = chain.sentence_start_tree_root

        if node is None or node.weight_sum == 0:
            return 0.0
        return node.weight_of(word, chain.ignore_case) / node.weight_sum

    def score_sequence(self, words):
        """
        Natural-log probability of generating ``words`` as a complete prefix.

        Args:
            words (Sequence[str]): Sequence to score

        Returns:
            float: Log probability; ``-inf`` if any step was never observed,
            ``0.0`` for an empty sequence
        """
        words = list(words)
        log_prob = 0.0
        for i, word in enumerate(words):
            p = self.transition_probability(words[:i], word)
            if p == 0.0:
                self.logger.debug("Unseen transition while scoring", extra={
                    "metrics": {"position": i, "word": word}
                })
                return -math.inf
            log_prob += math.log(p)
        return log_prob
