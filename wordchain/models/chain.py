"""
Word-level Markov chain backed by a weighted prefix tree.

Training records, for every context of 1 to ``max_depth`` preceding words,
how often each word followed it, plus a separate distribution of the words
that open a line. Generation starts from a sampled opening word and keeps
sampling a continuation for the trailing context until the model has nothing
to offer or ``max_length`` words have been produced.

Not thread-safe: train and generate from one thread, or serialize access.
"""

import random
import logging

from wordchain.models.trie_node import TrieNode
from wordchain.data_preprocessing.tokenizer import DelimiterTokenizer


class Chain:
    """
    A Markov chain over words with a bounded context depth.

    Under ``ignore_case`` words are stored and matched lower-cased, and each
    generated word takes the spelling most recently trained for that position
    in the tree. Other spellings of the same word are not kept.
    """

    def __init__(self, max_depth=2, ignore_case=False, max_length=100, rng=None, seed=None,
                 logger=None):
        """
        Create an empty, untrained chain.

        Args:
            max_depth (int): Most preceding words used as context (values below 1 become 1)
            ignore_case (bool): Case-fold words for storage and lookup
            max_length (int): Most words a single ``generate`` call may return (at least 1)
            rng: Random source with ``randrange``; defaults to ``random.Random(seed)``
            seed: Seed for the default random source, ignored when ``rng`` is given
            logger (logging.Logger, optional): Logger for training/generation events
        """
        self.logger = logger or logging.getLogger(__name__)

        if max_depth < 1:
            self.logger.warning("Context depth below 1 requested, using 1", extra={
                "metrics": {"requested_depth": max_depth}
            })
            max_depth = 1
        if max_length < 1:
            self.logger.warning("Maximum length below 1 requested, using 1", extra={
                "metrics": {"requested_max_length": max_length}
            })
            max_length = 1

        self.max_depth = max_depth
        self.ignore_case = ignore_case
        self.max_length = max_length
        self.rng = rng if rng is not None else random.Random(seed)

        self.word_tree_root = TrieNode()
        self.sentence_start_tree_root = TrieNode()

        self.lines_trained = 0
        self.words_trained = 0
        self._node_count = 0

        self.logger.debug("Chain initialized", extra={
            "metrics": {
                "max_depth": self.max_depth,
                "ignore_case": self.ignore_case,
                "max_length": self.max_length,
            }
        })

    @classmethod
    def from_config(cls, config, rng=None, logger=None):
        """
        Build a chain from a ChainConfig.

        Args:
            config (ChainConfig): Loaded configuration
            rng: Optional random source overriding the configured seed
            logger (logging.Logger, optional): Logger passed to the chain

        Returns:
            Chain: A new, untrained chain
        """
        return cls(
            max_depth=config.max_depth,
            ignore_case=config.ignore_case,
            max_length=config.max_length,
            rng=rng,
            seed=config.seed,
            logger=logger,
        )

    @property
    def is_trained(self):
        return self.sentence_start_tree_root.weight_sum > 0

    def train_line(self, line):
        """
        Add one line of words to the model.

        The first word is counted as a line opener. Every word after it is
        counted as a continuation of each context ending right before it,
        using up to ``max_depth`` preceding words from the same line.

        Args:
            line (Sequence[str]): Words of one line, in order
        """
        if not line:
            return

        root = self.word_tree_root
        for i, word in enumerate(line):
            if i == 0:
                self.sentence_start_tree_root.add_child(word, self.ignore_case)
                self._node_count += root.add_children([word], 0, self.ignore_case)
                continue

            window = line[max(0, i - self.max_depth):i + 1]
            # Context edges only route to the node, the last edge is the observation
            weights = [0] * (len(window) - 1) + [1]
            self._node_count += root.add_weighted_children(window, weights, 0, self.ignore_case)

        self.lines_trained += 1
        self.words_trained += len(line)

    def train(self, lines, resource_monitor=None):
        """
        Train on a sequence of lines. Each line starts with an empty context.

        Args:
            lines (Iterable[Sequence[str]]): Tokenized lines
            resource_monitor (ResourceMonitor, optional): Wraps the run with resource metrics

        Returns:
            dict: Counts for this call (lines, words) and the resulting node count
        """
        if resource_monitor is not None:
            resource_monitor.start("chain_training")

        line_count = 0
        word_count = 0
        try:
            for line in lines:
                self.train_line(line)
                if line:
                    line_count += 1
                    word_count += len(line)
        finally:
            if resource_monitor is not None:
                resource_monitor.stop()

        stats = {
            "lines": line_count,
            "words": word_count,
            "node_count": self.node_count(),
        }
        self.logger.info("Chain training completed", extra={"metrics": stats})
        return stats

    def train_text(self, text, tokenizer=None, resource_monitor=None):
        """
        Tokenize raw text and train on the resulting lines.

        Args:
            text (str): Raw training text
            tokenizer (DelimiterTokenizer, optional): Defaults to newline-separated lines
                of whitespace-separated words
            resource_monitor (ResourceMonitor, optional): Passed through to ``train``

        Returns:
            dict: Training statistics from ``train``
        """
        tokenizer = tokenizer or DelimiterTokenizer()
        return self.train(tokenizer.iter_tokenize([text]), resource_monitor=resource_monitor)

    def generate(self):
        """
        Generate one sequence of words from the trained model.

        Returns:
            list[str]: Generated words; empty if the chain was never trained
        """
        opening = self.sentence_start_tree_root.next_word(self.rng)
        if opening is None:
            self.logger.debug("Generation requested on an untrained chain")
            return []

        words = [opening]
        while True:
            node = self.word_tree_root.seek(words[-self.max_depth:], 0, self.ignore_case)
            if node is None or node.weight_sum == 0:
                break
            if len(words) >= self.max_length:
                self.logger.debug("Generation truncated at maximum length", extra={
                    "metrics": {"max_length": self.max_length}
                })
                break
            words.append(node.next_word(self.rng))

        return words

    next_sentence = generate

    def generate_text(self, separator=" "):
        """Generate one sequence and join it with ``separator``."""
        return separator.join(self.generate())

    def node_count(self):
        """Number of nodes below the context tree root, kept up to date by training."""
        return self._node_count

    def __repr__(self):
        return (f"Chain(max_depth={self.max_depth}, ignore_case={self.ignore_case}, "
                f"max_length={self.max_length}, lines_trained={self.lines_trained})")
