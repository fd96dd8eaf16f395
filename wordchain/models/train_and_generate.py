#!/usr/bin/env python3
"""
Chain Training and Generation Script

Trains a word chain on one or more text datasets and prints freshly generated
lines. Settings come from the environment's YAML config unless overridden on
the command line.
"""
import sys
import argparse

from wordchain.models.chain import Chain
from wordchain.models.analytics import ChainAnalytics
from wordchain.data_preprocessing.corpus import load_corpus
from wordchain.data_preprocessing.tokenizer import (
    DelimiterTokenizer,
    DEFAULT_LINE_DELIMITERS,
    DEFAULT_TOKEN_DELIMITERS,
    DEFAULT_IGNORED,
)
from wordchain.utils.config import load_chain_config
from wordchain.utils.loggers.json_logger import get_logger
from wordchain.utils.system_monitoring import ResourceMonitor


def _unescape(value):
    # Lets "\n", "\t" and "\r" be passed on the command line
    return value.replace("\\n", "\n").replace("\\t", "\t").replace("\\r", "\r")


class ChainTrainer:
    """
    Runs the pipeline: load datasets, tokenize, train, generate.
    """

    def __init__(self, dataset_paths, environment="development", config_path=None,
                 overrides=None, tokenizer=None, logger=None, resource_monitor=None):
        """
        Args:
            dataset_paths (list): Paths to .txt or .csv datasets
            environment (str): Config environment ('development', 'test', 'production')
            config_path (str, optional): Explicit YAML config file
            overrides (dict, optional): Config values that win over the file
            tokenizer (DelimiterTokenizer, optional): Tokenizer for raw text
            logger (logging.Logger, optional): Logger; a JSON logger is created when omitted
            resource_monitor (ResourceMonitor, optional): Resource tracking around training
        """
        self.dataset_paths = list(dataset_paths)
        self.environment = environment
        self.logger = logger or get_logger(
            f"wordchain_train_{environment}", context={"environment": environment})
        self.tokenizer = tokenizer or DelimiterTokenizer()
        self.resource_monitor = resource_monitor

        self.config = load_chain_config(
            environment=environment, config_path=config_path, logger=self.logger
        ).merged_with(**(overrides or {}))

        self.chain = Chain.from_config(self.config, logger=self.logger)

        self.logger.info("ChainTrainer initialized", extra={
            "metrics": {
                "environment": environment,
                "datasets": self.dataset_paths,
                "config": self.config.to_dict(),
            }
        })

    def train_model(self):
        """
        Train the chain on every dataset in order.

        Returns:
            dict: Totals across all datasets
        """
        totals = {"datasets": 0, "lines": 0, "words": 0}
        for path in self.dataset_paths:
            text = load_corpus(path, logger=self.logger)
            stats = self.chain.train_text(
                text, tokenizer=self.tokenizer, resource_monitor=self.resource_monitor)
            totals["datasets"] += 1
            totals["lines"] += stats["lines"]
            totals["words"] += stats["words"]

        totals["node_count"] = self.chain.node_count()
        self.logger.info("Training finished", extra={"metrics": totals})
        return totals

    def generate(self, count=5):
        """
        Generate ``count`` lines of text.

        Returns:
            list[str]: Generated lines (empty strings if nothing was learned)
        """
        return [self.chain.generate_text() for _ in range(count)]

    def run_pipeline(self, count=5, analyze=False):
        self.train_model()
        if analyze:
            ChainAnalytics(self.chain, logger=self.logger).analyze_model()
        return self.generate(count)


def build_parser():
    parser = argparse.ArgumentParser(
        description="Train a word chain on text datasets and generate new lines")
    parser.add_argument("--datasets", nargs="+", required=True,
                        help="Paths to .txt or .csv dataset files")
    parser.add_argument("--env", choices=["development", "test", "production"],
                        default="development", help="Config environment")
    parser.add_argument("--config", help="Explicit chain config YAML file")
    parser.add_argument("--depth", type=int, help="Context depth (overrides config)")
    case = parser.add_mutually_exclusive_group()
    case.add_argument("--ignore-case", dest="ignore_case", action="store_true", default=None,
                      help="Case-fold words (overrides config)")
    case.add_argument("--case-sensitive", dest="ignore_case", action="store_false", default=None,
                      help="Keep words as written (overrides config)")
    parser.add_argument("--max-length", type=int, help="Maximum words per generated line")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output")
    parser.add_argument("--count", type=int, default=5, help="Number of lines to generate")
    parser.add_argument("--line-delims", default=DEFAULT_LINE_DELIMITERS,
                        help="Characters ending a line (escapes like \\n allowed)")
    parser.add_argument("--token-delims", default=DEFAULT_TOKEN_DELIMITERS,
                        help="Characters ending a word")
    parser.add_argument("--ignore-chars", default=DEFAULT_IGNORED,
                        help="Characters to drop from the input")
    parser.add_argument("--analyze", action="store_true", help="Log model statistics")
    parser.add_argument("--log-file", help="Also write JSON logs to this file")
    parser.add_argument("--monitor", action="store_true",
                        help="Log memory and CPU usage around training")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logger = get_logger(f"wordchain_train_{args.env}", log_file=args.log_file,
                        context={"environment": args.env})

    try:
        tokenizer = DelimiterTokenizer(
            line_delimiters=_unescape(args.line_delims),
            token_delimiters=_unescape(args.token_delims),
            ignored=_unescape(args.ignore_chars),
        )
        trainer = ChainTrainer(
            dataset_paths=args.datasets,
            environment=args.env,
            config_path=args.config,
            overrides={
                "max_depth": args.depth,
                "ignore_case": args.ignore_case,
                "max_length": args.max_length,
                "seed": args.seed,
            },
            tokenizer=tokenizer,
            logger=logger,
            resource_monitor=ResourceMonitor(logger) if args.monitor else None,
        )
        lines = trainer.run_pipeline(count=args.count, analyze=args.analyze)
    except (OSError, ValueError) as e:
        logger.error(f"Training failed: {e}", exc_info=True)
        return 1

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
