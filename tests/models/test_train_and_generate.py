#!/usr/bin/env python3
"""
Tests for the training/generation pipeline and its command line entry point.
"""

import pytest
from unittest.mock import MagicMock

from wordchain.models.train_and_generate import ChainTrainer, build_parser, main


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing"""
    return MagicMock()


@pytest.fixture
def corpus_file(tmp_path):
    path = tmp_path / "corpus.txt"
    path.write_text("the quick brown fox\n", encoding="utf-8")
    return path


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "chain.yaml"
    path.write_text("max_depth: 2\nignore_case: false\nmax_length: 20\nseed: 3\n", encoding="utf-8")
    return path


class TestChainTrainer:

    def test_config_and_overrides(self, corpus_file, config_file, mock_logger):
        trainer = ChainTrainer(
            [str(corpus_file)], config_path=str(config_file),
            overrides={"max_depth": 4, "seed": None}, logger=mock_logger,
        )

        assert trainer.chain.max_depth == 4
        assert trainer.chain.max_length == 20
        assert trainer.config.seed == 3

    def test_case_sensitive_override_beats_config(self, tmp_path, corpus_file, mock_logger):
        config = tmp_path / "folding.yaml"
        config.write_text("ignore_case: true\n", encoding="utf-8")

        trainer = ChainTrainer([str(corpus_file)], config_path=str(config),
                               overrides={"ignore_case": False}, logger=mock_logger)

        assert trainer.chain.ignore_case is False

    def test_train_model_totals(self, corpus_file, config_file, mock_logger):
        trainer = ChainTrainer([str(corpus_file), str(corpus_file)],
                               config_path=str(config_file), logger=mock_logger)

        totals = trainer.train_model()

        assert totals["datasets"] == 2
        assert totals["lines"] == 2
        assert totals["words"] == 8
        assert totals["node_count"] == trainer.chain.node_count()

    def test_run_pipeline_generates(self, corpus_file, config_file, mock_logger):
        trainer = ChainTrainer([str(corpus_file)], config_path=str(config_file), logger=mock_logger)

        lines = trainer.run_pipeline(count=3, analyze=True)

        assert lines == ["the quick brown fox"] * 3

    def test_resource_monitor_passed_to_training(self, corpus_file, config_file, mock_logger):
        monitor = MagicMock()
        trainer = ChainTrainer([str(corpus_file)], config_path=str(config_file),
                               logger=mock_logger, resource_monitor=monitor)

        trainer.train_model()

        monitor.start.assert_called_once()
        monitor.stop.assert_called_once()

    def test_missing_dataset_raises(self, tmp_path, config_file, mock_logger):
        trainer = ChainTrainer([str(tmp_path / "missing.txt")],
                               config_path=str(config_file), logger=mock_logger)

        with pytest.raises(FileNotFoundError):
            trainer.train_model()


def test_parser_defaults():
    args = build_parser().parse_args(["--datasets", "a.txt"])

    assert args.datasets == ["a.txt"]
    assert args.env == "development"
    assert args.ignore_case is None
    assert args.count == 5


@pytest.mark.parametrize("flag, expected", [("--ignore-case", True), ("--case-sensitive", False)])
def test_parser_case_flags(flag, expected):
    args = build_parser().parse_args(["--datasets", "a.txt", flag])

    assert args.ignore_case is expected


def test_parser_case_flags_exclusive():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--datasets", "a.txt", "--ignore-case", "--case-sensitive"])


def test_main_prints_generated_lines(corpus_file, config_file, capsys):
    code = main(["--datasets", str(corpus_file), "--config", str(config_file),
                 "--count", "2", "--seed", "7"])

    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.splitlines() == ["the quick brown fox"] * 2
    assert "Training finished" in captured.err


def test_main_custom_delimiters(tmp_path, config_file, capsys):
    corpus = tmp_path / "sentences.txt"
    corpus.write_text("one, two. ", encoding="utf-8")

    code = main(["--datasets", str(corpus), "--config", str(config_file), "--count", "1",
                 "--line-delims", ".", "--token-delims", " ,", "--ignore-chars", "\\n"])

    assert code == 0
    assert "one two" in capsys.readouterr().out.splitlines()


def test_main_reports_failure(tmp_path, config_file):
    code = main(["--datasets", str(tmp_path / "missing.txt"), "--config", str(config_file)])

    assert code == 1


def test_main_rejects_conflicting_delimiters(corpus_file, config_file):
    code = main(["--datasets", str(corpus_file), "--config", str(config_file),
                 "--line-delims", "\\n", "--token-delims", " \\n"])

    assert code == 1
