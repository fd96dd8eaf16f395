import pytest
import pandas as pd
from unittest.mock import MagicMock

from wordchain.data_preprocessing.corpus import load_corpus


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing"""
    return MagicMock()


def test_load_text_file(tmp_path, mock_logger):
    path = tmp_path / "corpus.txt"
    path.write_text("the cat sat\nthe dog ran\n", encoding="utf-8")

    assert load_corpus(str(path), logger=mock_logger) == "the cat sat\nthe dog ran\n"
    mock_logger.info.assert_called_once()


def test_load_text_file_latin1_fallback(tmp_path, mock_logger):
    path = tmp_path / "legacy.txt"
    path.write_bytes("caf\xe9 au lait".encode("latin-1"))

    assert load_corpus(str(path), logger=mock_logger) == "caf\xe9 au lait"


def test_load_csv_prefers_text_column(tmp_path, mock_logger):
    path = tmp_path / "comments.csv"
    pd.DataFrame({
        "id": [1, 2],
        "comment_text": ["first comment", "second comment"],
    }).to_csv(path, index=False)

    assert load_corpus(str(path), logger=mock_logger) == "first comment\nsecond comment"


def test_load_csv_falls_back_to_first_column(tmp_path, mock_logger):
    path = tmp_path / "reviews.csv"
    pd.DataFrame({
        "review": ["good film", "bad film"],
        "score": [5, 1],
    }).to_csv(path, index=False)

    assert load_corpus(str(path), logger=mock_logger) == "good film\nbad film"


def test_load_csv_skips_missing_rows(tmp_path, mock_logger):
    path = tmp_path / "sparse.csv"
    path.write_text("text\nhello there\n\"\"\nbye now\n", encoding="utf-8")

    assert load_corpus(str(path), logger=mock_logger) == "hello there\nbye now"


def test_load_csv_with_mocked_reader(mocker, tmp_path, mock_logger):
    path = tmp_path / "mocked.csv"
    path.write_text("placeholder", encoding="utf-8")
    mocker.patch("pandas.read_csv", return_value=pd.DataFrame({"content": ["Hello world", "This is a test"]}))

    assert load_corpus(str(path), logger=mock_logger) == "Hello world\nThis is a test"


def test_missing_file(tmp_path, mock_logger):
    with pytest.raises(FileNotFoundError):
        load_corpus(str(tmp_path / "nope.txt"), logger=mock_logger)

    mock_logger.error.assert_called_once()


def test_unsupported_extension(tmp_path, mock_logger):
    path = tmp_path / "data.json"
    path.write_text("{}", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported file format"):
        load_corpus(str(path), logger=mock_logger)
