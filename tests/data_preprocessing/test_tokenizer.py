import io
import pytest

from wordchain.data_preprocessing.tokenizer import (
    CharCategory,
    DelimiterConfigurationError,
    DelimiterTokenizer,
    build_lookup,
)


@pytest.fixture
def tokenizer():
    """Tokenizer with the default newline / whitespace / carriage return setup."""
    return DelimiterTokenizer()


@pytest.fixture
def sentence_tokenizer():
    """Tokenizer that treats sentence punctuation as line ends."""
    return DelimiterTokenizer(line_delimiters=".!?\n", token_delimiters=" \t,", ignored='"')


def test_default_tokenize(tokenizer):
    assert tokenizer.tokenize("a b\nc d\n") == [["a", "b"], ["c", "d"]]


def test_adjacent_token_delimiters_produce_no_empty_words(tokenizer):
    assert tokenizer.tokenize("a   b\t\tc") == [["a", "b", "c"]]


def test_empty_lines_skipped(tokenizer):
    assert tokenizer.tokenize("\n\n a \n \n b\n") == [["a"], ["b"]]


def test_trailing_line_without_delimiter_flushed(tokenizer):
    assert tokenizer.tokenize("last line") == [["last", "line"]]


def test_ignored_characters_dropped(tokenizer):
    assert tokenizer.tokenize("win\r\ndows\r\n") == [["win"], ["dows"]]


def test_empty_input(tokenizer):
    assert tokenizer.tokenize("") == []


def test_sentence_delimiters(sentence_tokenizer):
    lines = sentence_tokenizer.tokenize('Hello, world. "Bye" now!')

    assert lines == [["Hello", "world"], ["Bye", "now"]]


def test_category_lookup(sentence_tokenizer):
    assert sentence_tokenizer.category(".") is CharCategory.LINE
    assert sentence_tokenizer.category(",") is CharCategory.TOKEN
    assert sentence_tokenizer.category('"') is CharCategory.IGNORE
    assert sentence_tokenizer.category("x") is CharCategory.ORDINARY


def test_duplicate_across_categories_rejected():
    with pytest.raises(DelimiterConfigurationError, match="Duplicate delimiter"):
        DelimiterTokenizer(line_delimiters="\n", token_delimiters=" \n", ignored="")


def test_duplicate_within_category_rejected():
    with pytest.raises(DelimiterConfigurationError):
        build_lookup("..", "", "")


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        DelimiterTokenizer(line_delimiters="x", token_delimiters="", ignored="x")


def test_multi_character_delimiter_rejected():
    with pytest.raises(DelimiterConfigurationError, match="single characters"):
        build_lookup(["\r\n"], [" "], [])


def test_stream_matches_string(tokenizer):
    text = "a word spans\nthe chunk boundary here\nend"

    streamed = list(tokenizer.tokenize_stream(io.StringIO(text), chunk_size=3))

    assert streamed == tokenizer.tokenize(text)


def test_iter_tokenize_is_lazy(tokenizer):
    lines = tokenizer.iter_tokenize(["first\nsec", "ond\n"])

    assert next(lines) == ["first"]
    assert next(lines) == ["second"]
    with pytest.raises(StopIteration):
        next(lines)
