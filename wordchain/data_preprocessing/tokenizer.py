"""
Delimiter Tokenizer Module

Splits raw text into lines of words using a character classification table.
Every character belongs to exactly one category:

- LINE: ends the current word and the current line
- TOKEN: ends the current word
- IGNORE: dropped entirely
- ORDINARY (anything not listed): part of a word

### Example Usage:

```python
from wordchain.data_preprocessing.tokenizer import DelimiterTokenizer

tokenizer = DelimiterTokenizer(line_delimiters=".!?\\n", token_delimiters=" \\t,", ignored="\\"")
lines = tokenizer.tokenize('Hello, world. "Bye" now!')
# [['Hello', 'world'], ['Bye', 'now']]
```
"""

from enum import Enum


class CharCategory(Enum):
    ORDINARY = 0
    IGNORE = 1
    LINE = 2
    TOKEN = 3


class DelimiterConfigurationError(ValueError):
    """A character was assigned to more than one delimiter category."""


DEFAULT_LINE_DELIMITERS = "\n"
DEFAULT_TOKEN_DELIMITERS = " \t"
DEFAULT_IGNORED = "\r"


def build_lookup(line_delimiters, token_delimiters, ignored):
    """
    Build the character -> category table.

    Args:
        line_delimiters (Iterable[str]): Characters that end a line
        token_delimiters (Iterable[str]): Characters that end a word
        ignored (Iterable[str]): Characters to drop

    Returns:
        dict: Character to CharCategory

    Raises:
        DelimiterConfigurationError: If a character appears more than once
    """
    lookup = {}
    for chars, category in ((line_delimiters, CharCategory.LINE),
                            (token_delimiters, CharCategory.TOKEN),
                            (ignored, CharCategory.IGNORE)):
        for char in chars:
            if len(char) != 1:
                raise DelimiterConfigurationError(
                    f"Delimiters must be single characters, got {char!r}")
            if char in lookup:
                raise DelimiterConfigurationError(
                    f"Duplicate delimiter {char!r}: already {lookup[char].name}, "
                    f"cannot also be {category.name}")
            lookup[char] = category
    return lookup


class DelimiterTokenizer:
    """
    Turns raw text into lines of words for chain training.
    """

    def __init__(self, line_delimiters=DEFAULT_LINE_DELIMITERS,
                 token_delimiters=DEFAULT_TOKEN_DELIMITERS, ignored=DEFAULT_IGNORED):
        self.lookup = build_lookup(line_delimiters, token_delimiters, ignored)

    def category(self, char):
        return self.lookup.get(char, CharCategory.ORDINARY)

    def iter_tokenize(self, chunks):
        """
        Tokenize text supplied in pieces (e.g. a file object read in chunks).

        Args:
            chunks (Iterable[str]): Consecutive pieces of the text

        Yields:
            list[str]: One non-empty line of words at a time
        """
        line = []
        word = []

        for chunk in chunks:
            for char in chunk:
                category = self.lookup.get(char, CharCategory.ORDINARY)

                if category is CharCategory.ORDINARY:
                    word.append(char)
                elif category is CharCategory.TOKEN:
                    if word:
                        line.append("".join(word))
                        word = []
                elif category is CharCategory.LINE:
                    if word:
                        line.append("".join(word))
                        word = []
                    if line:
                        yield line
                        line = []

        if word:
            line.append("".join(word))
        if line:
            yield line

    def tokenize(self, text):
        """
        Tokenize a whole string.

        Args:
            text (str): Raw text

        Returns:
            list[list[str]]: Lines of words
        """
        return list(self.iter_tokenize([text]))

    def tokenize_stream(self, stream, chunk_size=65536):
        """Tokenize a readable text stream without loading it all at once."""
        return self.iter_tokenize(iter(lambda: stream.read(chunk_size), ""))
