"""
Corpus loading.

Reads training text from plain-text or CSV datasets. CSV files contribute one
line of text per row, taken from the first column that looks like it holds
text.
"""

import os
import logging

import pandas as pd

TEXT_COLUMN_HINTS = ("text", "content", "comment")


def _read_text_file(file_path):
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError:
        with open(file_path, "r", encoding="latin-1") as f:
            return f.read()


def _read_csv_file(file_path):
    try:
        df = pd.read_csv(file_path, encoding="utf-8")
    except UnicodeDecodeError:
        df = pd.read_csv(file_path, encoding="latin-1")

    if df.empty or len(df.columns) == 0:
        return ""

    text_columns = [col for col in df.columns
                    if any(hint in str(col).lower() for hint in TEXT_COLUMN_HINTS)]
    column = text_columns[0] if text_columns else df.columns[0]

    return "\n".join(df[column].dropna().astype(str).tolist())


def load_corpus(file_path, logger=None):
    """
    Load raw training text from a dataset file.

    Args:
        file_path (str): Path to a ``.txt`` or ``.csv`` file
        logger (logging.Logger, optional): Logger for load events

    Returns:
        str: The dataset's text, one training line per row for CSV input

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the extension is not supported
    """
    logger = logger or logging.getLogger(__name__)

    if not os.path.exists(file_path):
        logger.error(f"Dataset file not found: {file_path}")
        raise FileNotFoundError(f"Dataset file not found: {file_path}")

    file_ext = os.path.splitext(file_path)[1].lower()
    if file_ext == ".csv":
        text = _read_csv_file(file_path)
    elif file_ext == ".txt":
        text = _read_text_file(file_path)
    else:
        logger.error(f"Unsupported file format: {file_ext}")
        raise ValueError(f"Unsupported file format: {file_ext}")

    logger.info(f"Loaded dataset: {file_path}", extra={
        "metrics": {
            "file_path": file_path,
            "format": file_ext.lstrip("."),
            "characters": len(text),
        }
    })
    return text
