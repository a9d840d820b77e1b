"""
Helper module to read order files (CSV or TSV) from either disk or Streamlit uploaded buffers.
"""
import io
import os

import pandas as pd
import streamlit as st

from errors import RecordParseError

TAB_EXTENSIONS = ('.tsv', '.tab')


def get_file_source(file_key: str, file_path: str):
    """
    Returns a file-like object or path for reading an order file.

    Priority:
    1. If uploaded file exists in session_state.uploaded_files, use that buffer
    2. Otherwise, use the file_path (disk or env var)

    Args:
        file_key: key in st.session_state.uploaded_files (e.g., 'orders')
        file_path: fallback file path

    Returns:
        tuple: (source, is_uploaded) where source is file-like or path, is_uploaded is bool
    """
    # st.session_state is not available when running outside Streamlit
    try:
        uploaded_files = st.session_state.get('uploaded_files', {})
    except (AttributeError, RuntimeError):
        uploaded_files = {}

    if file_key in uploaded_files:
        return uploaded_files[file_key], True
    elif file_path and os.path.isfile(os.path.abspath(file_path)):
        return file_path, False
    else:
        return None, False


def read_source_text(source, encoding: str = 'utf-8-sig') -> str:
    """
    Read the full text of a path or an uploaded buffer.

    Args:
        source: file path, bytes, str, or a file-like object (BytesIO, StringIO, UploadedFile)
        encoding: text encoding for byte sources (BOM is stripped by default)

    Returns:
        str: decoded file content

    Raises:
        RecordParseError: if the content cannot be decoded
    """
    try:
        if isinstance(source, (str, os.PathLike)):
            with open(source, 'rb') as handle:
                raw = handle.read()
        elif isinstance(source, bytes):
            raw = source
        elif hasattr(source, 'getvalue'):
            raw = source.getvalue()
        else:
            if hasattr(source, 'seek'):
                source.seek(0)
            raw = source.read()
    except FileNotFoundError:
        raise RecordParseError(f"File not found: {source}")
    except OSError as e:
        raise RecordParseError(f"Error reading file: {e}")

    if isinstance(raw, str):
        return raw

    try:
        return raw.decode(encoding)
    except UnicodeDecodeError as e:
        raise RecordParseError(f"Error reading file: content is not valid {encoding} text ({e.reason})")


def get_source_name(source):
    """Best-effort file name for a path or uploaded buffer."""
    if isinstance(source, (str, os.PathLike)):
        return os.path.basename(os.fspath(source))
    return getattr(source, 'name', None)


def detect_delimiter(text: str, file_name: str = None) -> str:
    """
    Pick the field delimiter for an order file.

    A .tsv/.tab extension always means tab. Otherwise the header line decides:
    tab if it holds more tabs than commas, comma if not.

    Args:
        text: full file content
        file_name: optional file name used for the extension check

    Returns:
        '\\t' or ','
    """
    if file_name and str(file_name).lower().endswith(TAB_EXTENSIONS):
        return '\t'

    for line in text.splitlines():
        if line.strip():
            return '\t' if line.count('\t') > line.count(',') else ','
    return ','


def parse_order_text(text: str, delimiter: str = None, file_name: str = None) -> pd.DataFrame:
    """
    Split a delimited-text blob into header-keyed string rows.

    The first row is the header. Blank lines are skipped. Every value is
    kept as a string; missing values become empty strings. Rows with more
    fields than the header (including a trailing delimiter) keep their
    first header-width fields; short rows are padded with empty strings.

    Raises:
        RecordParseError: if the text cannot be tokenized into rows
    """
    if not text.strip():
        raise RecordParseError("Error parsing file: the file is empty (no header row found)")

    sep = delimiter or detect_delimiter(text, file_name)

    try:
        header = pd.read_csv(io.StringIO(text), sep=sep, nrows=0, skip_blank_lines=True)
        n_cols = len(header.columns)

        df = pd.read_csv(
            io.StringIO(text),
            sep=sep,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            index_col=False,
            engine='python',
            on_bad_lines=lambda fields: fields[:n_cols],
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise RecordParseError(f"Error parsing file: {e}")

    return df.fillna('')


def safe_read_orders(file_key: str, file_path: str, delimiter: str = None) -> pd.DataFrame:
    """
    Safely read an order file from either uploaded buffer or disk.

    Args:
        file_key: key in st.session_state.uploaded_files
        file_path: fallback file path, or a file-like object / bytes payload
        delimiter: force ',' or '\\t' instead of detecting it

    Returns:
        pd.DataFrame of string columns

    Raises:
        RecordParseError: if no file is available or it cannot be parsed
    """
    if file_path is not None and not isinstance(file_path, (str, os.PathLike)):
        # A buffer was handed in directly
        source = file_path
    else:
        source, _ = get_file_source(file_key, file_path)

    if source is None:
        raise RecordParseError(f"File not found: {file_path} (and no uploaded file)")

    text = read_source_text(source)
    return parse_order_text(text, delimiter=delimiter, file_name=get_source_name(source))
