from .columns import locate_header, resolve_columns
from .reader import InsufficientRowsError, read_table_file, split_table, tokenize

__all__ = [
    "InsufficientRowsError",
    "locate_header",
    "read_table_file",
    "resolve_columns",
    "split_table",
    "tokenize",
]
