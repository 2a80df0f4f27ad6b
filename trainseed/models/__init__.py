"""Domain models for the train-name history extractor.

This package contains the data classes passed between the tokenizer, the
extractors, the orchestrator and the database seeder.
"""

from .error_record import ErrorRecord
from .processing_result import FileStat, ProcessingResult
from .source_file import FileStatus, SourceFile
from .table_data import ColumnRoles, RawRow, TableData
from .train_record import NameWithDates, TrainRecord

__all__ = [
    # Extraction models
    "RawRow",
    "TableData",
    "ColumnRoles",
    "NameWithDates",
    "TrainRecord",
    # Processing models
    "SourceFile",
    "FileStatus",
    "FileStat",
    "ProcessingResult",
    "ErrorRecord",
]
