"""
Dataset loading: read a delimited text file into raw rows.

Rows are kept as string fields; numeric parsing and label mapping happen
in FeatureExpander. The loader enforces the one invariant it can check on
its own: every row has the same number of fields. A mismatch fails the
whole load, nothing is skipped.
"""

import csv
import os
from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from gradient_descent.exceptions import InputFormatError, MalformedRowError


@dataclass
class RawDataset:
    """Rows of string fields read from a delimited file."""
    rows: List[List[str]]
    header: Optional[List[str]] = None
    line_numbers: List[int] = field(default_factory=list)
    source: Optional[str] = None

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def n_fields(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def __len__(self) -> int:
        return len(self.rows)


def read_rows(path: str,
              delimiter: str = ',',
              has_header: bool = False) -> RawDataset:
    """
    Read a delimited file.

    Blank lines are ignored and surrounding whitespace is stripped from
    every field.

    Args:
        path: File to read
        delimiter: Field separator
        has_header: If True, the first non-blank line is the header

    Returns:
        RawDataset with the 1-based source line of every row

    Raises:
        InputFormatError: file missing, empty, or rows with differing field counts
    """
    if not os.path.exists(path):
        raise InputFormatError(f"Input file not found: {path}")

    rows: List[List[str]] = []
    line_numbers: List[int] = []
    header: Optional[List[str]] = None

    with open(path, 'r', newline='', encoding='utf-8') as f:
        reader = csv.reader(f, delimiter=delimiter)
        for fields in reader:
            line = reader.line_num
            fields = [value.strip() for value in fields]
            if not any(fields):
                continue

            if has_header and header is None:
                header = fields
                continue

            if rows and len(fields) != len(rows[0]):
                raise MalformedRowError(
                    f"expected {len(rows[0])} fields, got {len(fields)}",
                    row=len(rows), line=line)
            rows.append(fields)
            line_numbers.append(line)

    if not rows:
        raise InputFormatError(f"No data rows in {path}")
    if header is not None and len(header) != len(rows[0]):
        raise InputFormatError(
            f"Header has {len(header)} fields but rows have {len(rows[0])}")

    logger.info("Loaded {} rows x {} fields from {}", len(rows), len(rows[0]), path)
    return RawDataset(rows=rows, header=header, line_numbers=line_numbers, source=path)


def write_rows(path: str, rows: List[List], header: Optional[List[str]] = None,
               delimiter: str = ','):
    """Write rows to a delimited file (used for generated datasets)."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f, delimiter=delimiter)
        if header:
            writer.writerow(header)
        writer.writerows(rows)
