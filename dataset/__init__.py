"""
Dataset module.

Provides loading and generation of tabular data:
- read_rows / write_rows: delimited text files to raw rows and back
- Synthetic generators for linear, binary and multi-class data
"""

from .csv_loader import RawDataset, read_rows, write_rows
from .synthetic import make_linear_rows, make_blob_rows, make_binary_rows

__all__ = [
    'RawDataset',
    'read_rows',
    'write_rows',
    'make_linear_rows',
    'make_blob_rows',
    'make_binary_rows',
]
