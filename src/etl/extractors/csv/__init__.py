"""CSV extractors package.

Provides the streaming row source and row normalizer for
uploaded movie CSV files.
"""

from src.etl.extractors.csv.normalizer import MovieRowNormalizer, parse_row
from src.etl.extractors.csv.source import CSV_COLUMNS, CSVRowSource, SourceError

__all__ = ["CSV_COLUMNS", "CSVRowSource", "MovieRowNormalizer", "SourceError", "parse_row"]
