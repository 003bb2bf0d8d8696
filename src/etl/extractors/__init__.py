"""ETL extractors package.

Provides data extraction from uploaded CSV files.

Classes:
    CSVRowSource: Consumer-paced CSV row iterator.
    MovieRowNormalizer: Raw row to typed row conversion.
"""

from src.etl.extractors.csv import CSVRowSource, MovieRowNormalizer, SourceError

__all__ = [
    "CSVRowSource",
    "MovieRowNormalizer",
    "SourceError",
]
