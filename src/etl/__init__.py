"""Bulk catalog ingestion: CSV extraction, row validation and loading of movie records.

Usage:
    from src.etl.pipeline import IngestionRun
"""
