"""
Catalog Record Export System

A hexagonal architecture implementation for exporting bibliographic and
authority MARC records in batches, with pluggable record sources, export
policies and output formats.
"""

__version__ = "1.0.0"
__description__ = "Batch MARC record export pipeline with hexagonal architecture"
