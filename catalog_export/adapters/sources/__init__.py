from .memory import InMemoryRecordSource, MockRecordSource
from .sql import SQLRecordSource

__all__ = ['InMemoryRecordSource', 'MockRecordSource', 'SQLRecordSource']
