"""
Silent Progress Adapter

No-op progress adapter for batch jobs or situations where
progress reporting is not desired.
"""

from ...core.domain import ExportSummary


class SilentProgressAdapter:
    """Silent progress adapter that performs no output; keeps the last summary"""

    def __init__(self):
        self.last_summary = None

    def start(self, total: int) -> None:
        """Silent - do nothing"""
        pass

    def update(self, current: int, total: int) -> None:
        """Silent - do nothing"""
        pass

    def finish(self, summary: ExportSummary) -> None:
        self.last_summary = summary

    def stop(self) -> None:
        """Silent - do nothing"""
        pass

    def is_progress_enabled(self) -> bool:
        """Progress reporting is disabled"""
        return False
