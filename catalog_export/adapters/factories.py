"""
Default adapter registration

Infrastructure layer wiring of the default policies, record sources,
progress adapters and configuration adapters into an AdapterRegistry, so the
core can select implementations without importing them.
"""

import sqlite3
from typing import Optional

from ..core.domain import AUTH, BIB
from ..core.registry import AdapterRegistry, get_default_registry
from .config.environment import EnvironmentConfigAdapter
from .policies.auth import AuthExportPolicy
from .policies.bib import BibExportPolicy
from .progress.cli import create_cli_progress_adapter
from .progress.silent import SilentProgressAdapter
from .sources.memory import MockRecordSource
from .sources.sql import SQLRecordSource


def create_sql_record_source(database: str, table: str = "marc_records", **kwargs) -> SQLRecordSource:
    """Open a SQLite database and wrap it in a SQLRecordSource"""
    if not database:
        raise ValueError("No database configured. Set CATALOG_EXPORT_DATABASE or pass --database")
    connection = sqlite3.connect(database)
    return SQLRecordSource(connection, table=table)


def register_default_adapters(registry: Optional[AdapterRegistry] = None) -> AdapterRegistry:
    """Register all default adapters"""
    registry = registry or get_default_registry()

    # Export policies
    registry.register_policy(
        BIB,
        lambda **kwargs: BibExportPolicy(**kwargs),
        name="Bibliographic Export Policy",
        description="Skips deleted and suppressed records, collects item fields",
        supported_features=["item_accumulator", "suppression"],
        priority=10
    )

    registry.register_policy(
        AUTH,
        lambda **kwargs: AuthExportPolicy(**kwargs),
        name="Authority Export Policy",
        description="Skips deleted and headingless authority records",
        supported_features=["heading_check"],
        priority=10
    )

    # Record sources
    registry.register_record_source(
        "sql",
        lambda **kwargs: create_sql_record_source(**kwargs),
        name="SQL Record Source",
        description="ISO 2709 records stored in a SQLite table",
        supported_features=["modified_window", "sql_criteria"],
        dependencies=["pymarc"],
        priority=10
    )

    registry.register_record_source(
        "mock",
        lambda count=25, **kwargs: MockRecordSource(count=count),
        name="Mock Record Source",
        description="Generated sample records for testing",
        supported_features=["testing", "no_database"],
        dependencies=["pymarc"],
        priority=0
    )

    # Progress adapters
    registry.register_progress_adapter(
        "cli",
        lambda cli_progress_type="auto", **kwargs: create_cli_progress_adapter(
            progress_type=cli_progress_type, **kwargs
        ),
        name="CLI Progress",
        description="Command-line progress reporting",
        supported_features=["status_line", "progress_bars"],
        dependencies=["rich"],
        priority=10
    )

    registry.register_progress_adapter(
        "silent",
        lambda **kwargs: SilentProgressAdapter(),
        name="Silent Progress",
        description="No progress output",
        supported_features=["automation", "no_output"],
        priority=5
    )

    # Config adapters
    registry.register_config_adapter(
        "environment",
        lambda **kwargs: EnvironmentConfigAdapter(),
        name="Environment Config",
        description="Configuration from environment variables and .env files",
        supported_features=["validation", "defaults"],
        dependencies=["python-dotenv"],
        priority=10
    )

    return registry
