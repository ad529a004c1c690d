"""
Shared pytest configuration and fixtures for catalog export tests.

This file provides common fixtures and configuration used across all test types
in the hexagonal architecture test suite.
"""

import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add project root and test helpers to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(Path(__file__).parent / "fixtures"))

from catalog_export.adapters.records.marc import DEFAULT_AUTH_LEADER, build_record
from catalog_export.adapters.sinks.document import InMemoryDocumentSink
from catalog_export.adapters.sources.memory import InMemoryRecordSource
from catalog_export.core.export_configuration import ExportConfiguration


# Domain Model Fixtures
@pytest.fixture
def sample_bib_record():
    """Bibliographic record with a title, an item field and a local note."""
    return build_record(101, [
        ("005", "20240102030405.0"),
        ("245", "1", "0", [("a", "Moby Dick /"), ("c", "Herman Melville.")]),
        ("590", " ", " ", [("a", "Local note")]),
        ("949", " ", " ", [("p", "31000000000101"), ("l", "stacks"), ("c", "PS2384 .M6")]),
    ])


@pytest.fixture
def sample_auth_record():
    """Authority record with a personal name heading."""
    return build_record(201, [
        ("100", "1", " ", [("a", "Melville, Herman,"), ("d", "1819-1891")]),
        ("670", " ", " ", [("a", "Moby Dick, 1851.")]),
    ], leader=DEFAULT_AUTH_LEADER)


@pytest.fixture
def memory_source(sample_bib_record, sample_auth_record):
    """In-memory record source holding one bib and one authority record."""
    source = InMemoryRecordSource()
    source.add_record(sample_bib_record, "Bib", modified=datetime(2024, 1, 2))
    source.add_record(sample_auth_record, "Auth", modified=datetime(2024, 1, 3))
    return source


@pytest.fixture
def document_sink():
    return InMemoryDocumentSink()


@pytest.fixture
def file_export_configuration(tmp_path):
    """Export configuration writing MARCXML to a file under tmp_path."""
    return ExportConfiguration(
        sql_criteria="SELECT record_id FROM marc_records",
        output_directory=str(tmp_path),
        output_filename="export.xml"
    )


# Mock Adapter Fixtures
@pytest.fixture
def mock_progress_port():
    """Mock progress reporting port."""
    mock = Mock()
    mock.is_progress_enabled.return_value = True
    return mock


# Pytest Configuration Hooks
def pytest_configure(config):
    """Configure pytest with custom settings."""
    markers = [
        "unit: Unit tests (fast, isolated)",
        "integration: Integration tests (slower, multiple components)",
        "contract: Port contract compliance tests",
        "architecture: Architecture validation tests",
    ]

    for marker in markers:
        config.addinivalue_line("markers", marker)


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)
        elif "contract" in path:
            item.add_marker(pytest.mark.contract)
        elif "architecture" in path:
            item.add_marker(pytest.mark.architecture)
