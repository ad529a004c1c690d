#!/usr/bin/env python3
"""
Catalog Export CLI

Command-line interface for exporting bibliographic and authority MARC records
selected by a modification window or a SQL query.
"""

import argparse
import sys
from datetime import datetime
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables at the entry point
load_dotenv()

from catalog_export.adapters.factories import register_default_adapters
from catalog_export.adapters.sinks.document import JSONLinesDocumentSink
from catalog_export.core.domain import ExportSummary, OutputType
from catalog_export.core.exceptions import CatalogExportError
from catalog_export.core.export_configuration import ExportConfiguration
from catalog_export.core.export_service import ExportService
from catalog_export.core.registry import AdapterRegistry, AdapterRegistryError, get_default_registry


def parse_timestamp(value: str) -> datetime:
    """argparse type for --since / --until (ISO 8601 date or datetime)"""
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid timestamp '{value}', expected ISO 8601 such as 2024-01-31 or 2024-01-31T12:00:00"
        ) from None


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser"""
    parser = argparse.ArgumentParser(
        description='Catalog Export - Export MARC records in batches',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  # Export bibliographic records modified since January as MARCXML
  python -m catalog_export.cli.main Bib --since 2024-01-01 -o bibs.xml --database horizon.db

  # Export authority records selected by a query, dropping local tags
  python -m catalog_export.cli.main Auth --sql "SELECT record_id FROM marc_records WHERE kind = 'Auth'" \\
    --type mrk -o auths.mrk --exclude-tag 999 --exclude-tag 949

  # Export documents to a JSON lines collection file
  python -m catalog_export.cli.main Bib --since 2024-01-01 --documents bibs.jsonl

  # Test with mock data
  python -m catalog_export.cli.main Bib --mock --since 2024-01-01 -o test.xml
        '''
    )

    parser.add_argument(
        'record_kind',
        help='Kind of record to export: Bib or Auth'
    )

    # Selection
    selection = parser.add_argument_group('selection')
    selection.add_argument('--sql', dest='sql_criteria', help='SQL query whose first column holds record identifiers')
    selection.add_argument('--since', dest='modified_since', type=parse_timestamp,
                           help='Export records modified at or after this time')
    selection.add_argument('--until', dest='modified_until', type=parse_timestamp,
                           help='Export records modified before this time (default: now)')

    # Output
    parser.add_argument(
        '--type',
        dest='output_type',
        choices=OutputType.values(),
        default=None,
        help='Output type (default: mongo with --documents, otherwise xml)'
    )
    parser.add_argument('-o', '--output', dest='output_filename', default=None,
                        help='Output filename (default: standard output)')
    parser.add_argument('-d', '--directory', dest='output_directory', default=None,
                        help='Existing directory for the output file (default: CATALOG_EXPORT_OUTPUT_DIR or .)')
    parser.add_argument('--documents', default=None,
                        help='Write one JSON document per record to this file instead of a stream')
    parser.add_argument('--exclude-tag', action='append', dest='exclude_tags',
                        help='Remove this tag from every exported record (can be used multiple times)')
    parser.add_argument('--batch-size', type=int, default=None,
                        help='Identifiers per retrieval batch (default: CATALOG_EXPORT_BATCH_SIZE or 1000)')

    # Record source
    parser.add_argument('--database', default=None,
                        help='SQLite database holding the marc_records table (default: CATALOG_EXPORT_DATABASE)')
    parser.add_argument('--mock', action='store_true',
                        help='Use generated sample records (no database)')
    parser.add_argument('--mock-count', type=int, default=25,
                        help='Number of sample records per kind with --mock (default: 25)')

    # Progress and display
    parser.add_argument('--progress-type', choices=['auto', 'backspace', 'rich', 'silent'], default='backspace',
                        help='Type of progress display (default: backspace)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')
    parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress and summary output')

    return parser


def create_export_configuration_from_args(args, export_settings: dict, document_sink=None) -> ExportConfiguration:
    """Create export configuration from CLI arguments over environment defaults"""
    return ExportConfiguration(
        sql_criteria=args.sql_criteria,
        modified_since=args.modified_since,
        modified_until=args.modified_until,
        exclude_tags=args.exclude_tags if args.exclude_tags is not None else export_settings['exclude_tags'],
        output_type=args.output_type or export_settings['output_type'],
        output_directory=args.output_directory or export_settings['output_directory'],
        output_filename=args.output_filename,
        document_sink=document_sink,
        batch_size=args.batch_size or export_settings['batch_size'],
    )


def create_record_source_from_registry(registry: AdapterRegistry, args, source_settings: dict):
    """Create record source using registry"""
    if args.mock:
        return registry.get_record_source("mock", count=args.mock_count)
    return registry.get_record_source(
        "sql",
        database=args.database or source_settings['database'],
        table=source_settings['table']
    )


def create_progress_adapter_from_registry(registry: AdapterRegistry, args):
    """Create progress adapter using registry"""
    if args.quiet:
        return registry.get_progress_adapter("silent")
    return registry.get_progress_adapter("cli", cli_progress_type=args.progress_type)


def print_export_summary(summary: ExportSummary, config: ExportConfiguration, args) -> None:
    """Print run details beyond the progress adapter's summary line"""
    if args.quiet or not args.verbose:
        return

    print(f"📋 Export {summary.export_id}", file=sys.stderr)
    print(f"   Record kind: {summary.record_kind}", file=sys.stderr)
    print(f"   Output type: {summary.output_type}", file=sys.stderr)
    print(f"   Batches: {summary.batches}", file=sys.stderr)
    print(f"   Processed: {summary.processed} of {summary.total}", file=sys.stderr)
    print(f"   Excluded: {summary.excluded}", file=sys.stderr)
    if config.output_filename:
        print(f"   📁 Output: {config.get_output_path()}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    document_sink = None
    try:
        registry = register_default_adapters(get_default_registry())
        config_adapter = registry.get_config_adapter("environment")

        policy = registry.get_policy(args.record_kind.capitalize())
        source = create_record_source_from_registry(registry, args, config_adapter.get_source_config())
        progress = create_progress_adapter_from_registry(registry, args)

        if args.documents:
            document_sink = JSONLinesDocumentSink(args.documents)

        export_config = create_export_configuration_from_args(
            args, config_adapter.get_export_config(), document_sink
        )

        service = ExportService(source=source, policy=policy, progress=progress)
        summary = service.run(export_config)

        print_export_summary(summary, export_config, args)
        return 0

    except KeyboardInterrupt:
        print("\n🛑 Export cancelled by user", file=sys.stderr)
        return 130
    except (CatalogExportError, AdapterRegistryError, ValueError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1
    finally:
        if document_sink is not None:
            document_sink.close()


if __name__ == "__main__":
    sys.exit(main())
