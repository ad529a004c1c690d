"""
Configuration adapters for catalog exports.

Read export and record source settings from environment variables, with a
.env file loaded through python-dotenv.
"""

import os
from typing import Any, Dict, List

from dotenv import load_dotenv

from ...core.domain import OutputType

# Load environment variables
load_dotenv()


def _split_tags(value: str) -> List[str]:
    return [tag.strip() for tag in value.split(",") if tag.strip()]


class EnvironmentConfigAdapter:
    """Configuration adapter that reads from environment variables"""

    def get_export_config(self) -> Dict[str, Any]:
        """Get export configuration from environment"""
        return {
            'output_directory': os.getenv('CATALOG_EXPORT_OUTPUT_DIR', '.'),
            'batch_size': self._int_setting('CATALOG_EXPORT_BATCH_SIZE', 1000),
            'output_type': os.getenv('CATALOG_EXPORT_OUTPUT_TYPE') or None,
            'exclude_tags': _split_tags(os.getenv('CATALOG_EXPORT_EXCLUDE_TAGS', '')),
        }

    def get_source_config(self) -> Dict[str, Any]:
        """Get record source configuration from environment"""
        return {
            'database': os.getenv('CATALOG_EXPORT_DATABASE', ''),
            'table': os.getenv('CATALOG_EXPORT_TABLE', 'marc_records'),
        }

    @staticmethod
    def _int_setting(name: str, default: int) -> int:
        raw = os.getenv(name)
        if raw is None or raw == '':
            return default
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"{name} must be an integer, got: {raw!r}") from None

    def get_validation_errors(self) -> List[str]:
        """Get detailed validation errors"""
        errors = []

        try:
            batch_size = self._int_setting('CATALOG_EXPORT_BATCH_SIZE', 1000)
            if batch_size < 1:
                errors.append(f"CATALOG_EXPORT_BATCH_SIZE must be positive, got: {batch_size}")
        except ValueError as e:
            errors.append(str(e))

        output_type = os.getenv('CATALOG_EXPORT_OUTPUT_TYPE')
        if output_type and output_type.lower() not in OutputType.values():
            errors.append(
                f"CATALOG_EXPORT_OUTPUT_TYPE must be one of {', '.join(OutputType.values())}, "
                f"got: {output_type}"
            )

        output_dir = os.getenv('CATALOG_EXPORT_OUTPUT_DIR', '.')
        if not os.path.isdir(output_dir):
            errors.append(f"CATALOG_EXPORT_OUTPUT_DIR does not exist: {output_dir}")

        return errors

    def validate_config(self) -> bool:
        """Validate configuration"""
        return not self.get_validation_errors()
