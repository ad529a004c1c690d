"""
Adapter registry for catalog export adapters.

Provides a centralized registry for export policies (one per record kind),
record sources, progress adapters and configuration adapters, with factory
functions and adapter metadata.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .ports import ConfigurationPort, ExportPolicyPort, ProgressReportingPort, RecordSourcePort


@dataclass
class AdapterInfo:
    """Metadata about a registered adapter"""
    name: str
    adapter_type: str
    factory: Callable
    description: str
    supported_features: List[str]
    dependencies: List[str]
    priority: int = 0  # Higher priority adapters are preferred


class AdapterRegistryError(Exception):
    """Exception raised when adapter registry operations fail"""
    pass


class AdapterRegistry:
    """Centralized registry for all catalog export adapters"""

    ADAPTER_TYPES = ("policy", "record_source", "progress", "config")

    def __init__(self):
        self._adapters: Dict[str, Dict[str, AdapterInfo]] = {
            adapter_type: {} for adapter_type in self.ADAPTER_TYPES
        }

    def _register(
        self,
        adapter_type: str,
        key: str,
        factory: Callable,
        name: Optional[str],
        description: str,
        supported_features: Optional[List[str]],
        dependencies: Optional[List[str]],
        priority: int
    ) -> None:
        self._adapters[adapter_type][key] = AdapterInfo(
            name=name or key,
            adapter_type=adapter_type,
            factory=factory,
            description=description,
            supported_features=supported_features or [],
            dependencies=dependencies or [],
            priority=priority
        )

    def _create(self, adapter_type: str, key: str, **kwargs) -> Any:
        adapters = self._adapters[adapter_type]
        if key not in adapters:
            raise AdapterRegistryError(
                f"No {adapter_type.replace('_', ' ')} adapter registered for '{key}'. "
                f"Available: {sorted(adapters.keys())}"
            )
        try:
            return adapters[key].factory(**kwargs)
        except AdapterRegistryError:
            raise
        except Exception as e:
            raise AdapterRegistryError(f"Failed to create {adapter_type} adapter '{key}': {e}") from e

    # Export policies

    def register_policy(
        self,
        record_kind: str,
        factory: Callable[..., ExportPolicyPort],
        name: Optional[str] = None,
        description: str = "",
        supported_features: Optional[List[str]] = None,
        dependencies: Optional[List[str]] = None,
        priority: int = 0
    ) -> None:
        """
        Register an export policy for a record kind.

        Args:
            record_kind: Record kind handled by the policy ("Bib", "Auth")
            factory: Factory function that creates the policy
            name: Human-readable name
            description: Description of the policy
            supported_features: Features this policy supports
            dependencies: Required third-party dependencies
            priority: Priority for selection (higher = preferred)
        """
        self._register("policy", record_kind, factory, name, description,
                       supported_features, dependencies, priority)

    def get_policy(self, record_kind: str, **kwargs) -> ExportPolicyPort:
        return self._create("policy", record_kind, **kwargs)

    def list_record_kinds(self) -> List[str]:
        return sorted(self._adapters["policy"].keys())

    # Record sources

    def register_record_source(
        self,
        source_type: str,
        factory: Callable[..., RecordSourcePort],
        name: Optional[str] = None,
        description: str = "",
        supported_features: Optional[List[str]] = None,
        dependencies: Optional[List[str]] = None,
        priority: int = 0
    ) -> None:
        self._register("record_source", source_type, factory, name, description,
                       supported_features, dependencies, priority)

    def get_record_source(self, source_type: str, **kwargs) -> RecordSourcePort:
        return self._create("record_source", source_type, **kwargs)

    def list_record_source_types(self) -> List[str]:
        return sorted(self._adapters["record_source"].keys())

    # Progress adapters

    def register_progress_adapter(
        self,
        progress_type: str,
        factory: Callable[..., ProgressReportingPort],
        name: Optional[str] = None,
        description: str = "",
        supported_features: Optional[List[str]] = None,
        dependencies: Optional[List[str]] = None,
        priority: int = 0
    ) -> None:
        self._register("progress", progress_type, factory, name, description,
                       supported_features, dependencies, priority)

    def get_progress_adapter(self, progress_type: str, **kwargs) -> ProgressReportingPort:
        return self._create("progress", progress_type, **kwargs)

    def list_supported_progress_types(self) -> List[str]:
        return sorted(self._adapters["progress"].keys())

    # Configuration adapters

    def register_config_adapter(
        self,
        config_type: str,
        factory: Callable[..., ConfigurationPort],
        name: Optional[str] = None,
        description: str = "",
        supported_features: Optional[List[str]] = None,
        dependencies: Optional[List[str]] = None,
        priority: int = 0
    ) -> None:
        self._register("config", config_type, factory, name, description,
                       supported_features, dependencies, priority)

    def get_config_adapter(self, config_type: str, **kwargs) -> ConfigurationPort:
        return self._create("config", config_type, **kwargs)

    def get_all_registered_adapters(self) -> Dict[str, List[AdapterInfo]]:
        """Get all registered adapters grouped by type"""
        return {
            adapter_type: list(adapters.values())
            for adapter_type, adapters in self._adapters.items()
        }


_default_registry: Optional[AdapterRegistry] = None


def get_default_registry() -> AdapterRegistry:
    """Get the process-wide default registry"""
    global _default_registry
    if _default_registry is None:
        _default_registry = AdapterRegistry()
    return _default_registry
