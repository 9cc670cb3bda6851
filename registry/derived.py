"""
Fabric Network Topology - Environment-Derived Registries

Base for the wallet and gateway registries. Besides their own persisted
entries, these registries expose entries computed from every registered
environment that owns wallets or gateways (automation-tool and live component
directory environments). Derived entries carry ``from_environment``.
"""

from pathlib import Path
from typing import Dict, List, Optional, Union

from environments.base import Environment

from .environment_registry import EnvironmentRegistry
from .exceptions import EntryNotFoundError
from .schema import EnvironmentFlags, EnvironmentRegistryEntry, sort_key
from .storage import EntryT, FileRegistry


DERIVING_FLAGS = EnvironmentFlags.ANSIBLE | EnvironmentFlags.MICROFAB


class DerivedRegistry(FileRegistry[EntryT]):
    """File registry merged with entries derived from environments."""

    def __init__(self, storage_dir: Union[str, Path], registry_name: str,
                 entry_model, environment_registry: EnvironmentRegistry):
        super().__init__(storage_dir, registry_name, entry_model)
        self.environment_registry = environment_registry

    def derive_entries(self, environment: Environment,
                       environment_entry: EnvironmentRegistryEntry) -> List[EntryT]:
        """Entries one environment contributes to this registry."""
        raise NotImplementedError

    def get_entries(self) -> List[EntryT]:
        """Persisted and derived entries sorted by display name."""
        entries = list(self._load_entries())
        for environment_entry in self.environment_registry.get_all():
            if not environment_entry.has_flag(DERIVING_FLAGS):
                continue
            environment = self.environment_registry.environment_factory.get_environment(environment_entry)
            entries.extend(self.derive_entries(environment, environment_entry))

        return sorted(entries, key=sort_key)

    def get_all(self, show_local: bool = True) -> List[EntryT]:
        """
        All entries. Entries derived from a local environment are placed first
        when ``show_local`` is set and left out otherwise.
        """
        environments: Dict[str, EnvironmentRegistryEntry] = {
            entry.name: entry for entry in self.environment_registry.get_all()
        }

        local, others = [], []
        for entry in self.get_entries():
            environment_entry = environments.get(entry.from_environment or '')
            if environment_entry is not None and environment_entry.has_flag(EnvironmentFlags.LOCAL):
                local.append(entry)
            else:
                others.append(entry)

        if show_local:
            return local + others
        return others

    def get(self, name: str, from_environment: Optional[str] = None) -> EntryT:
        """
        Look up ``name``. An entry derived from ``from_environment`` must match
        on both fields; other entries match on name, restricted to
        ``from_environment`` when they declare environment groups.
        """
        for entry in self.get_all():
            if entry.from_environment and entry.from_environment == from_environment:
                if entry.name == name:
                    return entry
                continue

            if entry.name != name:
                continue

            groups = self._environment_groups(entry)
            if groups and from_environment:
                if from_environment in groups:
                    return entry
                continue
            return entry

        raise EntryNotFoundError(self.registry_name, name, from_environment)

    def _environment_groups(self, entry: EntryT) -> List[str]:
        return []
