"""
Fabric Network Topology - Environment Registry

Persisted environment descriptors, filtered by their categorization tags.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Union

from environments.base import Environment
from environments.factory import EnvironmentFactory

from .schema import EnvironmentFlags, EnvironmentRegistryEntry
from .storage import FileRegistry, list_visible, remove_path


REGISTRY_NAME = 'environments'


def _matches_any(entry: EnvironmentRegistryEntry, flags: Iterable[EnvironmentFlags]) -> bool:
    return any(entry.has_flag(flag) for flag in flags)


class EnvironmentRegistry(FileRegistry[EnvironmentRegistryEntry]):
    """Registry of environments at ``<storage_dir>/environments``."""

    def __init__(self, storage_dir: Union[str, Path],
                 environment_factory: Optional[EnvironmentFactory] = None):
        super().__init__(storage_dir, REGISTRY_NAME, EnvironmentRegistryEntry)
        self.environment_factory = environment_factory or EnvironmentFactory(storage_dir)

    def get_all(self, include: Iterable[EnvironmentFlags] = (),
                exclude: Iterable[EnvironmentFlags] = ()) -> List[EnvironmentRegistryEntry]:
        """
        Entries whose tags intersect none of ``exclude`` and, when ``include``
        is given, at least one of ``include``. Local environments come first;
        relative order is otherwise kept.
        """
        include, exclude = list(include), list(exclude)

        entries = []
        for entry in self.get_entries():
            if _matches_any(entry, exclude):
                continue
            if include and not _matches_any(entry, include):
                continue
            entries.append(entry)

        local = [e for e in entries if e.has_flag(EnvironmentFlags.LOCAL)]
        others = [e for e in entries if not e.has_flag(EnvironmentFlags.LOCAL)]
        return local + others

    def add(self, entry: EnvironmentRegistryEntry) -> None:
        if not entry.environment_directory:
            entry = entry.model_copy(update={
                'environment_directory': str(self.registry_path / entry.name),
            })
        super().add(entry)

    def delete(self, name: str, ignore_not_exists: bool = False) -> None:
        """
        Remove the entry and ``<root>/environments/<name>``. Inside an
        automation-tool environment's own directory only the ``.config.json``
        sidecars written by the wallet and gateway registries are removed.
        """
        entry = None
        if self.exists(name):
            entry = self.get(name)

        super().delete(name, ignore_not_exists)

        if entry is not None and entry.environment_directory and entry.has_flag(EnvironmentFlags.ANSIBLE):
            self._remove_sidecars(Path(entry.environment_directory))

    def _remove_sidecars(self, environment_path: Path) -> None:
        for kind in ('wallets', 'gateways'):
            for child in list_visible(environment_path / kind):
                if not child.is_dir():
                    continue
                config_path = child / self.FILE_NAME
                if config_path.is_file():
                    remove_path(config_path)
                    self.logger.info(f"Removed {config_path}")

    def get_environment(self, name: str) -> Environment:
        """The environment object for a registered descriptor."""
        return self.environment_factory.get_environment(self.get(name))
