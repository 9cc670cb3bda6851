"""
Fabric Network Topology - Gateway Registry
"""

import shutil
from pathlib import Path
from typing import List, Union

from environments.base import Environment
from environments.reconcile import gateway_config_path, gateway_profile_name

from .derived import DerivedRegistry
from .environment_registry import EnvironmentRegistry
from .exceptions import StorageError
from .schema import EnvironmentRegistryEntry, GatewayRegistryEntry


REGISTRY_NAME = 'gateways'

CONNECTION_PROFILE_NAME = 'connection.json'


class GatewayRegistry(DerivedRegistry[GatewayRegistryEntry]):
    """Registered gateways plus those defined by environments."""

    def __init__(self, storage_dir: Union[str, Path], environment_registry: EnvironmentRegistry):
        super().__init__(storage_dir, REGISTRY_NAME, GatewayRegistryEntry, environment_registry)

    def derive_entries(self, environment: Environment,
                       environment_entry: EnvironmentRegistryEntry) -> List[GatewayRegistryEntry]:
        return environment.get_gateways()

    def _environment_groups(self, entry: GatewayRegistryEntry) -> List[str]:
        return [entry.environment_group] if entry.environment_group else []

    def connection_profile_path(self, name: str) -> Path:
        return self.registry_path / name / CONNECTION_PROFILE_NAME

    def import_connection_profile(self, name: str, source: Union[str, Path]) -> Path:
        """Copy a connection profile into the gateway's registry directory."""
        destination = self.connection_profile_path(name)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, destination)
        except OSError as e:
            raise StorageError(f"Failed to copy connection profile: {e}", source, destination)

        self.logger.info(f"Imported connection profile for gateway {name}")
        return destination

    def update(self, entry: GatewayRegistryEntry) -> None:
        """
        Persist ``entry``. A derived gateway is written as a ``.config.json``
        sidecar under its environment's ``gateways`` directory, keyed on the
        connection profile name so a changed display name is read back.
        """
        if entry.from_environment:
            environment_entry = self.environment_registry.get(entry.from_environment)
            environment_path = self.environment_registry.environment_factory.environment_path(
                environment_entry
            )
            profile_name = gateway_profile_name(entry.from_environment, entry.name)
            path = gateway_config_path(environment_path / 'gateways', profile_name)
            self._write_entry(entry, path)
        else:
            super().update(entry)
