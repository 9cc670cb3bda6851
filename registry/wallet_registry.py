"""
Fabric Network Topology - Wallet Registry
"""

from pathlib import Path
from typing import List, Union

from environments.base import Environment

from .derived import DerivedRegistry
from .environment_registry import EnvironmentRegistry
from .schema import EnvironmentFlags, EnvironmentRegistryEntry, WalletRegistryEntry


REGISTRY_NAME = 'wallets'


class WalletRegistry(DerivedRegistry[WalletRegistryEntry]):
    """Registered wallets plus those owned by environments."""

    def __init__(self, storage_dir: Union[str, Path], environment_registry: EnvironmentRegistry):
        super().__init__(storage_dir, REGISTRY_NAME, WalletRegistryEntry, environment_registry)

    def derive_entries(self, environment: Environment,
                       environment_entry: EnvironmentRegistryEntry) -> List[WalletRegistryEntry]:
        entries = environment.get_wallets_and_identities()
        if environment_entry.has_flag(EnvironmentFlags.ANSIBLE) and environment_entry.managed_runtime:
            entries = [entry.model_copy(update={'managed_wallet': True}) for entry in entries]
        return entries

    def _environment_groups(self, entry: WalletRegistryEntry) -> List[str]:
        return entry.environment_groups or []

    def update(self, entry: WalletRegistryEntry) -> None:
        """
        Persist ``entry``. A derived wallet is written as a ``.config.json``
        sidecar in its wallet directory; anything else goes to the registry.
        """
        if entry.from_environment:
            if not entry.wallet_path:
                raise ValueError(f"Wallet {entry.name} has no wallet path")
            self._write_entry(entry, Path(entry.wallet_path) / self.FILE_NAME)
        else:
            super().update(entry)
