"""
Fabric Network Topology - Environment Factory

Chooses the environment implementation for a registry entry from its tags.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Union

from network.microfab_client import MicrofabClient
from registry.schema import EnvironmentFlags, EnvironmentRegistryEntry
from wallet.filesystem import WalletFactory

from .ansible import AnsibleEnvironment
from .base import Environment, FabricEnvironmentError
from .fabric import FabricEnvironment
from .microfab import MicrofabEnvironment
from .noop import NoOpEnvironment


ClientFactory = Callable[[str], MicrofabClient]


class EnvironmentFactory:
    """
    Builds environments from registry entries.

    ``MICROFAB`` entries get the live component directory environment,
    ``SAAS`` entries (a hosted console no longer supported) a placeholder,
    ``ANSIBLE`` entries the automation-tool environment and anything else a
    plain directory environment.
    """

    def __init__(self, storage_dir: Union[str, Path],
                 wallet_factory: Optional[WalletFactory] = None,
                 client_factory: Optional[ClientFactory] = None,
                 verify_tls: bool = True):
        self.storage_dir = Path(storage_dir)
        self.wallet_factory = wallet_factory or WalletFactory()
        self.client_factory = client_factory or self._default_client
        self.verify_tls = verify_tls
        self.logger = logging.getLogger(__name__)

    def _default_client(self, url: str) -> MicrofabClient:
        return MicrofabClient(url, verify_tls=self.verify_tls)

    def environment_path(self, entry: EnvironmentRegistryEntry) -> Path:
        if entry.environment_directory:
            return Path(entry.environment_directory)
        return self.storage_dir / 'environments' / entry.name

    def get_environment(self, entry: EnvironmentRegistryEntry) -> Environment:
        if not entry.name:
            raise FabricEnvironmentError("Unable to get environment, entry has no name")

        path = self.environment_path(entry)

        if entry.has_flag(EnvironmentFlags.MICROFAB):
            if not entry.url:
                raise FabricEnvironmentError(f"Environment {entry.name} has no url")
            return MicrofabEnvironment(entry.name, path, entry.url,
                                       client=self.client_factory(entry.url),
                                       wallet_factory=self.wallet_factory)

        if entry.has_flag(EnvironmentFlags.SAAS):
            self.logger.warning(f"Environment {entry.name} is no longer supported")
            return NoOpEnvironment(entry.name, path)

        if entry.has_flag(EnvironmentFlags.ANSIBLE):
            return AnsibleEnvironment(entry.name, path, wallet_factory=self.wallet_factory)

        return FabricEnvironment(entry.name, path)
