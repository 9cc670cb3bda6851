"""
Fabric Network Topology - Registry Context

Wires the environment, wallet and gateway registries around one storage root.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from environments.factory import ClientFactory, EnvironmentFactory
from wallet.filesystem import WalletFactory

from .environment_registry import EnvironmentRegistry
from .gateway_registry import GatewayRegistry
from .wallet_registry import WalletRegistry


class RegistryContext:
    """The registries of one process, sharing a storage root and factories."""

    def __init__(self, storage_dir: Union[str, Path], verify_tls: bool = True,
                 wallet_factory: Optional[WalletFactory] = None,
                 client_factory: Optional[ClientFactory] = None):
        self.storage_dir = Path(storage_dir)
        self.logger = logging.getLogger(__name__)

        self.wallet_factory = wallet_factory or WalletFactory()
        self.environment_factory = EnvironmentFactory(
            self.storage_dir,
            wallet_factory=self.wallet_factory,
            client_factory=client_factory,
            verify_tls=verify_tls,
        )
        self.environments = EnvironmentRegistry(self.storage_dir, self.environment_factory)
        self.wallets = WalletRegistry(self.storage_dir, self.environments)
        self.gateways = GatewayRegistry(self.storage_dir, self.environments)

        self.logger.debug(f"Registry context at {self.storage_dir}")

    @classmethod
    def from_config(cls, config, **kwargs) -> 'RegistryContext':
        """Build from a ``ConfigurationManager`` (or anything with ``get(key_path, default)``)."""
        return cls(
            config.get('storage.directory'),
            verify_tls=config.get('http.verify_tls', True),
            **kwargs,
        )

    def clear(self) -> None:
        """Empty every registry."""
        self.environments.clear()
        self.wallets.clear()
        self.gateways.clear()
