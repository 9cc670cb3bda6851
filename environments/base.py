"""
Fabric Network Topology - Environment Interface

An environment is a named deployment of nodes, wallets and gateways. Each
backing-store kind implements this interface; see ``factory.py`` for how the
concrete type is chosen from an environment's tags.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Union

from model.gateway import Gateway
from model.identity import Identity
from model.node import FabricNode
from registry.schema import GatewayRegistryEntry, WalletRegistryEntry


class FabricEnvironmentError(Exception):
    """Base exception for environment errors."""
    pass


class UnsupportedOperationError(FabricEnvironmentError):
    """Raised by read-only environments for mutating calls."""

    def __init__(self, operation: str, environment_name: str):
        self.operation = operation
        self.environment_name = environment_name
        super().__init__(f"Operation not supported: {operation} on environment {environment_name}")


class Environment(ABC):
    """Capability set every environment variant provides."""

    def __init__(self, name: str, environment_path: Union[str, Path]):
        self.name = name
        self.path = Path(environment_path)

    @abstractmethod
    def get_nodes(self, without_identities: bool = False, show_all: bool = False) -> List[FabricNode]:
        """Nodes in this environment; hidden nodes only when ``show_all``."""

    @abstractmethod
    def get_all_organization_names(self, show_orderer: bool = True) -> List[str]:
        """Distinct MSP ids of the environment's nodes."""

    @abstractmethod
    def update_node(self, node: FabricNode, externally_managed: bool = False) -> None:
        pass

    @abstractmethod
    def delete_node(self, node: FabricNode) -> None:
        pass

    @abstractmethod
    def require_setup(self) -> bool:
        """True when some node still needs a wallet and identity assigned."""

    @abstractmethod
    def get_wallets_and_identities(self) -> List[WalletRegistryEntry]:
        """Wallet entries for this environment, importing any missing identities."""

    @abstractmethod
    def get_gateways(self) -> List[GatewayRegistryEntry]:
        pass

    @abstractmethod
    def get_wallet_names(self) -> List[str]:
        pass

    @abstractmethod
    def get_identities(self, wallet_name: str) -> List[Identity]:
        pass

    @abstractmethod
    def get_fabric_gateways(self) -> List[Gateway]:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, path={str(self.path)!r})"
