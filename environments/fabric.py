"""
Fabric Network Topology - Directory-Backed Environment

The plain environment: a hand-curated directory of node files. It owns no
wallets or gateways of its own.
"""

from pathlib import Path
from typing import List, Union

from model.gateway import Gateway
from model.identity import Identity
from model.node import FabricNode
from registry.schema import GatewayRegistryEntry, WalletRegistryEntry

from .base import Environment
from .nodes import NodeStore, organization_names


class FabricEnvironment(Environment):
    """Environment whose nodes live in ``<path>/nodes``."""

    def __init__(self, name: str, environment_path: Union[str, Path]):
        super().__init__(name, environment_path)
        self.node_store = NodeStore(self.path)

    def get_nodes(self, without_identities: bool = False, show_all: bool = False) -> List[FabricNode]:
        return self.node_store.get_nodes(without_identities, show_all)

    def get_all_organization_names(self, show_orderer: bool = True) -> List[str]:
        return organization_names(self.get_nodes(), show_orderer)

    def update_node(self, node: FabricNode, externally_managed: bool = False) -> None:
        self.node_store.update_node(node, externally_managed)

    def delete_node(self, node: FabricNode) -> None:
        self.node_store.delete_node(node)

    def require_setup(self) -> bool:
        return len(self.get_nodes(without_identities=True)) > 0

    def get_wallets_and_identities(self) -> List[WalletRegistryEntry]:
        return []

    def get_gateways(self) -> List[GatewayRegistryEntry]:
        return []

    def get_wallet_names(self) -> List[str]:
        return []

    def get_identities(self, wallet_name: str) -> List[Identity]:
        return []

    def get_fabric_gateways(self) -> List[Gateway]:
        return []
