"""
Fabric Network Topology - Placeholder Environment

Stands in for environments whose backing service is unreachable or no longer
supported. Every query is empty and every change is ignored.
"""

from typing import List

from model.gateway import Gateway
from model.identity import Identity
from model.node import FabricNode
from registry.schema import GatewayRegistryEntry, WalletRegistryEntry

from .base import Environment


class NoOpEnvironment(Environment):

    def get_nodes(self, without_identities: bool = False, show_all: bool = False) -> List[FabricNode]:
        return []

    def get_all_organization_names(self, show_orderer: bool = True) -> List[str]:
        return []

    def update_node(self, node: FabricNode, externally_managed: bool = False) -> None:
        return None

    def delete_node(self, node: FabricNode) -> None:
        return None

    def require_setup(self) -> bool:
        return False

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
