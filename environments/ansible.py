"""
Fabric Network Topology - Automation-Tool Environment

An environment generated by infrastructure automation. Nodes are handled as for
a plain directory environment; wallets and gateways come from the generated
``wallets/<wallet>/*.json`` identity files and ``gateways/**/*.json``
connection profiles.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from model.gateway import Gateway
from model.identity import Identity
from model.node import FabricNode
from registry.schema import GatewayRegistryEntry, WalletRegistryEntry
from wallet.filesystem import WalletFactory

from .base import Environment
from .nodes import NodeStore, organization_names
from .reconcile import (
    gateway_entries, load_gateways, load_wallet_entry, read_identities,
    read_wallet_names, reconcile_identities,
)


class AnsibleEnvironment(Environment):
    """Environment backed by an automation tool's output directory."""

    def __init__(self, name: str, environment_path: Union[str, Path],
                 wallet_factory: Optional[WalletFactory] = None):
        super().__init__(name, environment_path)
        self.node_store = NodeStore(self.path)
        self.wallet_factory = wallet_factory or WalletFactory()
        self.logger = logging.getLogger(__name__)

    @property
    def wallets_path(self) -> Path:
        return self.path / 'wallets'

    @property
    def gateways_path(self) -> Path:
        return self.path / 'gateways'

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
        """
        One entry per wallet directory. Identities found in the directory are
        imported into the wallet store unless an identical one is present.
        """
        entries = []
        for wallet_name in self.get_wallet_names():
            entry = load_wallet_entry(self.name, wallet_name, self.wallets_path / wallet_name)
            entries.append(entry)

            wallet = self.wallet_factory.get_wallet(entry)
            imported = reconcile_identities(wallet, self.get_identities(wallet_name))
            if imported:
                self.logger.info(
                    f"Imported {len(imported)} identities into wallet {wallet_name} "
                    f"of environment {self.name}"
                )

        return entries

    def get_gateways(self) -> List[GatewayRegistryEntry]:
        return gateway_entries(self.name, self.get_fabric_gateways(), self.gateways_path)

    def get_wallet_names(self) -> List[str]:
        return read_wallet_names(self.wallets_path)

    def get_identities(self, wallet_name: str) -> List[Identity]:
        return read_identities(self.wallets_path / wallet_name)

    def get_fabric_gateways(self) -> List[Gateway]:
        return load_gateways(self.gateways_path)
