"""
Fabric Network Topology - Live Component Directory Environment

An environment discovered entirely from a running network's HTTP component
directory. Nodes, wallets and gateways are all derived from the component list;
connection profiles are cached under ``<path>/gateways`` and wallet stores live
under ``<path>/wallets``. The environment is read-only: nodes cannot be changed
through it.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from model.gateway import Gateway
from model.identity import Identity
from model.node import FabricNode
from network.microfab_client import (
    MicrofabClient, is_gateway, is_identity, is_orderer, is_peer,
)
from registry.exceptions import StorageError
from registry.schema import GatewayRegistryEntry, WalletRegistryEntry
from wallet.filesystem import WalletFactory

from .base import Environment, UnsupportedOperationError
from .nodes import filter_nodes, organization_names
from .reconcile import (
    cache_connection_profile, gateway_entries, load_wallet_entry, reconcile_identities,
)


Component = Dict[str, Any]


def node_from_component(component: Component) -> Optional[FabricNode]:
    """Map a peer or orderer component onto a node; other components give None."""
    if is_peer(component):
        node = FabricNode.new_peer(
            component.get('id'),
            component.get('display_name'),
            component.get('api_url'),
            component.get('wallet'),
            component.get('identity'),
            component.get('msp_id'),
            False,
        )
        node.chaincode_url = component.get('chaincode_url')
        node.chaincode_options = component.get('chaincode_options')
    elif is_orderer(component):
        # A single-node ordering service has no cluster of its own.
        node = FabricNode.new_orderer(
            component.get('id'),
            component.get('display_name'),
            component.get('api_url'),
            component.get('wallet'),
            component.get('identity'),
            component.get('msp_id'),
            component.get('cluster_name') or component.get('wallet'),
            False,
        )
    else:
        return None

    node.api_options = component.get('api_options')
    return node


class MicrofabEnvironment(Environment):
    """Environment backed by the component directory at ``url``."""

    def __init__(self, name: str, environment_path: Union[str, Path], url: str,
                 client: Optional[MicrofabClient] = None,
                 wallet_factory: Optional[WalletFactory] = None):
        super().__init__(name, environment_path)
        self.url = url
        self.client = client or MicrofabClient(url)
        self.wallet_factory = wallet_factory or WalletFactory()
        self.logger = logging.getLogger(__name__)

    @property
    def wallets_path(self) -> Path:
        return self.path / 'wallets'

    @property
    def gateways_path(self) -> Path:
        return self.path / 'gateways'

    def get_nodes(self, without_identities: bool = False, show_all: bool = False) -> List[FabricNode]:
        nodes = []
        for component in self.client.get_components():
            node = node_from_component(component)
            if node is not None:
                nodes.append(node)
        return filter_nodes(nodes, without_identities, show_all)

    def get_all_organization_names(self, show_orderer: bool = True) -> List[str]:
        return organization_names(self.get_nodes(), show_orderer)

    def update_node(self, node: FabricNode, externally_managed: bool = False) -> None:
        raise UnsupportedOperationError('update_node', self.name)

    def delete_node(self, node: FabricNode) -> None:
        raise UnsupportedOperationError('delete_node', self.name)

    def require_setup(self) -> bool:
        return False

    def _wallet_names(self, components: List[Component]) -> List[str]:
        names = []
        for component in components:
            wallet = component.get('wallet')
            if is_identity(component) and wallet and wallet not in names:
                names.append(wallet)
        return names

    def _identities(self, components: List[Component], wallet_name: str) -> List[Identity]:
        return [
            Identity(
                name=component['display_name'],
                cert=component['cert'],
                private_key=component['private_key'],
                msp_id=component['msp_id'],
            )
            for component in components
            if is_identity(component) and component.get('wallet') == wallet_name
        ]

    def get_wallets_and_identities(self) -> List[WalletRegistryEntry]:
        components = self.client.get_components()
        entries = []
        for wallet_name in self._wallet_names(components):
            wallet_path = self.wallets_path / wallet_name
            try:
                wallet_path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Failed to create wallet directory: {e}", wallet_path)

            entry = load_wallet_entry(self.name, wallet_name, wallet_path)
            entries.append(entry)

            wallet = self.wallet_factory.get_wallet(entry)
            imported = reconcile_identities(wallet, self._identities(components, wallet_name))
            if imported:
                self.logger.info(
                    f"Imported {len(imported)} identities into wallet {wallet_name} "
                    f"of environment {self.name}"
                )

        return entries

    def get_gateways(self) -> List[GatewayRegistryEntry]:
        return gateway_entries(self.name, self.get_fabric_gateways(), self.gateways_path)

    def get_wallet_names(self) -> List[str]:
        return self._wallet_names(self.client.get_components())

    def get_identities(self, wallet_name: str) -> List[Identity]:
        return self._identities(self.client.get_components(), wallet_name)

    def get_fabric_gateways(self) -> List[Gateway]:
        """Gateway components, each cached to ``gateways/<display_name>.json``."""
        gateways = []
        for component in self.client.get_components():
            if not is_gateway(component):
                continue

            gateway_path = self.gateways_path / f"{component['display_name']}.json"
            if cache_connection_profile(gateway_path, component):
                self.logger.debug(f"Cached connection profile {gateway_path}")

            gateways.append(Gateway(
                name=component.get('name', component['display_name']),
                path=str(gateway_path),
                connection_profile=component,
            ))
        return gateways
