"""
Fabric Network Topology - Node Files

This module manages the node files of a directory-backed environment:
``<environment>/nodes/**/*.json``, one node per file. Updates carry identity
assignments across renames of externally managed nodes and keep every orderer
in a cluster on the same wallet, identity and visibility.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from pydantic import ValidationError

from model.node import FabricNode, NodeType, NodeValidationError
from registry.exceptions import StorageError
from registry.storage import move_path, read_json, remove_path, write_json


def filter_nodes(nodes: Iterable[FabricNode], without_identities: bool = False,
                 show_all: bool = False) -> List[FabricNode]:
    """Apply the visibility and missing-identity filters."""
    result = list(nodes)
    if without_identities:
        result = [node for node in result if not node.wallet or not node.identity]
    if not show_all:
        result = [node for node in result if not node.hidden]
    return result


def organization_names(nodes: Iterable[FabricNode], show_orderer: bool = True) -> List[str]:
    """Sorted distinct MSP ids, optionally leaving out orderer nodes."""
    names = set()
    for node in nodes:
        if not node.msp_id:
            continue
        if not show_orderer and node.type == NodeType.ORDERER:
            continue
        names.add(node.msp_id)
    return sorted(names)


class NodeStore:
    """Node files under one environment directory."""

    def __init__(self, environment_path: Union[str, Path]):
        self.nodes_path = Path(environment_path) / 'nodes'
        self.logger = logging.getLogger(__name__)

    def node_path(self, name: str) -> Path:
        return self.nodes_path / f"{name}.json"

    def _node_files(self) -> List[Path]:
        if not self.nodes_path.is_dir():
            return []
        files = []
        for path in sorted(self.nodes_path.rglob('*.json')):
            relative = path.relative_to(self.nodes_path)
            if any(part.startswith('.') for part in relative.parts):
                continue
            if path.is_file():
                files.append(path)
        return files

    def load(self) -> List[Tuple[Path, FabricNode]]:
        """Every node on disk with the file it was read from."""
        loaded = []
        for path in self._node_files():
            data = read_json(path)
            try:
                loaded.append((path, FabricNode.model_validate(data)))
            except ValidationError as e:
                raise StorageError(f"Invalid node definition: {e}", path)
        return loaded

    def get_nodes(self, without_identities: bool = False, show_all: bool = False) -> List[FabricNode]:
        return filter_nodes((node for _, node in self.load()), without_identities, show_all)

    def _find_path(self, loaded: List[Tuple[Path, FabricNode]], name: str) -> Optional[Path]:
        for path, node in loaded:
            if node.name == name:
                return path
        return None

    def update_node(self, node: FabricNode, externally_managed: bool = False) -> FabricNode:
        """
        Write ``node``, propagating to related nodes.

        When ``externally_managed``, an existing node with the same ``api_url``
        is the same node: its wallet and identity fill any gaps in ``node``
        and, if it was renamed, its file is moved to the new name first.
        For an orderer in a cluster, every other orderer in that cluster gets
        the same wallet, identity and hidden flag. Sibling files are written
        before the node itself, one at a time.

        Returns the node as written.
        """
        if not node.name:
            raise NodeValidationError("A node should have a name property")

        node = node.model_copy(deep=True)
        loaded = self.load()
        existing: Optional[Tuple[Path, FabricNode]] = None
        target_path: Optional[Path] = None

        if externally_managed:
            existing = next(((p, n) for p, n in loaded if n.api_url == node.api_url), None)
            if existing:
                old_path, old_node = existing
                if not node.wallet:
                    node.wallet = old_node.wallet
                if not node.identity:
                    node.identity = old_node.identity

                if old_node.name != node.name:
                    target_path = old_path.with_name(f"{node.name}.json")
                    self.logger.info(f"Renaming node {old_node.name} to {node.name}")
                    move_path(old_path, target_path)
                else:
                    target_path = old_path

        if target_path is None:
            target_path = self._find_path(loaded, node.name) or self.node_path(node.name)

        if node.type == NodeType.ORDERER and node.cluster_name:
            for path, other in loaded:
                if existing is not None and path == existing[0]:
                    continue
                if other.name == node.name or other.type != NodeType.ORDERER:
                    continue
                if other.cluster_name != node.cluster_name:
                    continue

                other.wallet = node.wallet
                other.identity = node.identity
                other.hidden = node.hidden
                self.logger.debug(f"Updating orderer {other.name} in cluster {node.cluster_name}")
                write_json(path, other.to_dict())

        write_json(target_path, node.to_dict())
        self.logger.debug(f"Updated node {node.name}")
        return node

    def delete_node(self, node: FabricNode) -> None:
        """Remove the file of the node with this name."""
        path = self._find_path(self.load(), node.name) or self.node_path(node.name)
        remove_path(path)
        self.logger.info(f"Deleted node {node.name}")
