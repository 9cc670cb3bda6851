"""
Fabric Network Topology - Node Import

Imports node definitions, such as those exported from an external console,
into an environment.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple

from model.node import FabricNode, NodeValidationError
from registry.exceptions import RegistryError

from .base import Environment, FabricEnvironmentError


logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Outcome of an import: nodes written and (definition, error) pairs that failed."""
    imported: List[FabricNode] = field(default_factory=list)
    failed: List[Tuple[Dict[str, Any], Exception]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed


def import_nodes(environment: Environment, definitions: Iterable[Dict[str, Any]],
                 externally_managed: bool = False) -> ImportResult:
    """
    Normalize, prune, validate and write each definition into ``environment``.

    Definitions without an ``api_url`` are skipped. Pruning keeps only the
    fields describing the node itself, so wallet, identity and container
    details supplied by a console are never persisted. Failures are collected
    per node; one bad definition does not stop the rest. When
    ``externally_managed``, nodes are matched by ``api_url`` and existing
    nodes whose ``api_url`` is not among the definitions are removed.
    """
    definitions = list(definitions)
    skipped = [d for d in definitions if not d.get('api_url')]
    if skipped:
        logger.debug(f"Skipping {len(skipped)} node definitions without api_url")
    definitions = [d for d in definitions if d.get('api_url')]

    result = ImportResult()
    existing_names = {node.name for node in environment.get_nodes()}

    for definition in definitions:
        try:
            node = FabricNode.prune(FabricNode.from_external(definition).to_dict())
            if not externally_managed and node.name in existing_names:
                raise FabricEnvironmentError(f"Node with name {node.name} already exists")

            node.validate_node()
            environment.update_node(node, externally_managed)
        except (NodeValidationError, FabricEnvironmentError, RegistryError, ValueError) as e:
            label = definition.get('display_name') or definition.get('name') or '<unnamed>'
            logger.error(f"Error importing node {label} into {environment.name}: {e}")
            result.failed.append((definition, e))
            continue

        existing_names.add(node.name)
        result.imported.append(node)
        logger.info(f"Imported node {node.name} into {environment.name}")

    if externally_managed:
        api_urls = {definition.get('api_url') for definition in definitions}
        for node in environment.get_nodes(show_all=True):
            if node.api_url not in api_urls:
                logger.info(f"Removing node {node.name} no longer present in {environment.name}")
                environment.delete_node(node)

    return result
