"""
Fabric Network Topology - Environments

Environment variants (directory-backed, automation-tool, live component
directory and placeholder), the factory that picks one for a registry entry,
and node import.
"""

from .base import Environment, FabricEnvironmentError, UnsupportedOperationError
from .factory import EnvironmentFactory
from .importer import ImportResult, import_nodes

__all__ = [
    'Environment',
    'FabricEnvironmentError',
    'UnsupportedOperationError',
    'EnvironmentFactory',
    'ImportResult',
    'import_nodes',
]
