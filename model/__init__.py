"""
Fabric Network Topology - Core Models
"""

from .node import FabricNode, NodeType, NodeValidationError
from .identity import Identity
from .gateway import Gateway

__all__ = [
    'FabricNode',
    'NodeType',
    'NodeValidationError',
    'Identity',
    'Gateway',
]
