"""
Fabric Network Topology - Node Model

This module defines the canonical descriptor for a network node (peer, orderer,
certificate authority or CouchDB) together with its constructors, validation
and normalization of node definitions exported by external consoles.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class NodeType(str, Enum):
    """Node role enumeration."""
    PEER = "fabric-peer"
    CERTIFICATE_AUTHORITY = "fabric-ca"
    ORDERER = "fabric-orderer"
    COUCHDB = "couchdb"


class NodeValidationError(ValueError):
    """Raised when a node is missing a field its type requires."""
    pass


# Fields kept by FabricNode.prune; everything else is identity specific.
PRUNED_FIELDS = (
    'msp_id',
    'ca_name',
    'pem',
    'ssl_target_name_override',
    'cluster_name',
)


class FabricNode(BaseModel):
    """JSON representation of a network node."""

    model_config = ConfigDict(extra='allow')

    short_name: Optional[str] = Field(None, description="Short node identifier")
    name: Optional[str] = Field(None, description="Node name, unique within an environment")
    display_name: Optional[str] = None
    type: Optional[NodeType] = None
    api_url: Optional[str] = Field(None, description="Node API URL, stable across renames")
    api_options: Optional[Dict[str, Any]] = None
    ca_name: Optional[str] = None
    pem: Optional[str] = None
    tls_cert: Optional[str] = None
    tls_ca_root_cert: Optional[str] = None
    ssl_target_name_override: Optional[str] = None
    wallet: Optional[str] = None
    identity: Optional[str] = None
    msp_id: Optional[str] = None
    container_name: Optional[str] = None
    chaincode_url: Optional[str] = None
    chaincode_options: Optional[Dict[str, Any]] = None
    enroll_id: Optional[str] = None
    enroll_secret: Optional[str] = None
    cluster_name: Optional[str] = Field(None, description="Orderer cluster grouping key")
    hidden: bool = False

    @classmethod
    def new_peer(cls, short_name: str, name: str, api_url: str, wallet: Optional[str],
                 identity: Optional[str], msp_id: str, hidden: bool = False) -> 'FabricNode':
        return cls(short_name=short_name, name=name, type=NodeType.PEER, api_url=api_url,
                   wallet=wallet, identity=identity, msp_id=msp_id, hidden=hidden)

    @classmethod
    def new_secure_peer(cls, short_name: str, name: str, api_url: str, pem: str,
                        wallet: Optional[str], identity: Optional[str], msp_id: str,
                        hidden: bool = False) -> 'FabricNode':
        return cls(short_name=short_name, name=name, type=NodeType.PEER, api_url=api_url,
                   pem=pem, wallet=wallet, identity=identity, msp_id=msp_id, hidden=hidden)

    @classmethod
    def new_orderer(cls, short_name: str, name: str, api_url: str, wallet: Optional[str],
                    identity: Optional[str], msp_id: str, cluster_name: Optional[str],
                    hidden: bool = False) -> 'FabricNode':
        return cls(short_name=short_name, name=name, type=NodeType.ORDERER, api_url=api_url,
                   wallet=wallet, identity=identity, msp_id=msp_id,
                   cluster_name=cluster_name, hidden=hidden)

    @classmethod
    def new_secure_orderer(cls, short_name: str, name: str, api_url: str, pem: str,
                           wallet: Optional[str], identity: Optional[str], msp_id: str,
                           cluster_name: Optional[str], hidden: bool = False) -> 'FabricNode':
        return cls(short_name=short_name, name=name, type=NodeType.ORDERER, api_url=api_url,
                   pem=pem, wallet=wallet, identity=identity, msp_id=msp_id,
                   cluster_name=cluster_name, hidden=hidden)

    @classmethod
    def new_couchdb(cls, short_name: str, name: str, api_url: str,
                    hidden: bool = False) -> 'FabricNode':
        return cls(short_name=short_name, name=name, type=NodeType.COUCHDB,
                   api_url=api_url, hidden=hidden)

    @classmethod
    def new_certificate_authority(cls, short_name: str, name: str, api_url: str, ca_name: str,
                                  wallet: Optional[str], identity: Optional[str],
                                  msp_id: Optional[str], enroll_id: Optional[str] = None,
                                  enroll_secret: Optional[str] = None,
                                  hidden: bool = False) -> 'FabricNode':
        return cls(short_name=short_name, name=name, type=NodeType.CERTIFICATE_AUTHORITY,
                   api_url=api_url, ca_name=ca_name, wallet=wallet, identity=identity,
                   msp_id=msp_id, enroll_id=enroll_id, enroll_secret=enroll_secret,
                   hidden=hidden)

    @classmethod
    def new_secure_certificate_authority(cls, short_name: str, name: str, api_url: str,
                                         ca_name: str, pem: str, wallet: Optional[str],
                                         identity: Optional[str], msp_id: Optional[str],
                                         enroll_id: Optional[str] = None,
                                         enroll_secret: Optional[str] = None,
                                         hidden: bool = False) -> 'FabricNode':
        return cls(short_name=short_name, name=name, type=NodeType.CERTIFICATE_AUTHORITY,
                   api_url=api_url, ca_name=ca_name, pem=pem, wallet=wallet,
                   identity=identity, msp_id=msp_id, enroll_id=enroll_id,
                   enroll_secret=enroll_secret, hidden=hidden)

    @classmethod
    def prune(cls, data: Dict[str, Any]) -> 'FabricNode':
        """
        Build a node from a definition, keeping only the fields that describe
        the node itself (no wallet, identity or container details).
        """
        node = cls(
            short_name=data.get('short_name'),
            name=data.get('name'),
            type=data.get('type'),
            api_url=data.get('api_url'),
            hidden=data.get('hidden') or False,
        )
        for field_name in PRUNED_FIELDS:
            if data.get(field_name):
                setattr(node, field_name, data[field_name])
        return node

    @classmethod
    def from_external(cls, data: Dict[str, Any]) -> 'FabricNode':
        """
        Normalize a node definition exported by an external console.

        The console names nodes with ``display_name`` and ships TLS material
        as ``tls_cert`` (certificate authorities) or ``tls_ca_root_cert``
        (everything else); both map onto ``name`` and ``pem``.
        """
        data = dict(data)
        if data.get('display_name'):
            data['name'] = data.pop('display_name')

        if data.get('type') == NodeType.CERTIFICATE_AUTHORITY.value:
            if data.get('tls_cert'):
                data['pem'] = data.pop('tls_cert')
        elif data.get('tls_ca_root_cert'):
            data['pem'] = data.pop('tls_ca_root_cert')

        if data.get('hidden') is None:
            data['hidden'] = False

        return cls.model_validate(data)

    def validate_node(self) -> None:
        """Check the fields required for this node's type are present."""
        if not self.name:
            raise NodeValidationError('A node should have a name property')
        if not self.type:
            raise NodeValidationError('A node should have a type property')
        if not self.api_url:
            raise NodeValidationError('A node should have a api_url property')

        node_type = NodeType(self.type).value
        if self.type in (NodeType.PEER, NodeType.ORDERER) and not self.msp_id:
            raise NodeValidationError(f'A {node_type} node should have a msp_id property')
        if self.type == NodeType.CERTIFICATE_AUTHORITY and not self.ca_name:
            raise NodeValidationError(f'A {node_type} node should have a ca_name property')

    @property
    def is_orderer(self) -> bool:
        return self.type == NodeType.ORDERER

    @property
    def has_identity(self) -> bool:
        return bool(self.wallet and self.identity)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for a node file; absent optional fields are omitted."""
        return self.model_dump(mode='json', exclude_none=True)
