"""
Fabric Network Topology - Identity Model

An identity is a certificate/private-key pair plus its owning MSP. Certificate
and key are carried base64-encoded, as they appear in identity files written by
automation tooling and in the live component API.
"""

import base64
from typing import Any, Dict

from pydantic import BaseModel, Field


class Identity(BaseModel):
    """Identity held in a wallet."""

    name: str = Field(..., description="Identity name, unique within a wallet")
    cert: str = Field(..., description="Base64-encoded PEM certificate")
    private_key: str = Field(..., description="Base64-encoded PEM private key")
    msp_id: str = Field(..., description="Owning MSP identifier")

    @classmethod
    def from_pem(cls, name: str, certificate: str, private_key: str, msp_id: str) -> 'Identity':
        """Build an identity from plain PEM text."""
        return cls(
            name=name,
            cert=base64.b64encode(certificate.encode('utf-8')).decode('ascii'),
            private_key=base64.b64encode(private_key.encode('utf-8')).decode('ascii'),
            msp_id=msp_id,
        )

    def decoded_cert(self) -> bytes:
        return base64.b64decode(self.cert)

    def decoded_private_key(self) -> bytes:
        return base64.b64decode(self.private_key)

    def matches(self, other: 'Identity') -> bool:
        """
        Reconciliation equality: same name, same MSP and byte-identical
        decoded certificate. Private keys are not compared.
        """
        return (
            self.name == other.name
            and self.msp_id == other.msp_id
            and self.decoded_cert() == other.decoded_cert()
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()
