"""
Fabric Network Topology - Gateway Model
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Gateway(BaseModel):
    """A named connection profile and the file it was loaded from."""

    name: str
    path: str
    connection_profile: Dict[str, Any] = Field(default_factory=dict)

    @property
    def wallet(self) -> Optional[str]:
        """Wallet the profile is associated with, if it names one."""
        return self.connection_profile.get('wallet')
