"""
Fabric Network Topology - Registry Schema Models

This module defines the Pydantic models for environment, wallet and gateway
registry entries, and the categorization flags carried by environments.

Entries are persisted with camelCase keys (``walletPath``, ``fromEnvironment``,
...) and exposed to Python with snake_case attributes.
"""

from enum import IntFlag
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EnvironmentFlags(IntFlag):
    """Independent categorization tags for an environment."""
    NONE = 0
    LOCAL = 1
    ANSIBLE = 2
    MANAGED = 4
    OPS_TOOLS = 8
    SAAS = 16
    MICROFAB = 32


class EnvironmentType:
    """Common tag combinations."""
    ENVIRONMENT = EnvironmentFlags.NONE
    ANSIBLE_ENVIRONMENT = EnvironmentFlags.ANSIBLE
    LOCAL_ENVIRONMENT = EnvironmentFlags.LOCAL | EnvironmentFlags.MANAGED | EnvironmentFlags.ANSIBLE
    OPS_TOOLS_ENVIRONMENT = EnvironmentFlags.OPS_TOOLS
    SAAS_OPS_TOOLS_ENVIRONMENT = EnvironmentFlags.OPS_TOOLS | EnvironmentFlags.SAAS
    MICROFAB_ENVIRONMENT = EnvironmentFlags.MICROFAB
    LOCAL_MICROFAB_ENVIRONMENT = EnvironmentFlags.LOCAL | EnvironmentFlags.MANAGED | EnvironmentFlags.MICROFAB


class RegistryEntry(BaseModel):
    """Base registry entry; every entry is keyed by name."""

    model_config = ConfigDict(populate_by_name=True, extra='allow')

    name: str = Field(..., min_length=1, description="Entry name")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for a registry file."""
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)


class EnvironmentRegistryEntry(RegistryEntry):
    """Descriptor of a registered environment."""

    environment_directory: Optional[str] = Field(None, alias='environmentDirectory')
    url: Optional[str] = Field(None, description="Base URL for HTTP-backed environments")
    environment_type: int = Field(default=0, alias='environmentType')
    managed_runtime: bool = Field(default=False, alias='managedRuntime')

    @field_validator('environment_type', mode='before')
    @classmethod
    def validate_environment_type(cls, v):
        """Accept flag members and plain integers; store the integer value."""
        if v is None:
            return 0
        return int(v)

    @property
    def flags(self) -> EnvironmentFlags:
        return EnvironmentFlags(self.environment_type)

    def has_flag(self, flag: EnvironmentFlags) -> bool:
        """True when this entry's tag set intersects ``flag``."""
        return bool(self.flags & flag)


class WalletRegistryEntry(RegistryEntry):
    """Registered wallet, either stored directly or derived from an environment."""

    wallet_path: Optional[str] = Field(None, alias='walletPath')
    display_name: Optional[str] = Field(None, alias='displayName')
    managed_wallet: Optional[bool] = Field(None, alias='managedWallet')
    from_environment: Optional[str] = Field(None, alias='fromEnvironment')
    environment_groups: Optional[List[str]] = Field(None, alias='environmentGroups')


class GatewayRegistryEntry(RegistryEntry):
    """Registered gateway, either stored directly or derived from an environment."""

    connection_profile_path: Optional[str] = Field(None, alias='connectionProfilePath')
    associated_wallet: Optional[str] = Field(None, alias='associatedWallet')
    display_name: Optional[str] = Field(None, alias='displayName')
    from_environment: Optional[str] = Field(None, alias='fromEnvironment')
    environment_group: Optional[str] = Field(None, alias='environmentGroup')
    transaction_data_directories: Optional[List[Dict[str, Any]]] = Field(
        None, alias='transactionDataDirectories'
    )


def sort_key(entry: RegistryEntry) -> Tuple[str, str]:
    """Order by display name, falling back to name, ignoring case."""
    label = getattr(entry, 'display_name', None) or entry.name
    return label.casefold(), label
