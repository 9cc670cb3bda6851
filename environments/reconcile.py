"""
Fabric Network Topology - Wallet and Gateway Reconciliation

Helpers shared by the environments that derive wallets and gateways: reading
identity and connection-profile files, building the derived registry entries,
importing identities a wallet does not hold yet, and caching connection
profiles without rewriting unchanged files.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from pydantic import ValidationError

from model.gateway import Gateway
from model.identity import Identity
from registry.exceptions import StorageError
from registry.schema import GatewayRegistryEntry, WalletRegistryEntry
from registry.storage import FileRegistry, list_visible, read_json, write_json


logger = logging.getLogger(__name__)


def read_wallet_names(wallets_path: Union[str, Path]) -> List[str]:
    """Sorted wallet directory names under ``wallets_path``."""
    return [p.name for p in list_visible(wallets_path) if p.is_dir()]


def read_identities(wallet_path: Union[str, Path]) -> List[Identity]:
    """Identity files (``*.json``) directly inside a wallet directory."""
    identities = []
    for path in list_visible(wallet_path):
        if not path.is_file() or path.suffix != '.json':
            continue
        data = read_json(path)
        try:
            identities.append(Identity.model_validate(data))
        except ValidationError as e:
            raise StorageError(f"Invalid identity definition: {e}", path)
    return identities


def load_gateways(gateways_path: Union[str, Path]) -> List[Gateway]:
    """Connection profiles found recursively under ``gateways_path``."""
    gateways = []
    for path in list_visible(gateways_path):
        if path.is_dir():
            gateways.extend(load_gateways(path))
        elif path.is_file() and path.suffix == '.json':
            profile = read_json(path)
            gateways.append(Gateway(name=profile.get('name', path.stem), path=str(path),
                                    connection_profile=profile))
    return gateways


def load_wallet_entry(environment_name: str, wallet_name: str,
                      wallet_path: Union[str, Path]) -> WalletRegistryEntry:
    """
    The registry entry for a wallet an environment owns.

    A ``.config.json`` sidecar in the wallet directory is authoritative;
    without one the entry is synthesized.
    """
    wallet_path = Path(wallet_path)
    config_path = wallet_path / FileRegistry.FILE_NAME
    if config_path.is_file():
        data = read_json(config_path)
        try:
            return WalletRegistryEntry.model_validate(data)
        except ValidationError as e:
            raise StorageError(f"Invalid wallet entry: {e}", config_path)

    return WalletRegistryEntry(
        name=wallet_name,
        wallet_path=str(wallet_path),
        managed_wallet=False,
        display_name=f"{environment_name} - {wallet_name}",
        from_environment=environment_name,
        environment_groups=[environment_name],
    )


def gateway_entry_name(environment_name: str, gateway_name: str) -> str:
    return f"{environment_name} - {gateway_name}"


def gateway_profile_name(environment_name: str, entry_name: str) -> str:
    """The connection profile name a derived gateway entry was built from."""
    prefix = gateway_entry_name(environment_name, '')
    if entry_name.startswith(prefix):
        return entry_name[len(prefix):]
    return entry_name


def gateway_config_path(gateways_path: Union[str, Path], gateway_name: str) -> Path:
    """
    Location of the ``.config.json`` sidecar for a derived gateway, keyed on
    the connection profile name.
    """
    return Path(gateways_path) / gateway_name / FileRegistry.FILE_NAME


def gateway_entries(environment_name: str, gateways: Iterable[Gateway],
                    gateways_path: Union[str, Path]) -> List[GatewayRegistryEntry]:
    """
    Derived gateway registry entries for an environment's connection profiles.

    As for wallets, a sidecar written by a registry update takes precedence
    over the synthesized entry.
    """
    entries = []
    for gateway in gateways:
        config_path = gateway_config_path(gateways_path, gateway.name)
        if config_path.is_file():
            data = read_json(config_path)
            try:
                entries.append(GatewayRegistryEntry.model_validate(data))
            except ValidationError as e:
                raise StorageError(f"Invalid gateway entry: {e}", config_path)
            continue

        entries.append(GatewayRegistryEntry(
            name=gateway_entry_name(environment_name, gateway.name),
            associated_wallet=gateway.wallet,
            display_name=gateway.name,
            connection_profile_path=gateway.path,
            from_environment=environment_name,
            environment_group=environment_name,
        ))
    return entries


def reconcile_identities(wallet, identities: Iterable[Identity]) -> List[Identity]:
    """
    Import into ``wallet`` every identity it does not already hold.

    An identity is already held when the wallet has one with the same name,
    MSP id and decoded certificate bytes; such identities are left untouched.
    Returns the identities imported.
    """
    existing = wallet.get_identities()
    imported = []
    for identity in identities:
        if any(other.matches(identity) for other in existing):
            logger.debug(f"Identity {identity.name} already present, skipping import")
            continue

        wallet.import_identity(
            identity.decoded_cert().decode('utf-8'),
            identity.decoded_private_key().decode('utf-8'),
            identity.name,
            identity.msp_id,
        )
        imported.append(identity)

    return imported


def cache_connection_profile(path: Union[str, Path], profile: Dict[str, Any]) -> bool:
    """Write ``profile`` to ``path`` unless the file already holds the same content."""
    path = Path(path)
    if path.is_file():
        try:
            if read_json(path) == profile:
                return False
        except StorageError as e:
            logger.warning(f"Replacing unreadable cached profile: {e}")

    write_json(path, profile)
    return True
