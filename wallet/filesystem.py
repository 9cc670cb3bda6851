"""
Fabric Network Topology - File System Wallet

A wallet store keeping one ``<name>.id`` JSON document per identity inside the
wallet directory. Certificates and keys are stored as plain PEM text; the
``Identity`` objects handed back carry them base64-encoded so they compare
directly with identities read from environments.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from model.identity import Identity
from registry.exceptions import StorageError
from registry.schema import WalletRegistryEntry
from registry.storage import read_json, remove_path, write_json


class FileSystemWallet:
    """Wallet backed by a directory of identity files."""

    IDENTITY_SUFFIX = '.id'

    def __init__(self, wallet_path: Union[str, Path]):
        self.wallet_path = Path(wallet_path)
        self.logger = logging.getLogger(__name__)

    def _identity_path(self, name: str) -> Path:
        return self.wallet_path / f"{name}{self.IDENTITY_SUFFIX}"

    def import_identity(self, certificate: str, private_key: str, name: str, msp_id: str) -> None:
        """Store an identity given its PEM certificate and key."""
        data: Dict[str, Any] = {
            'credentials': {
                'certificate': certificate,
                'privateKey': private_key,
            },
            'mspId': msp_id,
            'type': 'X.509',
            'version': 1,
        }
        write_json(self._identity_path(name), data)
        self.logger.info(f"Imported identity {name} ({msp_id}) into wallet {self.wallet_path}")

    def exists(self, name: str) -> bool:
        return self._identity_path(name).is_file()

    def get_identity_names(self) -> List[str]:
        if not self.wallet_path.is_dir():
            return []
        return sorted(
            p.name[:-len(self.IDENTITY_SUFFIX)]
            for p in self.wallet_path.iterdir()
            if p.is_file() and p.name.endswith(self.IDENTITY_SUFFIX)
        )

    def get_identity(self, name: str) -> Identity:
        path = self._identity_path(name)
        data = read_json(path)
        try:
            credentials = data['credentials']
            return Identity.from_pem(name, credentials['certificate'],
                                     credentials['privateKey'], data['mspId'])
        except (KeyError, TypeError) as e:
            raise StorageError(f"Malformed identity file, missing {e}", path)

    def get_identities(self) -> List[Identity]:
        return [self.get_identity(name) for name in self.get_identity_names()]

    def delete_identity(self, name: str) -> None:
        remove_path(self._identity_path(name))


class WalletFactory:
    """Opens the wallet store for a wallet registry entry."""

    def get_wallet(self, entry: WalletRegistryEntry) -> FileSystemWallet:
        if not entry.wallet_path:
            raise StorageError(f"Wallet {entry.name} has no wallet path")
        return FileSystemWallet(entry.wallet_path)
