"""
Fabric Network Topology - Wallet Stores
"""

from .filesystem import FileSystemWallet, WalletFactory

__all__ = ['FileSystemWallet', 'WalletFactory']
