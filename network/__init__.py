"""
Fabric Network Topology - Network Clients
"""

from .microfab_client import MicrofabClient, MicrofabClientError

__all__ = ['MicrofabClient', 'MicrofabClientError']
