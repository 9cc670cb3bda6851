"""
Fabric Registry CLI

Read-only command line over the environment, wallet and gateway registries.
"""

__version__ = "0.1.0"
