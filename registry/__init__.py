"""
Fabric Network Topology - Registries

Persisted registries of environments, wallets and gateways. Import the concrete
registries from their modules; ``context.RegistryContext`` wires them together.
"""
