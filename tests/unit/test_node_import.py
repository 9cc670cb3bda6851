"""
Unit tests for importing node definitions into an environment.
"""

import json
import pytest
from unittest.mock import Mock

from environments.fabric import FabricEnvironment
from environments.importer import import_nodes
from model.node import FabricNode, NodeValidationError


@pytest.fixture
def environment(populated_environment_dir):
    return FabricEnvironment('myFabric', populated_environment_dir)


def console_peer(name='Org2 Peer', api_url='grpcs://org2peer:7051', **extra):
    data = {
        'display_name': name, 'type': 'fabric-peer', 'api_url': api_url,
        'msp_id': 'Org2MSP', 'tls_ca_root_cert': 'ROOT',
    }
    data.update(extra)
    return data


class TestImportNodes:
    """Test import_nodes."""

    def test_import_new_node(self, environment):
        """Test importing a new node."""
        result = import_nodes(environment, [console_peer()])

        assert result.success
        assert [n.name for n in result.imported] == ['Org2 Peer']
        node = next(n for n in environment.get_nodes() if n.name == 'Org2 Peer')
        assert node.pem == 'ROOT'
        assert node.hidden is False

    def test_duplicate_name_rejected(self, environment):
        """Test an existing name is rejected."""
        result = import_nodes(environment, [console_peer(name='peer0.org1.example.com')])

        assert result.imported == []
        definition, error = result.failed[0]
        assert str(error) == 'Node with name peer0.org1.example.com already exists'

    def test_duplicates_within_one_import(self, environment):
        """Test duplicates within one import."""
        result = import_nodes(environment, [console_peer(), console_peer(api_url='grpcs://other:7051')])

        assert len(result.imported) == 1
        assert len(result.failed) == 1

    def test_invalid_definition_does_not_stop_others(self, environment):
        """Test one invalid definition does not stop the others."""
        invalid = console_peer(name='Broken Peer')
        del invalid['msp_id']

        result = import_nodes(environment, [invalid, console_peer()])

        assert [n.name for n in result.imported] == ['Org2 Peer']
        assert isinstance(result.failed[0][1], NodeValidationError)
        assert not result.success

    def test_console_identity_fields_not_persisted(self, environment, populated_environment_dir):
        """Test wallet, identity and container details are pruned on import."""
        result = import_nodes(environment, [console_peer(wallet='Org2', identity='admin',
                                                         container_name='org2peer')])

        assert result.success
        data = json.loads((populated_environment_dir / 'nodes' / 'Org2 Peer.json').read_text())
        assert data['msp_id'] == 'Org2MSP'
        assert data['pem'] == 'ROOT'
        assert 'wallet' not in data
        assert 'identity' not in data
        assert 'container_name' not in data

    def test_definitions_without_api_url_skipped(self, environment):
        """Test definitions lacking api_url are neither imported nor failed."""
        no_url = console_peer(name='No Url Peer')
        del no_url['api_url']

        result = import_nodes(environment, [no_url, console_peer()])

        assert [n.name for n in result.imported] == ['Org2 Peer']
        assert result.failed == []
        assert 'No Url Peer' not in [n.name for n in environment.get_nodes(show_all=True)]

    def test_externally_managed_replaces_missing_nodes(self, environment_dir):
        """Test nodes missing from a managed import are removed."""
        environment = FabricEnvironment('ops', environment_dir)
        import_nodes(environment, [console_peer(), console_peer(name='Org3 Peer', api_url='grpcs://org3:7051')],
                     externally_managed=True)

        result = import_nodes(environment, [console_peer(name='Org2 Peer Renamed')], externally_managed=True)

        assert result.success
        assert [n.name for n in environment.get_nodes(show_all=True)] == ['Org2 Peer Renamed']

    def test_externally_managed_keeps_identity(self, environment_dir):
        """Test a managed re-import keeps wallet and identity."""
        environment = FabricEnvironment('ops', environment_dir)
        import_nodes(environment, [console_peer()], externally_managed=True)
        node = environment.get_nodes()[0]
        node.wallet = 'Org2'
        node.identity = 'admin'
        environment.update_node(node)

        import_nodes(environment, [console_peer()], externally_managed=True)

        node = environment.get_nodes()[0]
        assert node.wallet == 'Org2'
        assert node.identity == 'admin'

    def test_uses_environment_interface(self):
        """Test import goes through the environment interface."""
        environment = Mock()
        environment.name = 'mock'
        environment.get_nodes.return_value = []

        import_nodes(environment, [console_peer()])

        node = environment.update_node.call_args[0][0]
        assert isinstance(node, FabricNode)
        assert environment.update_node.call_args[0][1] is False
        environment.delete_node.assert_not_called()
