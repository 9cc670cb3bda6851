"""
Unit tests for the live component directory client and environment.
"""

import json
import pytest
import requests
from unittest.mock import Mock

from conftest import CERT_PEM, KEY_PEM, b64
from environments.base import UnsupportedOperationError
from environments.microfab import MicrofabEnvironment
from model.node import FabricNode, NodeType
from network.microfab_client import MicrofabClient, MicrofabClientError
from wallet.filesystem import FileSystemWallet


URL = 'http://console.127-0-0-1.nip.io:8080'


@pytest.fixture
def components():
    return [
        {
            'id': 'orderer', 'display_name': 'Orderer', 'type': 'fabric-orderer',
            'api_url': 'grpc://orderer-api.127-0-0-1.nip.io:8080',
            'api_options': {'grpc.default_authority': 'orderer-api.127-0-0-1.nip.io:8080'},
            'msp_id': 'OrdererMSP', 'wallet': 'Orderer', 'identity': 'Orderer Admin',
        },
        {
            'id': 'org1peer', 'display_name': 'Org1 Peer', 'type': 'fabric-peer',
            'api_url': 'grpc://org1peer-api.127-0-0-1.nip.io:8080',
            'api_options': {'grpc.default_authority': 'org1peer-api.127-0-0-1.nip.io:8080'},
            'chaincode_url': 'grpc://org1peer-chaincode.127-0-0-1.nip.io:8080',
            'chaincode_options': {'grpc.default_authority': 'org1peer-chaincode.127-0-0-1.nip.io:8080'},
            'msp_id': 'Org1MSP', 'wallet': 'Org1', 'identity': 'Org1 Admin',
        },
        {
            'id': 'org1admin', 'display_name': 'Org1 Admin', 'type': 'identity',
            'cert': b64(CERT_PEM), 'private_key': b64(KEY_PEM), 'msp_id': 'Org1MSP', 'wallet': 'Org1',
        },
        {
            'id': 'ordereradmin', 'display_name': 'Orderer Admin', 'type': 'identity',
            'cert': b64(CERT_PEM), 'private_key': b64(KEY_PEM), 'msp_id': 'OrdererMSP', 'wallet': 'Orderer',
        },
        {
            'id': 'org1gateway', 'display_name': 'Org1 Gateway', 'type': 'gateway',
            'name': 'Org1 Gateway', 'version': '1.0', 'wallet': 'Org1',
            'client': {'organization': 'Org1'}, 'peers': ['org1peer-api.127-0-0-1.nip.io:8080'],
        },
    ]


@pytest.fixture
def client(components):
    client = Mock(spec=MicrofabClient)
    client.get_components.return_value = components
    return client


@pytest.fixture
def environment(environment_dir, client):
    return MicrofabEnvironment('myMicrofab', environment_dir, URL, client=client)


class TestMicrofabClient:
    """Test the HTTP client against a mocked session."""

    def _session(self, status_code=200, payload=None, error=None):
        session = Mock(spec=requests.Session)
        session.headers = {}
        if error is not None:
            session.get.side_effect = error
        else:
            response = Mock(status_code=status_code, reason='Not Found')
            response.json.return_value = payload
            session.get.return_value = response
        return session

    def test_get_components(self, components):
        """Test fetching all components."""
        session = self._session(payload=components)
        client = MicrofabClient(URL + '/', session=session)

        assert client.get_components() == components
        session.get.assert_called_once_with(f"{URL}/ak/api/v1/components", verify=True)

    def test_get_component(self, components):
        """Test fetching one component without TLS verification."""
        session = self._session(payload=components[1])
        client = MicrofabClient(URL, verify_tls=False, session=session)

        assert client.get_component('org1peer') == components[1]
        session.get.assert_called_once_with(f"{URL}/ak/api/v1/components/org1peer", verify=False)

    def test_http_error(self):
        """Test HTTP errors carry status and URL."""
        client = MicrofabClient(URL, session=self._session(status_code=404))

        with pytest.raises(MicrofabClientError) as exc_info:
            client.get_components()

        assert exc_info.value.status_code == 404
        assert exc_info.value.url == f"{URL}/ak/api/v1/components"

    def test_connection_error(self):
        """Test transport errors are wrapped."""
        client = MicrofabClient(URL, session=self._session(error=requests.exceptions.ConnectionError('refused')))

        with pytest.raises(MicrofabClientError) as exc_info:
            client.get_components()

        assert exc_info.value.status_code is None

    def test_non_list_payload(self):
        """Test a payload that is not a list."""
        client = MicrofabClient(URL, session=self._session(payload={'error': 'nope'}))

        with pytest.raises(MicrofabClientError):
            client.get_components()


class TestMicrofabNodes:
    """Test nodes derived from components."""

    def test_get_nodes(self, environment):
        """Test nodes built from components."""
        nodes = environment.get_nodes()

        assert [n.name for n in nodes] == ['Orderer', 'Org1 Peer']
        orderer, peer = nodes
        assert orderer.type == NodeType.ORDERER
        assert orderer.short_name == 'orderer'
        assert orderer.cluster_name == 'Orderer'
        assert orderer.api_options == {'grpc.default_authority': 'orderer-api.127-0-0-1.nip.io:8080'}
        assert peer.type == NodeType.PEER
        assert peer.chaincode_url == 'grpc://org1peer-chaincode.127-0-0-1.nip.io:8080'
        assert peer.wallet == 'Org1'
        assert peer.identity == 'Org1 Admin'

    def test_orderer_cluster_name_from_component(self, environment, components):
        """Test an explicit cluster name is kept."""
        components[0]['cluster_name'] = 'Raft'

        assert environment.get_nodes()[0].cluster_name == 'Raft'

    def test_organization_names(self, environment):
        """Test organization names from components."""
        assert environment.get_all_organization_names() == ['OrdererMSP', 'Org1MSP']
        assert environment.get_all_organization_names(show_orderer=False) == ['Org1MSP']

    def test_read_only(self, environment):
        """Test node changes are unsupported."""
        node = FabricNode.new_peer('p', 'p', 'grpc://p', None, None, 'Org1MSP')

        with pytest.raises(UnsupportedOperationError):
            environment.update_node(node)
        with pytest.raises(UnsupportedOperationError):
            environment.delete_node(node)

        assert environment.require_setup() is False

    def test_client_error_propagates(self, environment, client):
        """Test client errors propagate."""
        client.get_components.side_effect = MicrofabClientError('HTTP 500: Error', URL, 500)

        with pytest.raises(MicrofabClientError):
            environment.get_nodes()


class TestMicrofabWalletsAndGateways:
    """Test wallets, identities and gateway caching."""

    def test_wallet_names(self, environment):
        """Test wallet names from identity components."""
        assert environment.get_wallet_names() == ['Org1', 'Orderer']

    def test_identities(self, environment):
        """Test identities of one wallet."""
        identities = environment.get_identities('Org1')

        assert [i.name for i in identities] == ['Org1 Admin']
        assert identities[0].decoded_cert().decode('utf-8') == CERT_PEM

    def test_wallets_and_identities(self, environment, environment_dir):
        """Test wallets are created and identities imported."""
        entries = environment.get_wallets_and_identities()

        assert [e.name for e in entries] == ['Org1', 'Orderer']
        assert entries[0].display_name == 'myMicrofab - Org1'
        assert entries[0].wallet_path == str(environment_dir / 'wallets' / 'Org1')
        assert FileSystemWallet(environment_dir / 'wallets' / 'Org1').exists('Org1 Admin')
        assert FileSystemWallet(environment_dir / 'wallets' / 'Orderer').exists('Orderer Admin')

    def test_wallets_fetch_components_once(self, environment, client):
        """Test components are fetched once per call."""
        environment.get_wallets_and_identities()

        client.get_components.assert_called_once()

    def test_fabric_gateways_cached(self, environment, environment_dir, components):
        """Test gateway profiles are cached without rewrites."""
        gateways = environment.get_fabric_gateways()

        path = environment_dir / 'gateways' / 'Org1 Gateway.json'
        assert [g.name for g in gateways] == ['Org1 Gateway']
        assert gateways[0].path == str(path)
        assert json.loads(path.read_text()) == components[4]

        mtime = path.stat().st_mtime_ns
        environment.get_fabric_gateways()
        assert path.stat().st_mtime_ns == mtime

    def test_gateway_entries(self, environment):
        """Test gateway registry entries."""
        entries = environment.get_gateways()

        assert len(entries) == 1
        assert entries[0].name == 'myMicrofab - Org1 Gateway'
        assert entries[0].associated_wallet == 'Org1'
        assert entries[0].from_environment == 'myMicrofab'
