"""
Unit tests for the node, identity and gateway models.
"""

import pytest

from model.gateway import Gateway
from model.identity import Identity
from model.node import FabricNode, NodeType, NodeValidationError


class TestNodeConstructors:
    """Test the typed node constructors."""

    def test_new_peer(self):
        """Test the peer constructor."""
        node = FabricNode.new_peer('peer0', 'peer0.org1', 'grpc://localhost:7051',
                                   'Org1', 'admin', 'Org1MSP')

        assert node.type == NodeType.PEER
        assert node.short_name == 'peer0'
        assert node.wallet == 'Org1'
        assert node.hidden is False
        assert node.pem is None

    def test_new_secure_orderer_keeps_pem_and_cluster(self):
        """Test the secure orderer constructor."""
        node = FabricNode.new_secure_orderer('orderer', 'orderer.example.com', 'grpcs://localhost:7050',
                                             'PEM', 'wallet', 'admin', 'OrdererMSP', 'Raft')

        assert node.type == NodeType.ORDERER
        assert node.pem == 'PEM'
        assert node.cluster_name == 'Raft'
        assert node.is_orderer

    def test_new_certificate_authority_enrollment(self):
        """Test certificate authority enrollment fields."""
        node = FabricNode.new_certificate_authority('ca', 'ca.org1', 'http://localhost:7054', 'ca.org1',
                                                    None, None, 'Org1MSP', 'admin', 'adminpw')

        assert node.type == NodeType.CERTIFICATE_AUTHORITY
        assert node.enroll_id == 'admin'
        assert node.enroll_secret == 'adminpw'
        assert not node.has_identity

    def test_new_couchdb(self):
        """Test the CouchDB constructor."""
        node = FabricNode.new_couchdb('couchdb', 'couchdb', 'http://localhost:5984')

        assert node.type == NodeType.COUCHDB
        assert node.msp_id is None


class TestNodeSerialization:
    """Test node file round trips."""

    def test_to_dict_omits_absent_fields(self):
        """Test to_dict omits absent fields."""
        node = FabricNode.new_peer('peer0', 'peer0.org1', 'grpc://localhost:7051', None, None, 'Org1MSP')

        data = node.to_dict()

        assert data['type'] == 'fabric-peer'
        assert 'wallet' not in data
        assert 'pem' not in data
        assert data['hidden'] is False

    def test_unknown_fields_preserved(self):
        """Test unknown node-file keys are preserved."""
        node = FabricNode.model_validate({
            'name': 'peer0.org1', 'type': 'fabric-peer', 'api_url': 'grpc://localhost:7051',
            'msp_id': 'Org1MSP', 'custom_field': 'kept',
        })

        assert node.to_dict()['custom_field'] == 'kept'


class TestNodeValidation:
    """Test validate_node messages."""

    @pytest.mark.parametrize('data, message', [
        ({'type': 'fabric-peer', 'api_url': 'grpc://a'}, 'A node should have a name property'),
        ({'name': 'n', 'api_url': 'grpc://a'}, 'A node should have a type property'),
        ({'name': 'n', 'type': 'fabric-peer'}, 'A node should have a api_url property'),
        ({'name': 'n', 'type': 'fabric-peer', 'api_url': 'grpc://a'},
         'A fabric-peer node should have a msp_id property'),
        ({'name': 'n', 'type': 'fabric-orderer', 'api_url': 'grpc://a'},
         'A fabric-orderer node should have a msp_id property'),
        ({'name': 'n', 'type': 'fabric-ca', 'api_url': 'http://a'},
         'A fabric-ca node should have a ca_name property'),
    ])
    def test_missing_fields(self, data, message):
        """Test each missing required field."""
        node = FabricNode.model_validate(data)

        with pytest.raises(NodeValidationError) as exc_info:
            node.validate_node()

        assert str(exc_info.value) == message

    def test_valid_nodes(self, sample_nodes):
        """Test valid nodes pass."""
        for node in sample_nodes.values():
            node.validate_node()

    def test_couchdb_needs_no_msp(self):
        """Test CouchDB needs no MSP id."""
        FabricNode.new_couchdb('couchdb', 'couchdb', 'http://localhost:5984').validate_node()

    def test_validation_error_is_value_error(self):
        """Test NodeValidationError is a ValueError."""
        assert issubclass(NodeValidationError, ValueError)


class TestNodeNormalization:
    """Test prune and from_external."""

    def test_prune_drops_identity_fields(self):
        """Test prune drops identity fields."""
        data = {
            'short_name': 'peer0', 'name': 'peer0.org1', 'type': 'fabric-peer',
            'api_url': 'grpc://localhost:7051', 'msp_id': 'Org1MSP', 'pem': 'PEM',
            'wallet': 'Org1', 'identity': 'admin', 'container_name': 'peer0',
        }

        node = FabricNode.prune(data)

        assert node.msp_id == 'Org1MSP'
        assert node.pem == 'PEM'
        assert node.wallet is None
        assert node.identity is None
        assert node.container_name is None
        assert node.hidden is False

    def test_from_external_peer(self):
        """Test normalizing a console peer."""
        node = FabricNode.from_external({
            'display_name': 'Org1 Peer', 'type': 'fabric-peer', 'api_url': 'grpcs://peer:7051',
            'msp_id': 'Org1MSP', 'tls_ca_root_cert': 'ROOT',
        })

        assert node.name == 'Org1 Peer'
        assert node.pem == 'ROOT'
        assert node.tls_ca_root_cert is None
        assert node.hidden is False

    def test_from_external_certificate_authority(self):
        """Test normalizing a console certificate authority."""
        node = FabricNode.from_external({
            'display_name': 'Org1 CA', 'type': 'fabric-ca', 'api_url': 'https://ca:7054',
            'ca_name': 'ca', 'tls_cert': 'CA_TLS', 'tls_ca_root_cert': 'UNUSED',
        })

        assert node.name == 'Org1 CA'
        assert node.pem == 'CA_TLS'


class TestIdentity:
    """Test identity reconciliation equality."""

    def test_from_pem_round_trip(self):
        """Test building an identity from PEM text."""
        identity = Identity.from_pem('admin', 'CERT', 'KEY', 'Org1MSP')

        assert identity.decoded_cert() == b'CERT'
        assert identity.decoded_private_key() == b'KEY'

    def test_matches_ignores_private_key(self):
        """Test matches ignores the private key."""
        first = Identity.from_pem('admin', 'CERT', 'KEY1', 'Org1MSP')
        second = Identity.from_pem('admin', 'CERT', 'KEY2', 'Org1MSP')

        assert first.matches(second)

    @pytest.mark.parametrize('name, cert, msp_id', [
        ('other', 'CERT', 'Org1MSP'),
        ('admin', 'OTHER', 'Org1MSP'),
        ('admin', 'CERT', 'Org2MSP'),
    ])
    def test_mismatch(self, name, cert, msp_id):
        """Test differing identities do not match."""
        first = Identity.from_pem('admin', 'CERT', 'KEY', 'Org1MSP')
        second = Identity.from_pem(name, cert, 'KEY', msp_id)

        assert not first.matches(second)


class TestGateway:
    """Test the gateway model."""

    def test_wallet_from_profile(self):
        """Test the wallet named by a profile."""
        gateway = Gateway(name='Org1', path='/tmp/org1.json',
                          connection_profile={'name': 'Org1', 'wallet': 'Org1'})

        assert gateway.wallet == 'Org1'

    def test_no_wallet(self):
        """Test a profile without a wallet."""
        assert Gateway(name='Org1', path='/tmp/org1.json').wallet is None
