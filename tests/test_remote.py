import pytest

from assetgw import peer as peer_module
from assetgw.config import GatewayConfig
from assetgw.errors import CredentialIOError, PeerConnectionError
from assetgw.peer import Peer, connect_peer
from assetgw.remote import MAX_RECEIVE, MAX_SEND, SSL_TARGET_NAME_OVERRIDE, Endpoint, Remote


class RecordingChannel(object):

    def __init__(self, *args):
        self.args = args
        self.closed = False

    def unary_unary(self, method, request_serializer=None, response_deserializer=None):
        return method

    def close(self):
        self.closed = True


@pytest.fixture
def channels(monkeypatch):
    created = []

    def secure_channel(addr, creds, options):
        created.append(('secure', addr, options))
        return RecordingChannel(addr, creds, options)

    def insecure_channel(addr, options):
        created.append(('insecure', addr, options))
        return RecordingChannel(addr, options)

    monkeypatch.setattr(peer_module.aiogrpc, 'secure_channel', secure_channel)
    monkeypatch.setattr(peer_module.aiogrpc, 'insecure_channel', insecure_channel)
    return created


class TestEndpoint:
    def test_bare_address_uses_tls(self, crypto_material):
        endpoint = Endpoint('localhost:7051', crypto_material.tls_cert_pem)

        assert endpoint.protocol == 'grpcs'
        assert endpoint.addr == 'localhost:7051'
        assert endpoint.creds is not None

    def test_plain_grpc(self):
        endpoint = Endpoint('grpc://localhost:7051', None)

        assert endpoint.protocol == 'grpc'
        assert endpoint.creds is None

    def test_tls_requires_certificate(self):
        with pytest.raises(ValueError, match='TLS root certificate'):
            Endpoint('grpcs://localhost:7051', None)

    def test_missing_port(self, crypto_material):
        with pytest.raises(ValueError, match='host:port'):
            Endpoint('localhost', crypto_material.tls_cert_pem)

    def test_unknown_protocol(self, crypto_material):
        with pytest.raises(ValueError, match='Invalid protocol'):
            Endpoint('http://localhost:7051', crypto_material.tls_cert_pem)


class TestRemote:
    def test_host_alias_overrides_target_name(self, crypto_material):
        remote = Remote('localhost:7051', {
            'pem': crypto_material.tls_cert_pem,
            SSL_TARGET_NAME_OVERRIDE: 'peer0.org1.example.com',
        })

        options = dict(remote.options)
        assert options['grpc.ssl_target_name_override'] == 'peer0.org1.example.com'
        assert options['grpc.default_authority'] == 'peer0.org1.example.com'
        assert 'pem' not in options
        assert SSL_TARGET_NAME_OVERRIDE not in options

    def test_message_size_defaults(self):
        remote = Remote('grpc://localhost:7051')

        options = dict(remote.options)
        assert options[MAX_SEND] == -1
        assert options[MAX_RECEIVE] == -1

    def test_explicit_options_are_kept(self):
        remote = Remote('grpc://localhost:7051', {MAX_RECEIVE: 1024, 'name': 'peer0'})

        assert dict(remote.options)[MAX_RECEIVE] == 1024
        assert remote.name == 'peer0'

    def test_invalid_option_value(self):
        with pytest.raises(ValueError, match='invalid grpc option'):
            Remote('grpc://localhost:7051', {MAX_SEND: [1]})


class TestPeer:
    def test_secure_channel(self, channels, crypto_material):
        peer = Peer('localhost:7051', {
            'pem': crypto_material.tls_cert_pem,
            SSL_TARGET_NAME_OVERRIDE: 'peer0.org1.example.com',
        })

        kind, addr, options = channels[0]
        assert (kind, addr) == ('secure', 'localhost:7051')
        assert ('grpc.ssl_target_name_override', 'peer0.org1.example.com') in options
        assert peer.gateway_client.Evaluate == '/gateway.Gateway/Evaluate'

    def test_insecure_channel(self, channels):
        Peer('grpc://localhost:7051')

        assert channels[0][0] == 'insecure'

    @pytest.mark.asyncio
    async def test_close(self, channels):
        peer = Peer('grpc://localhost:7051')

        await peer.close()
        await peer.close()

        with pytest.raises(PeerConnectionError, match='closed'):
            peer.gateway_client

    @pytest.mark.asyncio
    async def test_unreachable_peer(self):
        peer = Peer('grpc://127.0.0.1:1')
        try:
            with pytest.raises(PeerConnectionError, match='127.0.0.1:1'):
                await peer.wait_for_ready(0.2)
        finally:
            await peer.close()

    def test_connect_peer(self, channels, crypto_material, setenv):
        setenv(crypto_material.environ())

        peer = connect_peer(GatewayConfig.load())

        assert channels[0][:2] == ('secure', 'localhost:7051')
        assert dict(peer.options)['grpc.ssl_target_name_override'] == 'peer0.org1.example.com'

    def test_connect_peer_without_tls_certificate(self, channels, tmp_path, setenv):
        setenv({'TLS_CERT_PATH': str(tmp_path / 'ca.crt')})
        config = GatewayConfig.load()

        with pytest.raises(CredentialIOError, match='TLS root certificate'):
            connect_peer(config)
        assert channels == []
