# SPDX-License-Identifier: Apache-2.0
import asyncio
import logging

import aiogrpc
import grpc

from .errors import CredentialIOError, PeerConnectionError
from .protos.gateway import GatewayStub
from .remote import Remote, SSL_TARGET_NAME_OVERRIDE

_logger = logging.getLogger(__name__)


class Peer(Remote):
    """Connection to the gateway service of one peer.

    The gRPC channel is created lazily by grpc itself; ``wait_for_ready``
    forces the TLS handshake so an unreachable peer is detected up front.
    """

    def __init__(self, url, opts=None):

        super(Peer, self).__init__(url, opts)

        _logger.debug(f'Peer.const - url: {url} name: {self.name}')

        self._channel = None
        self._gateway_client = None

        self._createClients()

    def _createClients(self):
        if not self._gateway_client:
            _logger.debug(f'_createClients - create peer gateway connection {self._endpoint.addr}')
            if self._endpoint.creds is None:
                self._channel = aiogrpc.insecure_channel(self._endpoint.addr, self.options)
            else:
                self._channel = aiogrpc.secure_channel(self._endpoint.addr, self._endpoint.creds, self.options)
            self._gateway_client = GatewayStub(self._channel)

    @property
    def gateway_client(self):
        if not self._gateway_client:
            raise PeerConnectionError(f'Connection to {self} is closed')
        return self._gateway_client

    async def wait_for_ready(self, timeout):
        _logger.debug(f'wait_for_ready - connecting to {self._endpoint.addr} timeout: {timeout}s')

        ready = grpc.channel_ready_future(self._channel)
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, ready.result, timeout)
        except grpc.FutureTimeoutError:
            ready.cancel()
            _logger.error(f'wait_for_ready - {self._endpoint.addr} not reachable after {timeout}s')
            raise PeerConnectionError(f'Unable to connect to peer {self._endpoint.addr} within {timeout} seconds')

        _logger.debug(f'wait_for_ready - connected to {self._endpoint.addr}')

    async def close(self):
        if self._channel:
            _logger.debug(f'close - closing peer gateway connection {self._endpoint.addr}')
            closing = self._channel.close()
            self._channel = None
            self._gateway_client = None
            if closing is not None:
                await closing

    def __str__(self):
        return f'Peer: {self._url}'


def connect_peer(config):
    """Create the peer connection described by a ``GatewayConfig``."""
    try:
        with open(config.tls_cert_path, 'rb') as f:
            tls_root_cert = f.read()
    except OSError as e:
        raise CredentialIOError(f'Unable to read TLS root certificate {config.tls_cert_path}: {e}') from e

    return Peer(config.peer_endpoint, {
        'pem': tls_root_cert,
        SSL_TARGET_NAME_OVERRIDE: config.peer_host_alias,
    })
