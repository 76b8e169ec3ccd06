# SPDX-License-Identifier: Apache-2.0
import logging

import grpc
from google.protobuf.message import DecodeError
from grpc_status import rpc_status

from .errors import CommitError, PeerConnectionError, RemoteInvocationError, RemoteTimeoutError, SessionClosedError
from .protos import gateway, peer as peer_protos
from .transaction.proposal import extract_transaction_result, new_signed_commit_status_request, \
    new_signed_proposal, sign_envelope
from .transaction.transaction_id import TransactionID

_logger = logging.getLogger(__name__)

EVALUATE = 'evaluate'
ENDORSE = 'endorse'
SUBMIT = 'submit'
COMMIT = 'commit'

# seconds
DEFAULT_TIMEOUTS = {
    EVALUATE: 5,
    ENDORSE: 15,
    SUBMIT: 5,
    COMMIT: 60,
}


class Gateway(object):
    """Authenticated session with one chaincode on one channel, through a gateway peer.

    ``evaluate`` runs a transaction function on the peer without touching the
    ledger. ``submit`` has it endorsed, sends it to ordering and waits until
    the peer reports the transaction as committed and valid. Each phase runs
    under its own deadline.

    The session does not own the peer connection; closing the session leaves
    the connection open for its owner to close.
    """

    def __init__(self, peer, identity, signer, channel_name, chaincode_name, timeouts=None):
        if not peer:
            raise ValueError('Missing required parameter "peer".')
        if not identity:
            raise ValueError('Missing required parameter "identity".')
        if not signer:
            raise ValueError('Missing required parameter "signer".')
        if not channel_name:
            raise ValueError('Missing required parameter "channel_name".')
        if not chaincode_name:
            raise ValueError('Missing required parameter "chaincode_name".')

        self._peer = peer
        self._identity = identity
        self._signer = signer
        self._channel_name = channel_name
        self._chaincode_name = chaincode_name

        self._timeouts = dict(DEFAULT_TIMEOUTS)
        if timeouts:
            unknown = set(timeouts) - set(DEFAULT_TIMEOUTS)
            if unknown:
                raise ValueError(f'Unknown timeout phases: {", ".join(sorted(unknown))}')
            self._timeouts.update(timeouts)

        self._closed = False

        _logger.debug(f'Gateway.const - {identity} channel: {channel_name} chaincode: {chaincode_name} '
                      f'timeouts: {self._timeouts}')

    @property
    def channel_name(self):
        return self._channel_name

    @property
    def chaincode_name(self):
        return self._chaincode_name

    @property
    def timeouts(self):
        return dict(self._timeouts)

    @property
    def closed(self):
        return self._closed

    async def evaluate(self, name, args=()):
        method = 'evaluate'
        self._check_open()
        _logger.debug(f'{method} - {name} args: {list(args)}')

        tx_id = TransactionID(self._identity)
        request = gateway.EvaluateRequest(
            transaction_id=tx_id.transactionID,
            channel_id=self._channel_name,
            proposed_transaction=self._new_proposal(tx_id, name, args))

        response = await self._call(EVALUATE, self._peer.gateway_client.Evaluate, request)

        result = response.result
        if result.status >= 400:
            _logger.error(f'{method} - {name} returned status {result.status}: {result.message}')
            raise RemoteInvocationError(result.message or f'{name} returned status {result.status}')

        return result.payload

    async def submit(self, name, args=()):
        method = 'submit'
        self._check_open()
        _logger.debug(f'{method} - {name} args: {list(args)}')

        client = self._peer.gateway_client
        tx_id = TransactionID(self._identity)

        endorse_request = gateway.EndorseRequest(
            transaction_id=tx_id.transactionID,
            channel_id=self._channel_name,
            proposed_transaction=self._new_proposal(tx_id, name, args))
        endorse_response = await self._call(ENDORSE, client.Endorse, endorse_request)

        prepared_transaction = endorse_response.prepared_transaction
        try:
            result = extract_transaction_result(prepared_transaction)
        except (DecodeError, ValueError) as e:
            _logger.error(f'{method} - unreadable prepared transaction {tx_id}')
            raise RemoteInvocationError(f'Unable to read the endorsed result of {name}: {e}') from e

        sign_envelope(self._signer, prepared_transaction)

        submit_request = gateway.SubmitRequest(
            transaction_id=tx_id.transactionID,
            channel_id=self._channel_name,
            prepared_transaction=prepared_transaction)
        await self._call(SUBMIT, client.Submit, submit_request)
        _logger.debug(f'{method} - {tx_id} submitted, waiting for commit')

        signed_request = new_signed_commit_status_request(tx_id, self._channel_name, self._signer)
        status = await self._call(COMMIT, client.CommitStatus, signed_request)

        if status.result != peer_protos.VALID:
            code = peer_protos.TX_VALIDATION_CODES.get(status.result, str(status.result))
            _logger.error(f'{method} - {tx_id} committed in block {status.block_number} as {code}')
            raise CommitError(tx_id.transactionID, code)

        _logger.debug(f'{method} - {tx_id} committed in block {status.block_number}')
        return result

    def close(self):
        if not self._closed:
            _logger.debug(f'close - closing gateway session {self._channel_name}/{self._chaincode_name}')
            self._closed = True

    def _check_open(self):
        if self._closed:
            raise SessionClosedError('The gateway session is closed')

    def _new_proposal(self, tx_id, name, args):
        return new_signed_proposal(tx_id, self._channel_name, self._chaincode_name, name, args, self._signer)

    async def _call(self, phase, stub_method, request):
        timeout = self._timeouts[phase]
        try:
            return await stub_method(request, timeout=timeout)
        except grpc.RpcError as e:
            raise _translate_error(phase, timeout, e) from e

    def __str__(self):
        return f'Gateway: {self._peer} channel: {self._channel_name} chaincode: {self._chaincode_name}'


def _translate_error(phase, timeout, error):
    code = error.code()
    message = error.details() or str(code)

    if code == grpc.StatusCode.DEADLINE_EXCEEDED:
        _logger.error(f'{phase} - deadline of {timeout}s exceeded')
        return RemoteTimeoutError(phase, f'{phase} deadline of {timeout} seconds exceeded')

    if code == grpc.StatusCode.UNAVAILABLE:
        _logger.error(f'{phase} - peer unavailable: {message}')
        return PeerConnectionError(f'{phase} failed, peer unavailable: {message}')

    _logger.error(f'{phase} - {code}: {message}')
    return RemoteInvocationError(message, error_details(error))


def error_details(error):
    """Decode the ``gateway.ErrorDetail`` entries of a rich gRPC status."""
    try:
        status = rpc_status.from_call(error)
    except ValueError as e:
        _logger.debug(f'error_details - inconsistent status details: {e}')
        return []

    details = []
    if status is None:
        return details

    for detail in status.details:
        if detail.Is(gateway.ErrorDetail.DESCRIPTOR):
            error_detail = gateway.ErrorDetail()
            detail.Unpack(error_detail)
            details.append(error_detail)

    return details
