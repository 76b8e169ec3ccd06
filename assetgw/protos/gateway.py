# SPDX-License-Identifier: Apache-2.0
"""Messages and client stub of fabric-protos ``gateway/gateway.proto``."""
from . import common, peer
from ._builder import BYTES, INT32, MESSAGE, STRING, UINT64, add_file, field, message

GATEWAY_PROTO = 'fabric/gateway/gateway.proto'

SERVICE = 'gateway.Gateway'
ENDORSE = f'/{SERVICE}/Endorse'
SUBMIT = f'/{SERVICE}/Submit'
COMMIT_STATUS = f'/{SERVICE}/CommitStatus'
EVALUATE = f'/{SERVICE}/Evaluate'

_gateway = add_file(GATEWAY_PROTO, 'gateway', [
    message('EndorseRequest',
            field('transaction_id', 1, STRING),
            field('channel_id', 2, STRING),
            field('proposed_transaction', 3, MESSAGE, '.protos.SignedProposal'),
            field('endorsing_organizations', 4, STRING, repeated=True)),
    message('EndorseResponse',
            field('prepared_transaction', 1, MESSAGE, '.common.Envelope')),
    message('SubmitRequest',
            field('transaction_id', 1, STRING),
            field('channel_id', 2, STRING),
            field('prepared_transaction', 3, MESSAGE, '.common.Envelope')),
    message('SubmitResponse'),
    message('SignedCommitStatusRequest',
            field('request', 1, BYTES),
            field('signature', 2, BYTES)),
    message('CommitStatusRequest',
            field('transaction_id', 1, STRING),
            field('channel_id', 2, STRING),
            field('identity', 3, BYTES)),
    message('CommitStatusResponse',
            field('result', 1, INT32),
            field('block_number', 2, UINT64)),
    message('EvaluateRequest',
            field('transaction_id', 1, STRING),
            field('channel_id', 2, STRING),
            field('proposed_transaction', 3, MESSAGE, '.protos.SignedProposal'),
            field('target_organizations', 4, STRING, repeated=True)),
    message('EvaluateResponse',
            field('result', 1, MESSAGE, '.protos.Response')),
    message('ErrorDetail',
            field('address', 1, STRING),
            field('msp_id', 2, STRING),
            field('message', 3, STRING)),
], dependencies=[common.COMMON_PROTO, peer.PROPOSAL_PROTO, peer.PROPOSAL_RESPONSE_PROTO])

EndorseRequest = _gateway['EndorseRequest']
EndorseResponse = _gateway['EndorseResponse']
SubmitRequest = _gateway['SubmitRequest']
SubmitResponse = _gateway['SubmitResponse']
SignedCommitStatusRequest = _gateway['SignedCommitStatusRequest']
CommitStatusRequest = _gateway['CommitStatusRequest']
CommitStatusResponse = _gateway['CommitStatusResponse']
EvaluateRequest = _gateway['EvaluateRequest']
EvaluateResponse = _gateway['EvaluateResponse']
ErrorDetail = _gateway['ErrorDetail']


class GatewayStub(object):
    """Client stub for the ``gateway.Gateway`` service."""

    def __init__(self, channel):
        self.Endorse = channel.unary_unary(
            ENDORSE,
            request_serializer=EndorseRequest.SerializeToString,
            response_deserializer=EndorseResponse.FromString)
        self.Submit = channel.unary_unary(
            SUBMIT,
            request_serializer=SubmitRequest.SerializeToString,
            response_deserializer=SubmitResponse.FromString)
        self.CommitStatus = channel.unary_unary(
            COMMIT_STATUS,
            request_serializer=SignedCommitStatusRequest.SerializeToString,
            response_deserializer=CommitStatusResponse.FromString)
        self.Evaluate = channel.unary_unary(
            EVALUATE,
            request_serializer=EvaluateRequest.SerializeToString,
            response_deserializer=EvaluateResponse.FromString)
