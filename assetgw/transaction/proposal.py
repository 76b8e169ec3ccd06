# SPDX-License-Identifier: Apache-2.0
"""Helpers assembling the signed messages exchanged with the gateway service."""
import logging
import time

from ..protos import common, gateway, peer

_logger = logging.getLogger(__name__)


def proto_b(value):
    if isinstance(value, bytes):
        return value
    return str(value).encode('utf-8')


def build_channel_header(type, channel_id, tx_id, chaincode_name, timestamp=None, epoch=0):
    channel_header = common.ChannelHeader()
    channel_header.type = type
    channel_header.channel_id = channel_id
    channel_header.tx_id = tx_id
    channel_header.epoch = epoch

    if timestamp is None:
        timestamp = time.time_ns()
    channel_header.timestamp.seconds = timestamp // 1_000_000_000
    channel_header.timestamp.nanos = timestamp % 1_000_000_000

    if chaincode_name:
        extension = peer.ChaincodeHeaderExtension()
        extension.chaincode_id.name = chaincode_name
        channel_header.extension = extension.SerializeToString()

    return channel_header


def build_header(creator, channel_header, nonce):
    signature_header = common.SignatureHeader()
    signature_header.creator = creator
    signature_header.nonce = nonce

    header = common.Header()
    header.channel_header = channel_header.SerializeToString()
    header.signature_header = signature_header.SerializeToString()
    return header


def build_proposal(chaincode_name, fcn, args, header):
    invocation_spec = peer.ChaincodeInvocationSpec()
    chaincode_spec = invocation_spec.chaincode_spec
    chaincode_spec.type = peer.GOLANG
    chaincode_spec.chaincode_id.name = chaincode_name
    chaincode_spec.input.args.append(proto_b(fcn))
    for arg in args:
        chaincode_spec.input.args.append(proto_b(arg))

    proposal_payload = peer.ChaincodeProposalPayload()
    proposal_payload.input = invocation_spec.SerializeToString()

    proposal = peer.Proposal()
    proposal.header = header.SerializeToString()
    proposal.payload = proposal_payload.SerializeToString()
    return proposal


def sign_proposal(signer, proposal):
    proposal_bytes = proposal.SerializeToString()

    signed_proposal = peer.SignedProposal()
    signed_proposal.proposal_bytes = proposal_bytes
    signed_proposal.signature = signer.sign(proposal_bytes)
    return signed_proposal


def new_signed_proposal(tx_id, channel_name, chaincode_name, fcn, args, signer):
    """Build and sign the proposal invoking ``fcn`` with ``args`` on the chaincode."""
    _logger.debug(f'new_signed_proposal - {fcn} on {channel_name}/{chaincode_name} tx: {tx_id.transactionID}')

    channel_header = build_channel_header(
        common.ENDORSER_TRANSACTION,
        channel_name,
        tx_id.transactionID,
        chaincode_name)
    header = build_header(tx_id.creator, channel_header, tx_id.nonce)
    proposal = build_proposal(chaincode_name, fcn, args, header)
    return sign_proposal(signer, proposal)


def sign_envelope(signer, envelope):
    envelope.signature = signer.sign(envelope.payload)
    return envelope


def new_signed_commit_status_request(tx_id, channel_name, signer):
    request = gateway.CommitStatusRequest()
    request.transaction_id = tx_id.transactionID
    request.channel_id = channel_name
    request.identity = tx_id.creator
    request_bytes = request.SerializeToString()

    signed_request = gateway.SignedCommitStatusRequest()
    signed_request.request = request_bytes
    signed_request.signature = signer.sign(request_bytes)
    return signed_request


def extract_transaction_result(envelope):
    """Return the chaincode response payload carried by an endorsed transaction envelope."""
    payload = common.Payload.FromString(envelope.payload)
    transaction = peer.Transaction.FromString(payload.data)

    if not transaction.actions:
        raise ValueError('Prepared transaction holds no actions')

    action_payload = peer.ChaincodeActionPayload.FromString(transaction.actions[0].payload)
    response_payload = peer.ProposalResponsePayload.FromString(action_payload.action.proposal_response_payload)
    chaincode_action = peer.ChaincodeAction.FromString(response_payload.extension)
    return chaincode_action.response.payload
