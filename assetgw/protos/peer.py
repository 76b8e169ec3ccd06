# SPDX-License-Identifier: Apache-2.0
"""Messages of fabric-protos ``peer/*.proto`` used to build proposals and read results."""
from ._builder import BOOL, BYTES, INT32, MESSAGE, STRING, add_file, field, message

CHAINCODE_PROTO = 'fabric/peer/chaincode.proto'
PROPOSAL_PROTO = 'fabric/peer/proposal.proto'
PROPOSAL_RESPONSE_PROTO = 'fabric/peer/proposal_response.proto'
TRANSACTION_PROTO = 'fabric/peer/transaction.proto'

# protos.ChaincodeSpec.Type
GOLANG = 1

# protos.TxValidationCode
TX_VALIDATION_CODES = {
    0: 'VALID',
    1: 'NIL_ENVELOPE',
    2: 'BAD_PAYLOAD',
    3: 'BAD_COMMON_HEADER',
    4: 'BAD_CREATOR_SIGNATURE',
    5: 'INVALID_ENDORSER_TRANSACTION',
    6: 'INVALID_CONFIG_TRANSACTION',
    7: 'UNSUPPORTED_TX_PAYLOAD',
    8: 'BAD_PROPOSAL_TXID',
    9: 'DUPLICATE_TXID',
    10: 'ENDORSEMENT_POLICY_FAILURE',
    11: 'MVCC_READ_CONFLICT',
    12: 'PHANTOM_READ_CONFLICT',
    13: 'UNKNOWN_TX_TYPE',
    14: 'TARGET_CHAIN_NOT_FOUND',
    15: 'MARSHAL_TX_ERROR',
    16: 'NIL_TXACTION',
    17: 'EXPIRED_CHAINCODE',
    18: 'CHAINCODE_VERSION_CONFLICT',
    19: 'BAD_HEADER_EXTENSION',
    20: 'BAD_CHANNEL_HEADER',
    21: 'BAD_RESPONSE_PAYLOAD',
    22: 'BAD_RWSET',
    23: 'ILLEGAL_WRITESET',
    24: 'INVALID_WRITESET',
    25: 'INVALID_CHAINCODE',
    254: 'NOT_VALIDATED',
    255: 'INVALID_OTHER_REASON',
}
VALID = 0

_chaincode = add_file(CHAINCODE_PROTO, 'protos', [
    message('ChaincodeID',
            field('path', 1, STRING),
            field('name', 2, STRING),
            field('version', 3, STRING)),
    message('ChaincodeInput',
            field('args', 1, BYTES, repeated=True),
            field('is_init', 3, BOOL)),
    message('ChaincodeSpec',
            field('type', 1, INT32),
            field('chaincode_id', 2, MESSAGE, '.protos.ChaincodeID'),
            field('input', 3, MESSAGE, '.protos.ChaincodeInput'),
            field('timeout', 4, INT32)),
    message('ChaincodeInvocationSpec',
            field('chaincode_spec', 1, MESSAGE, '.protos.ChaincodeSpec')),
])

ChaincodeInvocationSpec = _chaincode['ChaincodeInvocationSpec']

_proposal_response = add_file(PROPOSAL_RESPONSE_PROTO, 'protos', [
    message('Response',
            field('status', 1, INT32),
            field('message', 2, STRING),
            field('payload', 3, BYTES)),
    message('ProposalResponsePayload',
            field('proposal_hash', 1, BYTES),
            field('extension', 2, BYTES)),
    message('Endorsement',
            field('endorser', 1, BYTES),
            field('signature', 2, BYTES)),
])

ProposalResponsePayload = _proposal_response['ProposalResponsePayload']

_proposal = add_file(PROPOSAL_PROTO, 'protos', [
    message('SignedProposal',
            field('proposal_bytes', 1, BYTES),
            field('signature', 2, BYTES)),
    message('Proposal',
            field('header', 1, BYTES),
            field('payload', 2, BYTES),
            field('extension', 3, BYTES)),
    message('ChaincodeHeaderExtension',
            field('chaincode_id', 2, MESSAGE, '.protos.ChaincodeID')),
    message('ChaincodeProposalPayload',
            field('input', 1, BYTES)),
    message('ChaincodeAction',
            field('results', 1, BYTES),
            field('events', 2, BYTES),
            field('response', 3, MESSAGE, '.protos.Response'),
            field('chaincode_id', 4, MESSAGE, '.protos.ChaincodeID')),
], dependencies=[CHAINCODE_PROTO, PROPOSAL_RESPONSE_PROTO])

SignedProposal = _proposal['SignedProposal']
Proposal = _proposal['Proposal']
ChaincodeHeaderExtension = _proposal['ChaincodeHeaderExtension']
ChaincodeProposalPayload = _proposal['ChaincodeProposalPayload']
ChaincodeAction = _proposal['ChaincodeAction']

_transaction = add_file(TRANSACTION_PROTO, 'protos', [
    message('Transaction',
            field('actions', 1, MESSAGE, '.protos.TransactionAction', repeated=True)),
    message('TransactionAction',
            field('header', 1, BYTES),
            field('payload', 2, BYTES)),
    message('ChaincodeActionPayload',
            field('chaincode_proposal_payload', 1, BYTES),
            field('action', 2, MESSAGE, '.protos.ChaincodeEndorsedAction')),
    message('ChaincodeEndorsedAction',
            field('proposal_response_payload', 1, BYTES),
            field('endorsements', 2, MESSAGE, '.protos.Endorsement', repeated=True)),
], dependencies=[PROPOSAL_RESPONSE_PROTO])

Transaction = _transaction['Transaction']
ChaincodeActionPayload = _transaction['ChaincodeActionPayload']
