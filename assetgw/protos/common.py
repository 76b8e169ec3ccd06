# SPDX-License-Identifier: Apache-2.0
"""Messages of fabric-protos ``common/common.proto`` and ``msp/identities.proto``."""
from ._builder import BYTES, INT32, MESSAGE, STRING, UINT64, add_file, field, message

COMMON_PROTO = 'fabric/common/common.proto'
IDENTITIES_PROTO = 'fabric/msp/identities.proto'

# common.HeaderType
ENDORSER_TRANSACTION = 3

_common = add_file(COMMON_PROTO, 'common', [
    message('Envelope',
            field('payload', 1, BYTES),
            field('signature', 2, BYTES)),
    message('Header',
            field('channel_header', 1, BYTES),
            field('signature_header', 2, BYTES)),
    message('Payload',
            field('header', 1, MESSAGE, '.common.Header'),
            field('data', 2, BYTES)),
    message('ChannelHeader',
            field('type', 1, INT32),
            field('version', 2, INT32),
            field('timestamp', 3, MESSAGE, '.google.protobuf.Timestamp'),
            field('channel_id', 4, STRING),
            field('tx_id', 5, STRING),
            field('epoch', 6, UINT64),
            field('extension', 7, BYTES),
            field('tls_cert_hash', 8, BYTES)),
    message('SignatureHeader',
            field('creator', 1, BYTES),
            field('nonce', 2, BYTES)),
], dependencies=['google/protobuf/timestamp.proto'])

Envelope = _common['Envelope']
Header = _common['Header']
Payload = _common['Payload']
ChannelHeader = _common['ChannelHeader']
SignatureHeader = _common['SignatureHeader']

_identities = add_file(IDENTITIES_PROTO, 'msp', [
    message('SerializedIdentity',
            field('mspid', 1, STRING),
            field('id_bytes', 2, BYTES)),
])

SerializedIdentity = _identities['SerializedIdentity']
