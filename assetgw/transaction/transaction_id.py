# SPDX-License-Identifier: Apache-2.0
import hashlib
import logging
import os

_logger = logging.getLogger(__name__)

NONCE_LENGTH = 24


class TransactionID(object):

    def __init__(self, identity, nonce=None):
        if not identity:
            raise ValueError('Missing identity parameter')

        self._creator = identity.serialize()
        self._nonce = nonce if nonce is not None else os.urandom(NONCE_LENGTH)
        trans_hash = hashlib.sha256(self._nonce + self._creator)
        self._transaction_id = trans_hash.hexdigest()
        _logger.debug(f'const - transaction_id {self._transaction_id}')

    @property
    def transactionID(self):
        return self._transaction_id

    @property
    def nonce(self):
        return self._nonce

    @property
    def creator(self):
        return self._creator

    def __str__(self):
        return self._transaction_id
