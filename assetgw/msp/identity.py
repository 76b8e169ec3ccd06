# SPDX-License-Identifier: Apache-2.0
import logging
import os

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature, encode_dss_signature

from ..errors import CredentialIOError, KeyParseError
from ..protos import common

_logger = logging.getLogger(__name__)

# group orders, used to keep signatures in the low-S form Fabric requires
CURVE_ORDERS = {
    'secp256r1': 0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551,
    'secp384r1': 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFC7634D81F4372DDF581A0DB248B0A77AECEC196ACCC52973,
}


class Identity(object):

    def __init__(self, mspId, credentials):

        if not mspId:
            raise ValueError('Missing required parameter "mspId".')

        if not credentials:
            raise ValueError('Missing required parameter "credentials".')

        self._mspId = mspId
        self._credentials = credentials

    @property
    def mspid(self):
        return self._mspId

    @property
    def credentials(self):
        return self._credentials

    def serialize(self):
        serialized_identity = common.SerializedIdentity()
        serialized_identity.mspid = self._mspId
        serialized_identity.id_bytes = self._credentials
        return serialized_identity.SerializeToString()

    def __str__(self):
        return f'Identity: {self._mspId}'


class Signer(object):
    """Produces ECDSA signatures over messages with a private key."""

    def __init__(self, key):
        if not key:
            raise ValueError('Missing required parameter "key" for private key')

        if not isinstance(key, ec.EllipticCurvePrivateKey):
            raise KeyParseError(f'Unsupported private key type: {type(key).__name__}, an elliptic curve key is required')

        if key.curve.name not in CURVE_ORDERS:
            raise KeyParseError(f'Unsupported elliptic curve: {key.curve.name}')

        self._key = key
        self._order = CURVE_ORDERS[key.curve.name]

    @property
    def curve(self):
        return self._key.curve.name

    def getPublicKey(self):
        return self._key.public_key()

    def sign(self, message):
        der = self._key.sign(message, ec.ECDSA(hashes.SHA256()))
        r, s = decode_dss_signature(der)
        if s > self._order // 2:
            s = self._order - s
        return encode_dss_signature(r, s)

    def __call__(self, message):
        return self.sign(message)


def load_identity(cert_path, mspId):
    _logger.debug(f'load_identity - start cert: {cert_path} mspId: {mspId}')

    credentials = _read_file(cert_path, 'certificate')
    if not credentials:
        raise CredentialIOError(f'Certificate file {cert_path} is empty')

    return Identity(mspId, credentials)


def load_signer(key_directory_path):
    method = 'load_signer'
    _logger.debug(f'{method} - start key directory: {key_directory_path}')

    key_path = find_key_file(key_directory_path)
    private_key_pem = _read_file(key_path, 'private key')

    try:
        private_key = serialization.load_pem_private_key(private_key_pem, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        _logger.error(f'{method} - unable to parse private key {key_path}')
        raise KeyParseError(f'Failed to parse private key {key_path}: {e}') from e

    return Signer(private_key)


def find_key_file(key_directory_path):
    """Return the path of the single file held by the key directory."""
    try:
        names = sorted(os.listdir(key_directory_path))
    except OSError as e:
        raise CredentialIOError(f'Unable to list private key directory {key_directory_path}: {e}') from e

    files = [name for name in names if os.path.isfile(os.path.join(key_directory_path, name))]

    if not files:
        raise CredentialIOError(f'No private key file found in {key_directory_path}')
    if len(files) > 1:
        raise CredentialIOError(f'Expected exactly one private key file in {key_directory_path}, found {len(files)}: '
                                f'{", ".join(files)}')

    return os.path.join(key_directory_path, files[0])


def _read_file(path, description):
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        _logger.error(f'_read_file - unable to read {description} {path}')
        raise CredentialIOError(f'Unable to read {description} {path}: {e}') from e
