# SPDX-License-Identifier: Apache-2.0
import logging
from urllib.parse import urlparse

import grpc

MAX_SEND = 'grpc.max_send_message_length'
MAX_RECEIVE = 'grpc.max_receive_message_length'
SSL_TARGET_NAME_OVERRIDE = 'ssl-target-name-override'

_logger = logging.getLogger(__name__)


class Endpoint(object):

    def __init__(self, url, pem):

        if '//' not in url:
            url = f'grpcs://{url}'

        purl = urlparse(url)
        self.protocol = purl.scheme

        if not purl.hostname or not purl.port:
            raise ValueError(f'Invalid peer address: {url}. Expected host:port')

        self.addr = f'{purl.hostname}:{purl.port}'

        if self.protocol == 'grpc':
            self.creds = None
        elif self.protocol == 'grpcs':
            if not isinstance(pem, bytes) or not pem:
                raise ValueError('PEM encoded TLS root certificate is required.')
            self.creds = grpc.ssl_channel_credentials(root_certificates=pem)
        else:
            raise ValueError(f'Invalid protocol: {self.protocol}. URLs must begin with grpc:// or grpcs://')


class Remote(object):

    def __init__(self, url, opts=None):
        opts = opts or {}

        self._options = {}

        for key in opts:
            value = opts[key]
            if value and not isinstance(value, (str, int, bytes)):
                raise ValueError(f'invalid grpc option value:{key}-> {value} expected string|integer')
            if key not in ('pem', 'name', SSL_TARGET_NAME_OVERRIDE):
                self._options[key] = value

        # connection options

        if isinstance(opts.get(SSL_TARGET_NAME_OVERRIDE), str) and opts[SSL_TARGET_NAME_OVERRIDE]:
            self._options['grpc.ssl_target_name_override'] = opts[SSL_TARGET_NAME_OVERRIDE]
            self._options['grpc.default_authority'] = opts[SSL_TARGET_NAME_OVERRIDE]

        self._options.setdefault(MAX_RECEIVE, -1)  # default is unlimited
        self._options.setdefault(MAX_SEND, -1)

        self._url = url
        self._endpoint = Endpoint(url, opts.get('pem'))
        self._name = opts.get('name') or self._endpoint.addr

        _logger.debug(f' ** Remote instance url: {self._url}, name: {self._name}, options loaded are:: {self._options}')

    @property
    def name(self):
        return self._name

    @property
    def options(self):
        return list(self._options.items())

    def __str__(self):
        return f'Remote: {self._url}'
