# SPDX-License-Identifier: Apache-2.0


class GatewayError(Exception):
    """Base class of every error raised by the gateway client."""

    category = 'Error'


class CredentialIOError(GatewayError):
    category = 'Credential error'


class KeyParseError(GatewayError):
    category = 'Key error'


class PeerConnectionError(GatewayError, ConnectionError):
    category = 'Connection error'


class RemoteTimeoutError(GatewayError):
    category = 'Timeout'

    def __init__(self, phase, message=None):
        self.phase = phase
        if not message:
            message = f'{phase} deadline exceeded'
        super(RemoteTimeoutError, self).__init__(message)


class RemoteInvocationError(GatewayError):
    category = 'Contract error'

    def __init__(self, message, details=None):
        self.message = message
        self.details = details or []
        super(RemoteInvocationError, self).__init__(message)


class CommitError(RemoteInvocationError):
    category = 'Commit failed'

    def __init__(self, transaction_id, code):
        self.transaction_id = transaction_id
        self.code = code
        super(CommitError, self).__init__(f'Transaction {transaction_id} failed to commit with status code {code}')


class MalformedResponseError(GatewayError):
    category = 'Malformed response'

    def __init__(self, payload, reason):
        self.payload = payload
        self.text = payload.decode('utf-8', errors='replace')
        super(MalformedResponseError, self).__init__(f'Response is not valid JSON: {reason}')


class SessionClosedError(GatewayError):
    category = 'Session closed'


class InvalidMenuChoice(GatewayError):
    category = 'Invalid choice'

    def __init__(self, choice):
        self.choice = choice
        super(InvalidMenuChoice, self).__init__(f'You chose a wrong value: "{choice}"')
