# SPDX-License-Identifier: Apache-2.0
import json
import logging
from typing import Dict, List, Union

from .errors import MalformedResponseError

_logger = logging.getLogger(__name__)

JSONValue = Union[None, bool, int, float, str, List['JSONValue'], Dict[str, 'JSONValue']]


def decode_result(payload) -> JSONValue:
    """Decode a transaction result as UTF-8 JSON.

    An empty payload carries no result and decodes to ``None``. Anything
    else that is not UTF-8 encoded JSON raises ``MalformedResponseError``,
    which keeps the raw payload for display.
    """
    if not payload:
        return None

    try:
        text = bytes(payload).decode('utf-8')
    except UnicodeDecodeError as e:
        _logger.debug(f'decode_result - payload of {len(payload)} bytes is not UTF-8')
        raise MalformedResponseError(bytes(payload), e) from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        _logger.debug(f'decode_result - payload is not JSON: {e}')
        raise MalformedResponseError(bytes(payload), e) from e
