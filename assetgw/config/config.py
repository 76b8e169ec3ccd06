# SPDX-License-Identifier: Apache-2.0
import logging
import os
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from yaml import load, YAMLError

try:
    from yaml import CSafeLoader as Loader
except ImportError:
    from yaml import SafeLoader as Loader

_logger = logging.getLogger(__name__)

ORG_DOMAIN = 'org1.example.com'
USER_NAME = f'User1@{ORG_DOMAIN}'
PEER_NAME = f'peer0.{ORG_DOMAIN}'

DEFAULT_CRYPTO_PATH = os.path.join('..', '..', 'test-network', 'organizations', 'peerOrganizations', ORG_DOMAIN)


class GatewayConfig(BaseSettings):
    """Settings of one client process, resolved once at startup.

    Each field is read from the environment variable of the same name in
    upper case; an empty variable counts as unset. Values passed to the
    constructor (the YAML file) rank below the environment and above the
    defaults. The credential paths default to locations below
    ``crypto_path``.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_ignore_empty=True,
        extra='forbid',
        coerce_numbers_to_str=True,
    )

    channel_name: str = Field(default='mychannel', min_length=1)
    chaincode_name: str = Field(default='basic', min_length=1)
    msp_id: str = Field(default='Org1MSP', min_length=1)
    crypto_path: str = DEFAULT_CRYPTO_PATH
    key_directory_path: Optional[str] = None
    cert_path: Optional[str] = None
    tls_cert_path: Optional[str] = None
    peer_endpoint: str = Field(default='localhost:7051', min_length=1)
    peer_host_alias: str = PEER_NAME

    # seconds
    evaluate_timeout: float = Field(default=5.0, gt=0)
    endorse_timeout: float = Field(default=15.0, gt=0)
    submit_timeout: float = Field(default=5.0, gt=0)
    commit_status_timeout: float = Field(default=60.0, gt=0)
    connect_timeout: float = Field(default=10.0, gt=0)

    @classmethod
    def settings_customise_sources(cls, settings_cls, init_settings, env_settings, dotenv_settings,
                                   file_secret_settings):
        return env_settings, init_settings

    @model_validator(mode='after')
    def derive_credential_paths(self):
        user_msp = os.path.join(self.crypto_path, 'users', USER_NAME, 'msp')
        if not self.key_directory_path:
            self.key_directory_path = os.path.join(user_msp, 'keystore')
        if not self.cert_path:
            self.cert_path = os.path.join(user_msp, 'signcerts', 'cert.pem')
        if not self.tls_cert_path:
            self.tls_cert_path = os.path.join(self.crypto_path, 'peers', PEER_NAME, 'tls', 'ca.crt')
        return self

    @classmethod
    def load(cls, config_file=None):
        settings = read_config_file(config_file) if config_file else {}
        _logger.debug(f'load - settings from {config_file or "environment only"}: {sorted(settings)}')
        return cls(**settings)


def read_config_file(path):
    if not isinstance(path, (str, os.PathLike)):
        raise ValueError('The "path" parameter must be a string')

    try:
        with open(path, 'r') as f:
            content = load(f, Loader=Loader)
    except (OSError, YAMLError) as e:
        raise ValueError(f'Unable to read configuration file {path}: {e}') from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ValueError(f'Configuration file {path} must hold a mapping')

    settings = {}
    for key, value in content.items():
        name = str(key).lower().replace('-', '_')
        if name not in GatewayConfig.model_fields:
            _logger.warning(f'read_config_file - ignoring unknown setting "{key}" in {path}')
            continue
        if value is not None:
            settings[name] = value

    return settings
