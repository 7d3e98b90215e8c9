"""
Tests for connector option parsing and service configuration.
"""
import json

import pytest

from bucket_connector.exceptions import ConfigurationError
from bucket_connector.models.config import ConnectorOptions, ServiceConfig


class TestConnectorOptions:
    """Test cases for ConnectorOptions.from_payload."""

    def test_full_payload(self):
        payload = json.dumps({
            'profile': 'audit',
            'region': 'eu-west-1',
            'max_keys': 250,
            'buckets': ['logs', 'photos']
        })

        options = ConnectorOptions.from_payload(payload)

        assert options.profile == 'audit'
        assert options.region == 'eu-west-1'
        assert options.max_keys == 250
        assert options.buckets == ('logs', 'photos')
        assert options.malformed is False

    def test_missing_buckets_means_discovery(self):
        options = ConnectorOptions.from_payload('{"region": "us-east-1"}')

        assert options.buckets is None
        assert options.malformed is False

    def test_null_buckets_means_discovery(self):
        assert ConnectorOptions.from_payload('{"buckets": null}').buckets is None

    def test_empty_bucket_list_is_kept(self):
        options = ConnectorOptions.from_payload('{"buckets": []}')

        assert options.buckets == ()

    def test_bucket_names_kept_verbatim(self):
        options = ConnectorOptions.from_payload('{"buckets": ["b2", "", "b1"]}')

        assert options.buckets == ('b2', '', 'b1')

    def test_invalid_json_falls_back_to_defaults(self):
        options = ConnectorOptions.from_payload('{"profile": ')

        assert options == ConnectorOptions()
        assert options.buckets is None
        assert options.malformed is True
        assert 'not valid JSON' in options.issues[0]

    def test_non_object_payload_falls_back_to_defaults(self):
        options = ConnectorOptions.from_payload('["b1"]')

        assert options == ConnectorOptions()
        assert options.malformed is True

    def test_empty_payload_is_not_malformed(self):
        options = ConnectorOptions.from_payload('')

        assert options == ConnectorOptions()
        assert options.malformed is False

    def test_bytes_and_dict_payloads(self):
        from_bytes = ConnectorOptions.from_payload(b'{"max_keys": 5}')
        from_dict = ConnectorOptions.from_payload({'max_keys': 5})

        assert from_bytes.max_keys == 5
        assert from_dict.max_keys == 5

    def test_wrong_field_types_default_individually(self):
        options = ConnectorOptions.from_payload(json.dumps({
            'profile': 7,
            'region': 'us-west-2',
            'max_keys': 'ten',
            'buckets': 'b1'
        }))

        assert options.profile == ''
        assert options.region == 'us-west-2'
        assert options.max_keys == 0
        assert options.buckets is None
        assert len(options.issues) == 3

    def test_negative_max_keys_defaults_to_zero(self):
        options = ConnectorOptions.from_payload('{"max_keys": -4}')

        assert options.max_keys == 0
        assert options.malformed is True

    def test_boolean_max_keys_rejected(self):
        options = ConnectorOptions.from_payload('{"max_keys": true}')

        assert options.max_keys == 0
        assert options.malformed is True

    def test_integral_float_max_keys_accepted(self):
        assert ConnectorOptions.from_payload('{"max_keys": 100.0}').max_keys == 100

    def test_non_string_bucket_entry_becomes_empty_name(self):
        options = ConnectorOptions.from_payload('{"buckets": ["b1", 3]}')

        assert options.buckets == ('b1', '')
        assert options.malformed is True

    def test_parse_strict_raises_with_issues(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ConnectorOptions.parse_strict('{"max_keys": "x"}')

        assert exc_info.value.issues
        assert 'max_keys' in str(exc_info.value)

    def test_parse_strict_accepts_valid_payload(self):
        options = ConnectorOptions.parse_strict('{"buckets": ["b1"]}')

        assert options.buckets == ('b1',)

    def test_str_shows_discovery(self):
        assert 'buckets: <discover>' in str(ConnectorOptions())
        assert 'buckets: a,b' in str(ConnectorOptions(buckets=['a', 'b']))

    def test_to_dict(self):
        options = ConnectorOptions(profile='p', region='r', max_keys=3, buckets=['b'])

        assert options.to_dict() == {'profile': 'p', 'region': 'r', 'max_keys': 3, 'buckets': ['b']}

    def test_buckets_cannot_be_mutated_after_parsing(self):
        names = ['b1']
        options = ConnectorOptions(buckets=names)
        names.append('b2')

        assert options.buckets == ('b1',)
        assert isinstance(ConnectorOptions.from_payload('{"buckets": ["b1"]}').buckets, tuple)
        with pytest.raises(AttributeError):
            options.buckets.append('b3')
        assert hash(options) == hash(ConnectorOptions(buckets=('b1',)))


class TestServiceConfig:
    """Test cases for ServiceConfig.from_env."""

    def test_defaults(self, monkeypatch):
        for name in ['CONNECTOR_S3_ENDPOINT', 'CONNECTOR_CALLBACK_URL', 'CONNECTOR_CONCURRENCY',
                     'CONNECTOR_MAX_RETRIES', 'CONNECTOR_STRICT_OPTIONS', 'CONNECTOR_LOG_LEVEL',
                     'CONNECTOR_LOG_JSON', 'CONNECTOR_LOG_FILE']:
            monkeypatch.delenv(name, raising=False)

        config = ServiceConfig.from_env()

        assert config.endpoint_url is None
        assert config.callback_url is None
        assert config.concurrency == 1
        assert config.max_retries == 3
        assert config.strict_options is False
        assert config.log_level == 'INFO'
        assert config.log_json is False
        assert config.log_file is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('CONNECTOR_S3_ENDPOINT', 'http://localhost:9000')
        monkeypatch.setenv('CONNECTOR_CALLBACK_URL', 'http://localhost:8001')
        monkeypatch.setenv('CONNECTOR_CONCURRENCY', '4')
        monkeypatch.setenv('CONNECTOR_MAX_RETRIES', '0')
        monkeypatch.setenv('CONNECTOR_STRICT_OPTIONS', 'true')
        monkeypatch.setenv('CONNECTOR_LOG_LEVEL', 'debug')
        monkeypatch.setenv('CONNECTOR_LOG_JSON', '1')

        config = ServiceConfig.from_env()

        assert config.endpoint_url == 'http://localhost:9000'
        assert config.callback_url == 'http://localhost:8001'
        assert config.concurrency == 4
        assert config.max_retries == 1
        assert config.strict_options is True
        assert config.log_level == 'DEBUG'
        assert config.log_json is True
