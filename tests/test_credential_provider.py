"""
tests/test_credential_provider.py - 凭证 Provider 测试
"""

import pytest

from provider.discovery import EnvCredentialProvider, StaticCredentialProvider


class TestStaticCredentialProvider:
    """StaticCredentialProvider 测试"""

    def test_credentials(self):
        provider = StaticCredentialProvider('AKIA', 'secret', 'token')
        assert provider.get_credentials() == {'access_key': 'AKIA', 'secret_key': 'secret', 'session_token': 'token'}
        assert provider.get_provider_type() == 'static'

    def test_returns_copy(self):
        provider = StaticCredentialProvider('AKIA', 'secret')
        provider.get_credentials()['access_key'] = 'changed'
        assert provider.get_credentials()['access_key'] == 'AKIA'

    def test_requires_keys(self):
        with pytest.raises(ValueError):
            StaticCredentialProvider('', 'secret')


class TestEnvCredentialProvider:
    """EnvCredentialProvider 测试"""

    def test_no_env_uses_default_chain(self):
        assert EnvCredentialProvider().get_credentials() is None

    def test_reads_env(self, monkeypatch):
        monkeypatch.setenv('BEDROCK_ACCESS_KEY_ID', 'AKIA')
        monkeypatch.setenv('BEDROCK_SECRET_ACCESS_KEY', 'secret')
        monkeypatch.setenv('BEDROCK_SESSION_TOKEN', 'token')

        assert EnvCredentialProvider().get_credentials() == {
            'access_key': 'AKIA', 'secret_key': 'secret', 'session_token': 'token',
        }

    def test_incomplete_env(self, monkeypatch):
        monkeypatch.setenv('BEDROCK_ACCESS_KEY_ID', 'AKIA')
        assert EnvCredentialProvider().get_credentials() is None

    def test_custom_prefix(self, monkeypatch):
        monkeypatch.setenv('TEAM_ACCESS_KEY_ID', 'AKIA')
        monkeypatch.setenv('TEAM_SECRET_ACCESS_KEY', 'secret')
        assert EnvCredentialProvider(prefix='TEAM').get_credentials()['access_key'] == 'AKIA'

    def test_cached_until_cleared(self, monkeypatch):
        provider = EnvCredentialProvider()
        assert provider.get_credentials() is None

        monkeypatch.setenv('BEDROCK_ACCESS_KEY_ID', 'AKIA')
        monkeypatch.setenv('BEDROCK_SECRET_ACCESS_KEY', 'secret')
        assert provider.get_credentials() is None

        provider.clear_cache()
        assert provider.get_credentials()['access_key'] == 'AKIA'
