import pytest
from pydantic import ValidationError

from utils.settings_util import GatewaySettings


def test_defaults_without_environment():
    s = GatewaySettings()
    assert s.google_api_key == ''
    assert s.gemini_model == 'gemini-3-flash-preview'
    assert s.upstream_timeout is None
    assert s.enable_client_cache is True
    assert s.execution_context == 'cloud'
    assert s.proxy_url is None
    assert s.generate_content_url == (
        'https://generativelanguage.googleapis.com/v1beta/models/gemini-3-flash-preview:generateContent'
    )


def test_reads_environment(monkeypatch):
    monkeypatch.setenv('GOOGLE_API_KEY', 'from-env')
    monkeypatch.setenv('GEMINI_MODEL', 'gemini-custom')
    monkeypatch.setenv('GEMINI_API_BASE', 'http://upstream.test/v1/')
    monkeypatch.setenv('UPSTREAM_TIMEOUT', '12.5')
    monkeypatch.setenv('ENABLE_HTTPX_CLIENT_CACHE', 'false')
    s = GatewaySettings()
    assert s.google_api_key == 'from-env'
    assert s.upstream_timeout == 12.5
    assert s.enable_client_cache is False
    assert s.generate_content_url == 'http://upstream.test/v1/models/gemini-custom:generateContent'


@pytest.mark.parametrize('env', ['development', 'dev', 'local', 'Development'])
def test_local_environments_enable_proxy(monkeypatch, env):
    monkeypatch.setenv('ENVIRONMENT', env)
    monkeypatch.setenv('HTTP_PROXY', 'http://127.0.0.1:7890')
    s = GatewaySettings()
    assert s.is_local
    assert s.execution_context == 'local'
    assert s.proxy_url == 'http://127.0.0.1:7890'


def test_lowercase_proxy_variable_is_read(monkeypatch):
    monkeypatch.setenv('ENVIRONMENT', 'development')
    monkeypatch.setenv('http_proxy', 'http://127.0.0.1:1080')
    assert GatewaySettings().proxy_url == 'http://127.0.0.1:1080'


def test_proxy_ignored_outside_local(monkeypatch):
    monkeypatch.setenv('ENVIRONMENT', 'production')
    monkeypatch.setenv('HTTP_PROXY', 'http://127.0.0.1:7890')
    s = GatewaySettings()
    assert s.http_proxy == 'http://127.0.0.1:7890'
    assert s.proxy_url is None


def test_local_without_proxy_connects_directly(monkeypatch):
    monkeypatch.setenv('ENVIRONMENT', 'development')
    assert GatewaySettings().proxy_url is None


def test_vercel_context(monkeypatch):
    monkeypatch.setenv('VERCEL', '1')
    assert GatewaySettings().execution_context == 'vercel'


def test_empty_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv('GEMINI_MODEL', '')
    monkeypatch.setenv('UPSTREAM_TIMEOUT', '')
    s = GatewaySettings()
    assert s.gemini_model == 'gemini-3-flash-preview'
    assert s.upstream_timeout is None


def test_non_positive_timeout_rejected():
    with pytest.raises(ValidationError):
        GatewaySettings(upstream_timeout=0)


def test_settings_are_frozen():
    s = GatewaySettings(google_api_key='k')
    with pytest.raises(ValidationError):
        s.google_api_key = 'other'
