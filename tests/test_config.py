import os
from unittest import mock

import pytest

from alert_historian import build_backend as exported_build_backend
from alert_historian import config, main
from alert_historian.historian import PrometheusBackend
from alert_historian.main import build_backend, build_writer

from conftest import DummyWriter


@pytest.fixture
def logging_calls(monkeypatch) -> list[None]:
    calls: list[None] = []
    monkeypatch.setattr(main, "setup_logging", lambda: calls.append(None))
    return calls


def test_settings_defaults():
    with mock.patch.dict(os.environ, {}, clear=True):
        settings = config.read_settings()
        assert settings.DATASOURCE_UID is None
        assert settings.METRIC_NAME == "GRAFANA_ALERTS"
        assert settings.WRITE_URL == "http://localhost:3000"
        assert settings.WRITE_TIMEOUT_S == 10.0
        assert settings.API_TOKEN is None


def test_settings_custom():
    env = {
        "HISTORIAN_DATASOURCE_UID": "prom-uid",
        "HISTORIAN_METRIC_NAME": "ALERTS",
        "HISTORIAN_WRITE_URL": "http://grafana:3000/",
        "HISTORIAN_WRITE_TIMEOUT_S": "2.5",
        "HISTORIAN_API_TOKEN": "secret",
    }
    with mock.patch.dict(os.environ, env, clear=True):
        settings = config.read_settings()
        assert settings.DATASOURCE_UID == "prom-uid"
        assert settings.METRIC_NAME == "ALERTS"
        assert settings.WRITE_URL == "http://grafana:3000"
        assert settings.WRITE_TIMEOUT_S == 2.5
        assert settings.API_TOKEN == "secret"


def test_settings_invalid_timeout_falls_back():
    with mock.patch.dict(os.environ, {"HISTORIAN_WRITE_TIMEOUT_S": "soon"}, clear=True):
        assert config.read_settings().WRITE_TIMEOUT_S == 10.0


def test_new_prometheus_config_requires_datasource():
    with pytest.raises(config.ConfigError, match="datasource UID must not be empty"):
        config.new_prometheus_config("", "GRAFANA_ALERTS")


def test_new_prometheus_config_requires_metric_name():
    with pytest.raises(config.ConfigError, match="metric name must not be empty"):
        config.new_prometheus_config("prom-uid", "")


def test_build_backend_from_env(logging_calls):
    env = {"HISTORIAN_DATASOURCE_UID": "prom-uid", "HISTORIAN_WRITE_TIMEOUT_S": "3"}
    writer = DummyWriter()
    with mock.patch.dict(os.environ, env, clear=True):
        backend = build_backend(writer=writer)
    assert isinstance(backend, PrometheusBackend)
    assert backend.cfg.datasource_uid == "prom-uid"
    assert backend.cfg.metric_name == "GRAFANA_ALERTS"
    assert backend.cfg.write_timeout_s == 3.0
    assert backend.writer is writer


def test_build_backend_fails_without_datasource(logging_calls, caplog):
    with mock.patch.dict(os.environ, {}, clear=True):
        with pytest.raises(config.ConfigError):
            build_backend(writer=DummyWriter())
    assert "HISTORIAN_DATASOURCE_UID" in caplog.text


def test_build_writer_sets_bearer_token():
    settings = config.Settings(
        DATASOURCE_UID="prom-uid",
        METRIC_NAME="GRAFANA_ALERTS",
        WRITE_URL="http://grafana:3000",
        WRITE_TIMEOUT_S=4.0,
        API_TOKEN="secret",
    )
    writer = build_writer(settings)
    assert writer.headers == {"Authorization": "Bearer secret"}
    assert writer.timeout == 4.0


def test_build_backend_configures_logging(logging_calls):
    env = {"HISTORIAN_DATASOURCE_UID": "prom-uid"}
    with mock.patch.dict(os.environ, env, clear=True):
        backend = exported_build_backend()
    assert logging_calls == [None]
    assert exported_build_backend is build_backend
    assert backend.writer.base_url == "http://localhost:3000"
