# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import os
import ssl

import pytest
from prometheus_client import CollectorRegistry
from rich.console import Console

from nsq_exporter import cli_runner
from nsq_exporter.cli import app
from nsq_exporter.cli_utils import exit_on_error
from nsq_exporter.collectors import ConsumerStatsCollector, QueueStatsCollector
from nsq_exporter.common.config import ExporterConfig
from nsq_exporter.common.enums import CollectorType, TimingGranularity
from nsq_exporter.common.exceptions import ConfigurationError
from nsq_exporter.snapshot import SnapshotFetcher


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    for key in list(os.environ):
        if key.upper().startswith("NSQ_EXPORTER_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def captured_config(monkeypatch) -> list[ExporterConfig]:
    """Replace run_exporter with a recorder of the config it is called with."""
    configs: list[ExporterConfig] = []
    monkeypatch.setattr(cli_runner, "run_exporter", configs.append)
    return configs


class TestServeCommand:
    """Tests for the serve command's argument handling."""

    def test_defaults(self, captured_config):
        app(["serve"], exit_on_error=False)
        assert len(captured_config) == 1
        assert captured_config[0].nsqd_url == "http://localhost:4151/stats?format=json"

    def test_options(self, captured_config):
        app(
            [
                "serve",
                "--nsqd-url",
                "nsqd:4151",
                "--namespace",
                "broker",
                "--timeout",
                "2.5",
                "--listen-port",
                "9200",
                "--timing-granularity",
                "collector",
            ],
            exit_on_error=False,
        )
        config = captured_config[0]
        assert config.nsqd_url == "http://nsqd:4151/stats?format=json"
        assert config.namespace == "broker"
        assert config.timeout == 2.5
        assert config.listen_port == 9200
        assert config.timing_granularity == TimingGranularity.COLLECTOR

    def test_environment(self, captured_config, monkeypatch):
        monkeypatch.setenv("NSQ_EXPORTER_COLLECTORS", "stats.clients")
        app(["serve"], exit_on_error=False)
        assert captured_config[0].collectors == [CollectorType.CONSUMERS]

    def test_runner_error_exits(self, monkeypatch, capsys):
        """Test that an exporter error is rendered and exits with status 1."""

        def failing_runner(config):
            raise ConfigurationError("Failed to load TLS material: boom")

        monkeypatch.setattr(cli_runner, "run_exporter", failing_runner)
        with pytest.raises(SystemExit) as exc_info:
            app(["serve"], exit_on_error=False)
        assert exc_info.value.code == 1
        assert "Failed to load TLS material" in capsys.readouterr().err


class TestCollectorsCommand:
    def test_lists_collectors(self, capsys):
        app(["collectors"], exit_on_error=False)
        output = capsys.readouterr().out.split()
        assert set(output) == {"queues", "sub_queues", "consumers"}


class TestExitOnError:
    """Tests for the exit_on_error context manager."""

    def test_no_error(self):
        with exit_on_error():
            pass

    @pytest.mark.parametrize(
        "error", [ConfigurationError("bad config"), OSError("Port 9117 is already in use")]
    )
    def test_known_errors(self, error):
        console = Console(record=True, width=120)
        with pytest.raises(SystemExit) as exc_info, exit_on_error(title="Oops", console=console):
            raise error
        assert exc_info.value.code == 1
        text = console.export_text()
        assert "Oops" in text
        assert str(error) in text

    def test_unexpected_error_shows_type(self):
        console = Console(record=True, width=120)
        with pytest.raises(SystemExit), exit_on_error(console=console):
            raise KeyError("missing")
        assert "KeyError" in console.export_text()

    def test_keyboard_interrupt_passes_through(self):
        with pytest.raises(KeyboardInterrupt), exit_on_error():
            raise KeyboardInterrupt


class TestRunnerWiring:
    """Tests for building the exporter from its configuration."""

    def test_create_collectors(self):
        config = ExporterConfig(collectors="consumers,queues", namespace="broker")
        collectors = cli_runner.create_collectors(config)
        assert [type(c) for c in collectors] == [ConsumerStatsCollector, QueueStatsCollector]
        assert all(c.namespace == "broker" for c in collectors)

    def test_create_executor(self):
        config = ExporterConfig(concurrent_ingest=False)
        registry = CollectorRegistry()
        executor = cli_runner.create_executor(
            config, SnapshotFetcher(config.nsqd_url), registry=registry
        )
        assert executor.registry is registry
        assert [c.collector_type for c in executor.collectors] == [
            CollectorType.QUEUES,
            CollectorType.SUB_QUEUES,
        ]

    def test_create_fetcher_without_tls(self, monkeypatch):
        """Test that no TLS context is built when no TLS material is configured."""
        monkeypatch.setattr(
            cli_runner, "create_ssl_context", lambda *args: pytest.fail("TLS context built")
        )
        fetcher = cli_runner.create_fetcher(ExporterConfig(timeout=2.0))
        assert fetcher.url == "http://localhost:4151/stats?format=json"
        assert fetcher.timeout == 2.0
        assert fetcher._ssl_context is None

    def test_create_fetcher_with_tls(self, monkeypatch, tmp_path):
        ca = tmp_path / "ca.pem"
        ca.write_text("ca")
        context = ssl.create_default_context()
        calls = []

        def fake_create_ssl_context(*args):
            calls.append(args)
            return context

        monkeypatch.setattr(cli_runner, "create_ssl_context", fake_create_ssl_context)
        fetcher = cli_runner.create_fetcher(ExporterConfig(tls_ca_cert=ca))
        assert calls == [(ca, None, None)]
        assert fetcher._ssl_context is context
