"""Tests for the command-line entry point."""

import pytest

import run


def test_host_argument_is_required(capsys):
    with pytest.raises(SystemExit) as exc:
        run.main([])

    assert exc.value.code == 2
    assert "host" in capsys.readouterr().err


def test_main_runs_dashboard_for_host(monkeypatch):
    calls = []

    async def fake_run_dashboard(host):
        calls.append(host)
        return 0

    monkeypatch.setattr("dashboard.controller.run_dashboard", fake_run_dashboard)

    assert run.main(["jamulus.example.org"]) == 0
    assert calls == ["jamulus.example.org"]
