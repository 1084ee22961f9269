"""Tests for the `modelcatalog` command line."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner
from rich.console import Console

from modelcatalog import __version__
from modelcatalog.cli import cli as cli_module


@pytest.fixture
def console(monkeypatch):
    recording = Console(record=True, width=200)
    monkeypatch.setattr(cli_module, "console", recording)
    return recording


def _run_cli(tmp_path, args: list[str]):
    runner = CliRunner()
    return runner.invoke(cli_module.cli, args, env={"HOME": str(tmp_path)})


def test_version(tmp_path):
    result = _run_cli(tmp_path, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_providers_lists_every_key(tmp_path, console):
    result = _run_cli(tmp_path, ["providers"])
    assert result.exit_code == 0
    output = console.export_text()
    for key in ("openai", "anthropic", "openai-aiohttp", "freetrial"):
        assert key in output
    assert "14 provider(s)" in output


def test_providers_filtered_by_tag(tmp_path, console):
    result = _run_cli(tmp_path, ["providers", "--tag", "Free"])
    assert result.exit_code == 0
    output = console.export_text()
    assert "freetrial" in output
    assert "anthropic" not in output
    assert "1 provider(s)" in output


def test_providers_unknown_tag(tmp_path, console):
    result = _run_cli(tmp_path, ["providers", "--tag", "Cloud"])
    assert result.exit_code == 1
    assert "Unknown provider tag" in result.output


def test_show_provider(tmp_path, console):
    result = _run_cli(tmp_path, ["show", "anthropic"])
    assert result.exit_code == 0
    output = console.export_text()
    assert "Backend: anthropic" in output
    assert "Claude 3 Opus" in output
    assert "contextLength (number, optional) = 100000" in output


def test_show_unknown_provider(tmp_path, console):
    result = _run_cli(tmp_path, ["show", "nope"])
    assert result.exit_code == 1
    assert "Unknown provider 'nope'" in result.output


def test_packages_open_source_only(tmp_path, console):
    result = _run_cli(tmp_path, ["packages", "--open-source"])
    assert result.exit_code == 0
    output = console.export_text()
    assert "llama3_chat" in output
    assert "gpt_4o" not in output


def test_listing_starts_with_labels(tmp_path, console):
    result = _run_cli(tmp_path, ["listing"])
    assert result.exit_code == 0
    lines = [line.strip() for line in console.export_text().splitlines() if line.strip()]
    assert lines[:6] == ["OpenAI", "Anthropic", "Mistral", "Cohere", "Gemini", "Open Source"]
    assert lines[6] == "Autodetect"


def test_export_to_stdout(tmp_path):
    result = _run_cli(tmp_path, ["export"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert list(payload["providers"])[0] == "openai"
    assert payload["providers"]["ollama"]["collectInputFor"][-1]["defaultValue"] == (
        "http://localhost:11434"
    )


def test_export_to_file(tmp_path, console):
    target = tmp_path / "out" / "catalog.json"
    result = _run_cli(tmp_path, ["export", "-o", str(target)])
    assert result.exit_code == 0
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert "freetrial" in payload["providers"]
    assert "Wrote 14 providers" in console.export_text()


def test_params_merges_user_values(tmp_path):
    result = _run_cli(
        tmp_path,
        ["params", "ollama", "0", "-s", "apiBase=http://gpu-box:11434", "-s", "contextLength=2048"],
    )
    assert result.exit_code == 0
    params = json.loads(result.stdout)
    assert params == {
        "apiBase": "http://gpu-box:11434",
        "contextLength": 2048,
        "model": "AUTODETECT",
        "provider": "ollama",
    }


def test_params_with_dimension(tmp_path):
    result = _run_cli(
        tmp_path,
        ["params", "replicate", "Llama3 Chat", "-d", "Parameter Count=70b"],
    )
    assert result.exit_code == 0
    params = json.loads(result.stdout)
    assert params["model"] == "llama3-70b"
    assert params["provider"] == "replicate"


def test_params_rejects_malformed_assignment(tmp_path):
    result = _run_cli(tmp_path, ["params", "ollama", "0", "-s", "apiBase"])
    assert result.exit_code == 2
    assert "expected key=value" in result.output


def test_params_unknown_package(tmp_path):
    result = _run_cli(tmp_path, ["params", "openai", "GPT-9"])
    assert result.exit_code == 1
    assert "offers no package" in result.output


def test_config_option_disables_providers(tmp_path, console):
    config_path = tmp_path / "catalog.json"
    config_path.write_text(json.dumps({"disabled_providers": ["groq"]}))

    result = _run_cli(tmp_path, ["--config", str(config_path), "providers"])
    assert result.exit_code == 0
    output = console.export_text()
    assert "groq" not in output
    assert "13 provider(s)" in output


def test_log_dir_option_writes_debug_log(tmp_path, console):
    log_dir = tmp_path / "logs"

    result = _run_cli(tmp_path, ["--log-dir", str(log_dir), "providers"])
    assert result.exit_code == 0
    files = list(log_dir.glob("modelcatalog_*.log"))
    assert len(files) == 1
    content = files[0].read_text(encoding="utf-8")
    assert "[cli] Logging to file" in content
    assert "[registry] Built catalog" in content


def test_log_dir_option_wins_over_config(tmp_path, console):
    config_path = tmp_path / "catalog.json"
    config_path.write_text(json.dumps({"log_dir": str(tmp_path / "from_config")}))

    result = _run_cli(
        tmp_path,
        ["--config", str(config_path), "--log-dir", str(tmp_path / "from_cli"), "providers"],
    )
    assert result.exit_code == 0
    assert list((tmp_path / "from_cli").glob("modelcatalog_*.log"))
    assert not (tmp_path / "from_config").exists()
