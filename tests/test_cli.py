# File: tests/test_cli.py
"""Tests for the command line (``sitefetch.cli``) with click.testing.CliRunner.
The crawl itself is replaced by a fake ``fetch_site``.
"""
import importlib
import json

import pytest
from click.testing import CliRunner

from sitefetch import __version__
from sitefetch.cli import cli
from sitefetch.errors import CrawlCancelled, FetchError

# ``sitefetch.cli`` the attribute is the click command re-exported by the package;
# fetch the submodule itself so monkeypatching reaches its globals.
cli_module = importlib.import_module("sitefetch.cli")


@pytest.fixture(autouse=True)
def token_counts(monkeypatch):
    """Replace the tokenizer so no encoding is downloaded, record the pages it saw."""
    seen = []

    def fake_count_tokens(pages):
        pages = list(pages)
        seen.append(pages)
        return 1234 * len(pages)

    monkeypatch.setattr(cli_module, "count_tokens", fake_count_tokens)
    return seen


@pytest.fixture()
def calls(monkeypatch, sample_pages):
    """Patch fetch_site to return sample pages and remember how it was called."""
    seen = []

    async def fake_fetch_site(url, config=None, **kwargs):
        seen.append((url, config, kwargs))
        return dict(sample_pages)

    monkeypatch.setattr(cli_module, "fetch_site", fake_fetch_site)
    return seen


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert f"sitefetch, version {__version__}" in result.output


def test_no_url_prints_help(calls):
    result = CliRunner().invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage:" in result.output
    assert calls == []


def test_text_report_to_stdout(calls):
    result = CliRunner().invoke(cli, ["https://example.com", "--silent"])
    assert result.exit_code == 0, result.output
    assert "<url>https://example.com/docs</url>" in result.output
    assert result.output.startswith("<page>")


def test_options_reach_config(calls):
    result = CliRunner().invoke(
        cli,
        [
            "https://example.com",
            "--silent",
            "--concurrency", "5",
            "-m", "/docs/**",
            "-m", "/api/*",
            "--content-selector", "main",
            "--limit", "7",
            "--crawl-timeout", "30",
        ],
    )
    assert result.exit_code == 0, result.output
    url, cfg, kwargs = calls[0]
    assert url == "https://example.com"
    assert cfg.concurrency == 5
    assert cfg.match == ("/docs/**", "/api/*")
    assert cfg.content_selector == "main"
    assert cfg.limit == 7
    assert kwargs["cancel_after"] == 30.0


def test_config_file_with_flag_override(tmp_path, calls):
    cfg_file = tmp_path / "sitefetch.yaml"
    cfg_file.write_text("concurrency: 2\nlimit: 50\nmatch: ['/guide/**']\n", encoding="utf-8")
    result = CliRunner().invoke(
        cli, ["https://example.com", "--silent", "--config", str(cfg_file), "--limit", "5"]
    )
    assert result.exit_code == 0, result.output
    _, cfg, _ = calls[0]
    assert cfg.concurrency == 2
    assert cfg.limit == 5
    assert cfg.match == ("/guide/**",)


def test_outfile_json(tmp_path, calls):
    out = tmp_path / "reports" / "site.json"
    result = CliRunner().invoke(cli, ["https://example.com", "--silent", "-o", str(out)])
    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert [d["url"] for d in data] == ["https://example.com/", "https://example.com/docs"]
    assert "<page>" not in result.output


def test_outfile_text(tmp_path, calls):
    out = tmp_path / "site.txt"
    result = CliRunner().invoke(cli, ["https://example.com", "--silent", "--outfile", str(out)])
    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8").startswith("<page>")


def test_invalid_option_exits_with_error(calls):
    result = CliRunner().invoke(cli, ["https://example.com", "--silent", "--concurrency", "0"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output
    assert calls == []


def test_fetch_failure_exits_with_error(monkeypatch):
    async def failing(url, config=None, **kwargs):
        raise FetchError(url, "HTTP 500 Internal Server Error", 500)

    monkeypatch.setattr(cli_module, "fetch_site", failing)
    result = CliRunner().invoke(cli, ["https://example.com", "--silent"])
    assert result.exit_code == 1
    assert "Fetch failed" in result.output


def test_cancelled_crawl_keeps_partial_pages(monkeypatch, sample_pages):
    async def cancelled(url, config=None, **kwargs):
        raise CrawlCancelled({"https://example.com/": sample_pages["https://example.com/"]})

    monkeypatch.setattr(cli_module, "fetch_site", cancelled)
    result = CliRunner().invoke(cli, ["https://example.com", "--silent", "--crawl-timeout", "1"])
    assert result.exit_code == 0, result.output
    assert "<url>https://example.com/</url>" in result.output
    assert "docs" not in result.output


def test_no_pages_writes_nothing(monkeypatch, tmp_path):
    async def empty(url, config=None, **kwargs):
        return {}

    monkeypatch.setattr(cli_module, "fetch_site", empty)
    out = tmp_path / "site.json"
    result = CliRunner().invoke(cli, ["https://example.com", "--silent", "-o", str(out)])
    assert result.exit_code == 0
    assert not out.exists()


def test_log_file_reports_token_count(tmp_path, calls, token_counts):
    log_file = tmp_path / "logs" / "sitefetch.log"
    result = CliRunner().invoke(cli, ["https://example.com", "--log-file", str(log_file), "-o", str(tmp_path / "x.txt")])
    assert result.exit_code == 0, result.output
    assert "Total token count for 2 pages: 2,468" in log_file.read_text(encoding="utf-8")
    assert [p.url for p in token_counts[0]] == ["https://example.com/", "https://example.com/docs"]


def test_disable_tokenizer_logs_page_count(tmp_path, calls, token_counts):
    log_file = tmp_path / "sitefetch.log"
    result = CliRunner().invoke(
        cli, ["https://example.com", "--disable-tokenizer", "--log-file", str(log_file), "-o", str(tmp_path / "x.txt")]
    )
    assert result.exit_code == 0, result.output
    text = log_file.read_text(encoding="utf-8")
    assert "Total page count: 2 pages" in text
    assert "token count" not in text
    assert token_counts == []


def test_tokenizer_unavailable_falls_back_to_page_count(tmp_path, monkeypatch, calls):
    def offline(pages):
        raise OSError("cannot download o200k_base")

    monkeypatch.setattr(cli_module, "count_tokens", offline)
    log_file = tmp_path / "sitefetch.log"
    result = CliRunner().invoke(cli, ["https://example.com", "--log-file", str(log_file), "-o", str(tmp_path / "x.txt")])
    assert result.exit_code == 0, result.output
    text = log_file.read_text(encoding="utf-8")
    assert "Token count unavailable" in text
    assert "Total page count: 2 pages" in text


def test_cancelled_crawl_without_crawl_timeout(monkeypatch, tmp_path, sample_pages):
    async def cancelled(url, config=None, **kwargs):
        raise CrawlCancelled({"https://example.com/": sample_pages["https://example.com/"]})

    monkeypatch.setattr(cli_module, "fetch_site", cancelled)
    log_file = tmp_path / "sitefetch.log"
    result = CliRunner().invoke(cli, ["https://example.com", "--log-file", str(log_file), "-o", str(tmp_path / "x.txt")])
    assert result.exit_code == 0, result.output
    assert "Crawl cancelled, keeping 1 pages" in log_file.read_text(encoding="utf-8")
