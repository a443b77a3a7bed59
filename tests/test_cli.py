"""Tests for the command line driver."""

import httpx
import pytest
from typer.testing import CliRunner

from linkfinder import cli
from linkfinder.clients.link_store import HttpLinkStore

runner = CliRunner()


@pytest.fixture(autouse=True)
def stub_store(monkeypatch, stub_app):
    """Point every store the CLI builds at the stub link store."""

    def make_store(base_url=None, timeout=None):
        client = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=stub_app),
            base_url=base_url or "http://store.test",
        )
        return HttpLinkStore(client=client)

    monkeypatch.setattr(cli, "HttpLinkStore", make_store)


def test_find_lists_candidates():
    result = runner.invoke(cli.app, ["find", "docs"])
    assert result.exit_code == 0
    assert "docs" in result.output
    assert "existing" in result.output


def test_find_offers_create_for_unknown_text():
    result = runner.invoke(cli.app, ["find", "brand-new"])
    assert result.exit_code == 0
    assert "create" in result.output


def test_find_and_select_resolves_link():
    result = runner.invoke(cli.app, ["find", "foo", "--select", "1"])
    assert result.exit_code == 0
    assert "foo → foo.com" in result.output


def test_select_out_of_range():
    result = runner.invoke(cli.app, ["find", "foo", "--select", "5"])
    assert result.exit_code != 0


def test_shorten_creates_link():
    result = runner.invoke(cli.app, ["shorten", "https://new.example"])
    assert result.exit_code == 0
    assert "https://new.example" in result.output


def test_shorten_conflict_exits_with_error():
    result = runner.invoke(cli.app, ["shorten", "https://taken.example"])
    assert result.exit_code == 1
    assert "alias_conflict" in result.output
