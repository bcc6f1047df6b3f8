"""Tests for the command-line tools (file backend)."""

import importlib.util
import json
import os

import pytest


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def load_script(relative_path, name):
    module_spec = importlib.util.spec_from_file_location(name, os.path.join(ROOT, relative_path))
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="module")
def cli():
    return load_script("scripts/cli/url_shortener_cli.py", "url_shortener_cli")


@pytest.fixture(scope="module")
def seed():
    return load_script("scripts/database/seed_data.py", "seed_data")


@pytest.fixture
def run(cli, data_file, capsys):
    async def _run(*args):
        code = await cli.main(["--backend", "file", "--data-file", data_file, *args])
        captured = capsys.readouterr()
        return code, captured
    return _run


@pytest.mark.asyncio
class TestCLI:
    """Test CLI commands end to end."""

    async def test_shorten_and_get(self, run):
        code, out = await run("shorten", "https://example.com/cli")
        assert code == 0
        created = json.loads(out.out)
        assert created["success"] is True
        assert created["already_existed"] is False

        code, out = await run("get", created["short_code"])
        assert code == 0
        info = json.loads(out.out)
        assert info["long_url"] == "https://example.com/cli"
        assert info["visits"] == 0

    async def test_visit_counts(self, run):
        _, out = await run("shorten", "https://example.com/cli")
        short_code = json.loads(out.out)["short_code"]

        code, out = await run("visit", short_code)
        assert code == 0
        assert json.loads(out.out)["long_url"] == "https://example.com/cli"

        _, out = await run("get", short_code)
        assert json.loads(out.out)["visits"] == 1

    async def test_list(self, run):
        await run("shorten", "https://example.com/one")
        await run("shorten", "https://example.com/two")

        code, out = await run("list")

        assert code == 0
        assert json.loads(out.out)["count"] == 2

    async def test_invalid_url(self, run):
        code, out = await run("shorten", "example.com")

        assert code == 1
        assert "URL must include scheme" in out.err

    async def test_unknown_code(self, run):
        code, out = await run("get", "zzzzzz")

        assert code == 1
        assert "not found" in out.err

    async def test_health(self, run):
        code, out = await run("health")

        assert code == 0
        assert json.loads(out.out)["health"]["overall"] is True

    async def test_no_command(self, cli, capsys):
        assert await cli.main([]) == 1


@pytest.mark.asyncio
class TestSeedData:
    """Test the seeding script."""

    async def test_seed(self, seed, data_file, monkeypatch, capsys):
        monkeypatch.setattr(
            "sys.argv",
            ["seed_data.py", "--backend", "file", "--data-file", data_file, "--count", "5"],
        )

        assert await seed.main() == 0

        with open(data_file, encoding="utf-8") as f:
            assert len(json.load(f)["urls"]) == 5
