"""Tests for the click console."""

import json

import pytest
from click.testing import CliRunner

from sshdock.cli import cli

SERVERS = """
- name: alpha
  host: host
  username: user
  password: p
- name: web
  host: web.example.com
  username: deploy
  agent: true
  port: 2222
  path: /home/deploy
  project:
    /work/site: /var/www/site
- name: half
  host: half.example.com
"""


@pytest.fixture
def config(tmp_path):
    hosts = tmp_path / "servers.yaml"
    hosts.write_text(SERVERS)
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"hosts_files": [str(hosts)], "open_project_catalog": True}))
    return str(path)


@pytest.fixture
def runner():
    return CliRunner()


def test_hosts(runner, config):
    result = runner.invoke(cli, ["-c", config, "hosts"])
    assert result.exit_code == 0
    assert "alpha" in result.output
    assert "deploy@web.example.com:2222" in result.output
    assert "(incomplete)" in result.output
    assert "3 server(s)" in result.output


def test_hosts_json(runner, config):
    result = runner.invoke(cli, ["--json", "-c", config, "hosts"])
    assert result.exit_code == 0
    rows = json.loads(result.output)
    assert [r["name"] for r in rows] == ["alpha", "web", "half"]
    assert rows[2]["usable"] is False


def test_plan(runner, config):
    result = runner.invoke(cli, ["-c", config, "plan", "alpha"])
    assert result.exit_code == 0
    assert result.output.splitlines() == ["# alpha", "ssh host -l user", "p"]


def test_plan_with_forwarding_json(runner, config):
    result = runner.invoke(cli, ["--json", "-c", config, "plan", "web", "--forward", "-D localhost:1080"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["title"] == "web (Forwarding)"
    assert data["lines"] == ["ssh -D localhost:1080 web.example.com -l deploy -p 2222", "cd /home/deploy"]


def test_plan_fast_path(runner, config):
    result = runner.invoke(cli, ["-c", config, "plan", "web", "--fast", "/work/site/index.php"])
    assert result.exit_code == 0
    assert "cd /var/www/site" in result.output


def test_plan_fast_path_wrong_server(runner, config):
    result = runner.invoke(cli, ["-c", config, "plan", "alpha", "--fast", "/work/site/index.php"])
    assert result.exit_code == 1


def test_plan_incomplete_server(runner, config):
    result = runner.invoke(cli, ["-c", config, "plan", "half"])
    assert result.exit_code == 1
    assert "Check host or username for 'half.example.com'" in result.output


def test_project(runner, config):
    result = runner.invoke(cli, ["-c", config, "project", "/work/site/css/app.css"])
    assert result.exit_code == 0
    assert "web:/var/www/site" in result.output

    result = runner.invoke(cli, ["--json", "-c", config, "project", "/tmp/x"])
    assert json.loads(result.output) is None


@pytest.mark.parametrize("args, code", [
    (["localhost:9000"], 0),
    (["9000"], 0),
    (["9000", "--domain-required"], 1),
    (["70000"], 1),
])
def test_check_forward(runner, args, code):
    result = runner.invoke(cli, ["check-forward", *args])
    assert result.exit_code == code


def test_forward_wizard(runner, config):
    # SOCKS is the third forwarding type
    result = runner.invoke(cli, ["-c", config, "forward", "alpha"], input="3\nlocalhost:1080\n")
    assert result.exit_code == 0
    assert "ssh -D localhost:1080 host -l user" in result.output


def test_forward_cancelled(runner, config):
    result = runner.invoke(cli, ["-c", config, "forward", "alpha"], input="\n")
    assert result.exit_code == 1
