"""Tests for host models and the server catalog."""

import pytest

from sshdock.errors import ConfigMalformedError, IncompleteConfigError
from sshdock.hosts.catalog import ServerCatalog, display_name
from sshdock.hosts.models import HostConfig, DEFAULT_SSH_PORT
from sshdock.session.auth import AuthMethod, AuthResolver


class TestHostConfig:

    def test_camel_case_keys(self):
        config = HostConfig.from_dict({
            "name": "alpha",
            "host": "10.0.0.1",
            "username": "me",
            "privateKey": "~/.ssh/id_ed25519",
            "customCommands": ["uptime"],
            "portKnocking": {"port": 7000},
        })
        assert config.private_key == "~/.ssh/id_ed25519"
        assert config.custom_commands == ["uptime"]
        assert config.port_knocking.port == 7000

    def test_data_model_field_names(self):
        config = HostConfig.from_dict({
            "displayName": "alpha",
            "host": "h",
            "username": "u",
            "useAgent": True,
            "privateKeyPath": "/k",
            "startupCommands": ["ls"],
            "projectMap": {"/w": "/r"},
            "portKnock": {"knockPort": 7000, "knockHost": "gate"},
        })
        assert config.name == "alpha"
        assert config.agent is True
        assert config.private_key == "/k"
        assert config.custom_commands == ["ls"]
        assert config.project == {"/w": "/r"}
        knock = config.resolve().port_knocking
        assert (knock.host, knock.port) == ("gate", 7000)
        assert AuthResolver().resolve(config.resolve()).method == AuthMethod.AGENT

    def test_knock_port_without_host(self):
        config = HostConfig.from_dict({"host": "h", "username": "u", "portKnock": {"knockPort": "7000"}})
        knock = config.resolve("a").port_knocking
        assert (knock.host, knock.port) == ("h", 7000)

    def test_port_string_is_coerced(self):
        assert HostConfig.from_dict({"port": "2222"}).port == 2222

    def test_invalid_port_is_dropped(self):
        assert HostConfig.from_dict({"port": "ssh"}).port is None

    def test_single_custom_command_string(self):
        assert HostConfig.from_dict({"customCommands": "ls"}).custom_commands == ["ls"]

    def test_resolve_fills_defaults(self):
        resolved = HostConfig(name="a", host="h", username="u").resolve()
        assert resolved.port == DEFAULT_SSH_PORT
        assert resolved.port_knocking is None

    def test_resolve_knock_host_falls_back_to_server(self):
        config = HostConfig.from_dict({
            "host": "h", "username": "u", "portKnocking": {"port": 7000},
        })
        knock = config.resolve("a").port_knocking
        assert (knock.host, knock.port) == ("h", 7000)

    def test_disabled_knock_is_dropped(self):
        config = HostConfig.from_dict({
            "host": "h", "username": "u", "portKnocking": {"port": 0},
        })
        assert config.resolve("a").port_knocking is None

    @pytest.mark.parametrize("raw, missing", [
        ({"username": "u"}, ["host"]),
        ({"host": "h"}, ["username"]),
        ({}, ["host", "username"]),
    ])
    def test_resolve_incomplete(self, raw, missing):
        with pytest.raises(IncompleteConfigError) as exc:
            HostConfig.from_dict(raw).resolve("beta")
        assert exc.value.missing == missing
        assert exc.value.server_name == "beta"


class TestServerCatalog:

    def test_reload_and_find(self):
        catalog = ServerCatalog()
        catalog.reload([
            {"name": "alpha", "host": "h1", "username": "u"},
            {"name": "beta", "host": "h2", "username": "u"},
        ])
        assert catalog.list() == ["alpha", "beta"]
        assert catalog.find("beta").config.host == "h2"
        assert catalog.find("gamma") is None
        assert len(catalog) == 2

    def test_reload_replaces_everything(self):
        catalog = ServerCatalog()
        catalog.reload([{"name": "alpha", "host": "h", "username": "u"}])
        catalog.reload([])
        assert catalog.find("alpha") is None
        assert not catalog

    def test_show_hosts_uses_user_at_host(self):
        catalog = ServerCatalog()
        catalog.reload([{"name": "alpha", "host": "h", "username": "u"}], show_hosts=True)
        assert catalog.list() == ["u@h"]
        assert catalog.find("u@h").config.name == "alpha"

    def test_unnamed_server_uses_user_at_host(self):
        assert display_name(HostConfig(host="h", username="u")) == "u@h"

    def test_duplicate_names_keep_first(self):
        catalog = ServerCatalog()
        catalog.reload([
            {"name": "alpha", "host": "first", "username": "u"},
            {"name": "alpha", "host": "second", "username": "u"},
        ])
        assert len(catalog) == 1
        assert catalog.find("alpha").config.host == "first"

    def test_incomplete_entries_are_kept(self):
        catalog = ServerCatalog()
        catalog.reload([{"name": "half", "host": "h"}])
        assert catalog.find("half") is not None

    @pytest.mark.parametrize("raw", [None, "alpha", {"name": "alpha"}, 42])
    def test_non_sequence_is_malformed(self, raw):
        catalog = ServerCatalog()
        catalog.reload([{"name": "alpha", "host": "h", "username": "u"}])
        with pytest.raises(ConfigMalformedError):
            catalog.reload(raw)
        assert catalog.list() == []

    def test_non_mapping_item_is_malformed(self):
        catalog = ServerCatalog()
        with pytest.raises(ConfigMalformedError):
            catalog.reload([{"name": "alpha"}, "beta"])
        assert catalog.list() == []
