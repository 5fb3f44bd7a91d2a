import json
import logging

import httpx
import pytest

from client_cli import main as cli
from vcd_client import VcloudDirectorClient
from vcd_client.mock_data import VAPP1_ID, VAPP2_VM1_ID


@pytest.fixture
def no_config(tmp_path, clean_env):
    return str(tmp_path / "missing.yaml")


def _json_from(out: str) -> dict:
    """Return the JSON document printed by the CLI."""
    return json.loads(out)


def test_demo_prints_first_mock_vapp(no_config, capsys):
    rc = cli.main(["--action", "demo", "--config", no_config, "--log-level", "WARNING"])

    assert rc == 0
    body = _json_from(capsys.readouterr().out)
    assert body["name"] == "mock-vapp-1"
    assert body["Children"]["Vm"][0]["name"] == "mock-vm-1-1"


def test_get_vapp_in_mock_mode(no_config, capsys):
    rc = cli.main(["--mock", "--action", "get_vapp", "--id", VAPP2_VM1_ID, "--config", no_config, "--log-level", "WARNING"])

    assert rc == 0
    body = _json_from(capsys.readouterr().out)
    assert body["name"] == "mock-vm-2-1"
    assert body["type"] == "application/vnd.vmware.vcloud.vm+xml"


def test_mock_mode_from_environment(no_config, clean_env, capsys):
    clean_env.setenv("VCLOUD_DIRECTOR_MOCK", "1")

    rc = cli.main(["--action", "get_vapp", "--id", VAPP1_ID, "--config", no_config, "--log-level", "WARNING"])

    assert rc == 0
    assert _json_from(capsys.readouterr().out)["name"] == "mock-vapp-1"


def test_unknown_id_reports_error(no_config, capsys):
    rc = cli.main(["--mock", "--action", "get_vapp", "--id", "vdc-1", "--config", no_config, "--log-level", "WARNING"])

    assert rc == 1
    assert "This operation is denied." in capsys.readouterr().err


def test_get_vapp_requires_id(no_config):
    assert cli.main(["--mock", "--action", "get_vapp", "--config", no_config, "--log-level", "WARNING"]) == 1


def test_real_mode_without_host_fails_cleanly(no_config, capsys):
    rc = cli.main(["--action", "get_vapp", "--id", VAPP1_ID, "--config", no_config, "--log-level", "WARNING"])

    assert rc == 1
    assert "host is not configured" in capsys.readouterr().err


def test_no_action_prints_help(no_config, capsys):
    assert cli.main(["--config", no_config, "--log-level", "WARNING"]) == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_real_mode_uses_configured_endpoint(no_config, capsys, monkeypatch):
    vapp_xml = (
        '<VApp xmlns="http://www.vmware.com/vcloud/v1.5" name="remote">'
        '<Children><Vm name="only"/></Children></VApp>'
    )

    def handler(request):
        if request.url.path == "/api/sessions":
            return httpx.Response(200, headers={"x-vcloud-authorization": "tok"})
        if request.url.path == "/api/session":
            return httpx.Response(204)
        return httpx.Response(200, content=vapp_xml)

    real_init = VcloudDirectorClient.__init__

    def init_with_transport(self, *args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        real_init(self, *args, **kwargs)

    monkeypatch.setattr(VcloudDirectorClient, "__init__", init_with_transport)

    rc = cli.main(
        [
            "--host", "https://vcd.example.com",
            "--username", "admin@org",
            "--password", "pw",
            "--action", "get_vapp",
            "--id", "vapp-remote",
            "--config", no_config,
            "--log-level", "WARNING",
        ]
    )

    assert rc == 0
    assert _json_from(capsys.readouterr().out)["Children"]["Vm"] == [{"name": "only"}]


def test_default_log_level_keeps_stdout_parseable(no_config, capsys, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers, root.level
    root.handlers = []
    try:
        rc = cli.main(["--action", "demo", "--config", no_config])
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)

    out, err = capsys.readouterr()
    assert rc == 0
    assert _json_from(out)["name"] == "mock-vapp-1"
    assert "Configuration loaded" in err


def test_mock_data_with_unquoted_timestamp(no_config, tmp_path, capsys):
    data = tmp_path / "mock.yaml"
    data.write_text(
        "vapps:\n  vapp-1:\n    name: dated\n    date_created: 2014-03-16T10:52:31.874Z\n",
        encoding="utf-8",
    )

    rc = cli.main(
        ["--mock", "--mock-data", str(data), "--action", "get_vapp", "--id", "vapp-1", "--config", no_config, "--log-level", "WARNING"]
    )

    assert rc == 0
    assert _json_from(capsys.readouterr().out)["DateCreated"] == "2014-03-16T10:52:31.874Z"


def test_malformed_mock_data_reports_error(no_config, tmp_path, capsys):
    data = tmp_path / "mock.yaml"
    data.write_text("vapps:\n  vapp-1:\n    name: a\n    networks:\n      - name: net\n", encoding="utf-8")

    rc = cli.main(
        ["--mock", "--mock-data", str(data), "--action", "get_vapp", "--id", "vapp-1", "--config", no_config, "--log-level", "WARNING"]
    )

    assert rc == 1
    assert "parent_id" in capsys.readouterr().err
