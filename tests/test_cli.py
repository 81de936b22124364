from __future__ import annotations

import pytest
from typer.testing import CliRunner

from conftest import PROVISIONING_CONDITIONS, build_instance
from svcat import cli
from svcat.errors import ConfigError

runner = CliRunner()


class _StubCatalog:
    def __init__(self, provisioned, status=None):
        self.provisioned = provisioned
        self.status = status or provisioned
        self.provision_calls = []
        self.retrieve_calls = []

    def provision(self, instance_name, class_name, plan_name, opts):
        self.provision_calls.append((instance_name, class_name, plan_name, opts))
        return self.provisioned

    def retrieve_instance(self, namespace, name):
        self.retrieve_calls.append((namespace, name))
        return self.status


@pytest.fixture
def catalog(monkeypatch):
    stub = _StubCatalog(build_instance(name="bananainstance", namespace="default"))
    monkeypatch.setattr(cli, "ServiceCatalogClient", lambda: stub)
    monkeypatch.delenv("SVCAT_NAMESPACE", raising=False)
    return stub


def test_provision_builds_request_and_calls_provision_once(catalog):
    result = runner.invoke(
        cli.app,
        ["provision", "bananainstance", "--class", "mysqldb", "--plan", "free", "-p", "a=b"],
    )

    assert result.exit_code == 0, result.output
    assert len(catalog.provision_calls) == 1
    name, class_name, plan_name, opts = catalog.provision_calls[0]
    assert (name, class_name, plan_name) == ("bananainstance", "mysqldb", "free")
    assert opts.params == {"a": "b"}
    assert opts.secrets == {}
    assert opts.namespace == "default"
    assert opts.external_id is None
    assert "bananainstance" in result.output


def test_provision_passes_secrets_json_and_namespace(catalog):
    result = runner.invoke(
        cli.app,
        [
            "provision",
            "bananainstance",
            "--class",
            "mysqldb",
            "--plan",
            "free",
            "--params-json",
            '{"encrypt": true}',
            "-s",
            "mysecret[dbparams]",
            "--external-id",
            "abc-123",
            "-n",
            "team-a",
        ],
    )

    assert result.exit_code == 0, result.output
    _, _, _, opts = catalog.provision_calls[0]
    assert opts.params == {"encrypt": True}
    assert opts.secrets == {"mysecret": ("mysecret", "dbparams")}
    assert opts.namespace == "team-a"
    assert opts.external_id == "abc-123"


def test_missing_instance_name_fails_before_any_call(monkeypatch):
    def _no_client():
        raise AssertionError("client must not be created")

    monkeypatch.setattr(cli, "ServiceCatalogClient", _no_client)

    result = runner.invoke(cli.app, ["provision", "--class", "mysqldb", "--plan", "free"])

    assert result.exit_code == 1
    assert "an instance name is required" in result.output


def test_conflicting_param_sources_fail(catalog):
    result = runner.invoke(
        cli.app,
        [
            "provision",
            "bananainstance",
            "--class",
            "mysqldb",
            "--plan",
            "free",
            "--params-json",
            '{"foo":"bar"}',
            "-p",
            "a=b",
        ],
    )

    assert result.exit_code == 1
    assert "--params-json cannot be used with --param" in result.output
    assert catalog.provision_calls == []


def test_bad_secret_is_reported_verbatim(catalog):
    result = runner.invoke(
        cli.app,
        ["provision", "bananainstance", "--class", "mysqldb", "--plan", "free", "-s", "foo=bar"],
    )

    assert result.exit_code == 1
    assert (
        "invalid --secret value (invalid parameter (foo=bar), must be in MAP[KEY] format)"
        in result.output
    )


def test_plan_and_class_are_required(catalog):
    result = runner.invoke(cli.app, ["provision", "bananainstance", "--class", "mysqldb"])

    assert result.exit_code != 0
    assert catalog.provision_calls == []


def test_wait_timeout_exits_non_zero_but_prints_instance(monkeypatch):
    pending = build_instance(
        name="bananainstance", namespace="default", conditions=PROVISIONING_CONDITIONS
    )
    stub = _StubCatalog(pending)
    monkeypatch.setattr(cli, "ServiceCatalogClient", lambda: stub)

    result = runner.invoke(
        cli.app,
        [
            "provision",
            "bananainstance",
            "--class",
            "mysqldb",
            "--plan",
            "free",
            "--wait",
            "--interval",
            "10ms",
            "--timeout",
            "30ms",
        ],
    )

    assert result.exit_code == 1
    assert "Waiting for the instance to be provisioned..." in result.output
    assert "bananainstance" in result.output
    assert "timed out waiting for instance" in result.output
    assert stub.retrieve_calls


def test_invalid_wait_flags_fail_before_provisioning(catalog):
    result = runner.invoke(
        cli.app,
        [
            "provision",
            "bananainstance",
            "--class",
            "mysqldb",
            "--plan",
            "free",
            "--wait",
            "--interval",
            "10s",
            "--timeout",
            "5s",
        ],
    )

    assert result.exit_code == 1
    assert "--interval cannot be longer than --timeout" in result.output
    assert catalog.provision_calls == []


def test_missing_catalog_url_is_a_config_error(monkeypatch):
    def _unconfigured():
        raise ConfigError("SVCAT_URL is required.")

    monkeypatch.setattr(cli, "ServiceCatalogClient", _unconfigured)

    result = runner.invoke(
        cli.app, ["provision", "bananainstance", "--class", "mysqldb", "--plan", "free"]
    )

    assert result.exit_code == 1
    assert "SVCAT_URL is required." in result.output


def test_version_flag():
    result = runner.invoke(cli.app, ["--version"])

    assert result.exit_code == 0
    assert result.output.startswith("svcat ")


def test_provision_help_lists_flags():
    result = runner.invoke(
        cli.app, ["provision", "--help"], env={"COLUMNS": "200", "TERMINAL_WIDTH": "200"}
    )

    assert result.exit_code == 0
    flags = ("--plan", "--class", "--external-id", "--param", "--params-json", "--secret")
    for flag in flags + ("--wait", "--namespace"):
        assert flag in result.output


@pytest.mark.parametrize(
    "flags, expected",
    [
        (["-p", "a=b,c=d"], {"a": "b", "c": "d"}),
        (
            ["-p", "location=eastus,sslEnforcement=disabled"],
            {"location": "eastus", "sslEnforcement": "disabled"},
        ),
        (["-p", "a=b,c=d", "-p", "e=f"], {"a": "b", "c": "d", "e": "f"}),
        (["-p", '"note=x,y",a=b'], {"note": "x,y", "a": "b"}),
    ],
)
def test_param_flag_splits_comma_separated_values(catalog, flags, expected):
    result = runner.invoke(
        cli.app, ["provision", "bananainstance", "--class", "mysqldb", "--plan", "free", *flags]
    )

    assert result.exit_code == 0, result.output
    _, _, _, opts = catalog.provision_calls[0]
    assert opts.params == expected


def test_secret_flag_splits_comma_separated_values(catalog):
    result = runner.invoke(
        cli.app,
        [
            "provision",
            "bananainstance",
            "--class",
            "mysqldb",
            "--plan",
            "free",
            "-s",
            "s1[k1],s2[k2]",
        ],
    )

    assert result.exit_code == 0, result.output
    _, _, _, opts = catalog.provision_calls[0]
    assert opts.secrets == {"s1": ("s1", "k1"), "s2": ("s2", "k2")}
