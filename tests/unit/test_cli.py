"""
Unit tests for the command-line entry point.

Run: pytest tests/unit/test_cli.py -v
"""

import json
import sys
from pathlib import Path

# Add project root to Python path (for direct invocation)
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import httpx
import pytest

import main as cli
from api.client import ApiClient


@pytest.fixture
def run_cli(fake_api, monkeypatch):
    def client_factory(base_url, token_provider, timeout=None):
        return ApiClient(base_url, token_provider, timeout=timeout,
                         transport=httpx.MockTransport(fake_api.handler))

    monkeypatch.setattr(cli, "ApiClient", client_factory)

    def run(*argv):
        return cli.main(["--base-url", "http://cms.test", "--token", "cli-token", *argv])

    return run


class TestCli:

    def test_companies_prints_json(self, run_cli, fake_api, payloads, capsys):
        fake_api.route("GET", "/api/companies", json={"companies": [payloads.company()]})

        assert run_cli("companies") == 0

        output = json.loads(capsys.readouterr().out)
        assert output["companies"][0]["name"] == "Acme"
        assert fake_api.requests[0].headers["Authorization"] == "Bearer cli-token"

    def test_user_filters_become_query_params(self, run_cli, fake_api, capsys):
        fake_api.route("GET", "/api/users", json={"users": []})

        assert run_cli("users", "--company-id", "c1", "--role", "admin") == 0

        params = fake_api.requests[0].url.params
        assert params["companyId"] == "c1"
        assert params["role"] == "admin"

    def test_stats_period(self, run_cli, fake_api):
        fake_api.route("GET", "/api/stats", json={})

        run_cli("stats", "--period", "7d")

        assert fake_api.requests[0].url.params["period"] == "7d"

    def test_api_error_goes_to_stderr(self, run_cli, fake_api, capsys):
        fake_api.route("GET", "/api/companies", status=403, json={
            "error": "Forbidden",
            "details": [{"field": "role", "message": "Superadmin required"}],
        })

        assert run_cli("companies") == 1

        err = capsys.readouterr().err
        assert "Error: Forbidden" in err
        assert "role: Superadmin required" in err

    def test_check_domain_exit_code(self, run_cli, fake_api, capsys):
        fake_api.route("POST", "/api/auth/check-domain", json={"allowed": False, "message": "Nope"})

        assert run_cli("check-domain", "ada@acme.com") == 1
        assert json.loads(capsys.readouterr().out)["message"] == "Nope"

    def test_unknown_role_is_rejected_by_parser(self, run_cli):
        with pytest.raises(SystemExit):
            run_cli("users", "--role", "owner")

    def test_single_user(self, run_cli, fake_api, payloads, capsys):
        fake_api.route("GET", "/api/users/u1", json={"user": payloads.user()})

        assert run_cli("user", "u1") == 0
        assert json.loads(capsys.readouterr().out)["user"]["email"] == "ada@acme.com"

    def test_single_question(self, run_cli, fake_api, payloads, capsys):
        fake_api.route("GET", "/api/questions/q1", json={"question": payloads.question()})

        assert run_cli("question", "q1") == 0
        output = json.loads(capsys.readouterr().out)
        assert [answer["text"] for answer in output["question"]["answers"]] == ["Water", "CO2"]
