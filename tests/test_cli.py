import json
from pathlib import Path

from click.testing import CliRunner

from openrpc_inspector.cli import main

FIXTURES = Path(__file__).parent / "fixtures"


def _json_output(result) -> dict:
    """Parse the printed projection, skipping any warning lines before it."""
    lines = result.output.splitlines()
    return json.loads("\n".join(lines[lines.index("{"):]))


class TestCliMethods:
    def test_lists_methods(self):
        runner = CliRunner()
        result = runner.invoke(main, ["methods", str(FIXTURES / "ledger-api.yaml")])

        assert result.exit_code == 0
        assert "Ledger JSON-RPC API (4 methods)" in result.output
        assert "getBalance - Get the balance of an account." in result.output
        assert "legacyTransfer - Transfer funds using the old signing scheme. [deprecated]" in result.output

    def test_rejects_non_openrpc_document(self):
        runner = CliRunner()
        result = runner.invoke(main, ["methods", str(FIXTURES / "petstore.json")])

        assert result.exit_code != 0
        assert "is not an OpenRPC document" in result.output

    def test_reports_broken_refs(self, tmp_path):
        spec = tmp_path / "broken.yaml"
        spec.write_text(
            "openrpc: 1.2.6\n"
            "info: {title: Broken}\n"
            "methods:\n"
            "  - name: x\n"
            "    params:\n"
            "      - $ref: '#/components/contentDescriptors/Missing'\n"
        )
        runner = CliRunner()
        result = runner.invoke(main, ["methods", str(spec)])

        assert result.exit_code != 0
        assert "Unresolvable $ref" in result.output


class TestCliInspect:
    def test_inspect_matched_exchange(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "inspect", str(FIXTURES / "ledger-api.yaml"), str(FIXTURES / "get-balance.json"),
        ])

        assert result.exit_code == 0
        data = _json_output(result)
        assert data["service"]["name"] == "Ledger JSON-RPC API"
        assert data["operation"]["name"] == "getBalance"
        assert data["request"]["parameters"][0] == {
            "name": "address",
            "description": None,
            "location": "body",
            "required": True,
            "deprecated": False,
            "value": "0xabc",
            "warnings": [],
        }
        assert data["request"]["parameters"][1]["default_value"] == "latest"
        assert data["response"]["description"] == "The account balance, hex encoded."

    def test_inspect_without_response(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "inspect", str(FIXTURES / "ledger-api.yaml"), str(FIXTURES / "get-balance.json"), "--no-response",
        ])

        assert result.exit_code == 0
        assert _json_output(result)["response"] is None

    def test_inspect_unmatched_exchange(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "inspect", str(FIXTURES / "ledger-api.yaml"), str(FIXTURES / "aborted-unknown.yaml"),
        ])

        assert result.exit_code == 0
        data = _json_output(result)
        assert data["operation"]["name"] == "Unrecognized request to JSON-RPC API"
        assert data["operation"]["warnings"] == ["Unrecognized JSON-RPC method name: getBlock"]
        assert data["request"]["parameters"] == []
        assert data["response"] is None

    def test_warns_about_unknown_server(self, tmp_path):
        capture = tmp_path / "elsewhere.json"
        capture.write_text(json.dumps({
            "request": {
                "url": "https://other.example.org/",
                "body": {"jsonrpc": "2.0", "method": "ping"},
            },
        }))
        runner = CliRunner()
        result = runner.invoke(main, ["inspect", str(FIXTURES / "ledger-api.yaml"), str(capture)])

        assert result.exit_code == 0
        assert "is not a server of Ledger JSON-RPC API" in result.output
        assert _json_output(result)["operation"]["name"] == "ping"

    def test_rejects_capture_without_request(self, tmp_path):
        capture = tmp_path / "bad.yaml"
        capture.write_text("response: aborted\n")
        runner = CliRunner()
        result = runner.invoke(main, ["inspect", str(FIXTURES / "ledger-api.yaml"), str(capture)])

        assert result.exit_code != 0
        assert "no 'request' section" in result.output
