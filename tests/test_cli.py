"""
Tests for qrpayload.cli: command-line interface subcommands.

Tests use SystemExit assertions since the CLI calls sys.exit().
"""

import io
import json

import pytest

from qrpayload.cli import _build_parser, _parse_fields, main


def _run(argv):
    """Run main() and return its exit code."""
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


# ===================================================================
# Parser construction
# ===================================================================

class TestBuildParser:

    def test_parser_has_subcommands(self):
        parser = _build_parser()
        args = parser.parse_args(["detect", "hello"])
        assert args.command == "detect"

    def test_generate_rejects_unknown_type(self):
        parser = _build_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["generate", "barcode"])

    def test_no_subcommand_prints_help(self):
        assert _run([]) == 0


class TestParseFields:

    def test_key_value(self):
        assert _parse_fields(["ssid=MyNet", "password=a=b"]) == {"ssid": "MyNet", "password": "a=b"}

    def test_missing_equals_raises(self):
        with pytest.raises(ValueError):
            _parse_fields(["ssid"])


# ===================================================================
# generate subcommand
# ===================================================================

class TestGenerateSubcommand:

    def test_wifi(self, capsys):
        code = _run(["generate", "wifi", "--field", "ssid=MyNet", "--field", "encryption=WPA",
                     "--field", "password=pass123"])
        assert code == 0
        assert capsys.readouterr().out == "WIFI:T:WPA;S:MyNet;P:pass123;;\n"

    def test_json_fields(self, capsys):
        code = _run(["generate", "location", "--json", '{"latitude": 37.7749, "longitude": -122.4194}'])
        assert code == 0
        assert capsys.readouterr().out.strip() == "geo:37.7749,-122.4194"

    def test_field_overrides_json(self, capsys):
        code = _run(["generate", "phone", "--json", '{"phone": "1"}', "--field", "phone=2"])
        assert code == 0
        assert capsys.readouterr().out.strip() == "tel:2"

    def test_camel_case_field(self, capsys):
        code = _run(["generate", "vcard", "--field", "firstName=Jane"])
        assert code == 0
        assert "FN:Jane" in capsys.readouterr().out

    def test_missing_required_exits_1(self, capsys):
        assert _run(["generate", "email"]) == 1
        assert capsys.readouterr().out == ""

    def test_bad_field_exits_1(self, capsys):
        assert _run(["generate", "text", "--field", "oops"]) == 1
        assert "KEY=VALUE" in capsys.readouterr().out

    def test_bad_json_exits_1(self, capsys):
        assert _run(["generate", "text", "--json", "{not json"]) == 1
        assert "Error" in capsys.readouterr().out

    def test_json_must_be_object(self, capsys):
        assert _run(["generate", "text", "--json", "[1, 2]"]) == 1


# ===================================================================
# detect subcommand
# ===================================================================

class TestDetectSubcommand:

    def test_json_output(self, capsys):
        code = _run(["detect", "tel:+123456789"])
        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert out == {"type": "phone", "parsedData": {"phone": "+123456789"}}

    def test_stdin(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("geo:1.5,2.5\n"))
        code = _run(["detect", "-"])
        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert out["type"] == "location"
        assert out["parsedData"] == {"latitude": "1.5", "longitude": "2.5"}

    def test_stdin_crlf(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("tel:+1\r\n"))
        code = _run(["detect", "-"])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["parsedData"] == {"phone": "+1"}

    def test_pretty(self, capsys):
        code = _run(["detect", "--pretty", "WIFI:T:WPA;S:Net;P:k;H:true;"])
        assert code == 0
        out = capsys.readouterr().out
        assert "Detected: wifi" in out
        assert "ssid:" in out
        assert "true" in out

    def test_verbose_logs_to_stderr(self, capsys):
        code = _run(["--verbose", "detect", "hello"])
        assert code == 0
        captured = capsys.readouterr()
        assert json.loads(captured.out)["type"] == "text"
        assert "Detected payload" in captured.err
