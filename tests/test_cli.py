"""Tests for the command line client."""

import httpx
import pytest

from update_svc.cli import _print_result, build_parser, main, pair_items, print_updates
from update_svc.extension.types import RequestItem
from update_svc.protocol.codec import encode_update_response


class TestPairItems:
    def test_pairs(self):
        assert pair_items(["a", "1.0", "b", "2.0"]) == [RequestItem("a", "1.0"), RequestItem("b", "2.0")]

    def test_odd_count(self):
        with pytest.raises(ValueError):
            pair_items(["a", "1.0", "b"])


class TestParser:
    def test_check(self):
        args = build_parser().parse_args(["--raw", "check", "a", "1.0"])
        assert args.command == "check"
        assert args.extensions == ["a", "1.0"]
        assert args.raw

    def test_webstore(self):
        args = build_parser().parse_args(["--base-url", "http://updates:9000", "webstore", "a", "1.0"])
        assert args.base_url == "http://updates:9000"
        assert (args.id, args.version) == ("a", "1.0")

    def test_no_command(self, capsys):
        assert main([]) == 1


class TestOutput:
    def test_print_updates(self, capsys, dark_theme):
        print_updates(encode_update_response([dark_theme]))
        out = capsys.readouterr().out
        assert dark_theme.identifier in out
        assert dark_theme.sha256 in out

    def test_print_no_updates(self, capsys):
        print_updates(encode_update_response([]))
        assert "No updates available" in capsys.readouterr().out

    def test_redirect(self, capsys):
        response = httpx.Response(307, headers={"location": "https://upstream.example.com/"})
        assert _print_result(response, raw=False) == 0
        assert "https://upstream.example.com/" in capsys.readouterr().out

    def test_error(self, capsys):
        response = httpx.Response(400, text="bad request")
        assert _print_result(response, raw=False) == 1
        assert "bad request" in capsys.readouterr().err

    def test_raw(self, capsys):
        response = httpx.Response(200, content=b'<response protocol="3.1" server="prod"></response>')
        assert _print_result(response, raw=True) == 0
        assert "<response" in capsys.readouterr().out
