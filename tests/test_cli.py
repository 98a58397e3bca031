from __future__ import annotations

import json

import pytest

from cli import build_argparser, format_trace, main
from config import get_settings
from modexp import calculate, validate_and_parse


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    monkeypatch.setenv("MODEXP_LOG_LEVEL", "warning")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_argparser_accepts_optional_positionals():
    args = build_argparser().parse_args(["2", "23", "100", "--json"])
    assert (args.a, args.n, args.m, args.json) == ("2", "23", "100", True)
    assert build_argparser().parse_args([]).a is None


def test_format_trace_table():
    parsed = validate_and_parse("2", "23", "100").parsed
    text = format_trace(parsed, calculate(2, 23, 100))
    lines = text.splitlines()
    assert lines[0] == "n = 23 = 10111 (binary, 5 bits)"
    assert "(48)^2 * 2 mod 100" in lines[-3]
    assert lines[-1] == "2^23 ≡ 8 (mod 100)"


def test_main_prints_table(capsys):
    assert main(["2", "23", "100"]) == 0
    out = capsys.readouterr().out
    assert "10111" in out
    assert out.rstrip().endswith("2^23 ≡ 8 (mod 100)")


def test_main_json(capsys):
    assert main(["3", "100", "23", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["binary_str"] == "1100100"
    assert data["result"] == 3
    assert len(data["steps"]) == 7


def test_main_uses_defaults(capsys):
    assert main([]) == 0
    assert capsys.readouterr().out.rstrip().endswith("3^100 ≡ 3 (mod 23)")


def test_main_defaults_from_environment(monkeypatch, capsys):
    monkeypatch.setenv("MODEXP_DEFAULT_A", "2")
    monkeypatch.setenv("MODEXP_DEFAULT_N", "23")
    monkeypatch.setenv("MODEXP_DEFAULT_M", "100")
    get_settings.cache_clear()
    assert main([]) == 0
    assert capsys.readouterr().out.rstrip().endswith("2^23 ≡ 8 (mod 100)")


def test_main_validation_error(capsys):
    assert main(["2", "3", "0"]) == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Modulus (m) must be greater than 0" in captured.err


def test_main_limit_bits(capsys):
    big = str(2**30)
    assert main(["2", big, "7"]) == 2
    assert "less than 16777216" in capsys.readouterr().err
    assert main(["2", big, "7", "--limit-bits", "36"]) == 0
    assert capsys.readouterr().out.rstrip().endswith(f"2^{big} ≡ {pow(2, 2**30, 7)} (mod 7)")


def test_main_rejects_bad_limit_bits():
    with pytest.raises(SystemExit):
        main(["2", "3", "5", "--limit-bits", "0"])


@pytest.mark.parametrize("bits", ["65", "20000"])
def test_main_rejects_limit_bits_above_settings_range(bits, capsys):
    with pytest.raises(SystemExit):
        main(["2", "23", "100", "--limit-bits", bits])
    assert "between 1 and 64" in capsys.readouterr().err


def test_main_accepts_widest_limit_bits(capsys):
    assert main(["2", "23", "100", "--limit-bits", "64"]) == 0
    assert capsys.readouterr().out.rstrip().endswith("2^23 ≡ 8 (mod 100)")
