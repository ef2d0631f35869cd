"""End-to-end runs of the command line report."""

import json

import pytest
from main import build_parser, main

GUNTUR_ARGS = [
    "--location", "Guntur",
    "--roof-area", "150",
    "--dwellers", "4",
    "--space", "25",
    "--lat", "16.3",
    "--lng", "80.43",
    "--no-jitter",
]


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.setenv("RWH_GEOCODE_CACHE", str(tmp_path / "geo.db"))
    monkeypatch.delenv("RWH_JITTER", raising=False)
    monkeypatch.delenv("RWH_RANDOM_SEED", raising=False)
    monkeypatch.delenv("RWH_WATER_TARIFF", raising=False)


def run_json(capsys, extra=()):
    assert main(GUNTUR_ARGS + ["--json", *extra]) == 0
    return json.loads(capsys.readouterr().out)


def test_json_report(capsys):
    report = run_json(capsys)

    rec = report["recommendation"]
    assert rec["system_type"] == "injection_well_system"
    assert report["site"]["annual_rainfall_mm"] == 895
    assert report["site"]["groundwater_depth_m"] == 8.0
    assert report["rainfall"]["source"] == "Regional Normals"
    assert report["groundwater"]["region_class"] == "coastal"
    assert report["structure"]["estimated_cost"] == report["cost_breakdown"]["total"]
    assert "what_if" not in report


def test_no_jitter_is_repeatable(capsys):
    assert run_json(capsys) == run_json(capsys)


def test_what_if(capsys):
    report = run_json(capsys, ["--what-if", "--budget", "100000"])

    scenarios = report["what_if"]
    assert [s["scenario"] for s in scenarios] == [
        "current", "optimistic", "pessimistic", "expanded_roof", "compact",
    ]
    assert all(s["within_budget"] is False for s in scenarios)


def test_text_report(capsys):
    assert main(GUNTUR_ARGS + ["--what-if"]) == 0
    out = capsys.readouterr().out
    assert "RAINWATER HARVESTING REPORT: Guntur" in out
    assert "Recommended system: Injection Well System" in out
    assert "WHAT-IF SCENARIOS" in out


def test_invalid_input_exit_code(capsys):
    args = [a if a != "4" else "0" for a in GUNTUR_ARGS]
    assert main(args) == 2
    assert "number of dwellers" in capsys.readouterr().err


def test_parser_requires_core_fields():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--location", "Guntur"])
