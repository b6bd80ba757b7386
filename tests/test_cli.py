import json

import pytest

import angle_solver.__main__ as cli
import angle_solver.fixpoint as fixpoint
from angle_solver.theorems import Theorem


def isosceles_payload():
    return {
        "points": [{"id": "A"}, {"id": "B"}, {"id": "C"}],
        "edges": [{"p": ["A", "B"]}, {"p": ["B", "C"]}, {"p": ["C", "A"]}],
        "circles": [{"id": "A", "p": ["B", "C"]}],
        "angles": [
            {"id": "A", "p": ["B", "C"]},
            {"id": "B", "p": ["A", "C"], "v": "44"},
            {"id": "C", "p": ["B", "A"]},
        ],
    }


def write_diagram(tmp_path, payload):
    path = tmp_path / "diagram.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_main_prints_solved_angles(tmp_path, capsys):
    path = write_diagram(tmp_path, isosceles_payload())

    cli.main([path])

    out = capsys.readouterr().out
    assert "Warnings:\n  (none)" in out
    assert "Iterations: 2" in out
    assert "Solved: 3/3" in out
    assert "Triangles: 1 valid, 0 invalid, 0 incomplete" in out
    assert "  ∠BAC: 92.0" in out
    assert "[Isosceles Triangle]" in out


def test_main_json_output(tmp_path, capsys):
    path = write_diagram(tmp_path, isosceles_payload())

    cli.main([path, "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["angles"] == {"BAC": 92.0, "ABC": "44", "BCA": 44.0}
    assert payload["triangleReport"]["valid"] == 1


def test_main_dry_run(tmp_path, capsys):
    path = write_diagram(tmp_path, isosceles_payload())

    cli.main([path, "--dry-run"])

    out = capsys.readouterr().out
    assert "Solvable: True" in out
    assert "Reason: All angles solved, no contradictions" in out


def test_main_equation_cross_check(tmp_path, capsys):
    path = write_diagram(tmp_path, isosceles_payload())

    cli.main([path, "--equations", "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["equations"]["consistent"] is True
    assert payload["equationHistory"] == []


def test_main_lock_supplied_reports_contradiction(tmp_path, capsys):
    payload = isosceles_payload()
    for raw, value in zip(payload["angles"], ("90", "44", "44")):
        raw["v"] = value
    path = write_diagram(tmp_path, payload)

    cli.main([path, "--dry-run", "--lock-supplied", "--json"])

    verdict = json.loads(capsys.readouterr().out)
    assert verdict["solvable"] is False
    assert verdict["reason"] == "Contradictions found: △ABC: 178.0° ≠ 180°"


def test_main_rejects_invalid_diagram(tmp_path):
    payload = isosceles_payload()
    payload["angles"][0]["p"] = ["B", "B"]
    path = write_diagram(tmp_path, payload)

    with pytest.raises(SystemExit) as exc:
        cli.main([path])

    assert exc.value.code == 1


def test_main_rejects_malformed_json(tmp_path):
    path = write_diagram(tmp_path, {"angles": [{"id": "A", "p": ["B"]}]})

    with pytest.raises(SystemExit) as exc:
        cli.main([path])

    assert exc.value.code == 1


def test_main_exits_when_solve_fails(tmp_path, capsys, monkeypatch):
    def broken(ctx):
        raise RuntimeError("boom")

    monkeypatch.setattr(fixpoint, "THEOREMS", (Theorem("Broken", broken),))
    path = write_diagram(tmp_path, isosceles_payload())

    with pytest.raises(SystemExit) as exc:
        cli.main([path])

    assert exc.value.code == 1
    assert "Solve failed: boom" in capsys.readouterr().out
