# scripture_refs/tests/test_scripts.py
"""
Tests for the command-line scripts.
"""

import io
import json
import os
import sys
import tempfile
from contextlib import redirect_stdout
from pathlib import Path

# Add repo root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from scripture_refs.scripts import detect_references
from scripture_refs.scripts.reverse_usx import process_file
from scripture_refs.services.usx import UsxNumberingError, load_default_rules
from scripture_refs.tests.test_reverse_usx import RULES_PATH, build_usx, markers, expected_markers


def test_process_file():
    """Test reversing files in place and into another directory."""
    print("\n=== Testing reverse_usx.process_file ===")
    rules = load_default_rules(RULES_PATH)

    with tempfile.TemporaryDirectory() as tmpdir:
        mal = Path(tmpdir) / "MAL.usx"
        mal.write_text(build_usx("MAL", [(1, [1]), (2, [1]), (3, [1, 19, 20, 21, 22, 23, 24])]),
                       encoding="utf-8")
        gen = Path(tmpdir) / "GEN.usx"
        gen_xml = build_usx("GEN", [(1, [1, 2])])
        gen.write_text(gen_xml, encoding="utf-8")

        assert process_file(str(mal), rules, check=True) == "valid"
        print("✓ check only validates")

        out_dir = Path(tmpdir) / "out"
        out_dir.mkdir()
        assert process_file(str(gen), rules, str(out_dir)) == "unchanged"
        assert (out_dir / "GEN.usx").read_text(encoding="utf-8") == gen_xml
        print("✓ unchanged files still copied to output dir")

        assert process_file(str(mal), rules) == "changed"
        assert markers(mal.read_text(encoding="utf-8")) == expected_markers(
            "MAL", [(1, [1]), (2, [1]), (3, [1]), (4, [1, 2, 3, 4, 5, 6])])
        assert process_file(str(mal), rules) == "unchanged"
        print("✓ in place, and only once")

        broken = Path(tmpdir) / "EXO.usx"
        broken.write_text(build_usx("EXO", [(1, [2, 1])]), encoding="utf-8")
        try:
            process_file(str(broken), rules, check=True)
            assert False, "Should have raised UsxNumberingError"
        except UsxNumberingError:
            pass
        print("✓ numbering errors propagate")


def _run_detect(argv: list, stdin: str = "") -> str:
    """Run the detect_references CLI, returning what it printed."""
    out = io.StringIO()
    saved_argv, saved_stdin = sys.argv, sys.stdin
    sys.argv = ["detect_references"] + argv
    sys.stdin = io.StringIO(stdin)
    try:
        with redirect_stdout(out):
            assert detect_references.main() == 0
    finally:
        sys.argv, sys.stdin = saved_argv, saved_stdin
    return out.getvalue()


def test_detect_references_cli():
    """Test the reference detection CLI on stdin and files."""
    print("\n=== Testing detect_references.main ===")

    output = _run_detect([], "Read John 3:16 and Ezekiel 1.")
    lines = output.splitlines()
    assert len(lines) == 2
    assert lines[0].split()[0] == "5" and lines[0].endswith("John 3:16")
    assert lines[1].endswith("Ezekiel 1")
    print("✓ stdin with readable output")

    output = _run_detect(["--abbreviate"], "Ezekiel 1")
    assert output.strip().endswith("Ezek 1")
    print("✓ --abbreviate")

    data = json.loads(_run_detect(["--json"], "Rom 8:28, 31"))
    assert [m["text"] for m in data] == ["Rom 8:28", "31"]
    assert data[1]["ref"]["serialized"] == "rom8:31"
    print("✓ --json")

    with tempfile.TemporaryDirectory() as tmpdir:
        names = Path(tmpdir) / "spa.json"
        names.write_text(json.dumps({"jhn": {"normal": "Juan", "abbrev": "Jn"}}), encoding="utf-8")
        text = Path(tmpdir) / "notas.txt"
        text.write_text("Lee Juan 3:16 y Jn 1:1", encoding="utf-8")

        output = _run_detect([str(text), "--names", str(names), "--translation", "spa_rvr"])
        assert [line.rsplit(" ", 2)[-2:] for line in output.splitlines()] == \
            [["Juan", "3:16"], ["Juan", "1:1"]]

        output = _run_detect([str(text), "--names", str(names), "--translation", "spa_rvr",
                              "--abbreviate", "--no-english"])
        assert output.splitlines()[0].endswith("Jn 3:16")

        output = _run_detect(["--names", str(names), "--translation", "spa_rvr", "--no-english"],
                             "John 3:16")
        assert output == ""
    print("✓ --names, --translation and --no-english")


def main():
    """Run all tests."""
    print("=" * 60)
    print("Scripts Test Suite")
    print("=" * 60)

    test_process_file()
    test_detect_references_cli()

    print("\n" + "=" * 60)
    print("ALL TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main()
