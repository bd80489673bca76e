"""Run the spec fixtures in-process; tests/run_tests.py runs the same set through `python -m xdrc`."""
from pathlib import Path

import pytest

from fixture_metadata import get_fixture_category, parse_fixture_metadata
from xdrc.compiler.cli import main

SPECS_DIR = Path(__file__).parent / "specs"
FIXTURES = sorted(SPECS_DIR.glob("test_*.x"))
EXIT_CODES = {"success": 0, "warning": 1, "error": 2}


@pytest.mark.parametrize("fixture", FIXTURES, ids=[f.stem for f in FIXTURES])
def test_fixture(fixture, tmp_path, capsys):
    out_path = tmp_path / f"{fixture.stem}.rs"
    metadata = parse_fixture_metadata(fixture)

    exit_code = main([str(fixture), "-o", str(out_path)])
    stderr = capsys.readouterr().err

    assert exit_code == EXIT_CODES[get_fixture_category(fixture)], stderr
    for code in (metadata.expect_error, metadata.expect_warning):
        if code:
            assert f"[{code}]" in stderr

    generated = out_path.read_text() if out_path.exists() else ""
    for text in metadata.expect_output_contains:
        assert text in generated
    for text in metadata.expect_output_absent:
        assert text not in generated


def test_fixture_set_covers_every_category():
    categories = {get_fixture_category(f) for f in FIXTURES}
    assert categories == {"success", "warning", "error"}
