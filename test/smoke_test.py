"""Smoke test for GroupQuery CLI.

Run:
  python test/smoke_test.py

Runs the CLI against the shipped default config and sample directory and
checks that a typical query compiles into the expected predicate tree.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from click.testing import CliRunner


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
sys.path.insert(0, str(SRC_DIR))


def main() -> int:
    from GroupQuery.cli import cli

    os.chdir(REPO_ROOT)
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["parse", 'inname:dev member:builder is:visibletoall limit:5'],
        catch_exceptions=False,
    )

    output = result.output
    assert result.exit_code == 0, output
    assert "(member:1002 OR member:1003)" in output, output
    assert "Limit: 5" in output, output
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
