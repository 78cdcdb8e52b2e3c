# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for scorerun tests.

The external tester and visualizer are replaced by tiny shell scripts
written into the test's temp directory. They follow the same contract as
the real programs: the tester reads the case on stdin and reports
`Score = <n>` on stderr, the visualizer writes vis.html into its working
directory.
"""

import stat
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

# Echoes the input as the answer and reports the input's first line as score.
SCORING_TESTER = """\
#!/bin/sh
value=$(head -n 1)
echo "answer for $value"
echo "Score = $value" >&2
"""

# Writes an artifact that records which files it was given.
WRITING_VISUALIZER = """\
#!/bin/sh
printf '<html>%s %s</html>\\n' "$1" "$2" > vis.html
"""


@pytest.fixture()
def make_script(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory that writes an executable shell script and returns its path."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)

    def _make(name: str, body: str) -> Path:
        script = bin_dir / name
        script.write_text(textwrap.dedent(body), encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture()
def input_dir(tmp_path: Path) -> Path:
    """Three cases whose tester scores are 10, 20 and 30."""
    directory = tmp_path / "in"
    directory.mkdir()
    for name, value in (("0.txt", 10), ("1.txt", 20), ("2.txt", 30)):
        (directory / name).write_text(f"{value}\n", encoding="utf-8")
    return directory


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """
    Create a minimal valid config YAML file in a temp directory.

    This is the smallest config that passes schema validation.
    Tests that need specific config values should write their own files.
    """
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          log_level: "DEBUG"
        paths:
          input_dir: "in"
        tester:
          command: "./tester {{script}}"
          script: "solver.py"
    """)
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """A config file that's valid YAML but fails schema validation (missing tester)."""
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
        paths:
          input_dir: "in"
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file


@pytest.fixture()
def scoring_tester(make_script: Callable[[str, str], Path]) -> Path:
    return make_script("tester", SCORING_TESTER)


@pytest.fixture()
def writing_visualizer(make_script: Callable[[str, str], Path]) -> Path:
    return make_script("vis", WRITING_VISUALIZER)
