# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for scorerun.

Every config section gets its own frozen pydantic model. Frozen means once you
create it, you cannot mutate it; a run's configuration is fixed before the
first task is scored.

The models use pydantic v2's ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked

A complete file looks like:

    global:
      config_version: "1.0.0"
    paths:
      input_dir: tools/in
      output_dir: out
      visualizer_dir: visualizations
      html_output: results.html
    tester:
      command: "cargo run -r --bin tester {{script}} {{solver_script}}"
      script: "python3"
      solver_script: "solver.py"
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GlobalConfig(BaseModel):
    """Cross-cutting settings: schema version and observability."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )


class PathsConfig(BaseModel):
    """
    Where inputs come from and where every artifact of a run lands.

    Relative paths are resolved against the working directory the command
    was started from, same as the external tester and visualizer see them.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    input_dir: str = Field(description="Directory holding the input cases")
    input_extension: str = Field(
        default=".txt",
        description="Only files with this suffix are treated as input cases",
    )
    output_dir: str = Field(
        default="out",
        description="Tester stdout for each case is persisted here, one file per input",
    )
    visualizer_dir: str = Field(
        default="visualizations",
        description="Relocated visualizer artifacts land here",
    )
    html_output: str = Field(
        default="results.html",
        description="Path of the aggregated HTML report",
    )
    answers_dir: Optional[str] = Field(
        default=None,
        description="If set, every file of output_dir is copied here after the run",
    )

    @field_validator("input_extension")
    @classmethod
    def _extension_has_dot(cls, value: str) -> str:
        if not value.startswith(".") or len(value) < 2:
            raise ValueError(f"input_extension must look like '.txt', got '{value}'")
        return value


class TesterConfig(BaseModel):
    """
    The external scoring program.

    `command` is a template: `{{script}}` and `{{solver_script}}` are replaced
    by the values below (when set) and the result is split on whitespace.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    command: str = Field(description="Tester command template")
    script: Optional[str] = Field(
        default=None,
        description="Substituted for {{script}} in the command template",
    )
    solver_script: Optional[str] = Field(
        default=None,
        description="Substituted for {{solver_script}} in the command template",
    )
    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Kill the tester after this many seconds; unset waits forever",
    )


class VisualizerConfig(BaseModel):
    """The external visualization program and the artifact it leaves behind."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    enabled: bool = Field(
        default=True,
        description="Set to false to skip visualization entirely",
    )
    command: str = Field(
        default="./target/release/vis",
        description="Visualizer executable; input and output paths are appended",
    )
    artifact_name: str = Field(
        default="vis.html",
        description="File the visualizer writes into its working directory",
    )
    artifact_extension: str = Field(
        default=".html",
        description="Extension given to the relocated artifact",
    )
    working_dir: str = Field(
        default=".",
        description="Working directory the visualizer runs in",
    )
    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Kill the visualizer after this many seconds; unset waits forever",
    )


class ParallelConfig(BaseModel):
    """Degree of parallelism for the scoring stage."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    num_threads: Optional[int] = Field(
        default=None,
        ge=0,
        description="Concurrent tester processes; unset or 0 means one per CPU",
    )


class ScorerunConfig(BaseModel):
    """
    Top-level config container.

    `global`, `paths` and `tester` are required; the visualizer and
    parallelism sections fall back to their defaults when omitted.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    paths: PathsConfig
    tester: TesterConfig
    visualizer: VisualizerConfig = Field(default_factory=VisualizerConfig)
    parallel: ParallelConfig = Field(default_factory=ParallelConfig)
