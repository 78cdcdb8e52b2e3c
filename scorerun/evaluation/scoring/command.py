# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tester command construction and score extraction.

Both are pure string functions. The tester reports its result on stderr as
lines of the form `Score = <n>`; when it prints more than one, the last one
is the score. Testers that print a running score end with the final
value.
"""

from scorerun.evaluation.tasks.enumerator import parse_non_negative_int

SCRIPT_PLACEHOLDER = "{{script}}"
SOLVER_SCRIPT_PLACEHOLDER = "{{solver_script}}"
SCORE_PREFIX = "Score = "


def build_command(
    template: str,
    script: str | None = None,
    solver_script: str | None = None,
) -> list[str]:
    """
    Fill in the placeholders and split the command on whitespace.

    A placeholder whose value is unset is left in the command verbatim. An
    empty or blank template gives an empty list.
    """
    command = template
    if script is not None:
        command = command.replace(SCRIPT_PLACEHOLDER, script)
    if solver_script is not None:
        command = command.replace(SOLVER_SCRIPT_PLACEHOLDER, solver_script)
    return command.split()


def extract_score(diagnostics: str) -> int:
    """
    Pull the score out of the tester's stderr.

    Lines end at a newline only and lose a trailing carriage return, so a
    bare carriage return or form feed does not start a new line. Every line
    starting with exactly "Score = " is a candidate and the last one wins.
    A candidate whose value doesn't parse counts as 0. No candidate at all
    also gives 0.
    """
    score = 0
    for line in diagnostics.split("\n"):
        line = line.removesuffix("\r")
        if line.startswith(SCORE_PREFIX):
            value = parse_non_negative_int(line[len(SCORE_PREFIX):])
            score = value if value is not None else 0
    return score


def format_score(score: int) -> str:
    return str(score)
