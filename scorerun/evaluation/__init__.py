# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
scorerun evaluation pipeline.

Subsystems:
  - tasks: input case enumeration and the shared data models
  - scoring: tester invocation and score extraction
  - visualizer: visualizer invocation and artifact relocation
  - runner: the worker pool, result channel, consumer and progress
  - metrics: ordering and totals
  - reporting: HTML/JSON report and answer export
"""
