# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
scorerun: batch scoring and visualization runner for solver programs.

Feeds every input case to an external tester, collects the reported score,
renders each case with an external visualizer and writes one aggregated
report for the whole run.
"""

__version__ = "0.1.0"
