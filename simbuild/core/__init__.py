# SPDX-License-Identifier: MIT
"""Core build pipeline: flags, gate, planner, executor."""
