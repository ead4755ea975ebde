# SPDX-License-Identifier: MIT
"""Configuration: platform detection, variables, project file, probes."""
