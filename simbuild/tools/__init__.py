# SPDX-License-Identifier: MIT
"""Toolchain protocol types."""
