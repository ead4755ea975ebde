# SPDX-License-Identifier: MIT
"""Builders for installing and cleaning artifacts."""
