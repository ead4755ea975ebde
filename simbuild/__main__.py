# SPDX-License-Identifier: MIT
"""Allow running simbuild as ``python -m simbuild``."""

import sys

from simbuild.cli import main

sys.exit(main())
