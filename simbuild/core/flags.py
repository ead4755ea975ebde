# SPDX-License-Identifier: MIT
"""Compiler flag sets built from named layers.

A CompilerFlagSet holds one ordered list of flags per layer
(optimization, warnings, capability, debug, includes, defines).
Layers are rendered in a fixed order so the same inputs always
produce the same command line.

Some flags take their argument as a separate token (e.g.
``-Xpreprocessor -fopenmp``). When de-duplicating, the flag and its
argument are treated as one unit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

LAYERS: tuple[str, ...] = (
    "optimization",
    "warnings",
    "capability",
    "debug",
    "includes",
    "defines",
)


def deduplicate_flags(
    flags: Iterable[str], separated_arg_flags: frozenset[str] = frozenset()
) -> list[str]:
    """De-duplicate flags, keeping flag+argument pairs together.

    First occurrence wins and order is preserved.

    Examples:
        >>> deduplicate_flags(["-O3", "-Wall", "-O3"])
        ['-O3', '-Wall']

        >>> deduplicate_flags(
        ...     ["-Xpreprocessor", "-fopenmp", "-Xpreprocessor", "-fopenmp"],
        ...     frozenset(["-Xpreprocessor"]),
        ... )
        ['-Xpreprocessor', '-fopenmp']
    """
    tokens = list(flags)
    result: list[str] = []
    seen: set[str | tuple[str, str]] = set()
    i = 0

    while i < len(tokens):
        flag = tokens[i]
        if flag in separated_arg_flags and i + 1 < len(tokens):
            pair = (flag, tokens[i + 1])
            if pair not in seen:
                seen.add(pair)
                result.extend(pair)
            i += 2
        else:
            if flag not in seen:
                seen.add(flag)
                result.append(flag)
            i += 1

    return result


class CompilerFlagSet:
    """Ordered collection of flags organised in named layers.

    Example:
        flags = CompilerFlagSet()
        flags.add("optimization", "-O3", "-march=native")
        flags.add("defines", "-DNDEBUG")
        flags.flags()  # ['-O3', '-march=native', '-DNDEBUG']
    """

    def __init__(self, separated_arg_flags: frozenset[str] = frozenset()) -> None:
        self._separated_arg_flags = separated_arg_flags
        self._layers: dict[str, list[str]] = {name: [] for name in LAYERS}

    def add(self, layer: str, *flags: str) -> None:
        """Append flags to a layer, skipping ones already present."""
        if layer not in self._layers:
            raise KeyError(f"unknown flag layer: {layer!r}")
        self._layers[layer] = deduplicate_flags(
            [*self._layers[layer], *flags], self._separated_arg_flags
        )

    def layer(self, name: str) -> list[str]:
        """Return a copy of one layer's flags."""
        return list(self._layers[name])

    def flags(self) -> list[str]:
        """Render all layers in the fixed layer order."""
        rendered: list[str] = []
        for name in LAYERS:
            rendered.extend(self._layers[name])
        return rendered

    def contains(self, flag: str) -> bool:
        return any(flag in flags for flags in self._layers.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompilerFlagSet):
            return NotImplemented
        return self._layers == other._layers

    def __repr__(self) -> str:
        layers = ", ".join(
            f"{name}={flags!r}" for name, flags in self._layers.items() if flags
        )
        return f"CompilerFlagSet({layers})"
