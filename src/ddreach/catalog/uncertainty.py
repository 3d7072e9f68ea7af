# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Uncertainty-mode generation for catalog entries.

Every uncertainty variable of an entry (R0, U, W, V) carries one
UncertaintyModes record naming a set rule per mode:

    UncertaintyModes
    ├── standard   (mandatory)  usually a FixedSet literal
    ├── diag       (optional)   DiagonalDraw or a FixedSet literal
    └── rand       (optional)   DenseDraw or a FixedSet literal

generate(mode, dim, modes, rng) looks the rule up and evaluates it. A
missing rule means the entry does not define that mode.

Set Rules:
---------
FixedSet(c, G)
    Literal center and generators; rng is never touched.
DiagonalDraw(a, b)
    c = a · N(0, 1)ⁿ,  G = diag(b · U[0, 1)ⁿ)
DenseDraw(a, b, g)
    c = a · N(0, 1)ⁿ,  G = b · U[0, 1)ⁿˣᵍ   (g = n by default)

Draws always take the center first and the generators second, so a
seeded generator reproduces the same sets call after call.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ddreach.config import UNCERTAINTY_MODES
from ddreach.exceptions import UnsupportedModeError
from ddreach.types.core import ArrayLike, RandomSource, SetParameters

logger = logging.getLogger(__name__)


# ============================================================================
# Set Rules
# ============================================================================


class SetRule(ABC):
    """A recipe producing (center, generators) for a requested dimension."""

    @abstractmethod
    def draw(self, dim: int, rng: Optional[RandomSource]) -> SetParameters:
        pass


@dataclass(frozen=True)
class FixedSet(SetRule):
    """
    Hand-specified literal set.

    The requested dimension is not checked here; the catalog entry
    validates the resulting zonotope against its model.

    Attributes
    ----------
    center : ArrayLike
        Literal center (scalar or vector)
    generators : Optional[ArrayLike]
        Literal generator matrix, None for a point
    """

    center: ArrayLike
    generators: Optional[ArrayLike] = None

    def draw(self, dim: int, rng: Optional[RandomSource]) -> SetParameters:
        center = np.atleast_1d(np.array(self.center, dtype=float))
        if self.generators is None:
            return center, np.zeros((center.shape[0], 0))
        return center, np.array(self.generators, dtype=float)


@dataclass(frozen=True)
class DiagonalDraw(SetRule):
    """Random center and random axis-aligned (diagonal) generators."""

    center_scale: float = 0.1
    generator_scale: float = 0.1

    def draw(self, dim: int, rng: Optional[RandomSource]) -> SetParameters:
        center = self.center_scale * np.asarray(rng.standard_normal(dim), dtype=float)
        generators = np.diag(self.generator_scale * np.asarray(rng.random(dim), dtype=float))
        return center, generators


@dataclass(frozen=True)
class DenseDraw(SetRule):
    """Random center and a dense, non-negative random generator matrix."""

    center_scale: float = 1.0
    generator_scale: float = 1.0
    n_generators: Optional[int] = None

    def draw(self, dim: int, rng: Optional[RandomSource]) -> SetParameters:
        n_generators = dim if self.n_generators is None else self.n_generators
        center = self.center_scale * np.asarray(rng.standard_normal(dim), dtype=float)
        generators = self.generator_scale * np.asarray(
            rng.random((dim, n_generators)), dtype=float
        )
        return center, generators


# ============================================================================
# Mode Records
# ============================================================================


@dataclass(frozen=True)
class UncertaintyModes:
    """
    One set rule per uncertainty mode.

    Attributes
    ----------
    standard : SetRule
        Rule for 'standard' (required)
    diag : Optional[SetRule]
        Rule for 'diag', None if the entry does not define it
    rand : Optional[SetRule]
        Rule for 'rand', None if the entry does not define it

    Examples
    --------
    >>> modes = UncertaintyModes.with_draws(FixedSet(np.zeros(2), 0.2 * np.eye(2)))
    >>> modes.defined_modes()
    ('standard', 'diag', 'rand')
    """

    standard: SetRule
    diag: Optional[SetRule] = None
    rand: Optional[SetRule] = None

    def __post_init__(self):
        if self.standard is None:
            raise ValueError("The 'standard' rule is mandatory")
        for mode in UNCERTAINTY_MODES:
            rule = getattr(self, mode)
            if rule is not None and not isinstance(rule, SetRule):
                raise TypeError(
                    f"Rule for mode '{mode}' must be a SetRule, got {type(rule).__name__}"
                )

    @classmethod
    def fixed(cls, rule: SetRule) -> "UncertaintyModes":
        """Same rule for every mode (fixtures whose sets do not vary)."""
        return cls(standard=rule, diag=rule, rand=rule)

    @classmethod
    def with_draws(
        cls,
        standard: SetRule,
        diag: SetRule = DiagonalDraw(0.1, 0.1),
        rand: SetRule = DenseDraw(1.0, 1.0),
    ) -> "UncertaintyModes":
        """A literal 'standard' set plus the usual random 'diag' / 'rand' draws."""
        return cls(standard=standard, diag=diag, rand=rand)

    def rule_for(self, mode: str) -> Optional[SetRule]:
        if mode not in UNCERTAINTY_MODES:
            raise UnsupportedModeError(mode)
        return getattr(self, mode)

    def defined_modes(self):
        return tuple(mode for mode in UNCERTAINTY_MODES if getattr(self, mode) is not None)


def generate(
    mode: str,
    dim: int,
    modes: UncertaintyModes,
    rng: Optional[RandomSource],
    identifier: Optional[str] = None,
) -> SetParameters:
    """
    Produce (center, generators) for one uncertainty variable.

    Args:
        mode: 'standard', 'diag' or 'rand'
        dim: Dimension of the variable (used by random draws)
        modes: The variable's mode record
        rng: Random source for the draws; unused by FixedSet rules
        identifier: Catalog identifier, only used in error messages

    Returns:
        (center, generators); shapes are not validated against dim

    Raises:
        UnsupportedModeError: Invalid mode string, or no rule for the mode
    """
    rule = modes.rule_for(mode)
    if rule is None:
        raise UnsupportedModeError(mode, identifier)
    if not isinstance(rule, FixedSet) and rng is None:
        raise ValueError(f"Mode '{mode}' draws random sets and needs a random source")

    center, generators = rule.draw(dim, rng)
    logger.debug(
        "Generated %s set (mode=%s, dim=%d, generators=%s)",
        type(rule).__name__,
        mode,
        dim,
        generators.shape,
    )
    return center, generators


__all__ = [
    "SetRule",
    "FixedSet",
    "DiagonalDraw",
    "DenseDraw",
    "UncertaintyModes",
    "generate",
]
