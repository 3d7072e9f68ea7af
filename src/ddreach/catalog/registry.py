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
System Catalog Registry
=======================

Maps catalog identifiers to entry builders and loads systems together
with their uncertainty sets.

Usage
-----
Entries register themselves with a decorator:

>>> @register_system("mySystem")
... def _my_system(ctx: BuildContext) -> CatalogEntry:
...     ...

and are loaded by identifier:

>>> loaded = load_dynamics("pedestrian", mode="standard")
>>> loaded.system.dims
(4, 4, 2)
>>> loaded.uncertainty.U.dim
4

The registry is a closed enumeration: there is no fallback for unknown
identifiers. Every build is checked before it is returned,

    dim(R0) == system.state_dim,   dim(U) == system.input_dim

and nothing is returned when a check fails.
"""

import logging
import operator
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, NamedTuple, Optional, Tuple

import numpy as np

from ddreach.config import DEFAULT_MODE, DEFAULT_SCALABLE_DIM, UNCERTAINTY_MODES, get_random_source
from ddreach.exceptions import DimensionMismatchError, UnknownSystemError, UnsupportedModeError
from ddreach.sets.zonotope import Zonotope, cartesian_product, make_zonotope
from ddreach.systems.base.system_model import SystemModel, as_parameter_vector
from ddreach.types.core import ArrayLike, ParameterOverride, ParameterVector, RandomSource

from .uncertainty import UncertaintyModes, generate

logger = logging.getLogger(__name__)


# ============================================================================
# Result Types
# ============================================================================


@dataclass(frozen=True, eq=False)
class UncertaintySpec:
    """
    Uncertainty sets bound to one model and one mode.

    Attributes
    ----------
    R0 : Zonotope
        Initial set (over the stacked output history for ARX models)
    U : Zonotope
        Input set; cartesian_product(W, V) when W and V are given
    W : Optional[Zonotope]
        Process-noise set, for entries that separate the noise channels
    V : Optional[Zonotope]
        Measurement-noise set (possibly zero-dimensional)
    """

    R0: Zonotope
    U: Zonotope
    W: Optional[Zonotope] = None
    V: Optional[Zonotope] = None

    @classmethod
    def from_noise(cls, R0: Zonotope, W: Zonotope, V: Zonotope) -> "UncertaintySpec":
        """Compose U = W × V and keep both factors."""
        return cls(R0=R0, U=cartesian_product(W, V), W=W, V=V)

    @property
    def separates_noise(self) -> bool:
        return self.W is not None and self.V is not None


class CatalogEntry(NamedTuple):
    """What an entry builder returns."""

    system: SystemModel
    uncertainty: UncertaintySpec
    p_true: Optional[ParameterVector] = None


class LoadedSystem(NamedTuple):
    """
    Result of load_dynamics().

    Attributes
    ----------
    system : SystemModel
        The discrete-time model
    uncertainty : UncertaintySpec
        R0, U (and W, V where the entry separates them)
    p_true : Optional[ParameterVector]
        Ground-truth parameter vector, None for entries without one
    """

    system: SystemModel
    uncertainty: UncertaintySpec
    p_true: Optional[ParameterVector]


# ============================================================================
# Build Context
# ============================================================================


@dataclass(frozen=True)
class BuildContext:
    """
    Request parameters handed to an entry builder.

    Attributes
    ----------
    identifier : str
        Catalog identifier being built
    mode : str
        Requested uncertainty mode
    params : Optional[np.ndarray]
        Parameter-vector override
    dim : Optional[int]
        Dimension override for scalable fixtures
    rng : RandomSource
        Random source for 'diag' / 'rand' draws
    """

    identifier: str
    mode: str
    params: Optional[np.ndarray]
    dim: Optional[int]
    rng: RandomSource

    def zonotope(self, modes: UncertaintyModes, dim: int) -> Zonotope:
        """
        Evaluate a mode record and check the resulting dimension.

        Raises:
            UnsupportedModeError: The record has no rule for self.mode
            DimensionMismatchError: The set is not dim-dimensional
        """
        center, generators = generate(self.mode, dim, modes, self.rng, self.identifier)
        Z = make_zonotope(center, generators)
        if Z.dim != dim:
            raise DimensionMismatchError(
                f"System '{self.identifier}' produced a {Z.dim}-dimensional set "
                f"where {dim} dimensions are required (mode '{self.mode}')"
            )
        return Z

    def parameters(self, default: ArrayLike) -> ParameterVector:
        """The parameter override if one was given, else default."""
        default = np.asarray(default, dtype=float)
        value = default if self.params is None else self.params
        return as_parameter_vector(value, default.shape[0], f"{self.identifier} parameters")

    def scalable_dim(self, default: int = DEFAULT_SCALABLE_DIM) -> int:
        return default if self.dim is None else self.dim


EntryBuilder = Callable[[BuildContext], CatalogEntry]

_REGISTRY: Dict[str, EntryBuilder] = {}
_SUPPORTED_MODES: Dict[str, Tuple[str, ...]] = {}


def register_system(
    identifier: str, modes: Iterable[str] = UNCERTAINTY_MODES
) -> Callable[[EntryBuilder], EntryBuilder]:
    """
    Decorator registering an entry builder under identifier.

    Args:
        identifier: Catalog identifier
        modes: Uncertainty modes the entry defines

    Raises:
        ValueError: If the identifier is already registered or a mode is
            not a known uncertainty mode
    """
    modes = tuple(modes)
    unknown = [mode for mode in modes if mode not in UNCERTAINTY_MODES]
    if unknown or DEFAULT_MODE not in modes:
        raise ValueError(
            f"System '{identifier}' must define '{DEFAULT_MODE}' and only known modes, got {modes}"
        )

    def decorator(builder: EntryBuilder) -> EntryBuilder:
        if identifier in _REGISTRY:
            raise ValueError(f"System '{identifier}' is already registered")
        _REGISTRY[identifier] = builder
        _SUPPORTED_MODES[identifier] = modes
        return builder

    return decorator


def available_systems() -> Tuple[str, ...]:
    """Registered identifiers, in registration order."""
    return tuple(_REGISTRY)


def supported_modes(identifier: str) -> Tuple[str, ...]:
    """
    Uncertainty modes defined by a catalog entry.

    Raises:
        UnknownSystemError: identifier is not registered
    """
    try:
        return _SUPPORTED_MODES[identifier]
    except KeyError:
        raise UnknownSystemError(identifier, _REGISTRY) from None


# ============================================================================
# Loader
# ============================================================================


def load_dynamics(
    identifier: str,
    mode: str = DEFAULT_MODE,
    params: ParameterOverride = None,
    dim: Optional[int] = None,
    rng: Optional[RandomSource] = None,
) -> LoadedSystem:
    """
    Build a catalog system and its uncertainty sets.

    Args:
        identifier: Catalog identifier (see available_systems())
        mode: 'standard' (default), 'diag' or 'rand'
        params: Parameter-vector override for entries with p_true; the
            dynamics use it, p_true stays the documented ground truth
        dim: Dimension override for scalable fixtures
        rng: Random source for 'diag' / 'rand'; defaults to the
            process-wide source of ddreach.config

    Returns:
        LoadedSystem(system, uncertainty, p_true)

    Raises:
        UnknownSystemError: identifier is not registered (checked first)
        UnsupportedModeError: Invalid mode, or mode not defined by the entry
        DimensionMismatchError: The built sets disagree with the model
        TypeError: dim is not an integer

    Examples:
        >>> sys, sets, p_true = load_dynamics("lorenz")
        >>> sets.V.dim
        0
    """
    try:
        builder = _REGISTRY[identifier]
    except KeyError:
        raise UnknownSystemError(identifier, _REGISTRY) from None
    if mode not in UNCERTAINTY_MODES:
        raise UnsupportedModeError(
            mode,
            identifier,
            f"Unsupported uncertainty mode '{mode}'. Choose from: {', '.join(UNCERTAINTY_MODES)}",
        )
    if mode not in _SUPPORTED_MODES[identifier]:
        raise UnsupportedModeError(mode, identifier)
    if dim is not None:
        dim = operator.index(dim)
        if dim < 1:
            raise DimensionMismatchError(f"Dimension override must be positive, got {dim}")

    ctx = BuildContext(
        identifier=identifier,
        mode=mode,
        params=None if params is None else np.asarray(params, dtype=float),
        dim=dim,
        rng=get_random_source() if rng is None else rng,
    )
    system, uncertainty, p_true = builder(ctx)

    if uncertainty.R0.dim != system.state_dim:
        raise DimensionMismatchError(
            f"System '{identifier}': R0 has dimension {uncertainty.R0.dim}, "
            f"expected state dimension {system.state_dim}"
        )
    if uncertainty.U.dim != system.input_dim:
        raise DimensionMismatchError(
            f"System '{identifier}': U has dimension {uncertainty.U.dim}, "
            f"expected input dimension {system.input_dim}"
        )

    if p_true is not None:
        p_true = as_parameter_vector(p_true, np.size(p_true), f"{identifier} p_true")

    logger.debug(
        "Loaded system '%s' (mode=%s, kind=%s, dims=%s)",
        identifier,
        mode,
        system.kind.value,
        system.dims,
    )
    return LoadedSystem(system, uncertainty, p_true)


__all__ = [
    "UncertaintySpec",
    "CatalogEntry",
    "LoadedSystem",
    "BuildContext",
    "register_system",
    "available_systems",
    "supported_modes",
    "load_dynamics",
]
