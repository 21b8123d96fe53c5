from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

import numpy as np
from numpy.typing import NDArray

from .exceptions import InvalidParameterError
from .functions import CoefficientFunction, parse_function

# Boundary names of the rectangular domain
WEST, EAST, SOUTH, NORTH = "west", "east", "south", "north"
BOUNDARY_NAMES = (WEST, EAST, SOUTH, NORTH)

# Boundary condition kinds
DIRICHLET = "dirichlet"
NEUMANN = "neumann"
BC_KINDS = (DIRICHLET, NEUMANN)

# Element configuration (P1 triangles)
N_LOCAL_NODES = 3


def _readonly(a: NDArray) -> NDArray:
    a = np.array(a, copy=True)
    a.flags.writeable = False
    return a


@dataclass(frozen=True, eq=False)
class Mesh:
    """Structured triangular mesh of [0, Lx] x [0, Ly] for P1 elements.

    Attributes
    ----------
    nodes : ndarray (n_nodes, 2)
        Node coordinates, row-major over the grid (index = row*Nx + col).
    elements : ndarray (n_elements, 3)
        Element-to-vertex connectivity (0-based).
    boundaries : mapping of str to ndarray
        Node indices on each of ``west``, ``east``, ``south``, ``north``.
        Read-only, like the arrays.
    """

    nodes: NDArray[np.float64]
    elements: NDArray[np.int64]
    boundaries: Mapping[str, NDArray[np.int64]]

    # Generating parameters, kept for downstream consumers (renderers, reports)
    Lx: float = 0.0
    Ly: float = 0.0
    Nx: int = 0
    Ny: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", _readonly(np.asarray(self.nodes, dtype=np.float64)))
        object.__setattr__(self, "elements", _readonly(np.asarray(self.elements, dtype=np.int64)))
        object.__setattr__(
            self,
            "boundaries",
            MappingProxyType(
                {name: _readonly(np.asarray(idx, dtype=np.int64)) for name, idx in self.boundaries.items()}
            ),
        )

    @property
    def n_nodes(self) -> int:
        return len(self.nodes)

    @property
    def n_elements(self) -> int:
        return len(self.elements)

    @property
    def x(self) -> NDArray[np.float64]:
        return self.nodes[:, 0]

    @property
    def y(self) -> NDArray[np.float64]:
        return self.nodes[:, 1]

    @property
    def vertex_coords(
        self,
    ) -> tuple[
        NDArray[np.float64],
        NDArray[np.float64],
        NDArray[np.float64],
        NDArray[np.float64],
        NDArray[np.float64],
        NDArray[np.float64],
    ]:
        """Return (x1, y1, x2, y2, x3, y3) coordinates for all elements."""
        v1, v2, v3 = self.elements[:, 0], self.elements[:, 1], self.elements[:, 2]
        return (
            self.x[v1],
            self.y[v1],
            self.x[v2],
            self.y[v2],
            self.x[v3],
            self.y[v3],
        )

    def boundary_nodes(self) -> NDArray[np.int64]:
        """All node indices on any boundary, sorted and unique."""
        if not self.boundaries:
            return np.array([], dtype=np.int64)
        return np.unique(np.concatenate(list(self.boundaries.values())))


@dataclass(frozen=True)
class BoundaryConditionData:
    """Boundary condition on one named boundary.

    ``function`` takes precedence over the constant ``value`` when both are set.
    """

    kind: str
    function: Optional[CoefficientFunction] = None
    value: float = 0.0

    def __post_init__(self) -> None:
        if self.kind not in BC_KINDS:
            raise InvalidParameterError(
                f"Unknown boundary condition kind {self.kind!r}; expected one of {BC_KINDS}"
            )

    def __call__(self, x: float, y: float) -> float:
        if self.function is not None:
            return float(self.function(x, y))
        return float(self.value)

    @classmethod
    def from_value(cls, kind: str, value) -> BoundaryConditionData:
        if isinstance(value, str):
            return cls(kind, function=parse_function(value))
        if callable(value):
            return cls(kind, function=value)
        return cls(kind, value=float(value))

    @classmethod
    def dirichlet(cls, value=0.0) -> BoundaryConditionData:
        """u = g on the boundary; ``value`` is a number, a callable or expression text."""
        return cls.from_value(DIRICHLET, value)

    @classmethod
    def neumann(cls, value=0.0) -> BoundaryConditionData:
        """Additive load contribution h on the boundary nodes."""
        return cls.from_value(NEUMANN, value)

    @property
    def is_dirichlet(self) -> bool:
        return self.kind == DIRICHLET

    @property
    def is_neumann(self) -> bool:
        return self.kind == NEUMANN
