from __future__ import annotations

from typing import Callable

import numpy as np
from numpy.typing import NDArray

from .datastructures import Mesh
from .elements import element_geometry


def interior_nodes(mesh: Mesh) -> NDArray[np.int64]:
    """Indices of nodes not on any boundary."""
    on_boundary = np.zeros(mesh.n_nodes, dtype=bool)
    on_boundary[mesh.boundary_nodes()] = True
    return np.flatnonzero(~on_boundary)


def nodal_errors(
    mesh: Mesh, u_nodal: NDArray[np.float64], u_exact: Callable[[float, float], float]
) -> NDArray[np.float64]:
    """u_h - u_exact at every node."""
    u_ex = np.fromiter(
        (u_exact(float(x), float(y)) for x, y in mesh.nodes), dtype=np.float64, count=mesh.n_nodes
    )
    return np.asarray(u_nodal, dtype=np.float64) - u_ex


def linf_error(
    mesh: Mesh,
    u_nodal: NDArray[np.float64],
    u_exact: Callable[[float, float], float],
    interior_only: bool = False,
) -> float:
    """Maximum nodal error, optionally over interior nodes only."""
    e = nodal_errors(mesh, u_nodal, u_exact)
    if interior_only:
        e = e[interior_nodes(mesh)]
    if len(e) == 0:
        return 0.0
    return float(np.max(np.abs(e)))


def discrete_l2_error(
    mesh: Mesh, u_nodal: NDArray[np.float64], u_exact: Callable[[float, float], float]
) -> float:
    """
    L2 norm of the piecewise-linear interpolant of the nodal error.

    Exact integration over each triangle:
    ∫ e^2 = area/6 * (e1^2 + e2^2 + e3^2 + e1 e2 + e2 e3 + e3 e1).
    """
    e = nodal_errors(mesh, u_nodal, u_exact)
    geom = element_geometry(*mesh.vertex_coords)

    e1 = e[mesh.elements[:, 0]]
    e2 = e[mesh.elements[:, 1]]
    e3 = e[mesh.elements[:, 2]]
    element_errors_sq = (geom.area / 6.0) * (
        e1**2 + e2**2 + e3**2 + e1 * e2 + e2 * e3 + e3 * e1
    )
    return float(np.sqrt(np.sum(element_errors_sq)))
