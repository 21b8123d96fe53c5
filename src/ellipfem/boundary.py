from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from .datastructures import BoundaryConditionData, Mesh

log = logging.getLogger(__name__)


def processing_order(
    boundary_conditions: Mapping[str, BoundaryConditionData],
    order: Optional[Sequence[str]] = None,
) -> list[str]:
    """
    Order in which boundary conditions are applied.

    Names listed in ``order`` come first, in that sequence; the remaining names
    follow alphabetically. With ``order=None`` the order is alphabetical
    (east, north, south, west). For shared corner nodes the Dirichlet
    condition applied last wins.
    """
    head = [name for name in dict.fromkeys(order or ()) if name in boundary_conditions]
    tail = sorted(name for name in boundary_conditions if name not in head)
    return head + tail


def dirichlet_values(
    mesh: Mesh,
    boundary_conditions: Mapping[str, BoundaryConditionData],
    names: Sequence[str],
) -> dict[int, float]:
    """Prescribed value for every Dirichlet node, last-applied-wins at corners."""
    values: dict[int, float] = {}
    for name in names:
        bc = boundary_conditions[name]
        if not bc.is_dirichlet or name not in mesh.boundaries:
            continue
        for node in mesh.boundaries[name]:
            x, y = mesh.nodes[node]
            values[int(node)] = bc(float(x), float(y))
    return values


def dirbc(
    nodes: NDArray[np.int64],
    g: NDArray[np.float64],
    K: NDArray[np.float64],
    F: NDArray[np.float64],
) -> None:
    """Impose u[nodes] = g in place: lift into F, zero rows/cols, unit diagonal."""
    if len(nodes) == 0:
        return
    free = np.ones(len(F), dtype=bool)
    free[nodes] = False

    F[free] -= K[np.ix_(free, nodes)] @ g

    K[nodes, :] = 0.0
    K[:, nodes] = 0.0
    K[nodes, nodes] = 1.0
    F[nodes] = g


def neubc(
    mesh: Mesh,
    name: str,
    bc: BoundaryConditionData,
    F: NDArray[np.float64],
    constrained: NDArray[np.bool_],
) -> None:
    """Add h(x, y) to the load entry of each unconstrained node on the boundary."""
    for node in mesh.boundaries[name]:
        if constrained[node]:
            continue
        x, y = mesh.nodes[node]
        F[node] += bc(float(x), float(y))


def apply_boundary_conditions(
    K: NDArray[np.float64],
    F: NDArray[np.float64],
    mesh: Mesh,
    boundary_conditions: Mapping[str, BoundaryConditionData],
    order: Optional[Sequence[str]] = None,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Apply Dirichlet and Neumann conditions to the assembled system in place.

    Parameters
    ----------
    K, F : ndarray
        Global matrix and load vector, modified in place.
    mesh : Mesh
    boundary_conditions : mapping
        Boundary name -> BoundaryConditionData. Names the mesh does not have
        are skipped.
    order : sequence of str, optional
        Processing order, see ``processing_order``.

    Returns
    -------
    K, F : ndarray
    """
    names = processing_order(boundary_conditions, order)
    for name in names:
        if name not in mesh.boundaries:
            log.debug(f"Skipping boundary condition for unknown boundary {name!r}")

    values = dirichlet_values(mesh, boundary_conditions, names)
    nodes = np.fromiter(values.keys(), dtype=np.int64, count=len(values))
    g = np.fromiter(values.values(), dtype=np.float64, count=len(values))
    dirbc(nodes, g, K, F)

    constrained = np.zeros(mesh.n_nodes, dtype=bool)
    constrained[nodes] = True
    for name in names:
        bc = boundary_conditions[name]
        if bc.is_neumann and name in mesh.boundaries:
            neubc(mesh, name, bc, F, constrained)

    log.debug(
        f"Applied boundary conditions in order {names}: "
        f"{len(nodes)} Dirichlet nodes"
    )
    return K, F
