from __future__ import annotations

import logging
from typing import Mapping

import numpy as np
from numpy.typing import NDArray

from .datastructures import N_LOCAL_NODES, Mesh
from .elements import (
    element_convection,
    element_elliptic,
    element_geometry,
    element_load,
    element_reaction,
)
from .exceptions import InvalidParameterError
from .functions import CoefficientFunction

log = logging.getLogger(__name__)

COEFFICIENT_NAMES = ("a11", "a12", "a22", "b1", "b2", "c", "f")


def sample_at_centroids(
    func: CoefficientFunction, xc: NDArray[np.float64], yc: NDArray[np.float64]
) -> NDArray[np.float64]:
    """Evaluate a scalar coefficient function once per element centroid."""
    return np.fromiter(
        (func(float(x), float(y)) for x, y in zip(xc, yc)), dtype=np.float64, count=len(xc)
    )


def local_contributions(
    mesh: Mesh, coefficients: Mapping[str, CoefficientFunction]
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Compute element matrices and load vectors for every triangle.

    Parameters
    ----------
    mesh : Mesh
    coefficients : mapping
        Coefficient functions keyed by ``a11, a12, a22, b1, b2, c, f``.

    Returns
    -------
    Ke_all : ndarray (n_elem, 3, 3)
        Sum of elliptic, convection and reaction element matrices.
    fe_all : ndarray (n_elem, 3)
        Element load vectors.

    Raises
    ------
    InvalidParameterError
        If a coefficient is NaN or infinite at any centroid.
    """
    geom = element_geometry(*mesh.vertex_coords)
    vals = {
        name: sample_at_centroids(coefficients[name], geom.xc, geom.yc)
        for name in COEFFICIENT_NAMES
    }
    for name, values in vals.items():
        bad = ~np.isfinite(values)
        if bad.any():
            k = int(np.argmax(bad))
            raise InvalidParameterError(
                f"Coefficient {name} is not finite at {int(bad.sum())} element centroid(s), "
                f"first at ({geom.xc[k]:.6g}, {geom.yc[k]:.6g})"
            )

    Ke_all = (
        element_elliptic(geom, vals["a11"], vals["a12"], vals["a22"])
        + element_convection(geom, vals["b1"], vals["b2"])
        + element_reaction(geom, vals["c"])
    )
    fe_all = element_load(geom, vals["f"])
    return Ke_all, fe_all


def assemble_global_system(
    mesh: Mesh, coefficients: Mapping[str, CoefficientFunction]
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Assemble the dense global matrix K and load vector F.

    Contributions at shared nodes accumulate across elements.

    Returns
    -------
    K : ndarray (n_nodes, n_nodes)
    F : ndarray (n_nodes,)
    """
    n = mesh.n_nodes
    Ke_all, fe_all = local_contributions(mesh, coefficients)

    elems = mesh.elements
    rows = np.broadcast_to(elems[:, :, np.newaxis], (mesh.n_elements, N_LOCAL_NODES, N_LOCAL_NODES))
    cols = np.broadcast_to(elems[:, np.newaxis, :], (mesh.n_elements, N_LOCAL_NODES, N_LOCAL_NODES))

    K = np.zeros((n, n), dtype=np.float64)
    F = np.zeros(n, dtype=np.float64)
    np.add.at(K, (rows.ravel(), cols.ravel()), Ke_all.ravel())
    np.add.at(F, elems.ravel(), fe_all.ravel())

    log.debug(f"Assembled {n} x {n} dense system from {mesh.n_elements} elements")
    return K, F
