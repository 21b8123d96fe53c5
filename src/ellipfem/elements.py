"""Element-level contributions for P1 triangles.

All functions work on a batch of elements at once: coordinates and sampled
coefficients are arrays of shape (n_elem,), local matrices come back with
shape (n_elem, 3, 3) and local load vectors with shape (n_elem, 3).
Coefficients are sampled once per element at the centroid.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

# Mass-matrix pattern of the linear triangle, scaled by area/12
_MASS_PATTERN = np.array([[2.0, 1.0, 1.0], [1.0, 2.0, 1.0], [1.0, 1.0, 2.0]])


@dataclass
class ElementGeometry:
    """Area, centroid and shape-function gradients of a batch of triangles.

    Attributes
    ----------
    area : ndarray (n_elem,)
        Absolute element area.
    signed_area : ndarray (n_elem,)
        Oriented area, positive for counter-clockwise vertex order.
    xc, yc : ndarray (n_elem,)
        Centroid coordinates.
    dNdx, dNdy : ndarray (n_elem, 3)
        Constant gradients of the three hat functions.
    """

    area: NDArray[np.float64]
    signed_area: NDArray[np.float64]
    xc: NDArray[np.float64]
    yc: NDArray[np.float64]
    dNdx: NDArray[np.float64]
    dNdy: NDArray[np.float64]


def element_geometry(
    x1: NDArray[np.float64],
    y1: NDArray[np.float64],
    x2: NDArray[np.float64],
    y2: NDArray[np.float64],
    x3: NDArray[np.float64],
    y3: NDArray[np.float64],
) -> ElementGeometry:
    """
    Compute geometry of the affine map for each triangle.

    The gradients use the signed area, so they are correct for either vertex
    orientation; integration uses the absolute area.

    Returns
    -------
    ElementGeometry
    """
    signed = 0.5 * ((x2 - x1) * (y3 - y1) - (x3 - x1) * (y2 - y1))
    detJ = 2.0 * signed

    dNdx = np.empty((len(signed), 3), dtype=np.float64)
    dNdx[:, 0] = (y2 - y3) / detJ
    dNdx[:, 1] = (y3 - y1) / detJ
    dNdx[:, 2] = (y1 - y2) / detJ

    dNdy = np.empty((len(signed), 3), dtype=np.float64)
    dNdy[:, 0] = (x3 - x2) / detJ
    dNdy[:, 1] = (x1 - x3) / detJ
    dNdy[:, 2] = (x2 - x1) / detJ

    return ElementGeometry(
        area=np.abs(signed),
        signed_area=signed,
        xc=(x1 + x2 + x3) / 3.0,
        yc=(y1 + y2 + y3) / 3.0,
        dNdx=dNdx,
        dNdy=dNdy,
    )


def element_elliptic(
    geom: ElementGeometry,
    a11: NDArray[np.float64],
    a12: NDArray[np.float64],
    a22: NDArray[np.float64],
) -> NDArray[np.float64]:
    """
    Element matrix for the diffusion term -div(A grad u).

    Weak form contribution: ∫ grad(N_i)^T A grad(N_j) dx, with A = [[a11, a12], [a12, a22]]
    constant over the element.

    Returns
    -------
    Ke : ndarray (n_elem, 3, 3)
    """
    dx, dy = geom.dNdx, geom.dNdy
    Ke = (
        a11[:, None, None] * dx[:, :, None] * dx[:, None, :]
        + a12[:, None, None] * dx[:, :, None] * dy[:, None, :]
        + a12[:, None, None] * dy[:, :, None] * dx[:, None, :]
        + a22[:, None, None] * dy[:, :, None] * dy[:, None, :]
    )
    return geom.area[:, None, None] * Ke


def element_convection(
    geom: ElementGeometry,
    b1: NDArray[np.float64],
    b2: NDArray[np.float64],
) -> NDArray[np.float64]:
    """
    Element matrix for the convection term b . grad u.

    Simplified discretization: C[i, j] = (b1 dN_i/dx + b2 dN_i/dy) * (1/3) * area/6,
    i.e. the variation of N_j over the element is replaced by the constant 1/3.

    Returns
    -------
    Ce : ndarray (n_elem, 3, 3)
    """
    b_dot_grad = b1[:, None] * geom.dNdx + b2[:, None] * geom.dNdy
    row = b_dot_grad * (1.0 / 3.0) * (geom.area / 6.0)[:, None]
    return np.repeat(row[:, :, None], 3, axis=2)


def element_reaction(geom: ElementGeometry, c: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Element mass matrix for the reaction term c * u.

    Weak form contribution: c ∫ N_i N_j dx = c * area/12 * [[2,1,1],[1,2,1],[1,1,2]],
    zero where c vanishes.

    Returns
    -------
    Re : ndarray (n_elem, 3, 3)
    """
    factor = np.where(c != 0.0, c * geom.area / 12.0, 0.0)
    return factor[:, None, None] * _MASS_PATTERN[None, :, :]


def element_load(geom: ElementGeometry, f: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Element load vector ∫ f N_i dx, lumped with one centroid sample: f * area/3.

    Returns
    -------
    fe : ndarray (n_elem, 3)
    """
    return np.repeat((f * geom.area / 3.0)[:, None], 3, axis=1)
