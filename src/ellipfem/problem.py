"""Problems given as text parameters, as collected by a front end.

Architecture: Params vs Results

             Params (input/config)         Results (output)
             ─────────────────────         ────────────────
Problem      ProblemParameters             SolveResult
             Lx, Ly, Nx, Ny, a11..f         mesh, solution, wall time
Boundary     BoundarySpec                  -
             kind, value
Summary      -                             SolutionSummary
                                           n_nodes, min, max, mean
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional, Union

import numpy as np
from numpy.typing import NDArray
from omegaconf import DictConfig, OmegaConf

from .datastructures import BOUNDARY_NAMES, DIRICHLET, BoundaryConditionData, Mesh
from .mesh import MeshGenerator
from .solver import EllipticFEMSolver

log = logging.getLogger(__name__)


# ============================================================================
# Parameters (Input Configuration)
# ============================================================================


@dataclass
class BoundarySpec:
    """Boundary condition as entered by the user: a kind and a value or expression."""

    kind: str = DIRICHLET
    value: Union[str, float] = 0.0

    def to_condition(self) -> BoundaryConditionData:
        return BoundaryConditionData.from_value(self.kind.lower(), self.value)


def _default_boundary() -> dict[str, BoundarySpec]:
    return {name: BoundarySpec() for name in BOUNDARY_NAMES}


@dataclass
class ProblemParameters:
    """Domain, resolution, coefficient expressions and boundary conditions.

    Defaults give the Poisson problem -Δu = 1 on the unit square with u = 0
    on the whole boundary.
    """

    Lx: float = 1.0
    Ly: float = 1.0
    Nx: int = 10
    Ny: int = 10
    a11: str = "1"
    a12: str = "0"
    a22: str = "1"
    b1: str = "0"
    b2: str = "0"
    c: str = "0"
    f: str = "1"
    boundary: dict[str, BoundarySpec] = field(default_factory=_default_boundary)
    boundary_order: Optional[list[str]] = None

    @property
    def coefficient_texts(self) -> dict[str, str]:
        return {
            "a11": self.a11,
            "a12": self.a12,
            "a22": self.a22,
            "b1": self.b1,
            "b2": self.b2,
            "c": self.c,
            "f": self.f,
        }

    def boundary_conditions(self) -> dict[str, BoundaryConditionData]:
        return {name: spec.to_condition() for name, spec in self.boundary.items()}

    @classmethod
    def from_config(cls, cfg: Union[DictConfig, Mapping[str, Any]]) -> ProblemParameters:
        """
        Build parameters from a hydra/OmegaConf config or a plain mapping.

        Expected layout::

            domain: {Lx, Ly}
            mesh: {Nx, Ny}
            coefficients: {a11, a12, a22, b1, b2, c, f}
            boundary: {west: {kind, value}, ...}
            boundary_order: [...]   # optional
        """
        if isinstance(cfg, DictConfig):
            cfg = OmegaConf.to_container(cfg, resolve=True)

        domain = cfg.get("domain") or {}
        mesh = cfg.get("mesh") or {}
        coefficients = {
            k: "" if v is None else str(v) for k, v in (cfg.get("coefficients") or {}).items()
        }

        kwargs: dict[str, Any] = dict(coefficients)
        for key in ("Lx", "Ly"):
            if key in domain:
                kwargs[key] = float(domain[key])
        for key in ("Nx", "Ny"):
            if key in mesh:
                kwargs[key] = int(mesh[key])
        if cfg.get("boundary") is not None:
            kwargs["boundary"] = {
                name: BoundarySpec(**spec) for name, spec in cfg["boundary"].items()
            }
        if cfg.get("boundary_order") is not None:
            kwargs["boundary_order"] = list(cfg["boundary_order"])
        return cls(**kwargs)


# ============================================================================
# Results (Output)
# ============================================================================


@dataclass
class SolutionSummary:
    """Headline numbers of a computed solution."""

    n_nodes: int = 0
    n_elements: int = 0
    u_min: float = 0.0
    u_max: float = 0.0
    u_mean: float = 0.0

    @classmethod
    def from_solution(cls, mesh: Mesh, u: NDArray[np.float64]) -> SolutionSummary:
        u = np.asarray(u)
        if len(u) == 0:
            return cls(n_nodes=mesh.n_nodes, n_elements=mesh.n_elements)
        return cls(
            n_nodes=len(u),
            n_elements=mesh.n_elements,
            u_min=float(np.min(u)),
            u_max=float(np.max(u)),
            u_mean=float(np.mean(u)),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SolveResult:
    mesh: Mesh
    solution: NDArray[np.float64]
    summary: SolutionSummary
    wall_time_seconds: float = 0.0


def solve_with_parameters(params: ProblemParameters) -> SolveResult:
    """Generate the mesh, bind the coefficient expressions and solve."""
    t0 = time.perf_counter()
    mesh = MeshGenerator(params.Lx, params.Ly, params.Nx, params.Ny).generate()
    solver = EllipticFEMSolver(**params.coefficient_texts)

    u = solver.solve(mesh, params.boundary_conditions(), order=params.boundary_order)
    wall_time = time.perf_counter() - t0

    summary = SolutionSummary.from_solution(mesh, u)
    log.info(
        f"Solution computed: {summary.n_nodes} nodes, "
        f"range [{summary.u_min:.6g}, {summary.u_max:.6g}], mean {summary.u_mean:.6g}"
    )
    return SolveResult(mesh=mesh, solution=u, summary=summary, wall_time_seconds=wall_time)
