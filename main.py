"""
Elliptic FEM solver - command-line entry point.

Usage:
    python main.py
    python main.py mesh.Nx=41 mesh.Ny=41
    python main.py coefficients.f="x*y" exact=null
    python main.py boundary.north.kind=neumann boundary.north.value=5
"""

import logging
from pathlib import Path

import hydra
import numpy as np
from hydra.core.hydra_config import HydraConfig
from omegaconf import DictConfig, OmegaConf

from ellipfem import (
    ProblemParameters,
    discrete_l2_error,
    linf_error,
    parse_function,
    solve_with_parameters,
)

log = logging.getLogger(__name__)


def report_errors(result, exact_text: str) -> dict:
    """Nodal errors of the computed solution against an analytic expression."""
    u_exact = parse_function(exact_text)
    errors = {
        "linf_error": linf_error(result.mesh, result.solution, u_exact),
        "linf_error_interior": linf_error(result.mesh, result.solution, u_exact, interior_only=True),
        "l2_error": discrete_l2_error(result.mesh, result.solution, u_exact),
    }
    for name, value in errors.items():
        log.info(f"  {name}: {value:.6e}")
    return errors


def save_solution(result, output_dir: Path) -> Path:
    """Write nodes, elements and nodal solution for external renderers."""
    path = output_dir / "solution.npz"
    np.savez(
        path,
        nodes=result.mesh.nodes,
        elements=result.mesh.elements,
        solution=result.solution,
        Nx=result.mesh.Nx,
        Ny=result.mesh.Ny,
    )
    log.info(f"Saved solution to {path}")
    return path


@hydra.main(config_path="conf", config_name="config", version_base=None)
def main(cfg: DictConfig) -> dict:
    """Main entry point.

    Returns
    -------
    dict
        Solution summary, plus error norms when ``exact`` is set.
    """
    log.debug(f"Config:\n{OmegaConf.to_yaml(cfg)}")
    params = ProblemParameters.from_config(cfg)
    log.info(
        f"Domain [0, {params.Lx}] x [0, {params.Ly}], mesh {params.Nx} x {params.Ny} nodes"
    )
    for name, text in params.coefficient_texts.items():
        log.info(f"  {name}(x,y) = {text}")
    for name, spec in params.boundary.items():
        log.info(f"  {name}: {spec.kind} (value={spec.value})")

    result = solve_with_parameters(params)
    summary = result.summary.to_dict()
    log.info(
        f"Done: {summary['n_nodes']} nodes, {summary['n_elements']} elements, "
        f"min={summary['u_min']:.6g}, max={summary['u_max']:.6g}, mean={summary['u_mean']:.6g}, "
        f"time={result.wall_time_seconds:.2f}s"
    )

    if cfg.get("exact"):
        summary.update(report_errors(result, cfg.exact))

    if cfg.get("save_solution", False):
        save_solution(result, Path(HydraConfig.get().runtime.output_dir))

    return summary


if __name__ == "__main__":
    main()
