"""Tests for the text-parameter problem driver and the hydra configuration.

Run with: pytest tests/test_problem.py -v
"""

import numpy as np
import pytest
from hydra import compose, initialize
from omegaconf import OmegaConf

from ellipfem import (
    BoundarySpec,
    InvalidParameterError,
    ProblemParameters,
    SolutionSummary,
    solve_with_parameters,
)
from main import report_errors, save_solution


@pytest.fixture
def cfg():
    with initialize(version_base=None, config_path="../conf"):
        return compose(config_name="config", overrides=["mesh.Nx=9", "mesh.Ny=9"])


class TestProblemParameters:
    def test_defaults(self):
        params = ProblemParameters()
        assert params.coefficient_texts["f"] == "1"
        assert set(params.boundary) == {"west", "east", "south", "north"}
        assert all(spec.kind == "dirichlet" for spec in params.boundary.values())

    def test_boundary_conditions(self):
        params = ProblemParameters(boundary={"north": BoundarySpec("Neumann", "2*x")})
        bcs = params.boundary_conditions()
        assert list(bcs) == ["north"]
        assert bcs["north"].is_neumann
        assert bcs["north"](1.5, 0.0) == 3.0

    def test_invalid_boundary_kind(self):
        params = ProblemParameters(boundary={"north": BoundarySpec("robin", 1.0)})
        with pytest.raises(InvalidParameterError):
            params.boundary_conditions()

    def test_from_mapping(self):
        params = ProblemParameters.from_config(
            {
                "domain": {"Lx": 2, "Ly": 0.5},
                "mesh": {"Nx": 5, "Ny": 3},
                "coefficients": {"f": "x", "c": None, "a11": 2},
                "boundary": {"west": {"kind": "dirichlet", "value": 1.0}},
                "boundary_order": ["west"],
            }
        )
        assert (params.Lx, params.Ly, params.Nx, params.Ny) == (2.0, 0.5, 5, 3)
        assert params.f == "x"
        assert params.c == ""
        assert params.a11 == "2"
        assert params.a22 == "1"
        assert list(params.boundary) == ["west"]
        assert params.boundary_order == ["west"]

    def test_from_hydra_config(self, cfg):
        params = ProblemParameters.from_config(cfg)
        assert params.Nx == 9 and params.Ny == 9
        assert params.f == "2*pi*pi*sin(pi*x)*sin(pi*y)"
        assert params.boundary_order is None
        assert params.boundary["north"].value == "0"


class TestSolveWithParameters:
    def test_default_problem(self):
        result = solve_with_parameters(ProblemParameters(Nx=5, Ny=5))
        assert result.mesh.n_nodes == 25
        assert result.solution.shape == (25,)
        assert result.summary.n_elements == 32
        assert result.summary.u_min == 0.0
        assert result.summary.u_max > 0.0
        assert result.wall_time_seconds >= 0.0

    def test_invalid_mesh(self):
        with pytest.raises(InvalidParameterError):
            solve_with_parameters(ProblemParameters(Nx=1))

    def test_boundary_order(self):
        boundary = {
            "west": BoundarySpec("dirichlet", 1.0),
            "south": BoundarySpec("dirichlet", 2.0),
            "east": BoundarySpec("dirichlet", 0.0),
            "north": BoundarySpec("dirichlet", 0.0),
        }
        default = solve_with_parameters(ProblemParameters(Nx=4, Ny=4, f="0", boundary=boundary))
        custom = solve_with_parameters(
            ProblemParameters(Nx=4, Ny=4, f="0", boundary=boundary, boundary_order=["west", "south"])
        )
        assert default.solution[0] == 1.0
        assert custom.solution[0] == 2.0

    def test_summary(self):
        mesh_result = solve_with_parameters(ProblemParameters(Nx=4, Ny=4))
        summary = SolutionSummary.from_solution(mesh_result.mesh, np.array([1.0, 3.0, 2.0]))
        assert summary.to_dict() == {
            "n_nodes": 3,
            "n_elements": 18,
            "u_min": 1.0,
            "u_max": 3.0,
            "u_mean": 2.0,
        }


class TestEntryPoint:
    def test_config_solves_manufactured_problem(self, cfg):
        result = solve_with_parameters(ProblemParameters.from_config(cfg))
        errors = report_errors(result, cfg.exact)
        assert set(errors) == {"linf_error", "linf_error_interior", "l2_error"}
        assert errors["linf_error"] < 0.05
        assert errors["linf_error_interior"] == errors["linf_error"]

    def test_save_solution(self, tmp_path):
        result = solve_with_parameters(ProblemParameters(Nx=4, Ny=3))
        path = save_solution(result, tmp_path)
        assert path.exists()

        data = np.load(path)
        np.testing.assert_array_equal(data["nodes"], result.mesh.nodes)
        np.testing.assert_array_equal(data["elements"], result.mesh.elements)
        np.testing.assert_array_equal(data["solution"], result.solution)
        assert int(data["Nx"]) == 4 and int(data["Ny"]) == 3

    def test_config_overrides(self):
        with initialize(version_base=None, config_path="../conf"):
            cfg = compose(
                config_name="config",
                overrides=["mesh.Nx=4", "mesh.Ny=4", "boundary.north.kind=neumann", "exact=null"],
            )
        assert cfg.exact is None
        assert OmegaConf.select(cfg, "boundary.north.kind") == "neumann"
        params = ProblemParameters.from_config(cfg)
        assert params.boundary_conditions()["north"].is_neumann


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
