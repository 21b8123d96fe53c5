"""Finite element engine for 2D linear elliptic PDEs.

This package implements P1 (linear) triangular finite elements for solving

    -div(A grad u) + b . grad u + c u = f

on a rectangle with Dirichlet and Neumann boundary conditions, using a dense
direct solver. Coefficients may be given as expression text such as
``"sin(pi*x)*y"``.

Main components:
- MeshGenerator: structured triangular mesh and named boundary node sets
- parse_function, safe_eval: expression text to coefficient functions
- EllipticFEMSolver: assembly, boundary conditions and dense solve
- solve_with_parameters: end-to-end solve from text parameters
"""

from .exceptions import (
    EllipFEMError,
    InvalidParameterError,
    EvaluationError,
    SingularMatrixError,
)
from .expression import ExpressionEvaluator, evaluate
from .functions import (
    CoefficientFunction,
    parse_function,
    safe_eval,
    zero_function,
    constant_function,
    as_coefficient_function,
)
from .datastructures import (
    Mesh,
    BoundaryConditionData,
    WEST,
    EAST,
    SOUTH,
    NORTH,
    BOUNDARY_NAMES,
    DIRICHLET,
    NEUMANN,
)
from .mesh import MeshGenerator
from .assembly import assemble_global_system
from .boundary import apply_boundary_conditions, processing_order
from .linalg import gaussian_elimination
from .solver import EllipticFEMSolver
from .norms import interior_nodes, linf_error, discrete_l2_error
from .problem import (
    BoundarySpec,
    ProblemParameters,
    SolutionSummary,
    SolveResult,
    solve_with_parameters,
)

__all__ = [
    # Errors
    "EllipFEMError",
    "InvalidParameterError",
    "EvaluationError",
    "SingularMatrixError",
    # Expressions
    "ExpressionEvaluator",
    "evaluate",
    "CoefficientFunction",
    "parse_function",
    "safe_eval",
    "zero_function",
    "constant_function",
    "as_coefficient_function",
    # Mesh
    "Mesh",
    "MeshGenerator",
    "WEST",
    "EAST",
    "SOUTH",
    "NORTH",
    "BOUNDARY_NAMES",
    # Boundary conditions
    "BoundaryConditionData",
    "DIRICHLET",
    "NEUMANN",
    "apply_boundary_conditions",
    "processing_order",
    # Solver
    "assemble_global_system",
    "gaussian_elimination",
    "EllipticFEMSolver",
    # Verification
    "interior_nodes",
    "linf_error",
    "discrete_l2_error",
    # Problem driver
    "BoundarySpec",
    "ProblemParameters",
    "SolutionSummary",
    "SolveResult",
    "solve_with_parameters",
]
