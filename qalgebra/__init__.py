"""qalgebra - a graded operator-algebra engine over a field."""

__version__ = "0.1.0"

# Algebra core
from .algebra import (
    ID,
    Element,
    Elements,
    ExchangeRule,
    GradedTables,
    IdSpace,
    Kind,
    SimpleID,
    combinations,
    dot,
    duplicate_combinations,
    duplicate_permutations,
    permutations,
    permute,
    permute_into,
    promote,
    sequence,
    sequence_table,
    tensor,
)

# Configuration
from .config import (
    debug_context,
    get_tolerances,
    is_debug_enabled,
    set_debug_enabled,
    set_tolerances,
    tolerance_context,
)

# Errors
from .exceptions import (
    AlgebraError,
    DomainError,
    InvariantError,
    NotFoundError,
    ValidationError,
)

# Operator families
from .fermion import (
    FermionID,
    fermion_operator,
    fermion_operator_matrix,
    fermion_permute,
    normal_order,
    normal_order_table,
)

# Logging
from .logging import configure_logging, get_logger, set_log_level
from .spin import (
    SpinID,
    spin_matrix,
    spin_operator,
    spin_operator_matrix,
    spin_permute,
)

__all__ = [
    "__version__",
    # Algebra core
    "SimpleID",
    "ID",
    "Kind",
    "promote",
    "Element",
    "Elements",
    "tensor",
    "dot",
    "GradedTables",
    "IdSpace",
    "combinations",
    "duplicate_combinations",
    "permutations",
    "duplicate_permutations",
    "ExchangeRule",
    "sequence",
    "sequence_table",
    "permute",
    "permute_into",
    # Configuration
    "get_tolerances",
    "set_tolerances",
    "tolerance_context",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    # Errors
    "AlgebraError",
    "ValidationError",
    "DomainError",
    "NotFoundError",
    "InvariantError",
    # Spin
    "SpinID",
    "spin_operator",
    "spin_permute",
    "spin_matrix",
    "spin_operator_matrix",
    # Fermion
    "FermionID",
    "fermion_operator",
    "fermion_permute",
    "normal_order_table",
    "normal_order",
    "fermion_operator_matrix",
    # Logging
    "get_logger",
    "set_log_level",
    "configure_logging",
]
