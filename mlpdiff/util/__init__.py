# flake8: noqa

from .gradient_check import (
    check_derivatives,
    finite_difference_hessian,
    finite_difference_jacobian,
)
