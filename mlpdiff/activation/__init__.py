# flake8: noqa

from .activation import (
    ActivationFunction,
    evaluate,
    SELU_ALPHA,
    SELU_LAMBDA,
)
