# flake8: noqa

from .sklearn_convert import (
    network_from_mlp_regressor,
    normalization_from_scaler,
    SKLEARN_ACTIVATIONS,
)
