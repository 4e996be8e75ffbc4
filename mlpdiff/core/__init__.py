# flake8: noqa

from .exception import (
    ConfigurationError,
    DimensionMismatchError,
    ExtrapolationWarning,
    NetworkError,
    NotEvaluated,
)
from .layer import Layer
from .network import (
    EvaluationOptions,
    FIRST_ORDER,
    LayerInfo,
    Network,
    Prediction,
    SECOND_ORDER,
)
