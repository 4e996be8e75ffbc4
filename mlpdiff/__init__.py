# flake8: noqa

from .core import (
    ConfigurationError,
    DimensionMismatchError,
    EvaluationOptions,
    ExtrapolationWarning,
    FIRST_ORDER,
    Network,
    NetworkError,
    NotEvaluated,
    Prediction,
    SECOND_ORDER,
)
from .activation import ActivationFunction
from .matching import match_variables, MatchResult
from .normalization import (
    get_normalization_strategy,
    MINMAX,
    ROBUST,
    STANDARD,
)
