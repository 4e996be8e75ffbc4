# flake8: noqa

from .normalization import (
    BoundedRangeNormalization,
    get_normalization_strategy,
    MINMAX,
    NORMALIZATION_STRATEGIES,
    NormalizationStrategy,
    ROBUST,
    STANDARD,
    StatisticalNormalization,
)
