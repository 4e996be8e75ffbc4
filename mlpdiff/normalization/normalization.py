""" Normalization strategies applied to network inputs and outputs

Each variable carries a pair of reference values ``(a, b)`` whose meaning
depends on the strategy: (minimum, maximum) for min-max scaling,
(mean, standard deviation) for standardization and (median, inter-quartile
range) for robust scaling. All operations broadcast, so ``params`` may be
a single pair or an array of shape ``(n_variables, 2)``.
"""
import abc

import numpy

from mlpdiff.core.exception import ConfigurationError


def _split(params):
    params = numpy.asarray(params)
    if not numpy.issubdtype(params.dtype, numpy.floating):
        params = params.astype(numpy.float64)
    if params.shape[-1:] != (2,):
        msg = "Normalization parameters must be pairs, got shape {}"
        raise ConfigurationError(msg.format(params.shape))
    return params[..., 0], params[..., 1]


class NormalizationStrategy(abc.ABC):
    """ The abstract base class for normalization strategies
    """

    #: Identifier used to select the strategy by name
    name = None

    #: Short description used in architecture reports
    description = None

    #: Labels of the first and second reference value
    labels = (None, None)

    def __repr__(self):
        return "<{} name={}>".format(self.__class__.__name__, self.name)

    @abc.abstractmethod
    def normalize(self, value, params):
        """ Map raw values to the network's normalized domain """
        raise NotImplementedError

    @abc.abstractmethod
    def denormalize(self, value, params):
        """ Map normalized values back to raw values """
        raise NotImplementedError

    @abc.abstractmethod
    def scale(self, params):
        """ The factor d(raw) / d(normalized) of the transform

        Raw derivatives of normalized quantities are obtained by dividing
        (inputs) or multiplying (outputs) by this factor.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def offset(self, params):
        """ The raw value at the center of the normalized domain """
        raise NotImplementedError

    @abc.abstractmethod
    def contains(self, value, params):
        """ True where `value` lies inside the trust region """
        raise NotImplementedError


class BoundedRangeNormalization(NormalizationStrategy):
    """ Min-max scaling, ``params = (minimum, maximum)``
    """
    name = "minmax"
    description = "minimum-maximum"
    labels = ("Lower limit", "Upper limit")

    def normalize(self, value, params):
        lower, upper = _split(params)
        return (value - lower) / (upper - lower)

    def denormalize(self, value, params):
        lower, upper = _split(params)
        return (upper - lower) * value + lower

    def scale(self, params):
        lower, upper = _split(params)
        return upper - lower

    def offset(self, params):
        lower, upper = _split(params)
        return 0.5 * (upper + lower)

    def contains(self, value, params):
        lower, upper = _split(params)
        return (value >= lower) & (value <= upper)


class StatisticalNormalization(NormalizationStrategy):
    """ Centering and scaling, ``params = (center, spread)``

    Used both for standardization (mean, standard deviation) and for
    robust scaling (median, inter-quartile range); the two differ only in
    the width of the trust region, measured in units of the spread.
    """

    def __init__(self, name, description, labels, trust_width):
        self.name = name
        self.description = description
        self.labels = tuple(labels)
        self.trust_width = float(trust_width)

    def normalize(self, value, params):
        center, spread = _split(params)
        return (value - center) / spread

    def denormalize(self, value, params):
        center, spread = _split(params)
        return spread * value + center

    def scale(self, params):
        _, spread = _split(params)
        return spread

    def offset(self, params):
        center, _ = _split(params)
        return center

    def contains(self, value, params):
        return numpy.abs(self.normalize(value, params)) <= self.trust_width


MINMAX = BoundedRangeNormalization()

STANDARD = StatisticalNormalization(
    name="standard",
    description="mean-standard deviation",
    labels=("Mean", "std"),
    trust_width=2.0)

ROBUST = StatisticalNormalization(
    name="robust",
    description="quantile range",
    labels=("Median", "IQ range"),
    trust_width=10.0)

NORMALIZATION_STRATEGIES = {
    strategy.name: strategy for strategy in (MINMAX, STANDARD, ROBUST)
}


def get_normalization_strategy(strategy):
    """ Resolve a normalization strategy

    Parameters
    ----------
    strategy: str or NormalizationStrategy
        Either "minmax", "standard" or "robust" (case-insensitive), or a
        strategy instance, which is returned unchanged.

    Raises
    ------
    ConfigurationError
        If the name is not recognized.

    """
    if isinstance(strategy, NormalizationStrategy):
        return strategy

    try:
        return NORMALIZATION_STRATEGIES[str(strategy).strip().lower()]
    except KeyError:
        msg = "Unknown normalization strategy `{}` (expected one of {})"
        raise ConfigurationError(
            msg.format(strategy, ", ".join(sorted(NORMALIZATION_STRATEGIES))))
