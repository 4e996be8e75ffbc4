""" Activation functions with closed-form first and second derivatives

Every function maps a pre-activation value (scalar or array, evaluated
element-wise) to the triple ``(phi, dphi, d2phi)``: the activation value
and its first and second derivative with respect to the pre-activation.
"""
import enum

import numpy
from scipy.special import expit, ndtr

from mlpdiff.core.exception import ConfigurationError


# SELU constants
SELU_LAMBDA = 1.05070098
SELU_ALPHA = 1.67326324

_INV_SQRT_2PI = 1.0 / numpy.sqrt(2.0 * numpy.pi)


class ActivationFunction(enum.Enum):
    """ The supported activation function family
    """
    NONE = 0
    LINEAR = 1
    RELU = 2
    ELU = 3
    GELU = 4
    SELU = 5
    SIGMOID = 6
    SWISH = 7
    TANH = 8
    EXPONENTIAL = 9

    @property
    def label(self):
        """ The lower case name used in network definitions
        """
        return self.name.lower()

    @classmethod
    def from_name(cls, name):
        """ Resolve an activation function from its name

        Parameters
        ----------
        name: str or ActivationFunction
            One of none, linear, relu, elu, gelu, selu, sigmoid, swish,
            tanh, exponential (case-insensitive). Enum members are passed
            through unchanged.

        Returns
        -------
        function: ActivationFunction

        Raises
        ------
        ConfigurationError
            If the name is not recognized.

        """
        if isinstance(name, cls):
            return name

        try:
            return _NAME_TABLE[str(name).strip().lower()]
        except KeyError:
            msg = "Unknown activation function `{}` (expected one of {})"
            raise ConfigurationError(
                msg.format(name, ", ".join(sorted(_NAME_TABLE))))


_NAME_TABLE = {function.label: function for function in ActivationFunction}


def _none(x, first_order, second_order):
    zeros = numpy.zeros_like(x)
    return zeros, zeros, zeros


def _linear(x, first_order, second_order):
    return x, numpy.ones_like(x), numpy.zeros_like(x)


def _relu(x, first_order, second_order):
    positive = x > 0
    phi = numpy.where(positive, x, 0.0)
    dphi = numpy.where(positive, 1.0, 0.0)
    return phi, dphi, numpy.zeros_like(phi)


def _elu(x, first_order, second_order):
    positive = x > 0
    exp_x = numpy.exp(numpy.minimum(x, 0.0))
    phi = numpy.where(positive, x, exp_x - 1.0)
    dphi = numpy.where(positive, 1.0, exp_x)
    d2phi = numpy.where(positive, 0.0, exp_x)
    return phi, dphi, d2phi


def _selu(x, first_order, second_order):
    positive = x > 0
    scaled_exp = SELU_LAMBDA * SELU_ALPHA * numpy.exp(numpy.minimum(x, 0.0))
    phi = numpy.where(
        positive, SELU_LAMBDA * x, scaled_exp - SELU_LAMBDA * SELU_ALPHA)
    dphi = numpy.where(positive, SELU_LAMBDA, scaled_exp)
    d2phi = numpy.where(positive, 0.0, scaled_exp)
    return phi, dphi, d2phi


def _gelu(x, first_order, second_order):
    cdf = ndtr(x)
    phi = x * cdf
    if not first_order:
        return phi, None, None
    pdf = _INV_SQRT_2PI * numpy.exp(-0.5 * x * x)
    return phi, cdf + x * pdf, pdf * (2.0 - x * x)


def _sigmoid(x, first_order, second_order):
    s = expit(x)
    ds = s * (1.0 - s)
    return s, ds, ds * (1.0 - 2.0 * s)


def _swish(x, first_order, second_order):
    s = expit(x)
    ds = s * (1.0 - s)
    phi = x * s
    dphi = s + x * ds
    d2phi = ds * (2.0 + x * (1.0 - 2.0 * s))
    return phi, dphi, d2phi


def _tanh(x, first_order, second_order):
    t = numpy.tanh(x)
    dt = 1.0 - t * t
    return t, dt, -2.0 * t * dt


def _exponential(x, first_order, second_order):
    e = numpy.exp(x)
    return e, e, e


_EVALUATORS = {
    ActivationFunction.NONE: _none,
    ActivationFunction.LINEAR: _linear,
    ActivationFunction.RELU: _relu,
    ActivationFunction.ELU: _elu,
    ActivationFunction.GELU: _gelu,
    ActivationFunction.SELU: _selu,
    ActivationFunction.SIGMOID: _sigmoid,
    ActivationFunction.SWISH: _swish,
    ActivationFunction.TANH: _tanh,
    ActivationFunction.EXPONENTIAL: _exponential,
}

_missing = set(ActivationFunction) - set(_EVALUATORS)
if _missing:
    raise RuntimeError(
        "No evaluator for activation functions: {}".format(
            ", ".join(sorted(f.label for f in _missing))))


def evaluate(function, x, first_order=False, second_order=False):
    """ Evaluate an activation function and, optionally, its derivatives

    Parameters
    ----------
    function: ActivationFunction
        The activation function to evaluate. Anything that isn't a member
        of the family evaluates like NONE (zero value and derivatives).

    x: float or numpy.ndarray
        Pre-activation value(s).

    first_order: bool, default=False
        Compute the first derivative.

    second_order: bool, default=False
        Compute the second derivative. Implies `first_order`.

    Returns
    -------
    phi, dphi, d2phi: numpy.ndarray
        The activation value and derivatives, each the shape of `x`.
        Derivatives that were not requested are returned as zeros.

    """
    x = numpy.asarray(x)
    if not numpy.issubdtype(x.dtype, numpy.floating):
        x = x.astype(numpy.float64)
    first_order = first_order or second_order

    evaluator = _EVALUATORS.get(function, _none)
    phi, dphi, d2phi = evaluator(x, first_order, second_order)

    phi = numpy.asarray(phi, dtype=x.dtype)

    if first_order:
        dphi = numpy.broadcast_to(dphi, x.shape).astype(x.dtype)
    else:
        dphi = numpy.zeros_like(phi)

    if second_order:
        d2phi = numpy.broadcast_to(d2phi, x.shape).astype(x.dtype)
    else:
        d2phi = numpy.zeros_like(phi)

    return phi, dphi, d2phi
