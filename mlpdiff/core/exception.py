class NetworkError(Exception):
    """ Base class for errors raised while building or evaluating a network
    """


class ConfigurationError(NetworkError):
    """ Raised when the network architecture is malformed, e.g., an unknown
    activation function name, an out-of-bounds weight index, or an attempt
    to evaluate a network that has not been sized
    """


class DimensionMismatchError(NetworkError):
    """ Raised when an evaluation is requested with an input vector or
    output buffers whose shapes don't match the network
    """


class ExtrapolationWarning(UserWarning):
    """ Issued when an input value lies outside the trust region of the
    input normalization
    """


class NotEvaluated(NetworkError):
    """ Raised when reading results (outputs or derivatives) that the most
    recent evaluation did not produce
    """
