""" Build networks from fitted scikit-learn estimators

The conversion goes through the same construction calls that any other
architecture loader uses, so a converted network is indistinguishable
from one assembled by hand.
"""
import logging

import numpy
from sklearn.neural_network import MLPRegressor
from sklearn.preprocessing import MinMaxScaler, RobustScaler, StandardScaler

from mlpdiff.core.exception import ConfigurationError
from mlpdiff.core.network import Network
from mlpdiff.normalization.normalization import MINMAX, ROBUST, STANDARD


_logger_name = __name__.rsplit('.', 1)[-1]
logger = logging.getLogger(_logger_name)


# scikit-learn activation name => network activation name
SKLEARN_ACTIVATIONS = {
    'identity': 'linear',
    'logistic': 'sigmoid',
    'tanh': 'tanh',
    'relu': 'relu',
}


def _check_fitted(estimator, attribute):
    if not hasattr(estimator, attribute):
        msg = "{} has not been fitted"
        raise ConfigurationError(msg.format(estimator.__class__.__name__))


def normalization_from_scaler(scaler):
    """ Extract the normalization strategy and parameters of a fitted scaler

    Parameters
    ----------
    scaler: MinMaxScaler, StandardScaler or RobustScaler
        A fitted scaler. A MinMaxScaler must use `feature_range=(0, 1)`.

    Returns
    -------
    strategy: NormalizationStrategy
        MINMAX, STANDARD or ROBUST.

    params: numpy.ndarray, shape=(n_features, 2)
        One normalization pair per feature.

    Raises
    ------
    ConfigurationError
        If the scaler type or its settings have no counterpart.

    """
    if isinstance(scaler, MinMaxScaler):
        _check_fitted(scaler, 'data_min_')
        if tuple(scaler.feature_range) != (0, 1):
            msg = "MinMaxScaler feature_range {} is not supported, use (0, 1)"
            raise ConfigurationError(msg.format(scaler.feature_range))
        params = numpy.column_stack([scaler.data_min_, scaler.data_max_])
        return MINMAX, params

    if isinstance(scaler, StandardScaler):
        _check_fitted(scaler, 'n_features_in_')
        n_features = scaler.n_features_in_
        # mean_ is populated even when centering is disabled
        mean = (scaler.mean_ if scaler.with_mean
                else numpy.zeros(n_features))
        scale = (scaler.scale_ if scaler.with_std
                 else numpy.ones(n_features))
        return STANDARD, numpy.column_stack([mean, scale])

    if isinstance(scaler, RobustScaler):
        _check_fitted(scaler, 'n_features_in_')
        n_features = scaler.n_features_in_
        center = (scaler.center_ if scaler.with_centering
                  else numpy.zeros(n_features))
        scale = (scaler.scale_ if scaler.with_scaling
                 else numpy.ones(n_features))
        return ROBUST, numpy.column_stack([center, scale])

    msg = "Unsupported scaler type {}"
    raise ConfigurationError(msg.format(scaler.__class__.__name__))


def network_from_mlp_regressor(mlp, input_names, output_names,
                               input_scaler=None, output_scaler=None,
                               dtype=numpy.float64):
    """ Build a sized network reproducing a fitted MLPRegressor

    Parameters
    ----------
    mlp: sklearn.neural_network.MLPRegressor
        A fitted regressor with at least one hidden layer.

    input_names, output_names: list of str
        Variable names, in the column order used for fitting.

    input_scaler, output_scaler: scaler, default=None
        The fitted scalers that were applied to the inputs and targets
        before fitting (see :func:`normalization_from_scaler`). When None,
        the variables are taken as already normalized.

    dtype: numpy dtype, default=numpy.float64
        Precision of the resulting network.

    Returns
    -------
    network: Network
        A network that is ready for evaluation.

    """
    if not isinstance(mlp, MLPRegressor):
        msg = "Expected an MLPRegressor, got {}"
        raise ConfigurationError(msg.format(mlp.__class__.__name__))
    _check_fitted(mlp, 'coefs_')

    if mlp.activation not in SKLEARN_ACTIVATIONS:
        msg = "Unsupported MLPRegressor activation `{}`"
        raise ConfigurationError(msg.format(mlp.activation))

    coefs = mlp.coefs_
    intercepts = mlp.intercepts_
    n_inputs = coefs[0].shape[0]
    n_outputs = coefs[-1].shape[1]

    if len(input_names) != n_inputs:
        msg = "Got {:d} input names for a regressor with {:d} inputs"
        raise ConfigurationError(msg.format(len(input_names), n_inputs))
    if len(output_names) != n_outputs:
        msg = "Got {:d} output names for a regressor with {:d} outputs"
        raise ConfigurationError(msg.format(len(output_names), n_outputs))

    network = Network(dtype=dtype)
    network.define_input_layer(n_inputs)
    network.define_output_layer(n_outputs)
    for coef in coefs[:-1]:
        network.push_hidden_layer(coef.shape[1])

    hidden_activation = SKLEARN_ACTIVATIONS[mlp.activation]
    for i_layer in range(1, network.n_layers - 1):
        network.set_activation_function(i_layer, hidden_activation)
    network.set_activation_function(
        network.n_layers - 1, SKLEARN_ACTIVATIONS[mlp.out_activation_])

    for i_layer, (coef, intercept) in enumerate(zip(coefs, intercepts)):
        # sklearn stores (source, destination)
        network.set_weights(i_layer, coef.T)
        network.set_biases(i_layer + 1, intercept)

    for i_input, name in enumerate(input_names):
        network.set_input_name(i_input, name)
    for i_output, name in enumerate(output_names):
        network.set_output_name(i_output, name)

    if input_scaler is not None:
        strategy, params = normalization_from_scaler(input_scaler)
        _check_n_features(params, n_inputs, "input")
        network.set_input_normalization(strategy)
        for i_input, (first, second) in enumerate(params):
            network.set_input_norm(i_input, first, second)

    if output_scaler is not None:
        strategy, params = normalization_from_scaler(output_scaler)
        _check_n_features(params, n_outputs, "output")
        network.set_output_normalization(strategy)
        for i_output, (first, second) in enumerate(params):
            network.set_output_norm(i_output, first, second)

    network.size_weights()

    logger.info("Converted MLPRegressor with layer sizes {}".format(
        [network.get_n_neurons(i) for i in range(network.n_layers)]))

    return network


def _check_n_features(params, expected, kind):
    if len(params) != expected:
        msg = "The {} scaler has {:d} features but the network has {:d}"
        raise ConfigurationError(msg.format(kind, len(params), expected))
