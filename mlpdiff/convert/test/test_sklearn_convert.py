import unittest
import warnings

import numpy as np
from sklearn.exceptions import ConvergenceWarning
from sklearn.neural_network import MLPRegressor
from sklearn.preprocessing import (
    MaxAbsScaler, MinMaxScaler, RobustScaler, StandardScaler)

from mlpdiff.convert.sklearn_convert import (
    network_from_mlp_regressor, normalization_from_scaler)
from mlpdiff.core.exception import ConfigurationError
from mlpdiff.core.network import FIRST_ORDER
from mlpdiff.normalization.normalization import MINMAX, ROBUST, STANDARD
from mlpdiff.util.gradient_check import finite_difference_jacobian


class TestNormalizationFromScaler(unittest.TestCase):

    def setUp(self):
        random_state = np.random.RandomState(1234)
        self.X = 3 * random_state.randn(50, 3) + np.array([1.0, -2.0, 5.0])

    def test_scalers_match_transform(self):

        expected_strategies = [
            (MinMaxScaler(), MINMAX),
            (StandardScaler(), STANDARD),
            (RobustScaler(), ROBUST),
        ]

        for scaler, expected in expected_strategies:
            scaler.fit(self.X)
            strategy, params = normalization_from_scaler(scaler)

            self.assertIs(strategy, expected)
            self.assertEqual(params.shape, (3, 2))

            np.testing.assert_allclose(
                strategy.normalize(self.X, params), scaler.transform(self.X),
                rtol=1e-10, atol=1e-12)
            np.testing.assert_allclose(
                strategy.denormalize(scaler.transform(self.X), params),
                self.X, rtol=1e-10, atol=1e-12)

    def test_scaler_without_centering(self):

        scaler = StandardScaler(with_mean=False).fit(self.X)
        strategy, params = normalization_from_scaler(scaler)

        np.testing.assert_array_equal(params[:, 0], np.zeros(3))
        np.testing.assert_allclose(
            strategy.normalize(self.X, params), scaler.transform(self.X))

    def test_unsupported_scaler(self):

        with self.assertRaises(ConfigurationError):
            normalization_from_scaler(MaxAbsScaler().fit(self.X))

    def test_unsupported_feature_range(self):

        scaler = MinMaxScaler(feature_range=(-1, 1)).fit(self.X)

        with self.assertRaises(ConfigurationError):
            normalization_from_scaler(scaler)

    def test_unfitted_scaler(self):

        with self.assertRaises(ConfigurationError):
            normalization_from_scaler(StandardScaler())


class TestNetworkFromMLPRegressor(unittest.TestCase):

    def setUp(self):
        self.random_state = np.random.RandomState(1234)

        X = self.random_state.rand(80, 2) * np.array([4.0, 10.0])
        y = np.column_stack([
            np.sin(X[:, 0]) + 0.1 * X[:, 1],
            X[:, 0] * X[:, 1],
        ])

        self.X = X
        self.y = y
        self.input_scaler = StandardScaler().fit(X)
        self.output_scaler = MinMaxScaler().fit(y)

    def _fit(self, activation, n_outputs=2):
        y = self.output_scaler.transform(self.y)
        mlp = MLPRegressor(hidden_layer_sizes=(6, 5), activation=activation,
                           max_iter=50, random_state=0)
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", ConvergenceWarning)
            if n_outputs == 1:
                mlp.fit(self.input_scaler.transform(self.X), y[:, 0])
            else:
                mlp.fit(self.input_scaler.transform(self.X), y)
        return mlp

    def _reference(self, mlp, x):
        y_norm = mlp.predict(self.input_scaler.transform(x[None, :]))
        return self.output_scaler.inverse_transform(y_norm.reshape(1, -1))[0]

    def test_matches_predict(self):

        for activation in ("identity", "logistic", "tanh", "relu"):
            mlp = self._fit(activation)
            network = network_from_mlp_regressor(
                mlp, ["a", "b"], ["s", "p"],
                input_scaler=self.input_scaler,
                output_scaler=self.output_scaler)

            for x in self.X[:10]:
                np.testing.assert_allclose(
                    network.predict(x).outputs, self._reference(mlp, x),
                    rtol=1e-10, atol=1e-10)

    def test_architecture(self):

        network = network_from_mlp_regressor(
            self._fit("tanh"), ["a", "b"], ["s", "p"],
            input_scaler=self.input_scaler, output_scaler=self.output_scaler)

        self.assertEqual(
            [layer.n_neurons for layer in network.architecture()],
            [2, 6, 5, 2])
        self.assertEqual(
            [layer.activation.label for layer in network.architecture()],
            ["none", "tanh", "tanh", "linear"])
        self.assertEqual(network.input_names, ["a", "b"])
        self.assertIs(network.input_normalization, STANDARD)
        self.assertIs(network.output_normalization, MINMAX)

    def test_single_output(self):

        mlp = self._fit("logistic", n_outputs=1)

        network = network_from_mlp_regressor(
            mlp, ["a", "b"], ["s"], input_scaler=self.input_scaler)

        x = self.X[0]
        expected = mlp.predict(self.input_scaler.transform(x[None, :]))

        np.testing.assert_allclose(network.predict(x).outputs, expected,
                                   rtol=1e-10, atol=1e-12)

    def test_derivatives_of_converted_network(self):

        network = network_from_mlp_regressor(
            self._fit("tanh"), ["a", "b"], ["s", "p"],
            input_scaler=self.input_scaler, output_scaler=self.output_scaler)

        x = self.X[3]
        prediction = network.predict(x, options=FIRST_ORDER)

        np.testing.assert_allclose(
            prediction.jacobian, finite_difference_jacobian(network, x),
            rtol=1e-6, atol=1e-8)

    def test_name_count_mismatch(self):

        with self.assertRaises(ConfigurationError):
            network_from_mlp_regressor(self._fit("tanh"), ["a"], ["s", "p"])

    def test_unfitted_regressor(self):

        with self.assertRaises(ConfigurationError):
            network_from_mlp_regressor(MLPRegressor(), ["a", "b"], ["s"])
