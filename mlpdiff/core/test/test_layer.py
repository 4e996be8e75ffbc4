import unittest

import numpy as np

from mlpdiff.core.exception import ConfigurationError
from mlpdiff.core.layer import Layer


class TestLayer(unittest.TestCase):

    def test_input_layer_has_no_bias(self):

        layer = Layer(3, is_input=True)

        self.assertIsNone(layer.bias)
        with self.assertRaises(ConfigurationError):
            layer.set_bias(0, 1.0)

    def test_bias(self):

        layer = Layer(3)
        layer.set_bias(2, 0.5)

        self.assertEqual(layer.get_bias(2), 0.5)
        np.testing.assert_array_equal(layer.bias, [0.0, 0.0, 0.5])

    def test_bias_out_of_bounds(self):

        layer = Layer(3)

        with self.assertRaises(ConfigurationError):
            layer.set_bias(3, 1.0)
        with self.assertRaises(ConfigurationError):
            layer.set_bias(-1, 1.0)

    def test_size_gradients(self):

        layer = Layer(4, dtype=np.float32)
        self.assertFalse(layer.is_sized)

        layer.size_gradients(3)

        self.assertTrue(layer.is_sized)
        self.assertEqual(layer.dydx.shape, (4, 3))
        self.assertEqual(layer.d2ydx2.shape, (4, 3, 3))
        self.assertEqual(layer.d2ydx2.dtype, np.float32)

    def test_empty_layer(self):

        with self.assertRaises(ConfigurationError):
            Layer(0)

    def test_fractional_size(self):

        with self.assertRaises(ConfigurationError):
            Layer(2.5)
        with self.assertRaises(ConfigurationError):
            Layer("3")

        self.assertEqual(Layer(np.int64(3)).n_neurons, 3)
