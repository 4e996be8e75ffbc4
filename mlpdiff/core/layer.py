import operator

import numpy

from .exception import ConfigurationError


class Layer(object):
    """ A layer of neurons holding per-neuron outputs and, once sized, the
    derivatives of those outputs with respect to the network inputs
    """
    def __init__(self, n_neurons, is_input=False, dtype=numpy.float64):
        """ Initialize a layer

        Parameters
        ----------
        n_neurons: int
            Number of neurons in the layer.

        is_input: bool, default=False
            Input layers carry no biases.

        dtype: numpy dtype, default=numpy.float64
            Precision of the layer buffers.

        """
        try:
            n_neurons = operator.index(n_neurons)
        except TypeError:
            msg = "Layer size must be an integer (got {!r})"
            raise ConfigurationError(msg.format(n_neurons))
        if n_neurons < 1:
            msg = "Layer must have at least one neuron (got {})"
            raise ConfigurationError(msg.format(n_neurons))

        self.n_neurons = n_neurons
        self.is_input = is_input
        self.dtype = numpy.dtype(dtype)

        self.outputs = numpy.zeros(n_neurons, dtype=self.dtype)
        self.bias = (None if is_input
                     else numpy.zeros(n_neurons, dtype=self.dtype))

        self.dydx = None
        self.d2ydx2 = None

    def __repr__(self):
        return "<Layer n_neurons={:d}, is_input={}>".format(
            self.n_neurons, self.is_input)

    @property
    def is_sized(self):
        return self.dydx is not None

    def size_gradients(self, n_inputs):
        """ Allocate the first and second derivative buffers

        Parameters
        ----------
        n_inputs: int
            The number of network inputs.

        """
        self.dydx = numpy.zeros((self.n_neurons, n_inputs), dtype=self.dtype)
        self.d2ydx2 = numpy.zeros(
            (self.n_neurons, n_inputs, n_inputs), dtype=self.dtype)

    def set_bias(self, i_neuron, value):
        if self.is_input:
            raise ConfigurationError("The input layer has no biases")
        self.check_neuron(i_neuron)
        self.bias[i_neuron] = value

    def get_bias(self, i_neuron):
        if self.is_input:
            raise ConfigurationError("The input layer has no biases")
        self.check_neuron(i_neuron)
        return self.bias[i_neuron]

    def check_neuron(self, i_neuron):
        if not 0 <= i_neuron < self.n_neurons:
            msg = "Neuron index {} out of bounds for layer of size {}"
            raise ConfigurationError(msg.format(i_neuron, self.n_neurons))
