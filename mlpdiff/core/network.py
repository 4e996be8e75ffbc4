from collections import namedtuple
import copy
import logging
import warnings

import numpy

from mlpdiff.activation.activation import ActivationFunction, evaluate
from mlpdiff.matching.variable_matcher import match_variables
from mlpdiff.normalization.normalization import (
    get_normalization_strategy, MINMAX)
from .exception import (
    ConfigurationError, DimensionMismatchError, ExtrapolationWarning,
    NotEvaluated)
from .layer import Layer


_logger_name = __name__.rsplit('.', 1)[-1]
logger = logging.getLogger(_logger_name)


# Per-call evaluation settings. `second_order` implies `first_order`.
EvaluationOptions = namedtuple(
    'EvaluationOptions',
    ['first_order', 'second_order', 'check_extrapolation'])
EvaluationOptions.__new__.__defaults__ = (False, False, False)

FIRST_ORDER = EvaluationOptions(first_order=True)
SECOND_ORDER = EvaluationOptions(first_order=True, second_order=True)

# Returned by `Network.predict`
Prediction = namedtuple('Prediction', ['outputs', 'jacobian', 'hessian'])

# Returned by `Network.architecture`
LayerInfo = namedtuple('LayerInfo', ['index', 'n_neurons', 'activation'])

# Identity min-max pair assigned to variables until set otherwise
DEFAULT_NORM = (0.0, 1.0)


class Network(object):
    """ A dense feed-forward network that evaluates its outputs together
    with exact first and second derivatives of every output with respect
    to every input.

    The network is built once through a fixed sequence of calls::

        network = Network()
        network.define_input_layer(2)
        network.define_output_layer(1)
        network.push_hidden_layer(3)
        network.set_activation_function(1, "tanh")
        network.set_activation_function(2, "linear")
        network.set_weight(0, i_neuron, j_neuron, value)   # etc.
        network.set_bias(1, j_neuron, value)               # etc.
        network.set_input_name(0, "u")                     # etc.
        network.set_input_norm(0, lower, upper)            # etc.
        network.set_input_normalization("minmax")
        network.size_weights()

    and then evaluated any number of times with :meth:`predict`.

    Layers are indexed from the input layer (0) through the hidden layers
    (1, ..., n_hidden_layers) to the output layer (n_layers - 1). Weight
    layer `l` connects layer `l` to layer `l + 1`.

    The first call to :meth:`set_weight`, :meth:`set_bias` or
    :meth:`set_activation_function` freezes the layer layout; layers can't
    be added or redefined after that.

    Note
    ----
    Evaluation overwrites scratch buffers owned by the instance, so a
    single instance must not be evaluated from several threads at once.
    Give each thread its own instance (see :meth:`copy`).

    """
    def __init__(self, dtype=numpy.float64):
        """ Initialize an empty network

        Parameters
        ----------
        dtype: numpy dtype, default=numpy.float64
            Floating point precision used for values and derivatives.

        """
        dtype = numpy.dtype(dtype)
        if not numpy.issubdtype(dtype, numpy.floating):
            msg = "Network dtype must be a floating point type (got {})"
            raise ConfigurationError(msg.format(dtype))
        self.dtype = dtype

        self._input_layer = None
        self._output_layer = None
        self._hidden_layers = []

        # Built when the architecture is frozen
        self._layers = None
        self._weights = None
        self._activations = None

        self._input_names = []
        self._output_names = []
        self._input_norm = numpy.zeros((0, 2), dtype=self.dtype)
        self._output_norm = numpy.zeros((0, 2), dtype=self.dtype)
        self._input_normalization = MINMAX
        self._output_normalization = MINMAX

        # Built by `size_weights`
        self._outputs = None
        self._jacobian = None
        self._hessian = None
        self._sized = False

        # Which results the most recent evaluation produced
        self._has_outputs = False
        self._has_jacobian = False
        self._has_hessian = False

    def __repr__(self):
        return "<Network n_inputs={:d}, n_hidden_layers={:d}, n_outputs={:d}>"\
            .format(self.n_inputs, self.n_hidden_layers, self.n_outputs)

    ######################################################################
    # Architecture declaration

    def define_input_layer(self, n_neurons):
        """ Declare the input layer, fixing the number of network inputs
        """
        self._check_not_frozen("define the input layer")
        self._input_layer = Layer(n_neurons, is_input=True, dtype=self.dtype)
        self._input_names = [""] * self._input_layer.n_neurons
        self._input_norm = numpy.tile(
            numpy.array(DEFAULT_NORM, dtype=self.dtype),
            (self._input_layer.n_neurons, 1))

    def define_output_layer(self, n_neurons):
        """ Declare the output layer, fixing the number of network outputs
        """
        self._check_not_frozen("define the output layer")
        self._output_layer = Layer(n_neurons, dtype=self.dtype)
        self._output_names = [""] * self._output_layer.n_neurons
        self._output_norm = numpy.tile(
            numpy.array(DEFAULT_NORM, dtype=self.dtype),
            (self._output_layer.n_neurons, 1))

    def push_hidden_layer(self, n_neurons):
        """ Append a hidden layer after the previously pushed ones
        """
        self._check_not_frozen("push a hidden layer")
        self._hidden_layers.append(Layer(n_neurons, dtype=self.dtype))

    @property
    def is_frozen(self):
        return self._layers is not None

    @property
    def is_sized(self):
        return self._sized

    def _check_not_frozen(self, action):
        if self.is_frozen:
            msg = ("Cannot {} after weights, biases or activation functions "
                   "have been assigned")
            raise ConfigurationError(msg.format(action))

    def _check_architecture(self):
        if self._input_layer is None:
            raise ConfigurationError("The input layer has not been defined")
        if self._output_layer is None:
            raise ConfigurationError("The output layer has not been defined")
        if not self._hidden_layers:
            raise ConfigurationError("At least one hidden layer is required")

    def _freeze(self):
        """ Build the layer arena and zero-initialized weight matrices
        """
        if self.is_frozen:
            return

        self._check_architecture()

        self._layers = ([self._input_layer] + self._hidden_layers +
                        [self._output_layer])
        self._weights = [
            numpy.zeros((destination.n_neurons, source.n_neurons),
                        dtype=self.dtype)
            for source, destination in zip(self._layers[:-1],
                                           self._layers[1:])
        ]
        self._activations = [ActivationFunction.NONE] * len(self._layers)

        logger.debug("Froze network architecture: {}".format(
            [layer.n_neurons for layer in self._layers]))

    def size_weights(self):
        """ Allocate the derivative and output buffers

        This is the last construction step and must precede any
        evaluation. It freezes the architecture if that hasn't already
        happened.

        Raises
        ------
        ConfigurationError
            If the input, output, or hidden layers are missing, or if any
            normalization pair has a zero scale.

        """
        self._check_architecture()
        self._freeze()

        n_inputs = self._input_layer.n_neurons
        n_outputs = self._output_layer.n_neurons

        self._check_scales(self._input_normalization, self._input_norm,
                           self._input_names, "input")
        self._check_scales(self._output_normalization, self._output_norm,
                           self._output_names, "output")

        for layer in self._layers:
            layer.size_gradients(n_inputs)

        self._outputs = numpy.zeros(n_outputs, dtype=self.dtype)
        self._jacobian = numpy.zeros((n_outputs, n_inputs), dtype=self.dtype)
        self._hessian = numpy.zeros(
            (n_outputs, n_inputs, n_inputs), dtype=self.dtype)

        self._has_outputs = False
        self._has_jacobian = False
        self._has_hessian = False
        self._sized = True

        logger.debug("Sized network with {:d} inputs and {:d} outputs".format(
            n_inputs, n_outputs))

    @staticmethod
    def _check_scales(strategy, params, names, kind):
        scales = strategy.scale(params)
        for i in numpy.flatnonzero(scales == 0):
            msg = ("Normalization of {} {:d} (`{}`) has zero scale under "
                   "the {} strategy")
            raise ConfigurationError(
                msg.format(kind, i, names[i], strategy.name))

    ######################################################################
    # Parameter assignment

    def set_weight(self, i_layer, i_neuron, j_neuron, value):
        """ Set the weight of the synapse from neuron `i_neuron` in layer
        `i_layer` to neuron `j_neuron` in layer `i_layer + 1`
        """
        self._freeze()
        self._check_synapse(i_layer, i_neuron, j_neuron)
        self._weights[i_layer][j_neuron, i_neuron] = value

    def get_weight(self, i_layer, i_neuron, j_neuron):
        """ The weight from neuron `i_neuron` in layer `i_layer` to neuron
        `j_neuron` in layer `i_layer + 1`
        """
        self._freeze()
        self._check_synapse(i_layer, i_neuron, j_neuron)
        return self._weights[i_layer][j_neuron, i_neuron]

    def set_weights(self, i_layer, weights):
        """ Set all weights of weight layer `i_layer` at once

        Parameters
        ----------
        i_layer: int
            Weight layer index.

        weights: array-like, shape=(n_neurons(i_layer+1), n_neurons(i_layer))
            `weights[j, i]` connects neuron `i` of layer `i_layer` to
            neuron `j` of layer `i_layer + 1`.

        """
        self._freeze()
        self._check_weight_layer(i_layer)
        weights = numpy.asarray(weights, dtype=self.dtype)
        expected = self._weights[i_layer].shape
        if weights.shape != expected:
            msg = "Weights for weight layer {:d} have shape {} but expected {}"
            raise ConfigurationError(
                msg.format(i_layer, weights.shape, expected))
        self._weights[i_layer][...] = weights

    def get_weights(self, i_layer):
        """ A copy of the weight matrix of weight layer `i_layer`
        """
        self._freeze()
        self._check_weight_layer(i_layer)
        return self._weights[i_layer].copy()

    def set_bias(self, i_layer, i_neuron, value):
        self._freeze()
        self._check_layer(i_layer)
        self._layers[i_layer].set_bias(i_neuron, value)

    def get_bias(self, i_layer, i_neuron):
        self._freeze()
        self._check_layer(i_layer)
        return self._layers[i_layer].get_bias(i_neuron)

    def set_biases(self, i_layer, biases):
        """ Set all biases of layer `i_layer` at once
        """
        self._freeze()
        self._check_layer(i_layer)
        layer = self._layers[i_layer]
        if layer.is_input:
            raise ConfigurationError("The input layer has no biases")
        biases = numpy.asarray(biases, dtype=self.dtype)
        if biases.shape != (layer.n_neurons,):
            msg = "Biases for layer {:d} have shape {} but expected {}"
            raise ConfigurationError(
                msg.format(i_layer, biases.shape, (layer.n_neurons,)))
        layer.bias[...] = biases

    def set_activation_function(self, i_layer, function):
        """ Assign the activation function of layer `i_layer`

        Parameters
        ----------
        i_layer: int
            Layer index. The input layer's function is never evaluated.

        function: str or ActivationFunction
            Activation function name, e.g., "tanh".

        Raises
        ------
        ConfigurationError
            If the name is not recognized or the index is out of bounds.

        """
        self._freeze()
        self._check_layer(i_layer)
        self._activations[i_layer] = ActivationFunction.from_name(function)

    def get_activation_function(self, i_layer):
        self._freeze()
        self._check_layer(i_layer)
        return self._activations[i_layer]

    def set_input_name(self, i_input, name):
        self._check_input_index(i_input)
        self._input_names[i_input] = name

    def set_output_name(self, i_output, name):
        self._check_output_index(i_output)
        self._output_names[i_output] = name

    def get_input_name(self, i_input):
        self._check_input_index(i_input)
        return self._input_names[i_input]

    def get_output_name(self, i_output):
        self._check_output_index(i_output)
        return self._output_names[i_output]

    def set_input_norm(self, i_input, first, second):
        """ Set the normalization pair of input `i_input`, e.g., its
        (minimum, maximum) under min-max normalization
        """
        self._check_input_index(i_input)
        params = self._input_norm.copy()
        params[i_input] = (first, second)
        if self._sized:
            self._check_scales(self._input_normalization, params,
                               self._input_names, "input")
        self._input_norm = params

    def set_output_norm(self, i_output, first, second):
        """ Set the normalization pair of output `i_output`
        """
        self._check_output_index(i_output)
        params = self._output_norm.copy()
        params[i_output] = (first, second)
        if self._sized:
            self._check_scales(self._output_normalization, params,
                               self._output_names, "output")
        self._output_norm = params

    def get_input_norm(self, i_input):
        self._check_input_index(i_input)
        return tuple(float(v) for v in self._input_norm[i_input])

    def get_output_norm(self, i_output):
        self._check_output_index(i_output)
        return tuple(float(v) for v in self._output_norm[i_output])

    def set_input_normalization(self, strategy):
        """ Select the input normalization strategy by name ("minmax",
        "standard", "robust") or instance
        """
        strategy = get_normalization_strategy(strategy)
        if self._sized:
            self._check_scales(strategy, self._input_norm,
                               self._input_names, "input")
        self._input_normalization = strategy

    def set_output_normalization(self, strategy):
        """ Select the output normalization strategy by name ("minmax",
        "standard", "robust") or instance
        """
        strategy = get_normalization_strategy(strategy)
        if self._sized:
            self._check_scales(strategy, self._output_norm,
                               self._output_names, "output")
        self._output_normalization = strategy

    @property
    def input_normalization(self):
        return self._input_normalization

    @property
    def output_normalization(self):
        return self._output_normalization

    ######################################################################
    # Index validation

    def _check_layer(self, i_layer):
        if not 0 <= i_layer < len(self._layers):
            msg = "Layer index {} out of bounds for network with {:d} layers"
            raise ConfigurationError(msg.format(i_layer, len(self._layers)))

    def _check_weight_layer(self, i_layer):
        if not 0 <= i_layer < len(self._weights):
            msg = ("Weight layer index {} out of bounds for network with "
                   "{:d} weight layers")
            raise ConfigurationError(msg.format(i_layer, len(self._weights)))

    def _check_synapse(self, i_layer, i_neuron, j_neuron):
        self._check_weight_layer(i_layer)
        n_source, n_destination = (self._layers[i_layer].n_neurons,
                                   self._layers[i_layer + 1].n_neurons)
        if not 0 <= i_neuron < n_source:
            msg = "Neuron index {} out of bounds for layer {:d} of size {:d}"
            raise ConfigurationError(msg.format(i_neuron, i_layer, n_source))
        if not 0 <= j_neuron < n_destination:
            msg = "Neuron index {} out of bounds for layer {:d} of size {:d}"
            raise ConfigurationError(
                msg.format(j_neuron, i_layer + 1, n_destination))

    def _check_input_index(self, i_input):
        if self._input_layer is None:
            raise ConfigurationError("The input layer has not been defined")
        if not 0 <= i_input < self.n_inputs:
            msg = "Input index {} out of bounds for {:d} inputs"
            raise ConfigurationError(msg.format(i_input, self.n_inputs))

    def _check_output_index(self, i_output):
        if self._output_layer is None:
            raise ConfigurationError("The output layer has not been defined")
        if not 0 <= i_output < self.n_outputs:
            msg = "Output index {} out of bounds for {:d} outputs"
            raise ConfigurationError(msg.format(i_output, self.n_outputs))

    ######################################################################
    # Introspection

    @property
    def n_inputs(self):
        return len(self._input_names)

    @property
    def n_outputs(self):
        return len(self._output_names)

    @property
    def n_hidden_layers(self):
        return len(self._hidden_layers)

    @property
    def n_layers(self):
        """ Total number of layers, including the input and output layers
        """
        return len(self._declared_layers())

    @property
    def n_weight_layers(self):
        return max(self.n_layers - 1, 0)

    @property
    def input_names(self):
        return list(self._input_names)

    @property
    def output_names(self):
        return list(self._output_names)

    def _declared_layers(self):
        if self.is_frozen:
            return self._layers
        return [layer for layer in
                [self._input_layer] + self._hidden_layers +
                [self._output_layer]
                if layer is not None]

    def get_n_neurons(self, i_layer):
        layers = self._declared_layers()
        if not 0 <= i_layer < len(layers):
            msg = "Layer index {} out of bounds for network with {:d} layers"
            raise ConfigurationError(msg.format(i_layer, len(layers)))
        return layers[i_layer].n_neurons

    def architecture(self):
        """ Summarize the layer layout

        Returns
        -------
        layers: list of LayerInfo
            One record per layer, from the input to the output layer.

        """
        layers = self._declared_layers()
        activations = (self._activations if self.is_frozen
                       else [ActivationFunction.NONE] * len(layers))
        return [
            LayerInfo(index=i, n_neurons=layer.n_neurons, activation=function)
            for i, (layer, function) in enumerate(zip(layers, activations))
        ]

    def get_variable_mapping(self, lookup_inputs, lookup_outputs):
        """ Match this network's variables against a lookup request

        See :func:`mlpdiff.matching.variable_matcher.match_variables`.
        """
        return match_variables(self._input_names, self._output_names,
                               lookup_inputs, lookup_outputs)

    def copy(self):
        """ An independent copy, with its own scratch buffers
        """
        return copy.deepcopy(self)

    ######################################################################
    # Extrapolation checks

    def check_input_inclusion(self, value, i_input):
        """ Whether a raw value of input `i_input` lies inside the trust
        region of the input normalization
        """
        self._check_input_index(i_input)
        return bool(self._input_normalization.contains(
            value, self._input_norm[i_input]))

    def find_extrapolated_inputs(self, inputs):
        """ Indices of the raw inputs that lie outside the trust region
        """
        inputs = self._validate_inputs(inputs)
        inside = self._input_normalization.contains(inputs, self._input_norm)
        return [int(i) for i in numpy.flatnonzero(~inside)]

    def _warn_extrapolation(self, inputs):
        for i_input in self.find_extrapolated_inputs(inputs):
            msg = ("Input {:d} (`{}`) = {:g} lies outside the {} trust "
                   "region").format(i_input, self._input_names[i_input],
                                    inputs[i_input],
                                    self._input_normalization.description)
            logger.debug(msg)
            warnings.warn(msg, ExtrapolationWarning, stacklevel=3)

    ######################################################################
    # Evaluation

    def _validate_inputs(self, inputs):
        inputs = numpy.asarray(inputs, dtype=self.dtype)
        if inputs.shape != (self.n_inputs,):
            msg = "Expected input vector of shape {} but got {}"
            raise DimensionMismatchError(
                msg.format((self.n_inputs,), inputs.shape))
        return inputs

    @staticmethod
    def _check_buffer(buffer, shape, name):
        if buffer is None:
            return
        if numpy.shape(buffer) != shape:
            msg = "Buffer `{}` has shape {} but expected {}"
            raise DimensionMismatchError(
                msg.format(name, numpy.shape(buffer), shape))

    def predict(self, inputs, options=None, out=None, jacobian_out=None,
                hessian_out=None):
        """ Evaluate the network for a single raw input vector

        Parameters
        ----------
        inputs: array-like, shape=(n_inputs,)
            Raw (non-normalized) input values, ordered like the input
            names.

        options: EvaluationOptions, default=None
            Which derivatives to compute and whether to warn about
            extrapolation. The default computes outputs only.

        out: ndarray, shape=(n_outputs,), default=None
            Optional buffer receiving the outputs.

        jacobian_out: ndarray, shape=(n_outputs, n_inputs), default=None
            Optional buffer receiving the first derivatives, filled when
            first derivatives are computed.

        hessian_out: ndarray, shape=(n_outputs, n_inputs, n_inputs)
            Optional buffer receiving the second derivatives, filled when
            second derivatives are computed.

        Returns
        -------
        prediction: Prediction
            `outputs`, `jacobian[i, j]` = d output_i / d input_j and
            `hessian[i, j, k]` = d2 output_i / d input_j d input_k. The
            derivatives are None when they weren't requested. The arrays
            are copies and stay valid across later evaluations.

        Raises
        ------
        ConfigurationError
            If the network hasn't been sized.

        DimensionMismatchError
            If `inputs` or any provided buffer has the wrong shape.

        """
        if not self._sized:
            raise ConfigurationError(
                "The network must be sized with `size_weights` before "
                "evaluation")

        if options is None:
            options = EvaluationOptions()
        second_order = bool(options.second_order)
        first_order = bool(options.first_order) or second_order

        inputs = self._validate_inputs(inputs)

        n_inputs, n_outputs = self.n_inputs, self.n_outputs
        self._check_buffer(out, (n_outputs,), "out")
        self._check_buffer(jacobian_out, (n_outputs, n_inputs),
                           "jacobian_out")
        self._check_buffer(hessian_out, (n_outputs, n_inputs, n_inputs),
                           "hessian_out")

        if options.check_extrapolation:
            self._warn_extrapolation(inputs)

        self._propagate(inputs, first_order, second_order)
        self._denormalize_outputs(first_order, second_order)

        self._has_outputs = True
        self._has_jacobian = first_order
        self._has_hessian = second_order

        if out is not None:
            out[...] = self._outputs
        if first_order and jacobian_out is not None:
            jacobian_out[...] = self._jacobian
        if second_order and hessian_out is not None:
            hessian_out[...] = self._hessian

        return Prediction(
            outputs=self._outputs.copy(),
            jacobian=self._jacobian.copy() if first_order else None,
            hessian=self._hessian.copy() if second_order else None)

    def _propagate(self, inputs, first_order, second_order):
        """ Forward pass in the normalized domain, layer by layer
        """
        input_layer = self._layers[0]
        input_layer.outputs[...] = self._input_normalization.normalize(
            inputs, self._input_norm)

        if first_order:
            input_scale = self._input_normalization.scale(self._input_norm)
            input_layer.dydx[...] = numpy.diag(1.0 / input_scale)
            if second_order:
                # Normalization is linear in the inputs
                input_layer.d2ydx2.fill(0.0)

        for i_layer in range(1, len(self._layers)):
            previous = self._layers[i_layer - 1]
            layer = self._layers[i_layer]
            weights = self._weights[i_layer - 1]

            x = layer.bias + weights.dot(previous.outputs)
            phi, dphi, d2phi = evaluate(
                self._activations[i_layer], x,
                first_order=first_order, second_order=second_order)

            layer.outputs[...] = phi

            if not first_order:
                continue

            # psi[i, j] = sum_n w[i, n] * d y_n / d x_j
            psi = weights.dot(previous.dydx)
            layer.dydx[...] = dphi[:, None] * psi

            if second_order:
                # chi[i, j, k] = sum_n w[i, n] * d2 y_n / d x_j d x_k
                chi = numpy.tensordot(weights, previous.d2ydx2, axes=1)
                layer.d2ydx2[...] = (
                    d2phi[:, None, None] * psi[:, :, None] * psi[:, None, :] +
                    dphi[:, None, None] * chi)

    def _denormalize_outputs(self, first_order, second_order):
        output_layer = self._layers[-1]
        strategy = self._output_normalization

        self._outputs[...] = strategy.denormalize(
            output_layer.outputs, self._output_norm)

        if first_order:
            output_scale = strategy.scale(self._output_norm)
            self._jacobian[...] = output_scale[:, None] * output_layer.dydx
            if second_order:
                self._hessian[...] = (output_scale[:, None, None] *
                                      output_layer.d2ydx2)

    ######################################################################
    # Results of the most recent evaluation

    @property
    def outputs(self):
        """ Outputs of the most recent evaluation (None before any) """
        return self._outputs.copy() if self._has_outputs else None

    @property
    def jacobian(self):
        """ First derivatives of the most recent evaluation, or None if it
        didn't compute them
        """
        return self._jacobian.copy() if self._has_jacobian else None

    @property
    def hessian(self):
        """ Second derivatives of the most recent evaluation, or None if
        it didn't compute them
        """
        return self._hessian.copy() if self._has_hessian else None

    def get_output(self, i_output):
        if not self._has_outputs:
            raise NotEvaluated("The network has not been evaluated")
        self._check_output_index(i_output)
        return self._outputs[i_output]

    def get_doutput_dinput(self, i_output, i_input):
        if not self._has_jacobian:
            raise NotEvaluated(
                "The last evaluation did not compute first derivatives")
        self._check_output_index(i_output)
        self._check_input_index(i_input)
        return self._jacobian[i_output, i_input]

    def get_d2output_dinput2(self, i_output, i_input, j_input):
        if not self._has_hessian:
            raise NotEvaluated(
                "The last evaluation did not compute second derivatives")
        self._check_output_index(i_output)
        self._check_input_index(i_input)
        self._check_input_index(j_input)
        return self._hessian[i_output, i_input, j_input]

    def compute_doutput_dinput(self, i_layer, i_neuron, i_input):
        """ Weighted sum of the previous layer's output derivatives with
        respect to input `i_input`, i.e., the derivative of the
        pre-activation of neuron `i_neuron` in layer `i_layer`, in the
        normalized domain of the most recent evaluation
        """
        if not self._has_jacobian:
            raise NotEvaluated(
                "The last evaluation did not compute first derivatives")
        self._check_layer(i_layer)
        if i_layer == 0:
            raise ConfigurationError("The input layer has no pre-activation")
        self._layers[i_layer].check_neuron(i_neuron)
        self._check_input_index(i_input)
        previous = self._layers[i_layer - 1]
        return self._weights[i_layer - 1][i_neuron].dot(
            previous.dydx[:, i_input])
