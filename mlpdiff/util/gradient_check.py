import logging

import numpy

from mlpdiff.core.network import SECOND_ORDER


_logger_name = __name__.rsplit('.', 1)[-1]
logger = logging.getLogger(_logger_name)


def _perturbed_outputs(network, inputs, i_input, delta):
    perturbed = inputs.copy()
    perturbed[i_input] += delta
    return network.predict(perturbed).outputs


def finite_difference_jacobian(network, inputs, step=1e-5):
    """ Centered difference approximation of d outputs / d inputs

    Parameters
    ----------
    network: Network
        A sized network.

    inputs: array-like, shape=(n_inputs,)
        Raw input values at which to differentiate.

    step: float or array-like, default=1e-5
        Perturbation applied to each input, either shared or per input.

    Returns
    -------
    jacobian: numpy.ndarray, shape=(n_outputs, n_inputs)

    """
    inputs = numpy.array(inputs, dtype=numpy.float64)
    steps = numpy.broadcast_to(numpy.asarray(step, dtype=numpy.float64),
                               inputs.shape)

    jacobian = numpy.zeros((network.n_outputs, network.n_inputs))
    for j in range(network.n_inputs):
        forward = _perturbed_outputs(network, inputs, j, steps[j])
        backward = _perturbed_outputs(network, inputs, j, -steps[j])
        jacobian[:, j] = (forward - backward) / (2 * steps[j])

    return jacobian


def finite_difference_hessian(network, inputs, step=1e-4):
    """ Centered difference approximation of d2 outputs / d inputs2

    The diagonal uses the three point stencil and the off-diagonal terms
    the four point stencil.

    Returns
    -------
    hessian: numpy.ndarray, shape=(n_outputs, n_inputs, n_inputs)

    """
    inputs = numpy.array(inputs, dtype=numpy.float64)
    steps = numpy.broadcast_to(numpy.asarray(step, dtype=numpy.float64),
                               inputs.shape)
    n_inputs = network.n_inputs

    center = network.predict(inputs).outputs
    hessian = numpy.zeros((network.n_outputs, n_inputs, n_inputs))

    for j in range(n_inputs):
        hj = steps[j]
        forward = _perturbed_outputs(network, inputs, j, hj)
        backward = _perturbed_outputs(network, inputs, j, -hj)
        hessian[:, j, j] = (forward - 2 * center + backward) / hj**2

        for k in range(j + 1, n_inputs):
            hk = steps[k]
            corners = []
            for sj, sk in ((1, 1), (1, -1), (-1, 1), (-1, -1)):
                perturbed = inputs.copy()
                perturbed[j] += sj * hj
                perturbed[k] += sk * hk
                corners.append(network.predict(perturbed).outputs)
            pp, pm, mp, mm = corners
            hessian[:, j, k] = (pp - pm - mp + mm) / (4 * hj * hk)
            hessian[:, k, j] = hessian[:, j, k]

    return hessian


def check_derivatives(network, inputs, step=1e-5, rtol=1e-5, atol=1e-8,
                      second_order=False, second_order_step=1e-4):
    """ Compare the analytic derivatives against finite differences

    Parameters
    ----------
    network: Network
        A sized network.

    inputs: array-like, shape=(n_inputs,)
        Raw input values at which to compare.

    step: float, default=1e-5
        Perturbation used for the Jacobian approximation.

    rtol, atol: float
        Tolerances, as in :func:`numpy.allclose`.

    second_order: bool, default=False
        Also compare second derivatives, using `second_order_step`.

    Returns
    -------
    ok: bool
        Whether all compared derivatives agree within tolerance.

    max_error: float
        The largest absolute difference encountered.

    """
    prediction = network.predict(inputs, options=SECOND_ORDER)

    jacobian = finite_difference_jacobian(network, inputs, step)
    errors = [numpy.abs(prediction.jacobian - jacobian).max()]
    ok = numpy.allclose(prediction.jacobian, jacobian, rtol=rtol, atol=atol)

    if second_order:
        hessian = finite_difference_hessian(
            network, inputs, second_order_step)
        errors.append(numpy.abs(prediction.hessian - hessian).max())
        ok = ok and numpy.allclose(
            prediction.hessian, hessian, rtol=rtol, atol=atol)

    max_error = float(max(errors))

    msg = "Derivative check {}: max abs error {:.3e}"
    logger.info(msg.format("passed" if ok else "failed", max_error))

    return bool(ok), max_error
