from collections import namedtuple


MatchResult = namedtuple(
    'MatchResult',
    ['is_match', 'input_indices', 'output_indices'])


def _first_index_map(names):
    index_map = {}
    for i, name in enumerate(names):
        index_map.setdefault(name, i)
    return index_map


def match_variables(input_names, output_names, lookup_inputs, lookup_outputs):
    """ Decide whether a network can serve a lookup request

    Every network input must be available among `lookup_inputs` (strict,
    order-independent), while at least one network output must be among
    `lookup_outputs` (permissive). Network outputs that weren't requested
    are left out of the result.

    Parameters
    ----------
    input_names, output_names: list of str
        The network's input and output variable names, in neuron order.

    lookup_inputs, lookup_outputs: list of str
        The variable names available to, and requested by, the caller.

    Returns
    -------
    result: MatchResult
        `input_indices` and `output_indices` are lists of
        ``(lookup_index, network_index)`` pairs ordered by network index.
        Both are empty when `is_match` is False.

    """
    no_match = MatchResult(is_match=False, input_indices=[],
                           output_indices=[])

    lookup_input_map = _first_index_map(lookup_inputs)

    input_indices = []
    for i_network, name in enumerate(input_names):
        if name not in lookup_input_map:
            return no_match
        input_indices.append((lookup_input_map[name], i_network))

    lookup_output_map = _first_index_map(lookup_outputs)

    output_indices = [
        (lookup_output_map[name], i_network)
        for i_network, name in enumerate(output_names)
        if name in lookup_output_map
    ]

    if not output_indices:
        return no_match

    return MatchResult(is_match=True, input_indices=input_indices,
                       output_indices=output_indices)
