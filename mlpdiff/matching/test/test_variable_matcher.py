import unittest

from mlpdiff.matching.variable_matcher import match_variables


class TestVariableMatcher(unittest.TestCase):

    def test_match_with_extra_lookup_inputs(self):

        result = match_variables(
            input_names=["u", "v"], output_names=["y", "z"],
            lookup_inputs=["u", "v", "w"], lookup_outputs=["y"])

        self.assertTrue(result.is_match)
        self.assertEqual(result.input_indices, [(0, 0), (1, 1)])
        self.assertEqual(result.output_indices, [(0, 0)])

    def test_missing_input_is_no_match(self):

        result = match_variables(
            input_names=["u", "v"], output_names=["y", "z"],
            lookup_inputs=["u"], lookup_outputs=["y", "z"])

        self.assertFalse(result.is_match)
        self.assertEqual(result.input_indices, [])
        self.assertEqual(result.output_indices, [])

    def test_partial_inputs_are_discarded(self):

        # "u" and "v" match before "w" is found missing
        result = match_variables(
            input_names=["u", "v", "w"], output_names=["y"],
            lookup_inputs=["v", "u"], lookup_outputs=["y"])

        self.assertFalse(result.is_match)
        self.assertEqual(result.input_indices, [])

    def test_input_order_independent(self):

        result = match_variables(
            input_names=["u", "v"], output_names=["y"],
            lookup_inputs=["w", "v", "u"], lookup_outputs=["y"])

        self.assertTrue(result.is_match)
        self.assertEqual(result.input_indices, [(2, 0), (1, 1)])

    def test_no_overlapping_output(self):

        result = match_variables(
            input_names=["u", "v"], output_names=["y", "z"],
            lookup_inputs=["u", "v"], lookup_outputs=["q"])

        self.assertFalse(result.is_match)
        self.assertEqual(result.input_indices, [])
        self.assertEqual(result.output_indices, [])

    def test_subset_of_outputs(self):

        result = match_variables(
            input_names=["u"], output_names=["a", "b", "c"],
            lookup_inputs=["u"], lookup_outputs=["d", "c", "a"])

        self.assertTrue(result.is_match)
        self.assertEqual(result.output_indices, [(2, 0), (1, 2)])

    def test_every_network_input_appears_once(self):

        result = match_variables(
            input_names=["a", "b", "c"], output_names=["y"],
            lookup_inputs=["c", "a", "b", "a"], lookup_outputs=["y"])

        self.assertTrue(result.is_match)
        network_indices = sorted(i for _, i in result.input_indices)
        self.assertEqual(network_indices, [0, 1, 2])

    def test_duplicate_lookup_names_use_first(self):

        result = match_variables(
            input_names=["u"], output_names=["y"],
            lookup_inputs=["u", "u"], lookup_outputs=["y", "y"])

        self.assertEqual(result.input_indices, [(0, 0)])
        self.assertEqual(result.output_indices, [(0, 0)])
