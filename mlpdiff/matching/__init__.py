# flake8: noqa

from .variable_matcher import match_variables, MatchResult
