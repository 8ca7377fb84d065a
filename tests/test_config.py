import decimal
import sys

import pytest

from formula_engine import EngineConfig, InvalidArgumentError, LogLevel


def test_defaults():
    config = EngineConfig()
    assert config.precision == 50
    assert config.rounding == decimal.ROUND_HALF_EVEN
    assert config.max_factorial == 170
    assert config.log_level is None


@pytest.mark.parametrize("kwargs", [
    {"precision": 0},
    {"precision": 2.5},
    {"max_nesting_depth": -1},
    {"max_tree_depth": 0},
    {"max_factorial": -3},
    {"rounding": "ROUND_SIDEWAYS"},
    {"log_level": 3},
])
def test_invalid_values(kwargs):
    with pytest.raises(InvalidArgumentError):
        EngineConfig(**kwargs)


def test_from_dict():
    config = EngineConfig.from_dict({"precision": 12, "log_level": "silent", "rounding": decimal.ROUND_DOWN})
    assert config.precision == 12
    assert config.log_level == LogLevel.SILENT
    assert config.rounding == decimal.ROUND_DOWN


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(InvalidArgumentError):
        EngineConfig.from_dict({"precison": 12})
    with pytest.raises(InvalidArgumentError):
        EngineConfig.from_dict({"log_level": "chatty"})


def test_decimal_context_traps_overflow():
    ctx = EngineConfig(precision=8, rounding=decimal.ROUND_DOWN).decimal_context()
    assert ctx.prec == 8
    assert ctx.rounding == decimal.ROUND_DOWN
    assert ctx.traps[decimal.Overflow]
    assert ctx.traps[decimal.InvalidOperation]
    assert not ctx.traps[decimal.Inexact]


def test_config_is_frozen():
    with pytest.raises(AttributeError):
        EngineConfig().precision = 10


def test_tree_depth_default_tracks_recursion_limit():
    assert EngineConfig().max_tree_depth == max(64, sys.getrecursionlimit() // 2)
