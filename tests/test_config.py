import math

import pytest

from step_traversability.config import (
    DEFAULT_PARAMS,
    ConfigurationError,
    StepFilterConfig,
    load_params,
)

KEYS = ["critical_value", "first_window_radius", "second_window_radius",
        "critical_cell_number", "map_type"]


def test_from_params_defaults():
    cfg = StepFilterConfig.from_params(DEFAULT_PARAMS)
    assert cfg.critical_value == 0.3
    assert cfg.first_window_radius == 0.08
    assert cfg.second_window_radius == 0.08
    assert cfg.n_cell_critical == 5
    assert cfg.output_layer == "traversability_step"
    assert cfg.to_params() == DEFAULT_PARAMS


@pytest.mark.parametrize("key", KEYS)
def test_missing_param_names_key(key):
    params = dict(DEFAULT_PARAMS)
    del params[key]
    with pytest.raises(ConfigurationError) as exc:
        StepFilterConfig.from_params(params)
    assert exc.value.key == key
    assert "not found" in exc.value.reason


@pytest.mark.parametrize("key", ["critical_value", "first_window_radius",
                                 "second_window_radius", "critical_cell_number"])
@pytest.mark.parametrize("bad", [0, -1])
def test_non_positive_rejected(key, bad):
    params = dict(DEFAULT_PARAMS, **{key: bad})
    with pytest.raises(ConfigurationError) as exc:
        StepFilterConfig.from_params(params)
    assert exc.value.key == key


@pytest.mark.parametrize("bad", [math.nan, math.inf, "0.3", None, True])
def test_critical_value_type_checks(bad):
    with pytest.raises(ConfigurationError) as exc:
        StepFilterConfig.from_params(dict(DEFAULT_PARAMS, critical_value=bad))
    assert exc.value.key == "critical_value"


@pytest.mark.parametrize("key", ["first_window_radius", "second_window_radius"])
def test_infinite_radius_rejected(key):
    with pytest.raises(ConfigurationError) as exc:
        StepFilterConfig.from_params(dict(DEFAULT_PARAMS, **{key: math.inf}))
    assert exc.value.key == key


@pytest.mark.parametrize("bad", [5.0, 2.5, True])
def test_critical_cell_number_must_be_integer(bad):
    with pytest.raises(ConfigurationError) as exc:
        StepFilterConfig.from_params(dict(DEFAULT_PARAMS, critical_cell_number=bad))
    assert exc.value.key == "critical_cell_number"


@pytest.mark.parametrize("bad", ["", "   ", 3, "elevation", "step_height"])
def test_map_type_rejected(bad):
    with pytest.raises(ConfigurationError) as exc:
        StepFilterConfig.from_params(dict(DEFAULT_PARAMS, map_type=bad))
    assert exc.value.key == "map_type"


def test_configuration_error_is_value_error():
    err = ConfigurationError("critical_value", "must be greater than zero")
    assert isinstance(err, ValueError)
    assert "critical_value" in str(err)


def test_load_params_flat(tmp_path):
    p = tmp_path / "flat.yaml"
    p.write_text(
        "critical_value: 0.25\n"
        "first_window_radius: 0.1\n"
        "second_window_radius: 0.2\n"
        "critical_cell_number: 3\n"
        "map_type: curb_cost\n"
    )
    cfg = StepFilterConfig.from_params(load_params(str(p)))
    assert cfg.critical_value == 0.25
    assert cfg.n_cell_critical == 3
    assert cfg.output_layer == "curb_cost"


def test_load_params_nested(tmp_path):
    p = tmp_path / "nested.yaml"
    p.write_text("params:\n  critical_value: 0.5\n  map_type: step\n")
    assert load_params(str(p)) == {"critical_value": 0.5, "map_type": "step"}


def test_load_params_rejects_non_mapping(tmp_path):
    p = tmp_path / "list.yaml"
    p.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_params(str(p))
