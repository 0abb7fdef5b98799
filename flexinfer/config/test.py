"""Tests for configuration management."""

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    _convert_value,
    _parse_bool,
    get_environment,
    get_environment_info,
    get_log_level,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("FLEXINFER_OVERLAP_LIGHT_TOLERANCE", raising=False)
        result = get_environment(EnvVar.OVERLAP_LIGHT_TOLERANCE)
        assert result == -5.0

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("FLEXINFER_GRID_CLUSTER_TOLERANCE", "9")
        result = get_environment(EnvVar.GRID_CLUSTER_TOLERANCE, override=3.0)
        assert result == 3.0

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("FLEXINFER_OVERLAP_CONFIRM_TOLERANCE", "-12.5")
        result = get_environment(EnvVar.OVERLAP_CONFIRM_TOLERANCE)
        assert result == -12.5

    @pytest.mark.unit
    def test_float_type_conversion(self, monkeypatch):
        """Float type conversion from string."""
        monkeypatch.setenv("FLEXINFER_ROW_SPLIT_GAP_RATIO", "0.3")
        result = get_environment(EnvVar.ROW_SPLIT_GAP_RATIO)
        assert result == pytest.approx(0.3)
        assert isinstance(result, float)

    @pytest.mark.unit
    def test_int_type_conversion(self, monkeypatch):
        """Integer type conversion from string."""
        monkeypatch.setenv("FLEXINFER_GRID_MIN_CHILDREN", "6")
        result = get_environment(EnvVar.GRID_MIN_CHILDREN)
        assert result == 6
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_bool_type_conversion(self, monkeypatch):
        """Boolean type conversion for true and false spellings."""
        for value in ("true", "1", "yes", "TRUE"):
            monkeypatch.setenv("FLEXINFER_LOG_DECISIONS", value)
            assert get_environment(EnvVar.LOG_DECISIONS) is True
        for value in ("false", "0", "no", "No"):
            monkeypatch.setenv("FLEXINFER_LOG_DECISIONS", value)
            assert get_environment(EnvVar.LOG_DECISIONS) is False

    @pytest.mark.unit
    def test_invalid_float_returns_default(self, monkeypatch):
        """Invalid numeric value returns default."""
        monkeypatch.setenv("FLEXINFER_ALIGN_MIN_TOLERANCE", "wide")
        result = get_environment(EnvVar.ALIGN_MIN_TOLERANCE)
        assert result == 5.0


class TestConversionHelpers:
    """Tests for the private conversion helpers."""

    @pytest.mark.unit
    def test_parse_bool_unrecognized(self):
        """Unrecognized strings parse to None."""
        assert _parse_bool("maybe") is None

    @pytest.mark.unit
    @pytest.mark.parametrize("raw, expected", [(" On ", True), ("OFF", False)])
    def test_parse_bool_switch_words(self, raw, expected):
        assert _parse_bool(raw) is expected

    @pytest.mark.unit
    def test_convert_none_returns_default(self):
        """Missing values resolve to the default."""
        assert _convert_value(None, float, 1.5) == 1.5

    @pytest.mark.unit
    def test_convert_invalid_int(self):
        """Unparseable integers resolve to the default."""
        assert _convert_value("four", int, 4) == 4


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.GRID_CLUSTER_TOLERANCE)
        assert isinstance(info, EnvConfig)
        assert info.name == "FLEXINFER_GRID_CLUSTER_TOLERANCE"
        assert info.default == 5.0
        assert info.var_type is float
        assert info.category == "grid"

    @pytest.mark.unit
    def test_all_names_are_prefixed(self):
        """Every variable lives in the FLEXINFER_ namespace."""
        for var in EnvVar:
            assert var.value.name.startswith("FLEXINFER_")


class TestGetLogLevel:
    """Tests for log level resolution."""

    @pytest.mark.unit
    def test_default_level(self, monkeypatch):
        """Defaults to INFO."""
        monkeypatch.delenv("FLEXINFER_LOG_LEVEL", raising=False)
        assert get_log_level() == "INFO"

    @pytest.mark.unit
    def test_level_is_uppercased(self, monkeypatch):
        """Lower-case names are accepted."""
        monkeypatch.setenv("FLEXINFER_LOG_LEVEL", "debug")
        assert get_log_level() == "DEBUG"

    @pytest.mark.unit
    def test_unknown_level_falls_back(self):
        """Unknown level names fall back to the default."""
        assert get_log_level(override="chatty") == "INFO"


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_list_all(self):
        """No filter returns every variable."""
        assert list_environment_variables() == list(EnvVar)

    @pytest.mark.unit
    def test_filter_by_category(self):
        """Category filter returns only matching variables."""
        split_vars = list_environment_variables("split")
        assert EnvVar.ROW_SPLIT_GAP_RATIO in split_vars
        assert EnvVar.GRID_CLUSTER_TOLERANCE not in split_vars
        assert all(v.value.category == "split" for v in split_vars)

    @pytest.mark.unit
    def test_unknown_category_is_empty(self):
        """Unknown categories yield an empty list."""
        assert list_environment_variables("nonexistent") == []

    @pytest.mark.unit
    def test_strategy_category(self):
        """Detection strategy switches share the strategy category."""
        strategy_vars = list_environment_variables("strategy")
        assert strategy_vars == [
            EnvVar.SPLIT_STRATEGY,
            EnvVar.ADAPTIVE_TOLERANCE,
            EnvVar.SCORED_ALIGNMENT,
        ]
        assert get_environment(EnvVar.SPLIT_STRATEGY) == "sweep"
        assert get_environment(EnvVar.ADAPTIVE_TOLERANCE) is False
