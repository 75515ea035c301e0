"""Property tests for dot-path access and override merging."""

import copy

from hypothesis import given, settings, strategies as st

from lagforecast.utils.config_manager import ConfigManager

keys = st.text(alphabet="abcdefghijklmnopqrstuvwxyz_", min_size=1, max_size=8)
leaves = st.integers() | st.floats(allow_nan=False) | st.booleans() | st.text(max_size=5) | st.none()
values = st.recursive(
    leaves,
    lambda children: st.dictionaries(keys, children, max_size=4),
    max_leaves=12,
)
configs = st.dictionaries(keys, values, max_size=5)


def dot_paths(config, prefix=""):
    for key, value in config.items():
        path = f"{prefix}.{key}" if prefix else key
        yield path, value
        if isinstance(value, dict):
            yield from dot_paths(value, path)


@given(configs)
@settings(max_examples=50)
def test_every_path_resolves_to_its_value(config):
    manager = ConfigManager()
    for path, value in dot_paths(config):
        assert manager.get_value(config, path) == value


@given(configs, configs)
@settings(max_examples=50)
def test_merge_keeps_override_leaves_and_inputs(base, override):
    manager = ConfigManager()
    base_before, override_before = copy.deepcopy(base), copy.deepcopy(override)

    merged = manager.merge_configs(base, override)

    assert base == base_before
    assert override == override_before
    for path, value in dot_paths(override):
        if not isinstance(value, dict):
            assert manager.get_value(merged, path) == value
    assert manager.merge_configs(merged, override) == merged
