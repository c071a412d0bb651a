import pytest

from capsule_flow.core.config.engine_config import (
    DEFAULT_ENGINE_CONFIG,
    EngineConfig,
    resolve_engine_config,
)
from capsule_flow.core.config.loader import load_config
from capsule_flow.core.exceptions import EngineConfigurationError


def test_defaults_when_no_config_is_given():
    cfg = resolve_engine_config(None)

    assert cfg == EngineConfig(on_dependency_failure="continue", fail_fast=False)
    assert cfg.skip_failed_dependents is False


def test_skip_policy_is_resolved():
    cfg = resolve_engine_config({"engine": {"on_dependency_failure": "skip"}})

    assert cfg.skip_failed_dependents is True
    assert cfg.fail_fast is False


def test_unrelated_sections_are_ignored():
    cfg = resolve_engine_config({"editor": {"grid": 16}})

    assert cfg == EngineConfig()


def test_defaults_are_not_mutated():
    resolve_engine_config({"engine": {"fail_fast": True}})

    assert DEFAULT_ENGINE_CONFIG["engine"]["fail_fast"] is False


def test_unknown_policy_carries_allowed_values():
    """
    Verifica que a exceção de configuração é estruturada.

    Invariantes:
        - `details` traz o valor recebido e os valores aceitos
        - `hint` orienta a correção
    """
    with pytest.raises(EngineConfigurationError) as exc_info:
        resolve_engine_config({"engine": {"on_dependency_failure": "retry"}})

    err = exc_info.value
    assert err.details["received"] == "retry"
    assert err.details["allowed"] == ["continue", "skip"]
    assert err.hint


def test_type_conflict_becomes_configuration_error():
    with pytest.raises(EngineConfigurationError):
        resolve_engine_config({"engine": {"fail_fast": "yes"}})


def test_resolved_from_loaded_files(tmp_path, engine_defaults_yaml, engine_local_yaml):
    defaults = tmp_path / "defaults.yaml"
    local = tmp_path / "local.yaml"
    defaults.write_text(engine_defaults_yaml, encoding="utf-8")
    local.write_text(engine_local_yaml, encoding="utf-8")

    cfg = resolve_engine_config(load_config(defaults_path=str(defaults), local_path=str(local)))

    assert cfg.on_dependency_failure == "skip"


@pytest.mark.parametrize("section", ["strict", ["skip"], 1])
def test_non_mapping_engine_section_is_a_configuration_error(section):
    with pytest.raises(EngineConfigurationError) as exc_info:
        resolve_engine_config({"engine": section})

    assert "engine" in str(exc_info.value)
