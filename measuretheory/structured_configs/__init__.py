"""Structured configs for building measures through hydra."""

from measuretheory.structured_configs.measure import (
    ForArraysBuilderInstanceConfig,
    ForGridBuilderInstanceConfig,
    InstanceConfig,
    LikelihoodBuilderInstanceConfig,
    MeasureBuilderInstanceConfig,
    resolve_measure_config,
    validate_instance_config,
)

__all__ = [
    "ForArraysBuilderInstanceConfig",
    "ForGridBuilderInstanceConfig",
    "InstanceConfig",
    "LikelihoodBuilderInstanceConfig",
    "MeasureBuilderInstanceConfig",
    "resolve_measure_config",
    "validate_instance_config",
]
