"""Measure configuration dataclasses."""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import hydra
from omegaconf import DictConfig

from measuretheory.builder import MEASURE_FAMILIES
from measuretheory.exceptions import ConfigValidationError
from measuretheory.logger import MEASURETHEORY_LOGGER
from measuretheory.structured_configs.validation import (
    validate_mapping,
    validate_nonempty_str,
    validate_number,
    validate_positive_int,
    validate_sequence,
)

BUILD_MEASURE_TARGET = "measuretheory.builder.build_measure"
BUILD_FOR_GRID_TARGET = "measuretheory.builder.build_for_grid"
BUILD_FOR_ARRAYS_TARGET = "measuretheory.builder.build_for_arrays"
BUILD_LIKELIHOOD_TARGET = "measuretheory.builder.build_likelihood"


@dataclass
class InstanceConfig:
    """Base of the measure builder configs, instantiated by hydra through its ``_target_``."""

    _target_: str


def validate_instance_config(
    cfg: DictConfig, expected_target: str | None = None, config_name: str = "InstanceConfig"
) -> None:
    """Check that ``cfg._target_`` is a non-empty string and, if given, the expected target."""
    target = cfg.get("_target_", None)
    validate_nonempty_str(target, f"{config_name}._target_")
    if expected_target is not None and target != expected_target:
        raise ConfigValidationError(f"{config_name}._target_ must be {expected_target}, got {target}")


def _validate_family(value: Any, field_name: str) -> None:
    validate_nonempty_str(value, field_name)
    if value not in MEASURE_FAMILIES:
        raise ConfigValidationError(
            f"{field_name} must be one of {', '.join(MEASURE_FAMILIES.keys())}, got {value!r}"
        )


def _validate_number_array(value: Any, field_name: str) -> None:
    validate_sequence(value, field_name, element_validator=validate_number)


@dataclass
class MeasureBuilderInstanceConfig(InstanceConfig):
    """Configuration for the measure builder."""

    family: str
    params: Mapping[str, Any] | None = None

    def __init__(
        self,
        family: str,
        params: Mapping[str, Any] | None = None,
        _target_: str = BUILD_MEASURE_TARGET,
    ) -> None:
        super().__init__(_target_=_target_)
        self.family = family
        self.params = params


def is_measure_builder_target(target: str) -> bool:
    """Check if the target is a measure builder target."""
    return target == BUILD_MEASURE_TARGET


def is_measure_builder_config(cfg: DictConfig) -> bool:
    """Check if the configuration is a measure builder config."""
    target = cfg.get("_target_", None)
    if isinstance(target, str):
        return is_measure_builder_target(target)
    return False


def validate_measure_builder_instance_config(cfg: DictConfig) -> None:
    """Validate a MeasureBuilderInstanceConfig.

    Args:
        cfg: A DictConfig with MeasureBuilderInstanceConfig fields (from Hydra).
    """
    validate_instance_config(cfg, expected_target=BUILD_MEASURE_TARGET, config_name="MeasureBuilderInstanceConfig")
    _validate_family(cfg.get("family"), "MeasureBuilderInstanceConfig.family")
    validate_mapping(
        cfg.get("params"),
        "MeasureBuilderInstanceConfig.params",
        key_type=str,
        value_validator=validate_number,
        is_none_allowed=True,
    )


@dataclass
class ForGridBuilderInstanceConfig(InstanceConfig):
    """Configuration for the integer grid product measure builder."""

    family: str
    dims: Sequence[int]

    def __init__(self, family: str, dims: Sequence[int], _target_: str = BUILD_FOR_GRID_TARGET) -> None:
        super().__init__(_target_=_target_)
        self.family = family
        self.dims = dims


def is_for_grid_builder_target(target: str) -> bool:
    """Check if the target is an integer grid product measure builder target."""
    return target == BUILD_FOR_GRID_TARGET


def is_for_grid_builder_config(cfg: DictConfig) -> bool:
    """Check if the configuration is an integer grid product measure builder config."""
    target = cfg.get("_target_", None)
    if isinstance(target, str):
        return is_for_grid_builder_target(target)
    return False


def validate_for_grid_builder_instance_config(cfg: DictConfig) -> None:
    """Validate a ForGridBuilderInstanceConfig.

    Args:
        cfg: A DictConfig with ForGridBuilderInstanceConfig fields (from Hydra).
    """
    validate_instance_config(cfg, expected_target=BUILD_FOR_GRID_TARGET, config_name="ForGridBuilderInstanceConfig")
    _validate_family(cfg.get("family"), "ForGridBuilderInstanceConfig.family")
    validate_sequence(cfg.get("dims"), "ForGridBuilderInstanceConfig.dims", element_validator=validate_positive_int)


@dataclass
class ForArraysBuilderInstanceConfig(InstanceConfig):
    """Configuration for the zipped arrays product measure builder."""

    family: str
    arrays: Mapping[str, Sequence[float]]

    def __init__(
        self,
        family: str,
        arrays: Mapping[str, Sequence[float]],
        _target_: str = BUILD_FOR_ARRAYS_TARGET,
    ) -> None:
        super().__init__(_target_=_target_)
        self.family = family
        self.arrays = arrays


def is_for_arrays_builder_target(target: str) -> bool:
    """Check if the target is a zipped arrays product measure builder target."""
    return target == BUILD_FOR_ARRAYS_TARGET


def is_for_arrays_builder_config(cfg: DictConfig) -> bool:
    """Check if the configuration is a zipped arrays product measure builder config."""
    target = cfg.get("_target_", None)
    if isinstance(target, str):
        return is_for_arrays_builder_target(target)
    return False


def validate_for_arrays_builder_instance_config(cfg: DictConfig) -> None:
    """Validate a ForArraysBuilderInstanceConfig.

    Args:
        cfg: A DictConfig with ForArraysBuilderInstanceConfig fields (from Hydra).
    """
    validate_instance_config(cfg, expected_target=BUILD_FOR_ARRAYS_TARGET, config_name="ForArraysBuilderInstanceConfig")
    _validate_family(cfg.get("family"), "ForArraysBuilderInstanceConfig.family")
    arrays = cfg.get("arrays")
    validate_mapping(
        arrays, "ForArraysBuilderInstanceConfig.arrays", key_type=str, value_validator=_validate_number_array
    )
    lengths = {len(array) for array in arrays.values()}
    if len(lengths) > 1:
        raise ConfigValidationError(
            f"ForArraysBuilderInstanceConfig.arrays must all have the same length, got lengths {sorted(lengths)}"
        )


@dataclass
class LikelihoodBuilderInstanceConfig(InstanceConfig):
    """Configuration for the likelihood builder."""

    family: str
    x: Any
    constraint: Mapping[str, Any] | None = None

    def __init__(
        self,
        family: str,
        x: Any,
        constraint: Mapping[str, Any] | None = None,
        _target_: str = BUILD_LIKELIHOOD_TARGET,
    ) -> None:
        super().__init__(_target_=_target_)
        self.family = family
        self.x = x
        self.constraint = constraint


def is_likelihood_builder_target(target: str) -> bool:
    """Check if the target is a likelihood builder target."""
    return target == BUILD_LIKELIHOOD_TARGET


def is_likelihood_builder_config(cfg: DictConfig) -> bool:
    """Check if the configuration is a likelihood builder config."""
    target = cfg.get("_target_", None)
    if isinstance(target, str):
        return is_likelihood_builder_target(target)
    return False


def validate_likelihood_builder_instance_config(cfg: DictConfig) -> None:
    """Validate a LikelihoodBuilderInstanceConfig.

    Args:
        cfg: A DictConfig with LikelihoodBuilderInstanceConfig fields (from Hydra).
    """
    validate_instance_config(
        cfg, expected_target=BUILD_LIKELIHOOD_TARGET, config_name="LikelihoodBuilderInstanceConfig"
    )
    _validate_family(cfg.get("family"), "LikelihoodBuilderInstanceConfig.family")
    x = cfg.get("x")
    if isinstance(x, Sequence) and not isinstance(x, str):
        _validate_number_array(x, "LikelihoodBuilderInstanceConfig.x")
    else:
        validate_number(x, "LikelihoodBuilderInstanceConfig.x")
    validate_mapping(
        cfg.get("constraint"),
        "LikelihoodBuilderInstanceConfig.constraint",
        key_type=str,
        value_validator=validate_number,
        is_none_allowed=True,
    )


MEASURE_CONFIG_VALIDATORS: dict[str, Callable[[DictConfig], None]] = {
    BUILD_MEASURE_TARGET: validate_measure_builder_instance_config,
    BUILD_FOR_GRID_TARGET: validate_for_grid_builder_instance_config,
    BUILD_FOR_ARRAYS_TARGET: validate_for_arrays_builder_instance_config,
    BUILD_LIKELIHOOD_TARGET: validate_likelihood_builder_instance_config,
}


def validate_measure_config(cfg: DictConfig) -> None:
    """Validate any of the measure builder configs, dispatching on its target."""
    target = cfg.get("_target_", None)
    validate_nonempty_str(target, "InstanceConfig._target_")
    if target not in MEASURE_CONFIG_VALIDATORS:
        raise ConfigValidationError(
            f"Unknown measure builder target: {target}.  "
            f"Available targets are: {', '.join(MEASURE_CONFIG_VALIDATORS.keys())}"
        )
    MEASURE_CONFIG_VALIDATORS[target](cfg)


def resolve_measure_config(cfg: DictConfig) -> Any:
    """Validate a measure builder config and instantiate it.

    Returns the measure, product measure or likelihood the config describes.
    """
    try:
        validate_measure_config(cfg)
    except ConfigValidationError as e:
        MEASURETHEORY_LOGGER.warning("[measure] error validating config: %s", e)
        raise
    MEASURETHEORY_LOGGER.info("[measure] instantiating %s", cfg.get("_target_"))
    return hydra.utils.instantiate(cfg, _convert_="all")
