from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel

from src.bookhub.runtime.config.config_data import ConfigData
from src.bookhub.runtime.config.config_template import load_templated_yaml
from src.bookhub.runtime.settings import get_environment_variables

_PROJECT_ROOT = Path(__file__).resolve().parents[3]


@dataclass
class AppContext:
    """Application context containing configuration and other app-wide state."""

    config: ConfigData


def _load_default_config() -> ConfigData:
    """Load config.yaml from the configured path, falling back to the project root."""
    config_file = get_environment_variables().config_file
    candidates = [config_file]
    if not config_file.is_absolute():
        candidates.append(_PROJECT_ROOT / config_file)

    for candidate in candidates:
        if candidate.is_file():
            return load_templated_yaml(candidate)

    logger.warning("No configuration file found at {}; using built-in defaults", config_file)
    return ConfigData()


_default_config = _load_default_config()
_default_context = AppContext(config=_default_config)


_app_context: ContextVar[AppContext] = ContextVar(
    "app_context", default=_default_context
)


def get_context() -> AppContext:
    """Get the current application context.

    Returns:
        AppContext: The current application context containing configuration.
    """
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    """Set the current application context.

    Args:
        context: AppContext instance to set as current.
    """
    return _app_context.set(context)


def _recursive_model_dump_exclude_unset(model: BaseModel) -> dict:
    """Recursively dump a Pydantic model keeping only explicitly set fields.

    A nested model is included when any of its own fields were set, so partial
    overrides of deep sections survive the merge.
    """
    result = {}

    for field_name in model.__class__.model_fields:
        field_value = getattr(model, field_name)

        if isinstance(field_value, BaseModel):
            nested_result = _recursive_model_dump_exclude_unset(field_value)
            if nested_result:
                result[field_name] = nested_result
            elif field_name in model.model_fields_set:
                result[field_name] = field_value.model_dump()
        elif field_name in model.model_fields_set:
            result[field_name] = field_value

    return result


def _recursive_dict_merge(base_dict: dict, override_dict: dict) -> dict:
    """Recursively merge two dictionaries, values from ``override_dict`` winning."""
    result = base_dict.copy()

    for key, value in override_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _recursive_dict_merge(result[key], value)
        else:
            result[key] = value

    return result


def _merge_configs(
    base_config: ConfigData, override: ConfigData | dict[str, Any]
) -> ConfigData:
    """Merge an override (model or plain dict) into ``base_config``."""
    base_dict = base_config.model_dump()
    if isinstance(override, ConfigData):
        override_dict = _recursive_model_dump_exclude_unset(override)
    else:
        override_dict = override
    merged_dict = _recursive_dict_merge(base_dict, override_dict)
    return ConfigData.model_validate(merged_dict)


@contextmanager
def with_context(
    config_override: ConfigData | dict[str, Any] | None = None,
) -> Iterator[ConfigData]:
    """Temporarily override the application context.

    The override is merged with the current configuration, so only the fields
    it names change.

    Example:
        with with_context({"pagination": {"default_limit": 5}}) as config:
            assert config.pagination.default_limit == 5
    """
    current_config = get_context().config
    if config_override is None:
        yield current_config
        return

    if not isinstance(config_override, ConfigData | dict):
        raise ValueError(
            f"config_override must be ConfigData, dict or None, got {type(config_override)}"
        )

    merged_config = _merge_configs(current_config, config_override)
    token = set_context(replace(get_context(), config=merged_config))
    try:
        yield merged_config
    finally:
        _app_context.reset(token)


def get_config() -> ConfigData:
    """Convenience function to get the current configuration.

    Returns:
        ConfigData: The current configuration from the app context.
    """
    return get_context().config
