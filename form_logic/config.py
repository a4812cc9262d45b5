"""Configuration Manager for form logic."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigManager(BaseSettings):
    """Manages form logic settings using Pydantic BaseSettings.

    Every setting can be overridden with a ``FORM_LOGIC_`` prefixed
    environment variable, e.g. ``FORM_LOGIC_STRICT_CONDITIONS=true``.
    """

    # Logging settings
    log_level: str = 'INFO'
    log_colors: bool = True

    # Condition loading settings
    strict_conditions: bool = False  # reject unknown operators/actions when loading
    max_rule_depth: int = 10  # nesting levels of rule groups
    max_conditions: int = 500  # per template

    model_config = SettingsConfigDict(env_prefix='FORM_LOGIC_', case_sensitive=False)

    def get(self, key, default=None):
        """Return a setting by name, or ``default`` for names that are not settings."""
        if key not in type(self).model_fields:
            return default
        return getattr(self, key)

    def set(self, key, value):
        """Override a setting for this process, e.g. from a command line flag.

        Raises:
            KeyError: If ``key`` is not a setting.
        """
        if key not in type(self).model_fields:
            raise KeyError(f"Unknown form logic setting '{key}'")
        setattr(self, key, value)

    def get_all(self):
        return {key: getattr(self, key) for key in type(self).model_fields}
