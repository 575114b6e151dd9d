"""Exceptions shared by the core, the operators and the domains."""


class ConfigurationError(ValueError):
    """Invalid search or domain parameters. Raised before any generation runs."""

    pass


class ConfigValidationError(ConfigurationError):
    """Malformed run configuration file."""

    pass
