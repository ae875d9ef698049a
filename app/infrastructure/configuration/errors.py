"""Configuration errors."""


class ConfigurationError(Exception):
    """Raised at startup when a required credential or path is missing.

    Scripts raise this before making any remote call so a misconfigured run
    never leaves partial side effects behind.
    """

    def __init__(self, setting: str, hint: str = ""):
        self.setting = setting
        message = f"Missing required configuration: {setting}"
        if hint:
            message = f"{message} ({hint})"
        super().__init__(message)


def require(value, setting: str, hint: str = ""):
    """Return ``value`` or raise ConfigurationError when it is empty."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ConfigurationError(setting, hint)
    return value
