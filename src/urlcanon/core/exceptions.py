class UrlCanonError(Exception):
    pass

class ConfigError(UrlCanonError):
    pass

class InvalidReference(UrlCanonError):
    """A relative reference could not be resolved against its base URL."""

    def __init__(self, base, relative, reason: str = ""):
        self.base = base
        self.relative = relative
        message = f"Unable to resolve '{relative}' against base '{base}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
