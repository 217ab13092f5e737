"""Exceptions raised by sitemap_digest."""


class ConfigurationError(Exception):
    """Required settings are missing or invalid. Fatal: nothing is sent."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__(f"Configuration error: {', '.join(self.errors)}")
