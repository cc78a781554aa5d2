"""Exception hierarchy shared by all authorcheck components."""


class AuthorCheckError(Exception):
    """Base exception for authorcheck errors."""

    pass


class ConfigError(AuthorCheckError):
    """Configuration file is unreadable or malformed."""

    pass


class ExtractorError(AuthorCheckError):
    """An author source exists but cannot be parsed."""

    pass
