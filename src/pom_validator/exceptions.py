"""Custom exceptions for POM Validator."""


class PomValidatorError(Exception):
    """Base exception for POM Validator."""


class PomNotFoundError(PomValidatorError):
    """Raised when a pom.xml file cannot be found."""


class PomParseError(PomValidatorError):
    """Raised when a pom.xml file cannot be parsed."""


class PomModelError(PomValidatorError):
    """Raised when the parsed document is not a Maven project model."""


class RemediationError(PomValidatorError):
    """Raised when a fix cannot be persisted (backup or write failure)."""


class ConfigError(PomValidatorError):
    """Raised when configuration values are invalid."""
