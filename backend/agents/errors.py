"""Exceptions raised by the AI agents."""


class AIConfigurationError(RuntimeError):
    """The OpenAI API key is missing or still a placeholder."""


class AIResponseFormatError(ValueError):
    """The model answered, but not in the expected structure."""


class BlueprintGenerationError(RuntimeError):
    """No valid blueprint after all generation attempts."""
