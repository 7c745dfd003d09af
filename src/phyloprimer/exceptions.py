"""Custom exceptions for the phyloprimer toolkit."""


class ToolkitError(Exception):
    """Base exception for all toolkit errors."""
    pass


class ParseError(ToolkitError):
    """Exception raised while reading sequence input."""

    def __init__(self, message: str, input_file: str = None, record_name: str = None):
        self.input_file = input_file
        self.record_name = record_name

        if record_name is not None:
            message = f"FASTA record '{record_name}': {message}"
        if input_file is not None:
            message = f"{message} [{input_file}]"

        super().__init__(message)


class InputError(ToolkitError):
    """Exception raised when sequences or search parameters are rejected."""

    def __init__(self, message: str, sequence_name: str = None):
        self.sequence_name = sequence_name

        if sequence_name is not None:
            message = f"Invalid input for sequence {sequence_name}: {message}"

        super().__init__(message)


class ConfigurationError(ToolkitError):
    """Exception raised for unusable toolkit settings."""

    def __init__(self, message: str, config_file: str = None, parameter: str = None):
        self.config_file = config_file
        self.parameter = parameter

        if parameter is not None:
            message = f"Setting '{parameter}' rejected: {message}"
        if config_file is not None:
            message = f"{message} (loaded from {config_file})"

        super().__init__(message)
