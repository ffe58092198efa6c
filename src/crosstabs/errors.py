class ConfigurationError(ValueError):
    """Raised when a report cannot be started because its inputs are invalid.

    Covers a dataset that is not a DataFrame, an empty list of explanatory
    variables, unknown columns and palettes that are neither a color
    sequence nor a color generator.
    """
