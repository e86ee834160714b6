"""Configuration errors raised while building or wiring the dark brem model.

Numerical edge cases (zero cross section, unphysical samples) are part of
the physical domain and never raise.
"""


class ConfigurationError(ValueError):
    """Fatal setup problem: missing engine, empty library, bad method name."""


class MalformedRowError(ConfigurationError):
    """CSV library row that does not split into exactly 9 numeric fields.

    Args:
        path: File the row was read from.
        line_number: 1-based line number inside *path*.
        line: The offending line, without its trailing newline.
    """

    def __init__(self, path: str, line_number: int, line: str) -> None:
        self.path = path
        self.line_number = line_number
        self.line = line
        super().__init__(
            f"Malformed row {line_number} in {path!r}: expected 9 "
            f"comma-separated numbers, got {line!r}"
        )
