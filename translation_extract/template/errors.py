"""Parse errors raised by the template and expression parsers."""

from __future__ import annotations


class TemplateParseError(ValueError):
    """Raised when template or expression source cannot be parsed.

    ``line`` and ``column`` are 1-based positions within the parsed source
    (the inline template for component files), when known.
    """

    def __init__(
        self,
        message: str,
        file_path: str = "",
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.message = message
        self.file_path = file_path
        self.line = line
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        location = self.file_path or "<template>"
        if self.line is not None:
            location = f"{location}:{self.line}:{self.column or 1}"
        return f"{location}: {self.message}"

    def with_file(self, file_path: str) -> TemplateParseError:
        """Return a copy of this error attributed to ``file_path``."""
        return TemplateParseError(self.message, file_path, self.line, self.column)
