"""
Pipeline Errors

Both failure kinds are terminal for one visualize call: the caller gets either
a complete positioned graph or one of these, never a partial result.
"""

from typing import Any, Dict, Optional


class NotationError(Exception):
    """Base class for every failure the visualization pipeline reports"""

    kind = "NotationError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


class NotationSyntaxError(NotationError):
    """Raised when the text is not well-formed notation"""

    kind = "SyntaxError"

    def __init__(
        self,
        message: str,
        position: int,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.position = position
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"position": self.position, "line": self.line, "column": self.column})
        return data


class ProcessSchemaError(NotationError):
    """Raised when well-formed notation does not describe a recognized process"""

    kind = "SchemaError"

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["key"] = self.key
        return data
