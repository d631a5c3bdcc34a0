#!/usr/bin/env python3
"""
COMPOSCRIPT ERRORS
------------------
Typed failures raised by the parse steps. The build engine catches them
at its boundary and turns them into per-file diagnostics, so the policy of
aborting or skipping is decided there and not inside the parser.

Author: Composcript Team
Date: 2026-10-19
"""

from typing import Optional


class ComposcriptError(Exception):
    """Base class for every error the transpiler reports to users."""

    code = "COMPILE_ERROR"

    def __init__(self, message: str, file_path: Optional[str] = None, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.file_path = file_path
        self.line = line

    def __str__(self) -> str:
        location = ""
        if self.file_path:
            location = self.file_path
            if self.line is not None:
                location += f":{self.line}"
            location += ": "
        return f"{location}{self.message}"


class MissingDirectiveError(ComposcriptError):
    code = "MISSING_DIRECTIVE"

    def __init__(self, tag_name: str, file_path: Optional[str] = None):
        super().__init__(
            f'Attribute map not found, please add "// <{tag_name} />" to the top of the component',
            file_path=file_path,
        )
        self.tag_name = tag_name


class ComponentNotFoundError(ComposcriptError):
    code = "NO_COMPONENT"

    def __init__(self, file_path: Optional[str] = None):
        super().__init__("No component class declaration found", file_path=file_path)


class UnbalancedMarkupError(ComposcriptError):
    code = "UNBALANCED_MARKUP"

    def __init__(self, line: int, tag_name: Optional[str] = None, file_path: Optional[str] = None):
        what = f"<{tag_name}>" if tag_name else "Markup block"
        super().__init__(f"{what} opened here is never closed", file_path=file_path, line=line)


class UnbalancedBraceError(ComposcriptError):
    code = "UNBALANCED_BRACES"

    def __init__(self, line: int, file_path: Optional[str] = None):
        super().__init__("Component body is missing its closing brace", file_path=file_path, line=line)


class ConfigError(ComposcriptError):
    code = "CONFIG_ERROR"
