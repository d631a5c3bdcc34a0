#!/usr/bin/env python3
"""
COMPOSCRIPT CORE MODELS
-----------------------
Defines the fundamental data structures used across the Composcript
transpiler. These models represent the lowest level of component
abstraction: tokens, scan state and the parsed component descriptor.

Author: Composcript Team
Date: 2026-10-19
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class AttributeKind(Enum):
    """How a declared attribute is backed on the element."""
    PLAIN = "plain"              # string-valued DOM attribute
    BOOLEAN = "boolean"          # presence-valued DOM attribute
    CLASS_TOGGLE = "class"       # class-list membership


@dataclass(frozen=True)
class AttributeDescriptor:
    """
    One attribute declared in a component directive.

    The declared name keeps its hyphenated HTML form; `identifier` is the
    accessor name exposed on the generated class.
    """
    declared_name: str
    kind: AttributeKind = AttributeKind.PLAIN
    required: bool = False

    def __post_init__(self):
        if self.required and self.kind is AttributeKind.CLASS_TOGGLE:
            raise ValueError(f"Class toggle '{self.declared_name}' cannot be required")

    @property
    def identifier(self) -> str:
        return self.declared_name.replace("-", "_")


@dataclass(frozen=True)
class BodySpan:
    """Half-open offsets of a component body (end is one past the closing brace)."""
    start: int
    end: int

    def slice(self, text: str) -> str:
        return text[self.start:self.end]


@dataclass
class ComponentDescriptor:
    """
    Everything the generator needs to emit one compiled component.
    Built once per file per build pass and discarded afterwards.
    """
    tag_name: str
    class_name: str
    attributes: List[AttributeDescriptor] = field(default_factory=list)
    body_span: Optional[BodySpan] = None
    directive_text: str = ""        # The literal directive comment, replaced during codegen
    has_constructor: bool = False
    has_base_class: bool = False

    @property
    def required_attributes(self) -> List[str]:
        return [a.declared_name for a in self.attributes if a.required]


@dataclass
class ScanState:
    """
    Mutable lexer state for one tokenize() call.

    nesting_depth is 0 outside a markup block and never negative.
    """
    in_markup_block: bool = False
    nesting_depth: int = 0
    in_line_comment: bool = False
    in_block_comment: bool = False
    in_string: bool = False
    string_delimiter: Optional[str] = None
    expression_depth: int = 0

    def reset_block(self):
        self.in_markup_block = False
        self.nesting_depth = 0
        self.expression_depth = 0


class TokenKind(Enum):
    CODE = "code"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    STRING = "string"
    MARKUP = "markup"


class PartKind(Enum):
    TEXT = "text"
    EXPRESSION = "expression"
    COMMENT = "comment"


@dataclass(frozen=True)
class MarkupPart:
    kind: PartKind
    text: str


@dataclass(frozen=True)
class Token:
    """
    One lexical unit of a component source.

    For MARKUP tokens `text` is the raw source slice while `parts` holds the
    normalized content, with custom self-closing tags already expanded.
    `inner` bounds the parts between the outermost opening and closing tag.
    """
    kind: TokenKind
    text: str
    offset: int
    line: int
    parts: Tuple[MarkupPart, ...] = ()
    tag_name: Optional[str] = None
    inner: Tuple[int, int] = (0, 0)

    @property
    def end(self) -> int:
        return self.offset + len(self.text)

    @property
    def inner_parts(self) -> Tuple[MarkupPart, ...]:
        return self.parts[self.inner[0]:self.inner[1]]
