#!/usr/bin/env python3
"""
COMPOSCRIPT SPAN EXTRACTOR - Component Body Locator
---------------------------------------------------
Finds the component class inside a (markup-rewritten) source and returns
the span of its balanced { ... } body. Comments and string literals are
skipped via the lexer's state machine, so a stray brace in either can
never move the boundary.

Author: Composcript Team
Date: 2026-10-19
"""

import re
from typing import List

from composcript.core.errors import ComponentNotFoundError, UnbalancedBraceError
from composcript.core.models import BodySpan, Token, TokenKind
from composcript.transpile.lexer import SourceLexer

CLASS_PATTERN = re.compile(r"\bclass\s+[A-Za-z_$][\w$]*")


class SpanExtractor:

    def __init__(self):
        self.lexer = SourceLexer()

    def _code_tokens(self, source: str) -> List[Token]:
        tokens = self.lexer.tokenize(source, markup=False)
        return [t for t in tokens if t.kind is TokenKind.CODE]

    def find_component_start(self, source: str) -> int:
        """Offset of the first `class Name` keyword that sits in code."""
        for token in self._code_tokens(source):
            match = CLASS_PATTERN.search(token.text)
            if match:
                return token.offset + match.start()
        raise ComponentNotFoundError()

    def extract(self, source: str, start: int) -> BodySpan:
        """
        Counts braces from `start` and returns the span ending where the
        count returns to zero.
        """
        depth = 0
        for token in self._code_tokens(source):
            if token.end <= start:
                continue
            begin = max(start - token.offset, 0)
            for k in range(begin, len(token.text)):
                ch = token.text[k]
                if ch == "{":
                    depth += 1
                elif ch == "}":
                    depth -= 1
                    if depth == 0:
                        return BodySpan(start, token.offset + k + 1)
        raise UnbalancedBraceError(self.lexer.line_at(start))

    def locate(self, source: str) -> BodySpan:
        return self.extract(source, self.find_component_start(source))
