#!/usr/bin/env python3
"""
COMPOSCRIPT LEXER - Markup-Aware Tokenizer
------------------------------------------
Splits a component source into an immutable token stream: plain code,
comments, string literals and balanced markup blocks. The source string
itself is never mutated; each markup block is emitted as a single token
carrying its normalized parts (text, interpolations, comments).

The same comment/string state machine is reused by the span extractor
(markup=False) so braces inside strings or comments never count.

Author: Composcript Team
Date: 2026-10-19
"""

import re
from bisect import bisect_right
from typing import List, Optional

from composcript.core.errors import UnbalancedMarkupError
from composcript.core.models import MarkupPart, PartKind, ScanState, Token, TokenKind

QUOTES = ("'", '"', "`")

# Group 'close': leading slash, 'name': tag name, 'attrs': raw attributes
# (quoted values and {expr} groups may contain '>'), 'self': trailing slash.
TAG_PATTERN = re.compile(
    r"<(?P<close>/?)(?P<name>[A-Za-z][\w-]*)(?=[\s/>])"
    r"(?P<attrs>(?:[^<>\"'{}]|\"[^\"]*\"|'[^']*'|\{[^{}]*\})*?)"
    r"(?P<self>/?)>"
)


def is_line_comment_start(source: str, i: int) -> bool:
    """'//' opens a comment unless it follows ':' (protects 'http://')."""
    return source.startswith("//", i) and (i == 0 or source[i - 1] != ":")


def expand_custom_tag(match: "re.Match") -> str:
    """
    Rewrites a self-closing tag into an explicit open/close pair when its
    name contains a hyphen. Plain self-closing tags are returned unchanged.
    """
    tag = match.group(0)
    name = match.group("name")
    if not match.group("self") or "-" not in name:
        return tag
    head = tag[:match.start("self") - match.start()].rstrip()
    return f"{head}></{name}>"


class _PartBuilder:
    """Accumulates markup parts, merging consecutive text."""

    def __init__(self):
        self.parts: List[MarkupPart] = []
        self._pending: List[str] = []

    def text(self, chunk: str):
        self._pending.append(chunk)

    def add(self, kind: PartKind, chunk: str):
        self._flush()
        self.parts.append(MarkupPart(kind, chunk))

    def _flush(self):
        if self._pending:
            self.parts.append(MarkupPart(PartKind.TEXT, "".join(self._pending)))
            self._pending = []

    def mark(self) -> int:
        """Closes the pending text run and returns the index of the next part."""
        self._flush()
        return len(self.parts)

    def build(self):
        self._flush()
        return tuple(self.parts)


class SourceLexer:
    """
    Character-level state machine that emits a token on every mode change.
    State lives in a ScanState so it can be inspected after a run.
    """

    def __init__(self):
        self.state = ScanState()
        self._source = ""
        self._tokens: List[Token] = []
        self._run_start = 0
        self._newlines: List[int] = []

    def line_at(self, offset: int) -> int:
        """1-based line number of an offset in the current source."""
        return bisect_right(self._newlines, offset - 1) + 1

    def tokenize(self, source: str, markup: bool = True) -> List[Token]:
        """
        Primary interface. Returns the full token stream for `source`;
        concatenating every token's text reproduces the input exactly.
        """
        self.state = state = ScanState()
        self._source = source
        self._tokens = []
        self._run_start = 0
        self._newlines = [i for i, ch in enumerate(source) if ch == "\n"]

        n = len(source)
        i = 0
        while i < n:
            ch = source[i]

            # 1. Inside a comment nothing else fires
            if state.in_line_comment:
                if ch == "\n":
                    self._close_run(TokenKind.LINE_COMMENT, i)
                    state.in_line_comment = False
                i += 1
                continue
            if state.in_block_comment:
                if source.startswith("*/", i):
                    self._close_run(TokenKind.BLOCK_COMMENT, i + 2)
                    state.in_block_comment = False
                    i += 2
                else:
                    i += 1
                continue

            # 2. Inside a string only the matching delimiter ends it
            if state.in_string:
                if ch == "\\":
                    i += 2
                    continue
                if ch == state.string_delimiter:
                    self._close_run(TokenKind.STRING, i + 1)
                    state.in_string = False
                    state.string_delimiter = None
                i += 1
                continue

            # 3. Plain code: look for the start of a comment, string or markup block
            if is_line_comment_start(source, i):
                self._close_run(TokenKind.CODE, i)
                state.in_line_comment = True
                i += 2
                continue
            if source.startswith("/*", i):
                self._close_run(TokenKind.CODE, i)
                state.in_block_comment = True
                i += 2
                continue
            if ch in QUOTES:
                self._close_run(TokenKind.CODE, i)
                state.in_string = True
                state.string_delimiter = ch
                i += 1
                continue
            if markup and ch == "<":
                match = TAG_PATTERN.match(source, i)
                # A stray closing tag cannot open a block
                if match and not match.group("close"):
                    self._close_run(TokenKind.CODE, i)
                    i = self._consume_markup(i)
                    continue
            i += 1

        # EOF: whatever is open becomes the last token
        if state.in_line_comment:
            tail = TokenKind.LINE_COMMENT
        elif state.in_block_comment:
            tail = TokenKind.BLOCK_COMMENT
        elif state.in_string:
            tail = TokenKind.STRING
        else:
            tail = TokenKind.CODE
        self._close_run(tail, n)
        return list(self._tokens)

    def _close_run(self, kind: TokenKind, end: int):
        if end > self._run_start:
            self._tokens.append(Token(
                kind=kind,
                text=self._source[self._run_start:end],
                offset=self._run_start,
                line=self.line_at(self._run_start),
            ))
        self._run_start = end

    def _consume_markup(self, start: int) -> int:
        """
        Reads one balanced markup block starting at `start` and appends it
        as a MARKUP token. Returns the offset just past the block.
        """
        source = self._source
        state = self.state
        state.in_markup_block = True
        state.nesting_depth = 0

        parts = _PartBuilder()
        outer_name: Optional[str] = None
        inner_start = inner_end = 0
        n = len(source)
        i = start

        while i < n:
            ch = source[i]

            # Script comments inside a block are kept as text; tags in them do not count
            if state.in_line_comment:
                if ch == "\n":
                    state.in_line_comment = False
                parts.text(ch)
                i += 1
                continue
            if state.in_block_comment:
                if source.startswith("*/", i):
                    state.in_block_comment = False
                    parts.text("*/")
                    i += 2
                else:
                    parts.text(ch)
                    i += 1
                continue

            # HTML comments are literal text, tags inside do not count
            if source.startswith("<!--", i):
                end = source.find("-->", i + 4)
                end = n if end == -1 else end + 3
                parts.text(source[i:end])
                i = end
                continue

            # {/* ... */} becomes an HTML comment part
            if source.startswith("{/*", i):
                end = source.find("*/}", i + 3)
                if end != -1:
                    parts.add(PartKind.COMMENT, source[i + 3:end])
                    i = end + 3
                    continue

            if is_line_comment_start(source, i):
                state.in_line_comment = True
                parts.text("//")
                i += 2
                continue
            if source.startswith("/*", i):
                state.in_block_comment = True
                parts.text("/*")
                i += 2
                continue

            if ch == "{":
                end = self._scan_expression(source, i, self.line_at(i))
                parts.add(PartKind.EXPRESSION, source[i + 1:end - 1])
                i = end
                continue

            if ch == "<":
                match = TAG_PATTERN.match(source, i)
                if match:
                    first = outer_name is None
                    if first:
                        outer_name = match.group("name")
                    if match.group("close"):
                        state.nesting_depth -= 1
                        if state.nesting_depth == 0:
                            inner_end = parts.mark()
                        self._add_tag_text(parts, match.group(0))
                    elif match.group("self"):
                        # Custom tags always get an explicit closing tag; depth is unchanged
                        self._add_tag_text(parts, expand_custom_tag(match))
                    else:
                        state.nesting_depth += 1
                        self._add_tag_text(parts, match.group(0))
                    if first:
                        inner_start = inner_end = parts.mark()
                    i = match.end()

                    if state.nesting_depth == 0:
                        self._tokens.append(Token(
                            kind=TokenKind.MARKUP,
                            text=source[start:i],
                            offset=start,
                            line=self.line_at(start),
                            parts=parts.build(),
                            tag_name=outer_name,
                            inner=(inner_start, inner_end),
                        ))
                        self._run_start = i
                        state.reset_block()
                        return i
                    continue

            parts.text(ch)
            i += 1

        raise UnbalancedMarkupError(self.line_at(start), outer_name)

    def _add_tag_text(self, parts: _PartBuilder, tag: str):
        """Tag text may carry {expr} attribute values; split those out."""
        k = 0
        while k < len(tag):
            if tag[k] == "{":
                end = self._scan_expression(tag, k, self.line_at(self._run_start))
                parts.add(PartKind.EXPRESSION, tag[k + 1:end - 1])
                k = end
            else:
                parts.text(tag[k])
                k += 1

    def _scan_expression(self, text: str, i: int, line: int) -> int:
        """
        Matches the brace opened at `i`, skipping braces inside string
        literals. Returns the offset just past the closing brace.
        """
        state = self.state
        state.expression_depth = 0
        j = i
        n = len(text)
        while j < n:
            ch = text[j]
            if state.in_string:
                if ch == "\\":
                    j += 2
                    continue
                if ch == state.string_delimiter:
                    state.in_string = False
                    state.string_delimiter = None
                j += 1
                continue
            if ch in QUOTES:
                state.in_string = True
                state.string_delimiter = ch
            elif ch == "{":
                state.expression_depth += 1
            elif ch == "}":
                state.expression_depth -= 1
                if state.expression_depth == 0:
                    return j + 1
            j += 1
        state.in_string = False
        state.string_delimiter = None
        raise UnbalancedMarkupError(line)
