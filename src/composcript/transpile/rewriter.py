#!/usr/bin/env python3
"""
COMPOSCRIPT REWRITER - Markup Block Rewriter
--------------------------------------------
Turns the lexer's token stream into plain script. Every markup token is
replaced by a runtime expression: a render-helper call for ordinary
blocks, or a direct content assignment for the self-render tag. All other
tokens are copied through untouched into a separate output buffer.

Author: Composcript Team
Date: 2026-10-19
"""

from typing import Iterable, List

from composcript.core.models import MarkupPart, PartKind, Token, TokenKind

RENDER_HELPER = "renderComposcriptHTML"
SELF_RENDER_TAG = "This"


def escape_template_text(text: str) -> str:
    """Escapes literal text so a template literal renders it verbatim."""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def render_parts(parts: Iterable[MarkupPart]) -> str:
    """Builds the body of a template literal from normalized markup parts."""
    chunks = []
    for part in parts:
        if part.kind is PartKind.EXPRESSION:
            chunks.append("${" + part.text + "}")
        elif part.kind is PartKind.COMMENT:
            chunks.append("<!--" + part.text + "-->")
        else:
            chunks.append(escape_template_text(part.text))
    return "".join(chunks)


class MarkupRewriter:
    """
    Single-pass rewrite of a token stream. The rewriter keeps no state
    between calls; one instance can be shared across every file of a build.
    """

    def __init__(self, self_render_tag: str = SELF_RENDER_TAG, render_helper: str = RENDER_HELPER):
        self.self_render_tag = self_render_tag
        self.render_helper = render_helper

    def rewrite(self, tokens: Iterable[Token]) -> str:
        buffer: List[str] = []
        for token in tokens:
            if token.kind is TokenKind.MARKUP:
                buffer.append(self.render_block(token))
            else:
                buffer.append(token.text)
        return "".join(buffer)

    def render_block(self, token: Token) -> str:
        """Rewrites one markup token into its runtime expression."""
        if token.tag_name == self.self_render_tag:
            # The outer tag pair is dropped, only its content is assigned
            return f"this.innerHTML = `{render_parts(token.inner_parts)}`"

        return f"{self.render_helper}(`{render_parts(token.parts)}`)"
