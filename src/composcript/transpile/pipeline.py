#!/usr/bin/env python3
"""
COMPOSCRIPT TRANSPILE PIPELINE
------------------------------
Central coordinator for one component file. Runs the phases in a strict
order, each building on the last:

    lexer -> rewriter -> span extractor -> directive parser -> generator

Any phase may raise a ComposcriptError; the pipeline tags it with the
file path and lets it propagate to the build engine.

Author: Composcript Team
Date: 2026-10-19
"""

from typing import Callable, Optional

from composcript.core.errors import ComposcriptError
from composcript.transpile.context import CompileContext
from composcript.transpile.directive import DirectiveParser
from composcript.transpile.generator import AccessorGenerator
from composcript.transpile.lexer import SourceLexer
from composcript.transpile.rewriter import SELF_RENDER_TAG, MarkupRewriter
from composcript.transpile.span import SpanExtractor


class TranspilePipeline:
    """
    The Orchestrator for a single file: ensures rewriting, body extraction
    and code generation happen in a strictly defined order.
    """

    def __init__(self, self_render_tag: str = SELF_RENDER_TAG):
        self.lexer = SourceLexer()
        self.rewriter = MarkupRewriter(self_render_tag=self_render_tag)
        self.extractor = SpanExtractor()
        self.parser = DirectiveParser()
        self.generator = AccessorGenerator()

    def run(self, source: str, tag_name: Optional[str] = None,
            file_path: Optional[str] = None,
            on_phase: Optional[Callable[[str], None]] = None) -> CompileContext:
        """
        Args:
            source: Raw component file text.
            tag_name: External tag name the directive must declare.
            file_path: Used only to label errors.
            on_phase: Called with 'rewrite', 'extract' and 'generate' as each phase starts.
        """
        context = CompileContext(source=source, tag_name=tag_name, file_path=file_path)
        try:
            self._run_phases(context, on_phase or (lambda phase: None))
        except ComposcriptError as e:
            if e.file_path is None:
                e.file_path = file_path
            raise
        return context

    def _run_phases(self, context: CompileContext, notify: Callable[[str], None]):
        # --- PHASE 1: MARKUP REWRITE ---
        # Tokens are immutable; the rewritten text is built in a fresh buffer.
        notify("rewrite")
        context.tokens = self.lexer.tokenize(context.source)
        context.rewritten = self.rewriter.rewrite(context.tokens)

        # --- PHASE 2: BODY EXTRACTION ---
        # The first class declared in code is the component; anything around
        # it is carried through unchanged.
        notify("extract")
        context.body_span = self.extractor.locate(context.rewritten)
        body = context.body_span.slice(context.rewritten)

        # --- PHASE 3: DIRECTIVE PARSING & CODE GENERATION ---
        notify("generate")
        context.descriptor = self.parser.parse(body, context.tag_name, context.body_span)
        unit = self.generator.generate(context.descriptor, body)
        span = context.body_span
        context.compiled = context.rewritten[:span.start] + unit + context.rewritten[span.end:]

    def compile(self, source: str, tag_name: Optional[str] = None) -> str:
        """Convenience wrapper returning only the compiled unit."""
        return self.run(source, tag_name).compiled
