#!/usr/bin/env python3
"""
COMPOSCRIPT COMPILE CONTEXT
---------------------------
The record of one component file going through the transpiler. It stores
the raw source and every intermediate result so tests and the CLI can
inspect each phase.

Author: Composcript Team
Date: 2026-10-19
"""

from dataclasses import dataclass, field
from typing import List, Optional

from composcript.core.models import BodySpan, ComponentDescriptor, Token, TokenKind


@dataclass
class CompileContext:
    """
    State of a single file compile.

    Initialized by the TranspilePipeline and enriched phase by phase.
    """
    source: str                                       # Raw file text as read from disk
    tag_name: Optional[str] = None                    # External tag, derived from the file name
    file_path: Optional[str] = None
    tokens: List[Token] = field(default_factory=list)
    rewritten: str = ""                               # Source after markup rewriting
    body_span: Optional[BodySpan] = None
    descriptor: Optional[ComponentDescriptor] = None
    compiled: str = ""                                # Final unit appended to the bundle

    @property
    def markup_blocks(self) -> int:
        return sum(1 for t in self.tokens if t.kind is TokenKind.MARKUP)
