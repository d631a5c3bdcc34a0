#!/usr/bin/env python3
"""
COMPOSCRIPT DIRECTIVE PARSER
----------------------------
Reads the attribute directive of a component body and produces a typed
ComponentDescriptor.

    // <my-thing title! open? .active size />

Each space separated token declares one attribute; its shape decides the
kind (see classify_token).

Author: Composcript Team
Date: 2026-10-19
"""

import logging
import re
from typing import List, Optional

from composcript.core.errors import ComponentNotFoundError, MissingDirectiveError
from composcript.core.models import AttributeDescriptor, AttributeKind, BodySpan, ComponentDescriptor

logger = logging.getLogger("composcript.directive")

CLASS_HEADER = re.compile(r"\bclass\s+(?P<name>[A-Za-z_$][\w$]*)(?P<heritage>[^{]*)\{")
CONSTRUCTOR_PATTERN = re.compile(r"\bconstructor\s*\(")
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][\w$]*$")
ANY_TAG = r"[A-Za-z][\w-]*"


def directive_pattern(tag_name: Optional[str] = None) -> "re.Pattern":
    """Regex for `// <tag-name attr... />`, restricted to one tag when given."""
    tag = re.escape(tag_name) if tag_name else ANY_TAG
    return re.compile(rf"//[ \t]*<(?P<tag>{tag})(?=[\s/])(?P<specs>[^\n]*?)\s*/>")


def classify_token(token: str) -> Optional[AttributeDescriptor]:
    """
    Pure mapping from token shape to descriptor:
        .name  -> class toggle
        name?  -> boolean
        name!  -> plain, required
        name   -> plain
    Anything else falls through to plain. Returns None only for tokens
    that name nothing once the markers are removed.
    """
    token = token.strip()
    if not token:
        return None

    if token.startswith("."):
        name, kind, required = token[1:].rstrip("!?"), AttributeKind.CLASS_TOGGLE, False
    elif token.endswith("?"):
        name, kind, required = token[:-1], AttributeKind.BOOLEAN, False
    elif token.endswith("!"):
        name, kind, required = token[:-1], AttributeKind.PLAIN, True
    else:
        name, kind, required = token, AttributeKind.PLAIN, False

    if not name:
        logger.debug(f"Ignoring empty attribute token '{token}'")
        return None
    descriptor = AttributeDescriptor(declared_name=name, kind=kind, required=required)
    if not IDENTIFIER_PATTERN.match(descriptor.identifier):
        logger.warning(f"Attribute '{token}' gives an invalid accessor name '{descriptor.identifier}'")
    return descriptor


class DirectiveParser:
    """
    The parse step of codegen: body text in, ComponentDescriptor out.
    Raises MissingDirectiveError instead of exiting so the caller owns the
    abort-or-skip decision.
    """

    def parse_attributes(self, specs: str) -> List[AttributeDescriptor]:
        attributes: List[AttributeDescriptor] = []
        seen = set()
        for token in specs.split():
            descriptor = classify_token(token)
            if descriptor is None:
                continue
            if descriptor.declared_name in seen:
                logger.warning(f"Duplicate attribute '{descriptor.declared_name}' ignored")
                continue
            seen.add(descriptor.declared_name)
            attributes.append(descriptor)
        return attributes

    def parse(self, body: str, tag_name: Optional[str] = None,
              body_span: Optional[BodySpan] = None) -> ComponentDescriptor:
        """
        Args:
            body: The component body, from `class` to its closing brace.
            tag_name: Expected external tag name; any tag when None.
            body_span: Where the body sits in the rewritten source.
        """
        header = CLASS_HEADER.search(body)
        if not header:
            raise ComponentNotFoundError()

        match = directive_pattern(tag_name).search(body)
        if not match:
            raise MissingDirectiveError(tag_name or "tag-name")

        return ComponentDescriptor(
            tag_name=match.group("tag"),
            class_name=header.group("name"),
            attributes=self.parse_attributes(match.group("specs")),
            body_span=body_span,
            directive_text=match.group(0),
            has_constructor=bool(CONSTRUCTOR_PATTERN.search(body)),
            has_base_class=bool(re.search(r"\bextends\b", header.group("heritage"))),
        )
