#!/usr/bin/env python3
"""
COMPOSCRIPT GENERATOR - Accessor Synthesis
------------------------------------------
Consumes a ComponentDescriptor and emits the compiled unit: the class with
its base class, constructor, attribute accessors and required-attribute
list, followed by the custom element registration.

Author: Composcript Team
Date: 2026-10-19
"""

import json
import re
from typing import List

from composcript.core.models import AttributeDescriptor, AttributeKind, ComponentDescriptor

BASE_CLASS = "ComposcriptComponent"
DEFAULT_CONSTRUCTOR = "constructor(attr) { super(attr); }"

# (getter body, setter body) per kind; {name} is the DOM attribute or class name
ACCESSOR_TEMPLATES = {
    AttributeKind.PLAIN: (
        "return this.getAttribute('{name}');",
        "this.setAttribute('{name}', val);",
    ),
    AttributeKind.BOOLEAN: (
        "return this.hasAttribute('{name}');",
        "this.toggleAttribute('{name}', val);",
    ),
    AttributeKind.CLASS_TOGGLE: (
        "return this.classList.contains('{name}');",
        "this.classList.toggle('{name}', val);",
    ),
}


def _member(signature: str, statement: str) -> str:
    return f"\t{signature} {{\n\t\t{statement}\n\t}}"


class AccessorGenerator:

    def __init__(self, base_class: str = BASE_CLASS):
        self.base_class = base_class

    def accessor_pair(self, attribute: AttributeDescriptor) -> str:
        getter, setter = ACCESSOR_TEMPLATES[attribute.kind]
        ident = attribute.identifier
        return "\n\n".join([
            _member(f"get {ident}()", getter.format(name=attribute.declared_name)),
            _member(f"set {ident}(val)", setter.format(name=attribute.declared_name)),
        ])

    def members(self, descriptor: ComponentDescriptor) -> str:
        """All synthesized members, required-attribute list first."""
        blocks: List[str] = [
            _member("get requiredAttributes()", f"return {json.dumps(descriptor.required_attributes)};")
        ]
        blocks.extend(self.accessor_pair(a) for a in descriptor.attributes)
        return "\n" + "\n\n".join(blocks) + "\n"

    def generate(self, descriptor: ComponentDescriptor, body: str) -> str:
        """
        Args:
            descriptor: Parsed directive and class facts.
            body: The class text from `class` to its closing brace.
        """
        code = body

        # 1. Every component derives from the runtime base class
        if not descriptor.has_base_class:
            header = re.compile(rf"\bclass\s+{re.escape(descriptor.class_name)}(?![\w$])")
            code = header.sub(lambda m: f"{m.group(0)} extends {self.base_class}", code, count=1)

        # 2. The directive comment becomes the pass-through constructor
        replacement = "" if descriptor.has_constructor else DEFAULT_CONSTRUCTOR
        code = code.replace(descriptor.directive_text, replacement, 1)

        # 3. Accessors go right before the closing brace
        code = code.rstrip()
        code = code[:-1] + self.members(descriptor) + "}"

        return f"{code}\n\ncustomElements.define('{descriptor.tag_name}', {descriptor.class_name});"
