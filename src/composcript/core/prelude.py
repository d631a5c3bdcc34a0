#!/usr/bin/env python3
"""
COMPOSCRIPT RUNTIME PRELUDE
---------------------------
The fixed script placed at the top of every compiled bundle: the render
helper used by rewritten markup blocks and the base custom element every
compiled component extends.

Author: Composcript Team
Date: 2026-10-19
"""

from composcript.transpile.generator import BASE_CLASS
from composcript.transpile.rewriter import RENDER_HELPER

RUNTIME_PRELUDE = f"""function {RENDER_HELPER}(html) {{
	const div = document.createElement('div');
	div.innerHTML = html;
	const elem = div.firstElementChild;
	elem.remove();
	return elem;
}}

class {BASE_CLASS} extends HTMLElement {{
	constructor(attr) {{
		super();

		this.creation_complete = false;

		if (attr) {{
			for (let key in attr) this.setAttribute(key.replaceAll('_', '-'), attr[key]);
		}}
	}}

	async connectedCallback() {{
		if (!this.creation_complete) {{
			this.creation_complete = true;

			for (const req_attr of this.requiredAttributes) {{
				if (!this.hasAttribute(req_attr)) {{
					throw new Error(`Required attribute "${{req_attr}}" not found`);
				}}
			}}

			if (typeof this.created === 'function') this.created();
		}}
	}}
}}
"""
