"""Clean-up of model output before it is written out.

Models are told not to wrap their answer in a code fence but some still
reply with `````markdown ... `````, occasionally nested.
"""

import re

MAX_FENCE_UNWRAPS = 3

# The whole text must be one fenced block; inner fences are left alone.
_OUTER_MARKDOWN_FENCE = re.compile(r"^```markdown\n([\s\S]*?)\n```$")


def format_markdown(text: str) -> str:
    """Trim *text* and unwrap up to three outer ```markdown fences."""
    formatted = (text or "").strip()
    for _ in range(MAX_FENCE_UNWRAPS):
        match = _OUTER_MARKDOWN_FENCE.match(formatted)
        if not match:
            break
        formatted = match.group(1).strip()
    return formatted
