"""Template Renderer - {{placeholder}} substitution for notification text"""
import re
from typing import Any, Dict, List, Optional

PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")


def find_placeholders(template: str) -> List[str]:
    """Placeholder keys in order of appearance (duplicates kept)"""
    return PLACEHOLDER_PATTERN.findall(template or "")


def render(template: Optional[str], payload: Dict[str, Any]) -> str:
    """
    Substitute payload values into a template.
    
    Each `{{key}}` found in the original template is replaced by
    `payload[key]`, or by an empty string when the key is missing or None.
    Replacement is sequential over the original placeholder list, so a
    substituted value that itself contains a later placeholder token is
    replaced too.
    
    Example:
        >>> render("Hello {{name}}", {"name": "Sam"})
        'Hello Sam'
    """
    if not template:
        return ""
    
    result = template
    for key in find_placeholders(template):
        value = payload.get(key)
        result = result.replace("{{" + key + "}}", "" if value is None else str(value))
    return result


class TemplateRenderer:
    """Renders notification title/message templates against an event payload"""
    
    def render(self, template: Optional[str], payload: Dict[str, Any]) -> str:
        return render(template, payload)
