"""
HTML email templates.

Each template is a subject plus an HTML body rendered with ``str.format``.
"""

from html import escape
from typing import Dict, Tuple

_TEMPLATES: Dict[str, Dict[str, str]] = {
    "verification_code": {
        "subject": "Your verification code: {code}",
        "html": """
        <div style="font-family: Arial, sans-serif; max-width: 480px; margin: 0 auto;">
            <h2 style="margin: 0 0 16px;">Verify your company email</h2>
            <p>Use the code below to verify <strong>{email}</strong>.</p>
            <p style="font-size: 28px; letter-spacing: 6px; font-weight: 700;">{code}</p>
            <p style="color: #64748b;">The code expires in {ttl_minutes} minutes.
            If you did not request it, you can ignore this email.</p>
        </div>
        """,
    },
}


class UnknownTemplate(KeyError):
    pass


def render_template(name: str, **context) -> Tuple[str, str]:
    """Return (subject, html) for a named template."""
    template = _TEMPLATES.get(name)
    if template is None:
        raise UnknownTemplate(name)
    safe = {key: escape(str(value)) for key, value in context.items()}
    return template["subject"].format(**safe), template["html"].format(**safe)
