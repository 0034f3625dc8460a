"""Email templates: template key → subject/text/html (Jinja)."""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, StrictUndefined, Template

from app.infrastructure.external.email.protocols import OutgoingEmail

# In-repo template definitions: key → (subject, text body, html body)
_DEFAULT_TEMPLATES: dict[str, tuple[str, str, str]] = {
    "password_reset_otp": (
        "Password Reset OTP - {{ app_name }}",
        "Hello {{ user_name }},\n\n"
        "We received a request to reset the password of your account. "
        "Use the following one-time code to continue:\n\n"
        "    {{ otp }}\n\n"
        "The code is valid for {{ ttl_minutes }} minutes. Do not share it with anyone.\n"
        "If you did not request a password reset, ignore this email and make sure "
        "your account is secure.\n\n"
        "This message was sent automatically; please do not reply.\n",
        "<p>Hello {{ user_name }},</p>"
        "<p>We received a request to reset the password of your account. "
        "Use the following one-time code to continue:</p>"
        "<p style=\"font-size:28px;font-weight:bold;letter-spacing:6px\">{{ otp }}</p>"
        "<p>The code is valid for <strong>{{ ttl_minutes }} minutes</strong>. "
        "Do not share it with anyone.</p>"
        "<p>If you did not request a password reset, ignore this email and make sure "
        "your account is secure.</p>"
        "<p><small>This message was sent automatically; please do not reply.</small></p>",
    ),
}


class EmailTemplateRenderer:
    """Renders subject and bodies for an email template key."""

    def __init__(
        self,
        templates: dict[str, tuple[str, str, str]] | None = None,
    ) -> None:
        """Initialize with optional template dict; falls back to _DEFAULT_TEMPLATES."""
        self._templates = templates or _DEFAULT_TEMPLATES
        text_env = Environment(autoescape=False, undefined=StrictUndefined)
        html_env = Environment(autoescape=True, undefined=StrictUndefined)
        self._compiled: dict[str, tuple[Template, Template, Template]] = {}
        for key, (subject, text, html) in self._templates.items():
            self._compiled[key] = (
                text_env.from_string(subject),
                text_env.from_string(text),
                html_env.from_string(html),
            )

    def render(
        self,
        template_key: str,
        recipient: str,
        variables: dict[str, Any],
    ) -> OutgoingEmail:
        """Render the template for recipient. Raises KeyError if key unknown."""
        if template_key not in self._compiled:
            raise KeyError(f"Unknown email template: {template_key}")
        subject_tpl, text_tpl, html_tpl = self._compiled[template_key]
        return OutgoingEmail(
            recipient=recipient,
            subject=subject_tpl.render(**variables).strip(),
            text_body=text_tpl.render(**variables),
            html_body=html_tpl.render(**variables),
        )
