"""
Message Renderer
================
Pure rendering of message kinds into subject, HTML and text bodies.
"""

import html
from datetime import date, timedelta
from typing import Any, Dict, Mapping, Optional, Tuple

from ..otp.models import SecurityMethod
from . import markup
from .models import BrandConfig, MessageKind, RenderedMessage, TemplateError

REQUIRED_FIELDS: Dict[MessageKind, Tuple[str, ...]] = {
    MessageKind.OTP_CHALLENGE: ("code", "validity"),
    MessageKind.TWO_FACTOR_ENABLED: ("method",),
}


def format_validity(window: timedelta) -> str:
    """
    Human readable duration.

    Examples:
        timedelta(minutes=10) -> "10 minutes"
        timedelta(hours=1) -> "1 hour"
        timedelta(seconds=90) -> "90 seconds"
    """
    seconds = int(window.total_seconds())
    if seconds <= 0:
        raise ValueError("Validity window must be positive")

    for unit, size in (("hour", 3600), ("minute", 60)):
        if seconds % size == 0:
            count = seconds // size
            return f"{count} {unit}" if count == 1 else f"{count} {unit}s"

    return "1 second" if seconds == 1 else f"{seconds} seconds"


def _require(kind: MessageKind, fields: Mapping[str, Any]) -> None:
    missing = [name for name in REQUIRED_FIELDS[kind] if fields.get(name) in (None, "")]
    if missing:
        raise TemplateError(f"Missing fields for {kind.value}: {', '.join(missing)}")


def _context(kind: MessageKind, fields: Mapping[str, Any], brand: BrandConfig, year: int) -> Dict[str, str]:
    context = {
        "product": brand.product_name,
        "year": str(year),
    }

    if kind is MessageKind.OTP_CHALLENGE:
        validity = fields["validity"]
        if isinstance(validity, timedelta):
            validity = format_validity(validity)
        context.update(
            code=str(fields["code"]),
            validity=str(validity),
            signature=brand.team_signature,
        )
    else:
        label = SecurityMethod.from_value(fields["method"]).label
        context.update(
            method=label,
            method_lower=label.lower(),
            signature=brand.security_signature,
        )

    return context


def render_message(
    kind: MessageKind,
    fields: Mapping[str, Any],
    brand: Optional[BrandConfig] = None,
    year: Optional[int] = None,
) -> RenderedMessage:
    """
    Render a message kind into parallel HTML and plain-text forms.

    Args:
        kind: Which message to render
        fields: OTP_CHALLENGE needs code and validity (str or timedelta);
            TWO_FACTOR_ENABLED needs method (SecurityMethod or method
            string). An optional display_name personalises the greeting.
        brand: Product naming (defaults to BrandConfig())
        year: Footer year (defaults to the current year)

    Returns:
        RenderedMessage

    Raises:
        TemplateError: If a required field is missing
    """
    kind = MessageKind(kind)
    brand = brand or BrandConfig()
    _require(kind, fields)
    context = _context(kind, fields, brand, year or date.today().year)

    name = str(fields.get("display_name") or "").strip()

    escaped = {key: html.escape(value) for key, value in context.items()}
    escaped["base_style"] = markup.BASE_STYLE
    escaped["greeting"] = f"Hello <strong>{html.escape(name)}</strong>," if name else "Hello,"
    context["greeting"] = f"Hello {name}," if name else "Hello,"

    if kind is MessageKind.OTP_CHALLENGE:
        return RenderedMessage(
            subject=f"Your {brand.product_name} Verification Code",
            html=markup.OTP_CHALLENGE_HTML.substitute(escaped),
            text=markup.OTP_CHALLENGE_TEXT.substitute(context),
        )

    return RenderedMessage(
        subject="Two-Factor Authentication Enabled",
        html=markup.TWO_FACTOR_ENABLED_HTML.substitute(escaped),
        text=markup.TWO_FACTOR_ENABLED_TEXT.substitute(context),
    )
