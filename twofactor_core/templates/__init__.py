"""
Message Templates
=================
Pure rendering of OTP challenge and security notification messages.
"""

from .models import MessageKind, RenderedMessage, BrandConfig, TemplateError
from .renderer import render_message, format_validity

__all__ = [
    "MessageKind",
    "RenderedMessage",
    "BrandConfig",
    "TemplateError",
    "render_message",
    "format_validity",
]
