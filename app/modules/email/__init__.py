"""
Módulo de email: envío de correos SMTP con templates Jinja2.
"""

from .service import (
    EmailService,
    EmailServiceError,
    EmailNotConfiguredError,
    EmailDeliveryError,
    get_email_service
)

__all__ = [
    'EmailService',
    'EmailServiceError',
    'EmailNotConfiguredError',
    'EmailDeliveryError',
    'get_email_service'
]
