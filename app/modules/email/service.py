import smtplib
import ssl
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.mime.application import MIMEApplication
from typing import Callable, List, Optional, Dict, Any, Tuple
from pathlib import Path
import logging
from fastapi import Depends
from jinja2 import Environment, FileSystemLoader, select_autoescape
from app.core.config import MailSettings, get_mail_settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

# (filename, contenido)
Attachment = Tuple[str, bytes]


class EmailServiceError(Exception):
    """Error al enviar un correo."""


class EmailNotConfiguredError(EmailServiceError):
    """Faltan los datos del transporte SMTP."""

    def __init__(self):
        super().__init__(
            "Email service is not configured. Please set SMTP_HOST, SMTP_PORT, SMTP_USER, and SMTP_PASSWORD."
        )


class EmailDeliveryError(EmailServiceError):
    """El transporte SMTP rechazó o no pudo enviar el mensaje."""


class EmailService:
    """
    Servicio de correo electrónico con soporte para templates Jinja2.

    Un único intento por envío: los errores se propagan al llamador.
    """

    def __init__(
        self,
        config: MailSettings,
        smtp_factory: Optional[Callable[[MailSettings], smtplib.SMTP]] = None
    ):
        self.config = config
        self._smtp_factory = smtp_factory or self._create_smtp_connection

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(['html', 'xml'])
        )

    @staticmethod
    def _create_smtp_connection(config: MailSettings) -> smtplib.SMTP:
        """Crear conexión SMTP segura."""
        context = ssl.create_default_context()
        if config.SMTP_SECURE:
            server = smtplib.SMTP_SSL(config.SMTP_HOST, config.SMTP_PORT, timeout=config.SMTP_TIMEOUT, context=context)
        else:
            server = smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=config.SMTP_TIMEOUT)

        try:
            if not config.SMTP_SECURE:
                server.starttls(context=context)
            server.login(config.SMTP_USER, config.SMTP_PASSWORD)
        except (smtplib.SMTPException, OSError):
            server.close()
            raise
        return server

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Renderizar template de email con contexto.

        Args:
            template_name: Nombre del archivo de template
            context: Variables para el template

        Returns:
            HTML renderizado del template
        """
        template = self.jinja_env.get_template(template_name)
        return template.render(**context)

    def build_message(
        self,
        to_emails: List[str],
        subject: str,
        html_content: str,
        attachments: Optional[List[Attachment]] = None
    ) -> MIMEMultipart:
        msg = MIMEMultipart('mixed')
        msg['Subject'] = subject
        msg['From'] = self.config.sender
        msg['To'] = ', '.join(to_emails)

        msg.attach(MIMEText(html_content, 'html', 'utf-8'))

        for filename, content in attachments or []:
            part = MIMEApplication(content, _subtype="pdf" if filename.endswith(".pdf") else "octet-stream")
            part.add_header('Content-Disposition', 'attachment', filename=filename)
            msg.attach(part)

        return msg

    def send_email(
        self,
        to_emails: List[str],
        subject: str,
        html_content: str,
        attachments: Optional[List[Attachment]] = None
    ) -> None:
        """
        Enviar correo electrónico.

        Raises:
            EmailNotConfiguredError: si faltan SMTP_HOST, SMTP_USER o SMTP_PASSWORD
            EmailDeliveryError: si el envío falla
        """
        if not self.config.is_configured:
            raise EmailNotConfiguredError()

        msg = self.build_message(to_emails, subject, html_content, attachments)

        try:
            with self._smtp_factory(self.config) as server:
                server.sendmail(self.config.MAIL_FROM or self.config.SMTP_USER, to_emails, msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Error sending email: {str(e)}")
            raise EmailDeliveryError(str(e)) from e

        logger.info(f"Email sent successfully to {', '.join(to_emails)}")

    def send_template_email(
        self,
        to_emails: List[str],
        subject: str,
        template_name: str,
        context: Dict[str, Any],
        attachments: Optional[List[Attachment]] = None
    ) -> None:
        """
        Enviar correo usando template.

        Args:
            to_emails: Lista de destinatarios
            subject: Asunto del correo
            template_name: Nombre del template (ej: "invoice_email.html")
            context: Variables para el template
            attachments: Lista de adjuntos (filename, bytes)
        """
        html_content = self.render_template(template_name, context)
        self.send_email(
            to_emails=to_emails,
            subject=subject,
            html_content=html_content,
            attachments=attachments
        )


def get_email_service(config: MailSettings = Depends(get_mail_settings)) -> EmailService:
    """Dependency: servicio de correo construido con la configuración del proceso."""
    return EmailService(config)
