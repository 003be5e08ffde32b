"""
Invoice email delivery.

Builds a templated HTML email with the invoice PDF attached and hands it
to an SMTP server. Host and credentials come from settings.
"""

import logging
import os
import smtplib
from email.message import EmailMessage
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..core.config import Settings, settings as default_settings
from ..core.errors import MailerNotConfigured
from ..models.checkout import Order
from .invoice_renderer import format_money

logger = logging.getLogger(__name__)

templates_dir = os.path.join(os.path.dirname(__file__), "..", "templates")

_env = Environment(
    loader=FileSystemLoader(templates_dir),
    autoescape=select_autoescape(["html"]),
)


class Mailer:
    """SMTP client for invoice emails"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    @property
    def configured(self) -> bool:
        return self.settings.smtp_configured

    def build_invoice_message(self, to: str, order: Order, pdf: bytes) -> EmailMessage:
        """Compose the invoice email with the PDF attached"""
        store_name = self.settings.store_name
        total = format_money(order.total, self.settings.currency_symbol)

        message = EmailMessage()
        message["From"] = f'"{store_name}" <{self.settings.smtp_from}>'
        message["To"] = to
        message["Subject"] = f"Your {store_name} Invoice #{order.id}"
        message.set_content("Thank you for your order! Your invoice is attached.")

        html = _env.get_template("invoice_email.html").render(
            store_name=store_name,
            order_id=order.id,
            total=total,
        )
        message.add_alternative(html, subtype="html")
        message.add_attachment(
            pdf,
            maintype="application",
            subtype="pdf",
            filename=f"invoice-{order.id}.pdf",
        )
        return message

    def send_invoice(self, to: str, order: Order, pdf: bytes) -> None:
        """
        Send the invoice email.

        Raises:
            MailerNotConfigured: If SMTP host or sender address is missing
        """
        if not self.configured:
            raise MailerNotConfigured("SMTP is not configured")

        message = self.build_invoice_message(to, order, pdf)
        s = self.settings

        if s.smtp_secure:
            client = smtplib.SMTP_SSL(s.smtp_host, s.smtp_port, timeout=30)
        else:
            client = smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=30)

        with client:
            if not s.smtp_secure:
                client.ehlo()
                if client.has_extn("starttls"):
                    client.starttls()
                    client.ehlo()
            if s.smtp_user:
                client.login(s.smtp_user, s.smtp_password or "")
            client.send_message(message)

        logger.info(f"Invoice for order {order.id} emailed to {to}")


# Singleton instance
mailer = Mailer()
