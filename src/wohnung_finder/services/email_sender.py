"""Email notifications about newly found listings."""

import logging
import os
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from ..models.listing import Listing

logger = logging.getLogger(__name__)

DEFAULT_FROM = "wohnung-bot@example.com"


class EmailService:
    """
    Send an email listing the fresh offers of a search.

    Configured through SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS,
    SMTP_STARTTLS and FROM_EMAIL. Without SMTP_HOST the service is
    unconfigured and the poller skips notifications.
    """

    TEMPLATE_NAME = "new_listings.html"

    def __init__(self, template_dir: Optional[str] = None):
        self.smtp_host = os.getenv("SMTP_HOST")
        self.smtp_port = int(os.getenv("SMTP_PORT", "587"))
        self.smtp_user = os.getenv("SMTP_USER")
        self.smtp_password = os.getenv("SMTP_PASS")
        self.use_starttls = os.getenv("SMTP_STARTTLS", "true").lower() in ("1", "true", "yes")
        self.from_email = os.getenv("FROM_EMAIL", DEFAULT_FROM)

        if template_dir is None:
            # templates/ at the project root
            template_dir = Path(__file__).parent.parent.parent.parent / "templates"
        self.template_dir = Path(template_dir)

        if self.template_dir.exists():
            self.jinja_env = Environment(
                loader=FileSystemLoader(str(self.template_dir)),
                autoescape=True,
            )
        else:
            self.jinja_env = None
            logger.warning(f"Template directory not found: {self.template_dir}")

    def is_configured(self) -> bool:
        """Check if an SMTP server is configured."""
        return bool(self.smtp_host)

    def notify(self, recipient: str, listings: List[Listing]) -> bool:
        """
        Send the fresh listings of a search to one address.

        Args:
            recipient: Email address of the search owner
            listings: Fresh listings, already filtered

        Returns:
            True if sent successfully
        """
        if not listings:
            return True
        if not self.is_configured():
            logger.error("Email not configured - set SMTP_HOST")
            return False

        subject = f"Neue Wohnungsangebote ({len(listings)})"
        context = {
            "listings": listings,
            "count": len(listings),
            "date": datetime.now().strftime("%d.%m.%Y %H:%M"),
        }
        html_content = self._render_template(context)
        text_content = self.render_text(listings)

        return self._send_via_smtp([recipient], subject, html_content, text_content)

    def _render_template(self, context: dict) -> str:
        """Render the Jinja2 template, or the built-in table if it is missing."""
        if self.jinja_env is None:
            return self._generate_fallback_html(context)

        try:
            template = self.jinja_env.get_template(self.TEMPLATE_NAME)
        except TemplateNotFound:
            logger.warning(f"Template {self.TEMPLATE_NAME} not found in {self.template_dir}")
            return self._generate_fallback_html(context)
        return template.render(**context)

    def _generate_fallback_html(self, context: dict) -> str:
        env = Environment(autoescape=True)
        template = env.from_string(
            """
            <h3>Neue Angebote ({{ count }})</h3>
            <table border="1" cellpadding="6" cellspacing="0">
              <tr><th>Titel</th><th>Anbieter</th><th>Bezirk/Ort</th><th>Preis</th><th>Zimmer / m²</th><th>Link</th></tr>
              {% for item in listings %}
              <tr>
                <td>{{ item.title }}</td><td>{{ item.provider }}</td><td>{{ item.location }}</td>
                <td>{{ item.display_price() }}</td>
                <td>{{ item.display_size() }}</td>
                <td><a href="{{ item.url }}">Öffnen</a></td>
              </tr>
              {% endfor %}
            </table>
            """
        )
        return template.render(**context)

    @staticmethod
    def render_text(listings: List[Listing]) -> str:
        """Plain-text body, one listing per line."""
        return "\n".join(
            f"{item.title} | {item.provider} | {item.location} | "
            f"{item.display_price()} | {item.display_size()} | {item.url}"
            for item in listings
        )

    def _send_via_smtp(
        self,
        recipients: List[str],
        subject: str,
        html_content: str,
        text_content: str,
    ) -> bool:
        """Send a multipart email via SMTP."""
        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = self.from_email
            msg["To"] = ", ".join(recipients)

            msg.attach(MIMEText(text_content, "plain", "utf-8"))
            msg.attach(MIMEText(html_content, "html", "utf-8"))

            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=30) as server:
                if self.use_starttls:
                    server.starttls()
                if self.smtp_user:
                    server.login(self.smtp_user, self.smtp_password or "")
                server.sendmail(self.from_email, recipients, msg.as_string())

            logger.info(f"Email sent to {len(recipients)} recipient(s)")
            return True

        except smtplib.SMTPAuthenticationError:
            logger.error("SMTP authentication failed - check SMTP_USER and SMTP_PASS")
            return False
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email via SMTP: {e}")
            return False

    def send_test_email(self, recipient: str) -> bool:
        """Send a test email to verify configuration."""
        html = "<p>Die E-Mail-Konfiguration funktioniert.</p>"
        return self._send_via_smtp([recipient], "Wohnung Finder - Test", html, "Die E-Mail-Konfiguration funktioniert.")
