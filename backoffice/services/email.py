import logging
import os
import smtplib
from datetime import date
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

from jinja2 import Environment, FileSystemLoader, select_autoescape

from backoffice.config import settings

logger = logging.getLogger(__name__)

_templates_dir = os.path.join(os.path.dirname(__file__), "..", "templates")
_env = Environment(
    loader=FileSystemLoader(os.path.abspath(_templates_dir)),
    autoescape=select_autoescape(["html"]),
)


def is_configured() -> bool:
    return bool(settings.smtp_host)


def _get_smtp_config() -> dict:
    return {
        "host": settings.smtp_host or "localhost",
        "port": settings.smtp_port,
        "username": settings.smtp_username,
        "password": settings.smtp_password,
        "use_tls": settings.smtp_use_tls,
        "use_ssl": settings.smtp_use_ssl,
        "from_email": settings.smtp_from_email,
        "from_name": settings.smtp_from_name or settings.company_name,
    }


def _create_smtp_client(host: str, port: int, use_ssl: bool):
    if use_ssl:
        return smtplib.SMTP_SSL(host, port, timeout=30)
    return smtplib.SMTP(host, port, timeout=30)


def _build_email_message(
    subject: str,
    from_name: str,
    from_email: str,
    to_email: str,
    body_html: str,
    body_text: str | None = None,
) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = formataddr((from_name, from_email))
    msg["To"] = to_email
    if body_text:
        msg.attach(MIMEText(body_text, "plain", "utf-8"))
    msg.attach(MIMEText(body_html, "html", "utf-8"))
    return msg


def send_email(
    to_email: str,
    subject: str,
    body_html: str,
    body_text: str | None = None,
) -> bool:
    """
    Send an email via SMTP.

    Args:
        to_email: Recipient email address
        subject: Email subject
        body_html: HTML body
        body_text: Optional plain-text alternative

    Returns:
        True when the SMTP server accepted the message.
    """
    if not is_configured():
        logger.warning("SMTP not configured; email to %s not sent", to_email)
        return False

    config = _get_smtp_config()
    msg = _build_email_message(
        subject=subject,
        from_name=config["from_name"],
        from_email=config["from_email"],
        to_email=to_email,
        body_html=body_html,
        body_text=body_text,
    )
    try:
        server = _create_smtp_client(config["host"], int(config["port"]), bool(config["use_ssl"]))
        if config["use_tls"] and not config["use_ssl"]:
            server.starttls()
        if config["username"] and config["password"]:
            server.login(config["username"], config["password"])
        refused = server.sendmail(config["from_email"], to_email, msg.as_string())
        server.quit()
        if refused:
            logger.warning("SMTP sendmail refused recipients: %s", refused)
            return False
        return True
    except smtplib.SMTPAuthenticationError as exc:
        logger.error("SMTP authentication failed for %s: %s", to_email, exc)
        return False
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("Failed to send email to %s: %s", to_email, exc)
        return False


def render_user_activation(
    email: str,
    name: str | None,
    password: str,
    role_name: str,
    login_url: str,
) -> tuple[str, str, str]:
    """Return ``(subject, html, text)`` for the account activation email."""
    context = {
        "company_name": settings.company_name,
        "name": name or "Usuario",
        "email": email,
        "password": password,
        "role_name": role_name,
        "login_url": login_url,
        "year": date.today().year,
    }
    subject = f"Bienvenido a {settings.company_name} - Datos de Acceso"
    html = _env.get_template("email/user_activation.html").render(**context)
    text = _env.get_template("email/user_activation.txt").render(**context)
    return subject, html, text


def send_user_activation_email(
    email: str,
    name: str | None,
    password: str,
    role_name: str,
    login_url: str,
) -> bool:
    subject, html, text = render_user_activation(email, name, password, role_name, login_url)
    sent = send_email(email, subject, html, text)
    if sent:
        logger.info("Activation email sent to %s", email)
    return sent
