import logging
import smtplib
from email.message import EmailMessage
from urllib.parse import urlencode

from flask import current_app

logger = logging.getLogger(__name__)


def is_smtp_configured() -> bool:
    return bool(current_app.config.get("SMTP_HOST") and (
        current_app.config.get("SMTP_FROM_EMAIL") or current_app.config.get("SMTP_USERNAME")
    ))


def send_email(to_email: str, subject: str, body: str):
    host = current_app.config.get("SMTP_HOST")
    port = current_app.config.get("SMTP_PORT", 587)
    username = current_app.config.get("SMTP_USERNAME")
    password = current_app.config.get("SMTP_PASSWORD")
    from_email = current_app.config.get("SMTP_FROM_EMAIL") or username
    use_tls = current_app.config.get("SMTP_USE_TLS", True)

    if not host or not from_email:
        return False, "Email not configured"

    msg = EmailMessage()
    msg["From"] = from_email
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(body)

    try:
        with smtplib.SMTP(host, port, timeout=10) as server:
            if use_tls:
                server.starttls()
            if username and password:
                server.login(username, password)
            server.send_message(msg)
        return True, None
    except (smtplib.SMTPException, OSError) as exc:
        return False, str(exc)


def send_password_reset_email(to_email: str, token: str):
    base_url = current_app.config.get("FRONTEND_RESET_URL", "")
    link = f"{base_url}?{urlencode({'token': token})}"
    ttl = current_app.config.get("PASSWORD_RESET_TTL_MINUTES", 60)
    if not is_smtp_configured():
        logger.warning("SMTP not configured; password reset email to %s not sent", to_email)
        return False, "Email not configured"

    body = (
        "We received a request to reset your LumiFlix password.\n\n"
        f"Open this link to choose a new one (valid for {ttl} minutes):\n{link}\n\n"
        "If you did not ask for this, you can ignore this email."
    )
    ok, err = send_email(to_email, "Reset your LumiFlix password", body)
    if not ok:
        logger.warning("Password reset email to %s not sent: %s", to_email, err)
    return ok, err
