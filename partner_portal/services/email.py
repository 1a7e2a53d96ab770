from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

import httpx

from partner_portal.core.config import get_settings

logger = logging.getLogger(__name__)


def _sanitize_email_from(value: str) -> str:
    # Env vars are often pasted with surrounding quotes; Resend rejects that.
    v = (value or "").strip()
    if len(v) >= 2 and ((v[0] == v[-1] == '"') or (v[0] == v[-1] == "'")):
        v = v[1:-1].strip()
    return v


def mask_email(value: str) -> str:
    try:
        local, domain = value.split("@", 1)
    except ValueError:
        return "***"
    if not local:
        return f"***@{domain}"
    return f"{local[:2]}***@{domain}"


def build_login_url(extension: str) -> str:
    settings = get_settings()
    return f"{settings.frontend_base_url.rstrip('/')}/signIn?extension={extension}"


def _build_credentials_email_html(name: str, email: str, extension: str, password: str, login_url: str) -> str:
    return f"""
    <div style="font-family: Arial, sans-serif; line-height: 1.6; color: #0f172a;">
      <h2 style="margin: 0 0 8px;">Welcome to the Sqooli partner portal, {name}</h2>
      <p style="margin: 0 0 14px;">Your account has been created. Use these credentials to sign in:</p>
      <table style="margin: 0 0 16px; font-size: 14px;">
        <tr><td style="padding-right: 12px; color: #475569;">Email</td><td>{email}</td></tr>
        <tr><td style="padding-right: 12px; color: #475569;">Extension</td><td>{extension}</td></tr>
        <tr><td style="padding-right: 12px; color: #475569;">Password</td><td><code>{password}</code></td></tr>
      </table>
      <p style="margin: 0 0 16px;">
        <a href="{login_url}" style="display:inline-block;background:#0f766e;color:#fff;padding:10px 14px;border-radius:12px;text-decoration:none;font-weight:700;">
          Sign in
        </a>
      </p>
      <p style="margin: 0; color: #475569; font-size: 13px;">Change your password after the first sign in.</p>
    </div>
    """.strip()


def send_credentials_email(to_email: str, name: str, extension: str, password: str) -> None:
    settings = get_settings()
    login_url = build_login_url(extension)
    subject = "Your Sqooli partner portal credentials"
    html = _build_credentials_email_html(name, to_email, extension, password, login_url)
    to_email = (to_email or "").strip()

    provider = (settings.email_provider or "console").lower()
    if provider == "console":
        # Dev/test only. Never logs the password.
        logger.info("[email][console] to=%s subject=%s link=%s", mask_email(to_email), subject, login_url)
        return

    if provider == "resend":
        _send_via_resend(
            api_key=settings.resend_api_key,
            email_from=_sanitize_email_from(settings.email_from),
            to_email=to_email,
            subject=subject,
            html=html,
        )
        return

    if provider == "smtp":
        _send_via_smtp(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            email_from=_sanitize_email_from(settings.email_from),
            to_email=to_email,
            subject=subject,
            html=html,
        )
        return

    raise ValueError(f"Unsupported EMAIL_PROVIDER: {settings.email_provider}")


def _send_via_resend(
    *,
    api_key: Optional[str],
    email_from: str,
    to_email: str,
    subject: str,
    html: str,
) -> None:
    if not api_key:
        raise ValueError("RESEND_API_KEY is required when EMAIL_PROVIDER=resend")

    payload = {
        "from": email_from,
        "to": [to_email],
        "subject": subject,
        "html": html,
    }
    headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
    with httpx.Client(timeout=15) as client:
        res = client.post("https://api.resend.com/emails", json=payload, headers=headers)
        if res.status_code >= 400:
            raise RuntimeError(f"Resend error: {res.status_code} {res.text}")


def _send_via_smtp(
    *,
    host: Optional[str],
    port: int,
    username: Optional[str],
    password: Optional[str],
    use_tls: bool,
    email_from: str,
    to_email: str,
    subject: str,
    html: str,
) -> None:
    if not host:
        raise ValueError("SMTP_HOST is required when EMAIL_PROVIDER=smtp")

    msg = EmailMessage()
    msg["From"] = email_from
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content("Use an HTML-capable email client to view this message.")
    msg.add_alternative(html, subtype="html")

    with smtplib.SMTP(host, port, timeout=15) as server:
        server.ehlo()
        if use_tls:
            server.starttls()
            server.ehlo()
        if username and password:
            server.login(username, password)
        server.send_message(msg)


def deliver_credentials(to_email: str, name: str, extension: str, password: str) -> bool:
    """Send the credentials e-mail; failures are logged, never raised."""
    settings = get_settings()
    if not settings.send_credentials_email:
        return False
    try:
        send_credentials_email(to_email, name, extension, password)
        return True
    except Exception as exc:
        # Credentials are still returned in the API response.
        logger.warning(
            "Credentials email send failed to=%s provider=%s error=%s",
            mask_email(to_email),
            settings.email_provider,
            exc,
        )
        return False
