"""Email utility: sends transactional emails via SMTP (TLS)."""
from __future__ import annotations

import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from docpage.core.config import settings

logger = logging.getLogger(__name__)


def _build_smtp_connection() -> smtplib.SMTP:
    """Open an authenticated SMTP TLS connection."""
    conn = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=15)
    conn.ehlo()
    conn.starttls()
    conn.ehlo()
    conn.login(settings.SMTP_USER, settings.SMTP_PASS)
    return conn


def send_email(to: str, subject: str, html_body: str, plain_body: str = "") -> bool:
    """
    Send a transactional email. Returns True on success, False on failure.
    """
    try:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{settings.EMAIL_FROM_NAME} <{settings.EMAIL_FROM}>"
        msg["To"] = to

        if plain_body:
            msg.attach(MIMEText(plain_body, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        with _build_smtp_connection() as conn:
            conn.sendmail(settings.EMAIL_FROM, [to], msg.as_string())

        logger.info(f"[Email] Sent '{subject}' → {to}")
        return True

    except (smtplib.SMTPException, OSError) as exc:
        logger.error(f"[Email] Failed to send '{subject}' to {to}: {exc}")
        return False


# ── Convenience senders ───────────────────────────────────────────────────────

def send_otp_email(to: str, otp: str) -> bool:
    """Send the 6-digit sign-in code."""
    subject = "Seu código de verificação - DocPage AI"
    html_body = f"""
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <style>
    body {{ font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; background: #f4f4f5; margin: 0; padding: 40px 20px; }}
    .container {{ max-width: 400px; margin: 0 auto; background: #fff;
                  border-radius: 12px; padding: 40px; box-shadow: 0 4px 6px rgba(0,0,0,.1); }}
    .logo {{ font-size: 24px; font-weight: 700; color: #18181b; text-align: center; margin-bottom: 24px; }}
    .otp {{ font-size: 32px; font-weight: 800; letter-spacing: 8px; color: #fff;
            background: linear-gradient(135deg, #6366f1, #8b5cf6); padding: 20px;
            border-radius: 8px; text-align: center; margin: 0 0 24px 0; }}
    .footer {{ margin-top: 24px; font-size: 12px; color: #a1a1aa; text-align: center; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="logo">DocPage AI</div>
    <p>Segue abaixo o código de verificação para você acessar sua conta:</p>
    <div class="otp">{otp}</div>
    <p>Este código expira em <strong>{settings.OTP_EXPIRE_MINUTES} minutos</strong>.</p>
    <div class="footer">Se você não solicitou este código, pode ignorar este email.</div>
  </div>
</body>
</html>
"""
    plain_body = (
        f"Seu código de verificação DocPage AI é: {otp}\n\n"
        f"Expira em {settings.OTP_EXPIRE_MINUTES} minutos."
    )
    return send_email(to, subject, html_body, plain_body)


def send_site_published_email(to: str, doctor_name: str, site_url: str) -> bool:
    """Tell the page owner their site is live."""
    name = html.escape(doctor_name)
    url = html.escape(site_url, quote=True)
    subject = "🎉 Seu site está no ar! - DocPage AI"
    html_body = f"""
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <style>
    body {{ font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; background: #f4f4f5; margin: 0; padding: 40px 20px; }}
    .container {{ max-width: 500px; margin: 0 auto; background: #fff;
                  border-radius: 12px; padding: 40px; box-shadow: 0 4px 6px rgba(0,0,0,.1); }}
    .banner {{ background: linear-gradient(135deg, #6366f1, #8b5cf6); border-radius: 8px;
               padding: 24px; text-align: center; margin: 0 0 24px 0; color: #fff; }}
    .banner a {{ color: #fff; font-size: 18px; font-weight: bold; text-decoration: none; word-break: break-all; }}
    .footer {{ margin-top: 32px; font-size: 12px; color: #a1a1aa; text-align: center; }}
  </style>
</head>
<body>
  <div class="container">
    <h1 style="text-align: center;">🎉 Parabéns, {name}!</h1>
    <p>Seu novo site profissional acaba de ser publicado e já está disponível no ar!</p>
    <div class="banner">
      <p>Seu site está disponível em:</p>
      <a href="{url}">{url}</a>
    </div>
    <ul>
      <li>Divulgar o link para seus pacientes</li>
      <li>Compartilhar nas suas redes sociais</li>
      <li>Adicionar o link nas suas assinaturas de email</li>
    </ul>
    <div class="footer">
      Este é um email automático enviado pela plataforma DocPage AI.<br>
      Em caso de dúvidas: {settings.SUPPORT_EMAIL}
    </div>
  </div>
</body>
</html>
"""
    plain_body = (
        f"Parabéns, {doctor_name}!\n\n"
        f"Seu site foi publicado e está disponível em {site_url}\n\n"
        f"- DocPage AI"
    )
    return send_email(to, subject, html_body, plain_body)
