# contador/services/email_service.py
"""
Envío de correos por SMTP.

La configuración se toma de system_settings (categoría EMAIL, editable por
el superadmin). Si SMTP no está habilitado en BD se usan las variables de
entorno SMTP_*.
"""

import smtplib
import logging
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.utils import formataddr
from typing import List, Optional, Dict, Any, Union
import time
from dataclasses import dataclass

from sqlalchemy.orm import Session

from contador.core.config import settings

logger = logging.getLogger(__name__)

SSL_PORT = 465


@dataclass
class EmailConfig:
    """Configuración de email."""
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    from_email: str
    from_name: str
    timeout: int = 20

    @property
    def use_ssl(self) -> bool:
        # SSL implícito solo en 465; el resto negocia STARTTLS si el servidor lo ofrece
        return self.smtp_port == SSL_PORT


def open_smtp_connection(config: EmailConfig) -> smtplib.SMTP:
    """Abre la conexión, negocia TLS y hace login si hay usuario."""
    if config.use_ssl:
        server = smtplib.SMTP_SSL(config.smtp_host, config.smtp_port, timeout=config.timeout)
    else:
        server = smtplib.SMTP(config.smtp_host, config.smtp_port, timeout=config.timeout)
        server.ehlo()
        if server.has_extn("starttls"):
            server.starttls()
            server.ehlo()

    try:
        if config.smtp_user:
            server.login(config.smtp_user, config.smtp_password)
    except Exception:
        server.close()
        raise
    return server


class EmailService:
    """
    Cliente SMTP con reintentos.

    Las fallas de envío no se lanzan: send_email devuelve un dict con
    success=False y el último error.
    """

    def __init__(self, config: Optional[EmailConfig] = None):
        self.config = config or self._load_config_from_settings()
        self.max_retries = 3
        self.retry_delay = 2  # segundos

    @classmethod
    def from_db(cls, db: Session) -> "EmailService":
        """Usa la configuración SMTP guardada en BD si está habilitada."""
        from contador.services.smtp_config_service import get_stored_smtp_config

        stored = get_stored_smtp_config(db)
        if stored.get("smtp_enabled") and stored.get("smtp_host"):
            return cls(EmailConfig(
                smtp_host=stored["smtp_host"],
                smtp_port=int(stored.get("smtp_port") or 587),
                smtp_user=stored.get("smtp_user", ""),
                smtp_password=stored.get("smtp_password", ""),
                from_email=stored.get("smtp_from_email", ""),
                from_name=stored.get("smtp_from_name", "") or settings.smtp_from_name,
                timeout=settings.smtp_timeout,
            ))
        return cls()

    def _load_config_from_settings(self) -> EmailConfig:
        """Carga configuración desde variables de entorno."""
        return EmailConfig(
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_user=settings.smtp_user,
            smtp_password=settings.smtp_password,
            from_email=settings.smtp_from_email,
            from_name=settings.smtp_from_name,
            timeout=settings.smtp_timeout
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.config.smtp_host and self.config.from_email)

    def send_email(
        self,
        to_email: Union[str, List[str]],
        subject: str,
        body_html: str,
        body_text: Optional[str] = None,
    ) -> Dict[str, Any]:
        """HTML obligatorio; body_text se adjunta como alternativa plana."""
        if not self.is_configured:
            logger.warning("Sin host SMTP o remitente; se omite el envío de '%s'", subject)
            return {
                'success': False,
                'error': 'SMTP no configurado',
                'mode': 'disabled'
            }

        if isinstance(to_email, str):
            to_email = [to_email]

        last_error = None
        for attempt in range(self.max_retries):
            try:
                result = self._send_email_attempt(to_email, subject, body_html, body_text)
                logger.info("Correo '%s' entregado a %s", subject, ", ".join(to_email))
                return result

            except Exception as e:
                last_error = str(e)
                logger.warning("SMTP intento %d/%d: %s", attempt + 1, self.max_retries, e)

                if attempt < self.max_retries - 1:
                    time.sleep(self.retry_delay * (2 ** attempt))

        logger.error("Correo '%s' no enviado tras %d intentos: %s", subject, self.max_retries, last_error)
        return {
            'success': False,
            'error': last_error,
            'attempts': self.max_retries
        }

    def _send_email_attempt(
        self,
        to_email: List[str],
        subject: str,
        body_html: str,
        body_text: Optional[str],
    ) -> Dict[str, Any]:
        msg = MIMEMultipart('alternative')
        msg['Subject'] = subject
        msg['From'] = formataddr((self.config.from_name, self.config.from_email)) if self.config.from_name else self.config.from_email
        msg['To'] = ', '.join(to_email)

        if body_text:
            msg.attach(MIMEText(body_text, 'plain', 'utf-8'))
        msg.attach(MIMEText(body_html, 'html', 'utf-8'))

        server = open_smtp_connection(self.config)
        try:
            server.sendmail(self.config.from_email, to_email, msg.as_string())
            return {
                'success': True,
                'recipients': to_email,
                'subject': subject,
                'timestamp': time.time()
            }
        finally:
            server.quit()
