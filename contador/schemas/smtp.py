# contador/schemas/smtp.py
from pydantic import BaseModel, EmailStr
from typing import Optional


class SMTPConfig(BaseModel):
    smtp_enabled: bool = False
    smtp_host: Optional[str] = ""
    smtp_port: Optional[int] = 587
    smtp_user: Optional[str] = ""
    smtp_password: Optional[str] = ""
    smtp_from_email: Optional[str] = ""
    smtp_from_name: Optional[str] = ""
    smtp_secure: bool = True


class SMTPConfigResponse(SMTPConfig):
    has_password: bool = False


class SMTPTestRequest(BaseModel):
    """Sin host/puerto se prueba la configuración guardada."""
    smtp_host: Optional[str] = None
    smtp_port: Optional[int] = None
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_from_email: Optional[str] = None
    smtp_from_name: Optional[str] = None
    test_email: Optional[EmailStr] = None
