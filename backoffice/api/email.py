from fastapi import APIRouter, HTTPException

from backoffice.config import settings
from backoffice.schemas.common import MessageResponse
from backoffice.schemas.email import EmailTestRequest
from backoffice.services import email as email_service

router = APIRouter(tags=["email"])


@router.post("/test-email", response_model=MessageResponse)
def send_test_email(payload: EmailTestRequest):
    email = (payload.email or "").strip()
    if not email:
        raise HTTPException(status_code=400, detail="Email is required")
    if not email_service.is_configured():
        raise HTTPException(status_code=500, detail="SMTP is not configured")
    sent = email_service.send_user_activation_email(
        email=email,
        name="Usuario de prueba",
        password="********",
        role_name="Administrador",
        login_url=f"{settings.app_url.rstrip('/')}/login",
    )
    if not sent:
        raise HTTPException(status_code=500, detail="Failed to send test email")
    return {"message": f"Test email sent to {email}"}
