import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from backoffice.models.siigo import SiigoCredentials
from backoffice.schemas.siigo import SiigoCredentialsSave
from backoffice.services.siigo.client import SiigoAuthCredentials, siigo_client

logger = logging.getLogger(__name__)


class SiigoCredentialsService:
    @staticmethod
    def get_active(db: Session) -> SiigoCredentials | None:
        return (
            db.query(SiigoCredentials)
            .filter(SiigoCredentials.is_active.is_(True))
            .order_by(SiigoCredentials.updated_at.desc())
            .first()
        )

    @staticmethod
    def save(db: Session, payload: SiigoCredentialsSave) -> SiigoCredentials:
        """Update the active credentials or create them when none exist."""
        credentials = SiigoCredentialsService.get_active(db)
        if credentials:
            credentials.email = payload.email
            credentials.access_key = payload.access_key
            credentials.platform = payload.platform
        else:
            credentials = SiigoCredentials(**payload.model_dump(), is_active=True)
            db.add(credentials)
        db.commit()
        db.refresh(credentials)
        siigo_client.clear_token()
        logger.info("siigo_credentials_saved email=%s platform=%s", credentials.email, credentials.platform.value)
        return credentials

    @staticmethod
    def deactivate(db: Session) -> None:
        rows = db.query(SiigoCredentials).filter(SiigoCredentials.is_active.is_(True)).all()
        if not rows:
            raise HTTPException(status_code=404, detail="No active Siigo credentials")
        for row in rows:
            row.is_active = False
        db.commit()
        siigo_client.clear_token()

    @staticmethod
    def test_connection(payload: SiigoCredentialsSave) -> dict:
        return siigo_client.test_connection(
            credentials=SiigoAuthCredentials(
                email=payload.email,
                access_key=payload.access_key,
                platform=payload.platform.value,
            )
        )


siigo_credentials = SiigoCredentialsService()
