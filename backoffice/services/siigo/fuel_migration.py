"""Push pending fuel purchases to Siigo as accounting journals."""

from __future__ import annotations

import logging
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy.orm import Session, selectinload

from backoffice.config import parse_provider_map, settings
from backoffice.models.fleet import FuelPurchase
from backoffice.models.siigo import SiigoCostCenter
from backoffice.services.common import coerce_uuid
from backoffice.services.siigo.client import SiigoClient, SiigoError, siigo_client

logger = logging.getLogger(__name__)


class FuelJournalError(Exception):
    """A purchase cannot be turned into a Siigo journal."""


def _journal_item(
    movement: str,
    provider_id: str,
    description: str,
    cost_center: int,
    value: Decimal,
) -> dict:
    return {
        "account": {"code": settings.siigo_fuel_account_code, "movement": movement},
        "customer": {"identification": provider_id, "branch_office": 0},
        "description": description,
        "cost_center": cost_center,
        "value": float(value),
    }


def build_journal(db: Session, purchase: FuelPurchase, providers: dict[str, str] | None = None) -> dict:
    """Build the Siigo journal payload for one fuel purchase.

    Raises FuelJournalError when the provider is not mapped or no Siigo cost
    center is named after the vehicle plate.
    """
    providers = providers if providers is not None else parse_provider_map(settings.siigo_fuel_providers)
    provider_id = providers.get(purchase.provider)
    if not provider_id:
        valid = ", ".join(sorted(providers))
        raise FuelJournalError(
            f"Provider '{purchase.provider}' is not mapped. Valid providers: {valid}"
        )
    plate = purchase.vehicle.plate
    cost_center = db.query(SiigoCostCenter).filter(SiigoCostCenter.name == plate).first()
    if not cost_center:
        raise FuelJournalError(f"No Siigo cost center found for plate '{plate}'")

    description = f"COMBUSTIBLE RECIBO {purchase.receipt or ''}".strip()
    vehicle = purchase.vehicle
    return {
        "document": {"id": settings.siigo_fuel_document_id},
        "date": purchase.purchase_date.isoformat(),
        "items": [
            _journal_item("Debit", provider_id, description, cost_center.id, purchase.total),
            _journal_item(
                "Credit",
                provider_id,
                description,
                settings.siigo_fuel_credit_cost_center,
                purchase.total,
            ),
        ],
        "observations": f"Automatic migration - Vehicle: {plate} ({vehicle.brand} {vehicle.model})",
    }


class FuelSiigoMigration:
    def __init__(self, client: SiigoClient | None = None):
        self.client = client or siigo_client

    def _push(self, db: Session, purchase: FuelPurchase) -> dict:
        journal = build_journal(db, purchase)
        result = self.client.create_journal(db, journal)
        purchase.state = False
        db.commit()
        journal_id = result.get("id") if isinstance(result, dict) else None
        logger.info(
            "fuel_purchase_migrated id=%s plate=%s journal_id=%s",
            purchase.id,
            purchase.vehicle.plate,
            journal_id,
        )
        return {"id": purchase.id, "receipt": purchase.receipt, "success": True, "error": None}

    def migrate_one(self, db: Session, purchase_id: str) -> dict:
        purchase = (
            db.query(FuelPurchase)
            .options(selectinload(FuelPurchase.vehicle))
            .filter(FuelPurchase.id == coerce_uuid(purchase_id))
            .filter(FuelPurchase.state.is_(True))
            .first()
        )
        if not purchase:
            raise HTTPException(status_code=404, detail="Pending fuel purchase not found")
        try:
            return self._push(db, purchase)
        except FuelJournalError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    def migrate_pending(self, db: Session) -> dict:
        pending = (
            db.query(FuelPurchase)
            .options(selectinload(FuelPurchase.vehicle))
            .filter(FuelPurchase.state.is_(True))
            .order_by(FuelPurchase.purchase_date.asc(), FuelPurchase.created_at.asc())
            .all()
        )
        if not pending:
            raise HTTPException(status_code=400, detail="No fuel purchases pending migration")

        results = []
        for purchase in pending:
            try:
                results.append(self._push(db, purchase))
            except (FuelJournalError, SiigoError) as exc:
                db.rollback()
                logger.warning("fuel_purchase_migration_failed id=%s error=%s", purchase.id, exc)
                results.append(
                    {"id": purchase.id, "receipt": purchase.receipt, "success": False, "error": str(exc)}
                )
        successful = sum(1 for item in results if item["success"])
        return {
            "total": len(pending),
            "successful": successful,
            "failed": len(results) - successful,
            "results": results,
        }


fuel_siigo_migration = FuelSiigoMigration()
