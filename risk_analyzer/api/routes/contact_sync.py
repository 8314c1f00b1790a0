"""
Contact Sync API Route
Upsert an assessment taker into the CRM by email
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from risk_analyzer.api.dependencies import get_contact_sync_service
from risk_analyzer.api.routes.analyze_risk import read_json_body
from risk_analyzer.domain.models import ContactDetails, ContactSyncError
from risk_analyzer.services.contact_sync_service import ContactSyncService

router = APIRouter()
logger = logging.getLogger(__name__)


def _optional_str(value):
    if value is None:
        return None
    return str(value)


@router.post(
    "/hubspot-sync",
    summary="Sync contact to CRM",
    description="Search by email, then update or create the contact",
)
async def hubspot_sync(
    request: Request,
    contact_sync_service: ContactSyncService = Depends(get_contact_sync_service),
):
    body = await read_json_body(request)
    if not isinstance(body, dict):
        body = {}

    email = body.get("email")
    contact = ContactDetails(
        email=email.strip() if isinstance(email, str) else "",
        first_name=_optional_str(body.get("firstName")),
        last_name=_optional_str(body.get("lastName")),
        investable_assets=_optional_str(body.get("investableAssets")),
    )

    if not contact.has_plausible_email:
        return JSONResponse(status_code=400, content={"error": "Email required"})

    try:
        outcome = await contact_sync_service.sync_contact(contact)
    except ContactSyncError as e:
        content = {"error": str(e)}
        if e.details is not None:
            content["details"] = e.details
        return JSONResponse(status_code=500, content=content)

    return outcome.to_dict()
