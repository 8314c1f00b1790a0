"""
CONTACT SYNC SERVICE (HubSpot)

Upsert-by-email of assessment takers into the CRM.

• Search by exact email → PATCH if found, POST if not
• Skips the CRM entirely when the email is blank or lacks "@"
• Each request bounded by CONTACT_SYNC_TIMEOUT_SECONDS
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

import httpx

from risk_analyzer.config import settings as app_settings
from risk_analyzer.domain.models import ContactDetails, ContactSyncError, ContactSyncResult

logger = logging.getLogger(__name__)


def utc_today() -> date:
    """Calendar date in UTC, used for `risk_analyzer_taken_on`"""
    return datetime.now(timezone.utc).date()


class ContactSyncService:
    """HubSpot CRM v3 contacts client"""

    SEARCH_PATH = "/crm/v3/objects/contacts/search"
    CONTACTS_PATH = "/crm/v3/objects/contacts"

    def __init__(self, settings=None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or app_settings
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return self.settings.contact_sync_configured

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.HUBSPOT_ACCESS_TOKEN}",
            "Content-Type": "application/json",
        }

    def _url(self, path: str) -> str:
        return f"{self.settings.HUBSPOT_BASE_URL.rstrip('/')}{path}"

    @staticmethod
    def build_assessment_properties(
        investable_assets: Optional[str],
        taken_on: date,
    ) -> Dict[str, Any]:
        return {
            "investable_assets": investable_assets,
            "has_taken_risk_analyzer": "true",
            "risk_analyzer_taken_on": taken_on.isoformat(),
        }

    async def sync_contact(
        self,
        contact: ContactDetails,
        taken_on: Optional[date] = None,
    ) -> ContactSyncResult:
        """
        Create or update the contact for an assessment.

        Args:
            contact: Email, names and investable-assets label
            taken_on: Assessment date (defaults to today in UTC)

        Returns:
            ContactSyncResult with mode "created" or "updated"

        Raises:
            ValueError: Email blank or implausible (CRM not called)
            ContactSyncError: CRM disabled, unreachable, non-2xx, or
                returned an unexpected body
        """
        if not contact.has_plausible_email:
            raise ValueError("Email required")
        if not self.enabled:
            raise ContactSyncError("Contact sync not configured")

        taken_on = taken_on or utc_today()
        properties = self.build_assessment_properties(contact.investable_assets, taken_on)

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.CONTACT_SYNC_TIMEOUT_SECONDS,
                headers=self._headers(),
                transport=self._transport,
            ) as client:
                contact_id = await self._find_contact_id(client, contact.email)

                if contact_id is not None:
                    resp = await client.patch(
                        self._url(f"{self.CONTACTS_PATH}/{contact_id}"),
                        json={"properties": properties},
                    )
                    resp.raise_for_status()
                    logger.info(f"CRM contact updated: {contact.email}")
                    return ContactSyncResult(mode="updated", contact_id=contact_id)

                resp = await client.post(
                    self._url(self.CONTACTS_PATH),
                    json={
                        "properties": {
                            "email": contact.email,
                            "firstname": contact.first_name,
                            "lastname": contact.last_name,
                            **properties,
                        }
                    },
                )
                resp.raise_for_status()
                created_id = self._safe_json(resp).get("id")
                logger.info(f"CRM contact created: {contact.email}")
                return ContactSyncResult(
                    mode="created",
                    contact_id=str(created_id) if created_id is not None else None,
                )
        except httpx.HTTPStatusError as exc:
            logger.error(f"HubSpot sync error: HTTP {exc.response.status_code}")
            raise ContactSyncError(
                "HubSpot sync failed",
                status_code=exc.response.status_code,
                details=self._safe_json(exc.response) or exc.response.text,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error(f"HubSpot sync error: {exc}")
            raise ContactSyncError("HubSpot sync failed", details=str(exc)) from exc
        except (AttributeError, KeyError, TypeError) as exc:
            logger.error(f"HubSpot sync error: unexpected response shape ({exc})")
            raise ContactSyncError("HubSpot sync failed", details="Unexpected response") from exc

    async def _find_contact_id(self, client: httpx.AsyncClient, email: str) -> Optional[str]:
        resp = await client.post(
            self._url(self.SEARCH_PATH),
            json={
                "filterGroups": [
                    {
                        "filters": [
                            {"propertyName": "email", "operator": "EQ", "value": email},
                        ]
                    }
                ]
            },
        )
        resp.raise_for_status()
        return self.parse_search_result(self._safe_json(resp))

    @staticmethod
    def parse_search_result(data: Dict[str, Any]) -> Optional[str]:
        """
        Id of the first matching contact, or None when there is no match.

        Raises:
            ContactSyncError: Search response has an unexpected shape
        """
        try:
            total = int(data.get("total") or 0)
        except (TypeError, ValueError) as exc:
            raise ContactSyncError(
                "HubSpot sync failed", details="Unexpected search response"
            ) from exc
        results = data.get("results") or []
        if total <= 0 or not results:
            return None

        first = results[0] if isinstance(results, list) else None
        contact_id = first.get("id") if isinstance(first, dict) else None
        if contact_id is None or isinstance(contact_id, (dict, list, bool)):
            raise ContactSyncError("HubSpot sync failed", details="Unexpected search response")
        return str(contact_id)

    @staticmethod
    def _safe_json(resp: httpx.Response) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
