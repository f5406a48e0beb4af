"""
Contact Tools - Outlook contact operations via MS Graph API.
"""

import logging
from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .service import OutlookService

logger = logging.getLogger(__name__)


def _addresses(contact: Dict[str, Any]) -> list:
    return [e.get("address") for e in contact.get("emailAddresses") or []]


class ContactTools:
    """Contact operations via MS Graph API."""

    CONTACT_FIELDS = "id,displayName,emailAddresses,businessPhones,mobilePhone,jobTitle,companyName"

    def __init__(self, service: "OutlookService"):
        self.service = service

    async def search_contacts(self, search_term: str, top: int = 10) -> Dict[str, Any]:
        """
        Search the signed-in user's contacts.

        Args:
            search_term: Free-text search query
            top: Maximum number of contacts to return (default: 10)

        Returns:
            Envelope with a list of contacts, email addresses flattened
        """
        try:
            params = {
                "$search": self.service.quote_search(search_term),
                "$select": self.CONTACT_FIELDS,
                "$top": top,
            }

            response = await self.service.client.get("/me/contacts", params=params)
            response.raise_for_status()
            data = response.json()

            contacts = []
            for contact in data.get("value", []):
                contacts.append({
                    "id": contact.get("id"),
                    "displayName": contact.get("displayName"),
                    "emailAddresses": _addresses(contact),
                    "businessPhones": contact.get("businessPhones") or [],
                    "mobilePhone": contact.get("mobilePhone"),
                    "jobTitle": contact.get("jobTitle"),
                    "companyName": contact.get("companyName"),
                })

            return {"success": True, "contacts": contacts}

        except Exception as e:
            return self.service.handle_tool_error(e, "searching contacts")

    async def create_contact(
        self,
        display_name: str,
        email: Optional[str] = None,
        phone: str = "",
        company: str = "",
        job_title: str = ""
    ) -> Dict[str, Any]:
        """
        Create a contact in the default contacts folder.

        Returns:
            Envelope with the new contact's id, display name and email addresses
        """
        try:
            contact = {
                "displayName": display_name,
                "emailAddresses": [{"address": email}] if email else [],
                "businessPhones": [phone] if phone else [],
                "companyName": company,
                "jobTitle": job_title,
            }

            response = await self.service.client.post("/me/contacts", json=contact)
            response.raise_for_status()
            created = response.json()

            return {
                "success": True,
                "contact": {
                    "id": created.get("id"),
                    "displayName": created.get("displayName"),
                    "emailAddresses": _addresses(created),
                },
            }

        except Exception as e:
            return self.service.handle_tool_error(e, "creating contact")
