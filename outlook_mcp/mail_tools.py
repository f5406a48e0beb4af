"""
Mail Tools - Email operations via MS Graph API.
"""

import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .service import OutlookService

logger = logging.getLogger(__name__)

# Friendly names that are not Graph well-known folder names
FOLDER_ALIASES = {
    "sent": "sentitems",
    "deleted": "deleteditems",
    "junk": "junkemail",
}


class MailTools:
    """Email operations via MS Graph API."""

    MESSAGE_FIELDS = "id,subject,from,receivedDateTime,body,isRead,importance"

    def __init__(self, service: "OutlookService"):
        self.service = service

    async def send_email(
        self,
        to: Union[str, List[str]],
        subject: str,
        body: str,
        is_html: bool = False
    ) -> Dict[str, Any]:
        """
        Send an email from the signed-in mailbox.

        Args:
            to: Recipient address or list of addresses
            subject: Email subject line
            body: Email body content
            is_html: Send the body as HTML instead of plain text

        Returns:
            Success envelope
        """
        try:
            recipients = [to] if isinstance(to, str) else list(to)

            message = {
                "subject": subject,
                "body": {
                    "contentType": "HTML" if is_html else "Text",
                    "content": body,
                },
                "toRecipients": [
                    {"emailAddress": {"address": email}} for email in recipients
                ],
            }

            response = await self.service.client.post("/me/sendMail", json={"message": message})
            response.raise_for_status()

            return {"success": True, "message": "Email sent successfully"}

        except Exception as e:
            return self.service.handle_tool_error(e, "sending email")

    async def read_emails(
        self,
        folder_id: str = "inbox",
        top: int = 10,
        search: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        List the newest messages in a folder, optionally filtered by a search query.

        Args:
            folder_id: Well-known folder name or folder ID (default: inbox)
            top: Maximum number of emails to return (default: 10)
            search: Free-text search applied by Graph

        Returns:
            Envelope with a list of email records
        """
        try:
            params = {
                "$top": top,
                "$select": self.MESSAGE_FIELDS,
            }

            if search:
                # Graph rejects $orderby combined with $search on messages;
                # search results come back newest first anyway.
                params["$search"] = self.service.quote_search(search)
            else:
                params["$orderby"] = "receivedDateTime desc"

            response = await self.service.client.get(self._get_folder_path(folder_id), params=params)
            response.raise_for_status()
            data = response.json()

            emails = []
            for msg in data.get("value", []):
                sender = (msg.get("from") or {}).get("emailAddress") or {}
                emails.append({
                    "id": msg.get("id"),
                    "subject": msg.get("subject"),
                    "from": sender.get("address") or "Unknown",
                    "fromName": sender.get("name") or "Unknown",
                    "receivedDateTime": msg.get("receivedDateTime"),
                    "body": (msg.get("body") or {}).get("content") or "",
                    "isRead": msg.get("isRead"),
                    "importance": msg.get("importance"),
                })

            return {"success": True, "emails": emails}

        except Exception as e:
            return self.service.handle_tool_error(e, "reading emails")

    def _get_folder_path(self, folder_id: str) -> str:
        """
        Map a folder name or ID to its messages path.

        Args:
            folder_id: Folder name (inbox, sent, drafts, ...) or Graph folder ID

        Returns:
            MS Graph API path for the folder's messages
        """
        folder = FOLDER_ALIASES.get(folder_id.lower(), folder_id)
        return f"/me/mailFolders/{folder}/messages"
