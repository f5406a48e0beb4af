"""
Calendar Tools - Calendar operations via MS Graph API.

Event times are always sent with a UTC time zone annotation. The dateTime
string is passed through as given, so callers should send UTC times.
"""

import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .service import OutlookService

logger = logging.getLogger(__name__)


class CalendarTools:
    """Calendar operations via MS Graph API."""

    TIMEZONE = "UTC"
    EVENT_FIELDS = "id,subject,start,end,location,attendees,organizer"

    def __init__(self, service: "OutlookService"):
        self.service = service

    async def create_calendar_event(
        self,
        subject: str,
        start: str,
        end: str,
        attendees: Optional[List[str]] = None,
        body: str = "",
        location: str = ""
    ) -> Dict[str, Any]:
        """
        Create a new event in the default calendar.

        Args:
            subject: Event title
            start: Event start time (ISO format: 2025-06-06T10:00:00)
            end: Event end time (ISO format: 2025-06-06T11:00:00)
            attendees: List of attendee email addresses
            body: Event description (HTML)
            location: Event location display name

        Returns:
            Envelope with the created event's id, subject, times and web link
        """
        try:
            event = {
                "subject": subject,
                "body": {
                    "contentType": "HTML",
                    "content": body,
                },
                "start": {
                    "dateTime": start,
                    "timeZone": self.TIMEZONE,
                },
                "end": {
                    "dateTime": end,
                    "timeZone": self.TIMEZONE,
                },
                "location": {
                    "displayName": location,
                },
                "attendees": [
                    {"emailAddress": {"address": email, "name": email}}
                    for email in attendees or []
                ],
            }

            response = await self.service.client.post("/me/events", json=event)
            response.raise_for_status()
            created = response.json()

            return {
                "success": True,
                "event": {
                    "id": created.get("id"),
                    "subject": created.get("subject"),
                    "start": (created.get("start") or {}).get("dateTime"),
                    "end": (created.get("end") or {}).get("dateTime"),
                    "webLink": created.get("webLink"),
                },
            }

        except Exception as e:
            return self.service.handle_tool_error(e, "creating calendar event")

    async def get_calendar_events(
        self,
        start_date: str,
        end_date: str,
        top: int = 25
    ) -> Dict[str, Any]:
        """
        List events that start and end within a window, earliest first.

        Args:
            start_date: Window start (ISO 8601)
            end_date: Window end (ISO 8601)
            top: Maximum number of events to return (default: 25)

        Returns:
            Envelope with a list of event records
        """
        try:
            params = {
                "$filter": f"start/dateTime ge '{start_date}' and end/dateTime le '{end_date}'",
                "$select": self.EVENT_FIELDS,
                "$orderby": "start/dateTime",
                "$top": top,
            }

            response = await self.service.client.get("/me/events", params=params)
            response.raise_for_status()
            data = response.json()

            events = []
            for event in data.get("value", []):
                events.append({
                    "id": event.get("id"),
                    "subject": event.get("subject"),
                    "start": (event.get("start") or {}).get("dateTime"),
                    "end": (event.get("end") or {}).get("dateTime"),
                    "location": (event.get("location") or {}).get("displayName") or "",
                    "organizer": ((event.get("organizer") or {}).get("emailAddress") or {}).get("address") or "",
                    "attendees": [
                        (a.get("emailAddress") or {}).get("address")
                        for a in event.get("attendees") or []
                    ],
                })

            return {"success": True, "events": events}

        except Exception as e:
            return self.service.handle_tool_error(e, "listing calendar events")
