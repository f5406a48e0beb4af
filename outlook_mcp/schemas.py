"""
Pydantic schemas for MCP tool parameters.

Field names on the wire are camelCase (aliases); Python code uses snake_case.
"""

from typing import Dict, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field


class ToolParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SendEmailParams(ToolParams):
    to: Union[str, List[str]] = Field(description="Recipient email address(es)")
    subject: str = Field(description="Email subject")
    body: str = Field(description="Email body content")
    is_html: bool = Field(False, alias="isHtml", description="Whether the body is HTML formatted")


class ReadEmailsParams(ToolParams):
    folder_id: str = Field("inbox", alias="folderId", description="Folder to read from (inbox, sent, etc.)")
    top: int = Field(10, description="Number of emails to retrieve")
    search: Optional[str] = Field(None, description="Search query to filter emails")


class CreateCalendarEventParams(ToolParams):
    subject: str = Field(description="Event title")
    start: str = Field(description="Start date/time (ISO 8601 format, UTC)")
    end: str = Field(description="End date/time (ISO 8601 format, UTC)")
    attendees: List[str] = Field(default_factory=list, description="List of attendee email addresses")
    body: str = Field("", description="Event description")
    location: str = Field("", description="Event location")


class GetCalendarEventsParams(ToolParams):
    start_date: str = Field(alias="startDate", description="Start date for event range (ISO 8601 format)")
    end_date: str = Field(alias="endDate", description="End date for event range (ISO 8601 format)")
    top: int = Field(25, description="Maximum number of events to retrieve")


class SearchContactsParams(ToolParams):
    search_term: str = Field(alias="searchTerm", description="Search term to find contacts")
    top: int = Field(10, description="Maximum number of contacts to return")


class CreateContactParams(ToolParams):
    display_name: str = Field(alias="displayName", description="Contact display name")
    email: Optional[str] = Field(None, description="Contact email address")
    phone: str = Field("", description="Contact phone number")
    company: str = Field("", description="Contact company name")
    job_title: str = Field("", alias="jobTitle", description="Contact job title")


TOOL_PARAMS: Dict[str, Type[ToolParams]] = {
    "send_email": SendEmailParams,
    "read_emails": ReadEmailsParams,
    "create_calendar_event": CreateCalendarEventParams,
    "get_calendar_events": GetCalendarEventsParams,
    "search_contacts": SearchContactsParams,
    "create_contact": CreateContactParams,
}
