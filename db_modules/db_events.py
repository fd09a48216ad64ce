import logging
import uuid

from models import Event, REGISTRATION_HEADERS
from utils.helpers import utc_timestamp

from .errors import RecordNotFoundError, DuplicateRecordError


logger = logging.getLogger(__name__)


class EventDbMixin:
    """Event operations on a company sheet.

    A company sheet lists one event per row; the `Table` column names the
    hidden worksheet holding that event's registrations.
    """

    def _load_events(self, workbook, company_name):
        worksheet = self._get_sheet(workbook, company_name)
        events = []
        for _, record in self._records(worksheet):
            event = Event.from_record(record)
            if not event.name:
                continue
            if event.table and event.table in workbook.sheetnames:
                event.registrations = len(self._records(workbook[event.table]))
            events.append(event)
        return events

    def _find_event(self, workbook, company_name, event_name):
        for event in self._load_events(workbook, company_name):
            if event.name == event_name:
                return event
        return None

    def get_company_events(self, company_name):
        """Events of a company, with registration counts

        Raises SheetNotFoundError when the company sheet does not exist.
        """
        with self.get_workbook() as workbook:
            return self._load_events(workbook, company_name)

    def get_event(self, company_name, event_name):
        """Event by exact name, or None"""
        with self.get_workbook() as workbook:
            return self._find_event(workbook, company_name, event_name)

    def create_event(self, company_name, event):
        """Add an event row and its registration table"""
        with self.get_workbook(write=True) as workbook:
            existing = self._load_events(workbook, company_name)
            if any(e.name.lower() == event.name.lower() for e in existing):
                raise DuplicateRecordError(company_name, 'Event', event.name)

            table = f"evt_{uuid.uuid4().hex[:12]}"
            while table in workbook.sheetnames:
                table = f"evt_{uuid.uuid4().hex[:12]}"
            event.table = table
            event.created_at = event.created_at or utc_timestamp()
            event.registrations = 0

            self._create_sheet(workbook, table, headers=REGISTRATION_HEADERS, hidden=True)
            self._append_records(workbook, company_name, [event.to_record()], unique=('Event',))

        logger.info(f"Created event {event.name} for {company_name} (table {event.table})")
        return event

    def update_event(self, company_name, event_name, changes):
        """Update status / image of an event addressed by name"""
        with self.get_workbook(write=True) as workbook:
            event = self._find_event(workbook, company_name, event_name)
            if event is None:
                raise RecordNotFoundError(company_name, 'Event', event_name)

            for attr, value in changes.items():
                setattr(event, attr, value)
            event = Event.from_record(event.to_record())

            record = self._update_record(workbook, company_name, 'Event', event_name, {
                'Status': event.status.value,
                'Image': event.image,
            })
            updated = Event.from_record(record)
            if updated.table in workbook.sheetnames:
                updated.registrations = len(self._records(workbook[updated.table]))

        logger.info(f"Updated event {event_name} for {company_name}")
        return updated
