import logging

from models import Registration

from .errors import RecordNotFoundError


logger = logging.getLogger(__name__)


class RegistrationDbMixin:
    """Registration rows of an event table."""

    def _event_table(self, workbook, company_name, event_name):
        event = self._find_event(workbook, company_name, event_name)
        if event is None or not event.table:
            raise RecordNotFoundError(company_name, 'Event', event_name)
        return self._get_sheet(workbook, event.table)

    def get_event_table_data(self, company_name, event_name):
        """Raw rows of an event table, header row included"""
        with self.get_workbook() as workbook:
            return self._rows(self._event_table(workbook, company_name, event_name))

    def get_registrations(self, company_name, event_name):
        with self.get_workbook() as workbook:
            worksheet = self._event_table(workbook, company_name, event_name)
            return [Registration.from_record(record) for _, record in self._records(worksheet)]

    def find_registration(self, company_name, event_name, email=None, whatsapp=None):
        """First registration with the same email or WhatsApp number"""
        for registration in self.get_registrations(company_name, event_name):
            if registration.matches(email=email, whatsapp=whatsapp):
                return registration
        return None

    def add_registration(self, company_name, event_name, registration):
        """Append a registration; Email and WhatsApp must be unique in the event"""
        with self.get_workbook(write=True) as workbook:
            worksheet = self._event_table(workbook, company_name, event_name)
            self._append_records(
                workbook,
                worksheet.title,
                [registration.to_record()],
                unique=('Email', 'WhatsApp'),
            )

        logger.info(f"Added registration {registration.email} to {company_name}/{event_name}")
        return registration
