import logging

from models import Company, COMPANY_HEADERS, EVENT_HEADERS
from utils.helpers import is_valid_sheet_title, MAX_SHEET_TITLE_LENGTH

from .errors import (
    SheetNotFoundError,
    SheetExistsError,
    InvalidSheetNameError,
    RecordNotFoundError,
    DuplicateRecordError,
)


logger = logging.getLogger(__name__)

# Soft-deleted company sheets are renamed to <name><suffix>
DELETED_SHEET_SUFFIX = '-deleted'
MAX_COMPANY_NAME_LENGTH = MAX_SHEET_TITLE_LENGTH - len(DELETED_SHEET_SUFFIX)


class CompanyDbMixin:
    """Company table-of-record operations.

    Relies on the host class for:
    - self.get_workbook(): workbook context manager
    - self.companies_sheet: title of the companies worksheet
    - the low level _get_sheet/_records/_create_sheet/_rename_sheet/... helpers
    """

    def _ensure_companies_sheet(self, workbook):
        if self.companies_sheet not in workbook.sheetnames:
            logger.info("Companies sheet does not exist, creating it...")
            self._create_sheet(workbook, self.companies_sheet, headers=COMPANY_HEADERS)
        return workbook[self.companies_sheet]

    def _load_companies(self, workbook):
        if self.companies_sheet not in workbook.sheetnames:
            return []
        worksheet = workbook[self.companies_sheet]
        return [Company.from_record(record) for _, record in self._records(worksheet)]

    def _check_username_available(self, companies, username, exclude_id=None):
        wanted = username.strip().lower()
        for company in companies:
            if company.deleted or company.company_id == exclude_id:
                continue
            if company.username and company.username.lower() == wanted:
                raise DuplicateRecordError(self.companies_sheet, 'Username', username)

    def _check_sheet_name_available(self, workbook, name, ignore=None):
        if (
            name.lower() == self.companies_sheet.lower()
            or len(name) > MAX_COMPANY_NAME_LENGTH
            or not is_valid_sheet_title(name)
        ):
            raise InvalidSheetNameError(name)
        if self._title_taken(workbook, name, ignore=ignore):
            raise SheetExistsError(name)

    def get_all_companies(self, include_deleted=True):
        """All companies from the companies sheet (empty if it does not exist yet)"""
        with self.get_workbook() as workbook:
            companies = self._load_companies(workbook)
        if include_deleted:
            return companies
        return [c for c in companies if not c.deleted]

    def get_company_by_id(self, company_id):
        for company in self.get_all_companies():
            if company.company_id == company_id:
                return company
        return None

    def get_company_by_name(self, name):
        """Active (non-deleted) company with this name"""
        for company in self.get_all_companies(include_deleted=False):
            if company.name == name:
                return company
        return None

    def get_company_by_username(self, username):
        """Active (non-deleted) company with this username"""
        if not username:
            return None
        wanted = username.strip().lower()
        for company in self.get_all_companies(include_deleted=False):
            if company.username and company.username.lower() == wanted:
                return company
        return None

    def create_company(self, company):
        """Append the company row and create its event sheet in one save"""
        with self.get_workbook(write=True) as workbook:
            worksheet = self._ensure_companies_sheet(workbook)
            companies = self._load_companies(workbook)

            self._check_username_available(companies, company.username)
            self._check_sheet_name_available(workbook, company.name)

            taken_ids = {c.company_id for c in companies}
            base_id = company.company_id
            suffix = 1
            while company.company_id in taken_ids:
                company.company_id = f"{base_id}_{suffix}"
                suffix += 1

            self._append_records(workbook, worksheet.title, [company.to_record()], unique=('ID',))
            self._create_sheet(workbook, company.name, headers=EVENT_HEADERS)

        logger.info(f"Created company {company.company_id} ({company.name})")
        return company

    def update_company(self, company_id, changes):
        """Apply record changes to a company addressed by id

        `changes` maps Company attributes (name, username, password_hash,
        image, status, deleted) to new values. A name change renames the
        company sheet.
        """
        with self.get_workbook(write=True) as workbook:
            companies = self._load_companies(workbook)
            current = next((c for c in companies if c.company_id == company_id), None)
            if current is None:
                raise RecordNotFoundError(self.companies_sheet, 'ID', company_id)

            updated = Company.from_record(current.to_record())
            for attr, value in changes.items():
                setattr(updated, attr, value)
            # Re-run coercion for status / deleted
            updated = Company.from_record(updated.to_record())

            username_changed = (updated.username or '').lower() != (current.username or '').lower()
            restoring = current.deleted and not updated.deleted
            if (username_changed or restoring) and not updated.deleted:
                self._check_username_available(companies, updated.username, exclude_id=company_id)

            if updated.name != current.name:
                ignore = workbook[current.name] if current.name in workbook.sheetnames else None
                self._check_sheet_name_available(workbook, updated.name, ignore=ignore)
                self._rename_sheet(workbook, current.name, updated.name)

            self._update_record(workbook, self.companies_sheet, 'ID', company_id, updated.to_record())

        logger.info(f"Updated company {company_id}")
        return updated

    def soft_delete_company(self, company_id):
        """Mark a company deleted and rename its sheet to `<name>-deleted`"""
        with self.get_workbook(write=True) as workbook:
            companies = self._load_companies(workbook)
            company = next((c for c in companies if c.company_id == company_id), None)
            if company is None:
                raise RecordNotFoundError(self.companies_sheet, 'ID', company_id)

            company.deleted = True
            self._update_record(workbook, self.companies_sheet, 'ID', company_id, {'Deleted': True})
            try:
                self._rename_sheet(workbook, company.name, f"{company.name}{DELETED_SHEET_SUFFIX}")
            except SheetNotFoundError:
                logger.warning(f"Company {company_id} has no sheet named {company.name}, nothing to rename")

        logger.info(f"Soft-deleted company {company_id} ({company.name})")
        return company
