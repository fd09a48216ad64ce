#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Event registration service - spreadsheet storage

All data lives in one .xlsx workbook:
- the `companies` worksheet is the table of record for companies;
- every company has a worksheet named after it listing its events;
- every event keeps its registrations in a hidden worksheet.

Rows are addressed by header name. A workbook is loaded, changed and saved
as one unit while the module lock is held.
"""

import os
import logging
import threading
import time
import tempfile
import uuid
from contextlib import contextmanager

from flask import current_app, has_app_context
from openpyxl import Workbook, load_workbook

from config import Config
from utils.helpers import is_valid_sheet_title
from db_modules.errors import (
    SpreadsheetError,
    SheetNotFoundError,
    SheetExistsError,
    InvalidSheetNameError,
    RecordNotFoundError,
    DuplicateRecordError,
)
from db_modules.db_companies import CompanyDbMixin
from db_modules.db_events import EventDbMixin
from db_modules.db_registrations import RegistrationDbMixin

logger = logging.getLogger(__name__)

_workbook_lock = threading.RLock()
_local = threading.local()


def _is_empty_row(values):
    return all(v is None or (isinstance(v, str) and not v.strip()) for v in values)


class SpreadsheetManager(
    CompanyDbMixin,
    EventDbMixin,
    RegistrationDbMixin,
):
    """Spreadsheet manager"""

    def __init__(self, path=None):
        self._path = path

    @property
    def path(self):
        if self._path:
            return self._path
        if has_app_context():
            return current_app.config['SPREADSHEET_PATH']
        return Config.SPREADSHEET_PATH

    @property
    def companies_sheet(self):
        if has_app_context():
            return current_app.config.get('COMPANIES_SHEET', Config.COMPANIES_SHEET)
        return Config.COMPANIES_SHEET

    @property
    def slow_threshold_ms(self):
        if has_app_context():
            return current_app.config.get('SLOW_OPERATION_THRESHOLD_MS', Config.SLOW_OPERATION_THRESHOLD_MS)
        return Config.SLOW_OPERATION_THRESHOLD_MS

    # ==================== workbook lifecycle ====================

    def _load_workbook(self):
        if os.path.exists(self.path):
            return load_workbook(self.path)
        workbook = Workbook()
        # Drop the default sheet so it cannot collide with a company name
        workbook.remove(workbook.active)
        return workbook

    def _save_workbook(self, workbook):
        if not workbook.worksheets:
            return
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(suffix='.xlsx', dir=directory)
        os.close(fd)
        try:
            workbook.save(tmp_path)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    @contextmanager
    def get_workbook(self, write=False):
        """Context manager yielding the workbook

        Nested calls on the same thread share the outer workbook; only the
        outermost call saves, and only when some level asked to write and the
        block finished without an exception.
        """
        current = getattr(_local, 'transaction', None)
        if current is not None and current['path'] == self.path:
            if write:
                current['dirty'] = True
            yield current['workbook']
            return

        with _workbook_lock:
            start = time.perf_counter()
            workbook = self._load_workbook()
            _local.transaction = {'path': self.path, 'workbook': workbook, 'dirty': write}
            try:
                yield workbook
                if _local.transaction['dirty']:
                    self._save_workbook(workbook)
            finally:
                _local.transaction = None
                duration_ms = (time.perf_counter() - start) * 1000
                if duration_ms >= self.slow_threshold_ms:
                    logger.warning(
                        "Slow workbook operation took %.1f ms (write=%s): %s",
                        duration_ms,
                        write,
                        self.path,
                    )

    # ==================== sheet helpers ====================

    def _get_sheet(self, workbook, sheet_name):
        if sheet_name not in workbook.sheetnames:
            raise SheetNotFoundError(sheet_name)
        return workbook[sheet_name]

    @staticmethod
    def _headers(worksheet):
        if worksheet.max_row < 1:
            return []
        first = next(worksheet.iter_rows(min_row=1, max_row=1, values_only=True), ())
        return [str(h).strip() if h is not None else None for h in first]

    def _rows(self, worksheet):
        return [list(row) for row in worksheet.iter_rows(values_only=True) if not _is_empty_row(row)]

    def _records(self, worksheet):
        """(row number, record dict) for every data row"""
        headers = self._headers(worksheet)
        records = []
        for row_number, row in enumerate(worksheet.iter_rows(min_row=2, values_only=True), start=2):
            if _is_empty_row(row):
                continue
            record = {header: row[i] if i < len(row) else None
                      for i, header in enumerate(headers) if header}
            records.append((row_number, record))
        return records

    @staticmethod
    def _title_taken(workbook, title, ignore=None):
        """Worksheet titles are unique regardless of case"""
        wanted = title.lower()
        return any(ws.title.lower() == wanted for ws in workbook.worksheets if ws is not ignore)

    def _create_sheet(self, workbook, sheet_name, headers=None, hidden=False):
        if not is_valid_sheet_title(sheet_name):
            raise InvalidSheetNameError(sheet_name)
        if self._title_taken(workbook, sheet_name):
            raise SheetExistsError(sheet_name)
        worksheet = workbook.create_sheet(title=sheet_name)
        if headers:
            worksheet.append(list(headers))
        if hidden:
            worksheet.sheet_state = 'hidden'
        logger.info(f"Created sheet {sheet_name}")
        return worksheet

    def _rename_sheet(self, workbook, old_name, new_name):
        worksheet = self._get_sheet(workbook, old_name)
        if not is_valid_sheet_title(new_name):
            raise InvalidSheetNameError(new_name)
        if self._title_taken(workbook, new_name, ignore=worksheet):
            raise SheetExistsError(new_name)
        if worksheet.title.lower() == new_name.lower():
            # openpyxl would treat the old title as a clash and append a counter
            worksheet.title = f"tmp_{uuid.uuid4().hex[:20]}"
        worksheet.title = new_name
        logger.info(f"Renamed sheet {old_name} -> {new_name}")
        return worksheet

    def _check_unique(self, sheet_name, existing, record, unique):
        for field in unique:
            value = record.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            needle = str(value).strip().lower()
            for _, other in existing:
                other_value = other.get(field)
                if other_value is not None and str(other_value).strip().lower() == needle:
                    raise DuplicateRecordError(sheet_name, field, value)

    def _append_records(self, workbook, sheet_name, records, unique=()):
        worksheet = self._get_sheet(workbook, sheet_name)
        headers = self._headers(worksheet)
        existing = self._records(worksheet)
        for record in records:
            if unique:
                self._check_unique(sheet_name, existing, record, unique)
            worksheet.append([record.get(h) if h else None for h in headers])
            existing.append((worksheet.max_row, record))
        return len(records)

    def _update_record(self, workbook, sheet_name, key_field, key_value, changes):
        worksheet = self._get_sheet(workbook, sheet_name)
        headers = self._headers(worksheet)
        for row_number, record in self._records(worksheet):
            if record.get(key_field) != key_value:
                continue
            for field, value in changes.items():
                if field not in headers:
                    raise SpreadsheetError(f"Sheet '{sheet_name}' has no column '{field}'")
                worksheet.cell(row=row_number, column=headers.index(field) + 1, value=value)
                record[field] = value
            return record
        raise RecordNotFoundError(sheet_name, key_field, key_value)

    # ==================== public sheet operations ====================

    def sheet_exists(self, sheet_name):
        with self.get_workbook() as workbook:
            return sheet_name in workbook.sheetnames

    def get_sheet_data(self, sheet_name):
        """All non-empty rows of a sheet, header row included"""
        with self.get_workbook() as workbook:
            return self._rows(self._get_sheet(workbook, sheet_name))

    def get_records(self, sheet_name):
        """Data rows of a sheet as dicts keyed by header"""
        with self.get_workbook() as workbook:
            return [record for _, record in self._records(self._get_sheet(workbook, sheet_name))]

    def create_sheet(self, sheet_name, headers=None, hidden=False):
        with self.get_workbook(write=True) as workbook:
            self._create_sheet(workbook, sheet_name, headers=headers, hidden=hidden)

    def rename_sheet(self, old_name, new_name):
        with self.get_workbook(write=True) as workbook:
            self._rename_sheet(workbook, old_name, new_name)

    def append_records(self, sheet_name, records, unique=()):
        """Append records; `unique` lists fields that must not repeat"""
        with self.get_workbook(write=True) as workbook:
            return self._append_records(workbook, sheet_name, records, unique=unique)

    def update_record(self, sheet_name, key_field, key_value, changes):
        """Update the row whose `key_field` equals `key_value`"""
        with self.get_workbook(write=True) as workbook:
            return self._update_record(workbook, sheet_name, key_field, key_value, changes)


__all__ = [
    'SpreadsheetManager',
    'SpreadsheetError',
    'SheetNotFoundError',
    'SheetExistsError',
    'InvalidSheetNameError',
    'RecordNotFoundError',
    'DuplicateRecordError',
]
