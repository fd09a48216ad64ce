"""Spreadsheet storage errors."""


class SpreadsheetError(Exception):
    """Base class for storage failures."""


class SheetNotFoundError(SpreadsheetError):
    def __init__(self, sheet_name):
        super().__init__(f"Sheet '{sheet_name}' does not exist")
        self.sheet_name = sheet_name


class SheetExistsError(SpreadsheetError):
    def __init__(self, sheet_name):
        super().__init__(f"Sheet '{sheet_name}' already exists")
        self.sheet_name = sheet_name


class InvalidSheetNameError(SpreadsheetError):
    def __init__(self, sheet_name):
        super().__init__(f"'{sheet_name}' cannot be used as a sheet name")
        self.sheet_name = sheet_name


class RecordNotFoundError(SpreadsheetError):
    def __init__(self, sheet_name, field, value):
        super().__init__(f"No row in '{sheet_name}' with {field}={value!r}")
        self.sheet_name = sheet_name
        self.field = field
        self.value = value


class DuplicateRecordError(SpreadsheetError):
    """A unique field already holds the value being written."""

    def __init__(self, sheet_name, field, value):
        super().__init__(f"'{sheet_name}' already has a row with {field}={value!r}")
        self.sheet_name = sheet_name
        self.field = field
        self.value = value
