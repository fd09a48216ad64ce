"""
Excel export helper
Builds downloadable registration lists for an event
"""

from io import BytesIO

import pandas as pd

from utils.helpers import INVALID_SHEET_TITLE_CHARS, MAX_SHEET_TITLE_LENGTH


class ExcelHandler:
    def __init__(self):
        # Registration field -> column title, in export order
        self.columns = {
            'name': 'Name',
            'whatsapp': 'WhatsApp',
            'national_id': 'National ID',
            'email': 'Email',
            'education': 'Education',
            'university_college': 'University / College',
            'age': 'Age',
            'gender': 'Gender',
            'registration_date': 'Registration Date',
        }
        self.column_widths = [24, 18, 20, 30, 18, 30, 8, 10, 26]

    @staticmethod
    def sheet_title(event_name):
        """Worksheet title usable for the export"""
        title = INVALID_SHEET_TITLE_CHARS.sub('_', event_name or '').strip()
        return title[:MAX_SHEET_TITLE_LENGTH] or 'Registrations'

    def export_registrations(self, registrations, event_name):
        """
        Export the registrations of an event as xlsx bytes
        """
        export_data = [
            {title: getattr(registration, field) for field, title in self.columns.items()}
            for registration in registrations
        ]
        df = pd.DataFrame(export_data, columns=list(self.columns.values()))

        sheet_name = self.sheet_title(event_name)
        output = BytesIO()
        with pd.ExcelWriter(output, engine='openpyxl') as writer:
            df.to_excel(writer, sheet_name=sheet_name, index=False)

            worksheet = writer.sheets[sheet_name]
            for i, width in enumerate(self.column_widths):
                worksheet.column_dimensions[chr(ord('A') + i)].width = width
            worksheet.freeze_panes = 'A2'

        output.seek(0)
        return output.getvalue()
