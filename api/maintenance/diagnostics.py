from flask import request, jsonify

from database import SpreadsheetError
from utils.decorators import admin_required, log_action
from utils.helpers import utc_timestamp

from . import maintenance_bp, db_manager, logger


@maintenance_bp.route('/test', methods=['GET'])
@admin_required
@log_action('storage diagnostics')
def storage_diagnostics():
    """Report what the workbook holds for a company / event

    Each probe records its own failure so one missing sheet does not hide the
    other results.
    """
    company = (request.args.get('company') or '').strip() or None
    event = (request.args.get('event') or '').strip() or None

    response = {
        'status': 'ok',
        'timestamp': utc_timestamp(),
        'query': {
            'company': company,
            'event': event,
        },
        'results': {},
    }
    results = response['results']

    try:
        with db_manager.get_workbook():
            if company:
                try:
                    company_rows = db_manager.get_sheet_data(company)
                    results['company'] = {'found': True, 'rowCount': len(company_rows)}

                    if event:
                        try:
                            event_rows = db_manager.get_event_table_data(company, event)
                            results['event'] = {
                                'found': True,
                                'rowCount': len(event_rows),
                                'headers': list(event_rows[0]) if event_rows else [],
                            }
                        except SpreadsheetError as e:
                            results['event'] = {'found': False, 'error': str(e)}
                except SpreadsheetError as e:
                    results['company'] = {'found': False, 'error': str(e)}

            try:
                companies_rows = db_manager.get_sheet_data(db_manager.companies_sheet)
                results['companies'] = {
                    'found': True,
                    'rowCount': len(companies_rows),
                    'list': [
                        {'id': c.company_id, 'name': c.name, 'status': c.status.value}
                        for c in db_manager.get_all_companies()
                    ],
                }
            except SpreadsheetError as e:
                results['companies'] = {'found': False, 'error': str(e)}

    except Exception as e:
        logger.error(f"Storage diagnostics failed: {e}", exc_info=True)
        return jsonify({'status': 'error', 'message': str(e)}), 500

    return jsonify(response)
