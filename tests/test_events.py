from io import BytesIO

import pytest
from openpyxl import load_workbook

from conftest import create_company, registration_payload, png_base64


def test_list_requires_company(client):
    response = client.get('/api/events')

    assert response.status_code == 400


def test_list_unknown_company(client, company):
    response = client.get('/api/events?company=Nobody')

    assert response.status_code == 404
    assert response.get_json() == {'error': 'Company not found'}


def test_list_events(client, event):
    response = client.get('/api/events?company=Acme')

    assert response.status_code == 200
    assert response.get_json() == {'events': [{
        'id': 'Launch',
        'name': 'Launch',
        'image': None,
        'registrations': 0,
        'status': 'enabled',
        'companyStatus': 'enabled',
    }]}


def test_list_for_disabled_company(admin_client, client, company, event):
    admin_client.put('/api/companies', json={'id': company['id'], 'status': 'disabled'})

    response = client.get('/api/events?company=Acme')

    assert response.status_code == 403
    assert response.get_json() == {'error': 'Company is disabled'}


def test_create_event_requires_company_session(client, admin_client):
    assert client.post('/api/events', json={'name': 'Launch'}).status_code == 401
    assert admin_client.post('/api/events', json={'name': 'Launch'}).status_code == 401


def test_create_event_creates_hidden_table(company_client, workbook):
    response = company_client.post('/api/events', json={'name': 'Launch'})

    assert response.status_code == 200
    assert response.get_json()['success'] is True

    wb = workbook()
    registry = [[cell.value for cell in row] for row in wb['Acme'].iter_rows()]
    assert registry[0] == ['Event', 'Status', 'Image', 'Table', 'CreatedAt']
    assert registry[1][0] == 'Launch'
    table = registry[1][3]
    assert wb[table].sheet_state == 'hidden'
    assert [cell.value for cell in wb[table][1]] == [
        'Name', 'WhatsApp', 'NationalID', 'Email', 'Education',
        'UniversityCollege', 'Age', 'Gender', 'RegistrationDate',
    ]


def test_create_event_requires_name(company_client):
    response = company_client.post('/api/events', json={'name': ' '})

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Event name is required'}


def test_create_duplicate_event(company_client, event):
    response = company_client.post('/api/events', json={'name': 'launch'})

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Event already exists'}


def test_create_disabled_event_with_image(company_client, uploads):
    response = company_client.post('/api/events', json={
        'name': 'Gala',
        'status': 'disabled',
        'image': png_base64(),
    })

    event = response.get_json()['event']
    assert event['status'] == 'disabled'
    assert event['image'].startswith('https://images.example.com/events/event_')


def test_create_event_rejects_unknown_status(company_client):
    response = company_client.post('/api/events', json={'name': 'Gala', 'status': 'archived'})

    assert response.status_code == 400


def test_update_event_status(company_client, client, event):
    response = company_client.put('/api/events', json={'name': 'Launch', 'status': 'disabled'})

    assert response.status_code == 200
    assert response.get_json()['event']['status'] == 'disabled'

    listed = client.get('/api/events?company=Acme').get_json()['events']
    assert listed[0]['status'] == 'disabled'


def test_update_unknown_event(company_client, event):
    response = company_client.put('/api/events', json={'name': 'Nope', 'status': 'disabled'})

    assert response.status_code == 404
    assert response.get_json() == {'error': 'Event not found'}


def test_events_follow_company_rename(admin_client, company_client, company, event):
    admin_client.put('/api/companies', json={'id': company['id'], 'name': 'Acme Labs'})

    response = company_client.post('/api/events', json={'name': 'Workshop'})

    assert response.status_code == 200
    events = admin_client.get('/api/events?company=Acme%20Labs').get_json()['events']
    assert [e['name'] for e in events] == ['Launch', 'Workshop']


def test_disabled_company_session_cannot_create_events(admin_client, company_client, company):
    admin_client.put('/api/companies', json={'id': company['id'], 'status': 'disabled'})

    response = company_client.post('/api/events', json={'name': 'Gala'})

    assert response.status_code == 403


@pytest.fixture
def registered(client, event):
    response = client.post('/api/events/register', json=registration_payload())
    assert response.status_code == 200


def test_export_for_company(company_client, registered):
    response = company_client.get('/api/events/export?event=Launch')

    assert response.status_code == 200
    assert response.mimetype == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    assert 'attachment' in response.headers['Content-Disposition']

    sheet = load_workbook(BytesIO(response.data)).active
    rows = [list(row) for row in sheet.iter_rows(values_only=True)]
    assert rows[0][0] == 'Name'
    assert rows[1][0] == 'Jane Doe'
    assert rows[1][3] == 'jane@example.com'


def test_export_for_admin_needs_company(admin_client, registered):
    assert admin_client.get('/api/events/export?event=Launch').status_code == 400

    response = admin_client.get('/api/events/export?event=Launch&company=Acme')
    assert response.status_code == 200


def test_export_unknown_event(company_client, event):
    response = company_client.get('/api/events/export?event=Nope')

    assert response.status_code == 404


def test_export_requires_session(client, registered):
    response = client.get('/api/events/export?event=Launch')

    assert response.status_code == 401


def test_export_is_scoped_to_session_company(admin_client, app, registered):
    create_company(admin_client, name='Other', username='other', password='pw')
    other = app.test_client()
    other.post('/api/auth/login', json={'username': 'other', 'password': 'pw'})

    response = other.get('/api/events/export?event=Launch&company=Acme')

    assert response.status_code == 404
