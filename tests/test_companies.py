import pytest

from conftest import create_company, login, png_base64


@pytest.mark.parametrize('method', ['get', 'post', 'put', 'delete'])
def test_requires_admin_session(client, method):
    response = getattr(client, method)('/api/companies', json={})

    assert response.status_code == 401
    assert response.get_json() == {'error': 'Unauthorized'}


def test_company_session_is_not_admin(company_client):
    response = company_client.get('/api/companies')

    assert response.status_code == 401


def test_list_is_empty_without_companies_sheet(admin_client):
    response = admin_client.get('/api/companies')

    assert response.status_code == 200
    assert response.get_json() == {'companies': []}


def test_create_company(admin_client, workbook):
    response = create_company(admin_client)

    assert response.status_code == 200
    data = response.get_json()
    assert data['success'] is True
    company = data['company']
    assert company['id'].startswith('company_')
    assert company['name'] == 'Acme'
    assert company['username'] == 'acme'
    assert company['status'] == 'enabled'
    assert company['deleted'] is False
    assert company['image'] is None
    assert 'password' not in company
    assert 'password_hash' not in company

    wb = workbook()
    assert 'companies' in wb.sheetnames
    assert 'Acme' in wb.sheetnames
    headers = [cell.value for cell in wb['companies'][1]]
    assert headers == ['ID', 'Name', 'Username', 'Password', 'Image', 'Status', 'Deleted']


def test_password_is_hashed(admin_client, workbook):
    create_company(admin_client, password='secret')

    row = [cell.value for cell in workbook()['companies'][2]]
    assert row[3] != 'secret'
    assert len(row[3]) == 96
    assert row[6] is False


@pytest.mark.parametrize('missing', ['name', 'username', 'password'])
def test_create_requires_fields(admin_client, missing):
    payload = {'name': 'Acme', 'username': 'acme', 'password': 'secret'}
    payload[missing] = ''

    response = admin_client.post('/api/companies', json=payload)

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Name, username, and password are required'}


def test_duplicate_username(admin_client):
    create_company(admin_client)

    response = create_company(admin_client, name='Other', username='ACME')

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Username already exists'}


def test_username_can_be_reused_after_delete(admin_client, company):
    admin_client.delete(f"/api/companies?id={company['id']}")

    response = create_company(admin_client, name='Other', username='acme')

    assert response.status_code == 200


def test_duplicate_name_is_rejected(admin_client):
    create_company(admin_client)

    response = create_company(admin_client, name='acme', username='other')

    assert response.status_code == 400


@pytest.mark.parametrize('name', ['companies', 'a/b', 'x' * 40, 'x' * 24])
def test_name_must_be_a_valid_sheet_title(admin_client, name):
    response = create_company(admin_client, name=name, username='other')

    assert response.status_code == 400


def test_create_with_image(admin_client, uploads):
    response = create_company(admin_client, image=png_base64())

    company = response.get_json()['company']
    assert company['image'].startswith('https://images.example.com/companies/company_')
    assert uploads[0]['folder'] == 'companies'
    assert uploads[0]['file_name'].startswith(f"company_{company['id']}_")


def test_failed_image_upload_leaves_image_empty(admin_client, monkeypatch):
    from utils.image_upload import image_uploader
    monkeypatch.setattr(image_uploader, 'upload', lambda *a, **k: {'success': False, 'error': 'offline'})

    response = create_company(admin_client, image=png_base64())

    assert response.status_code == 200
    assert response.get_json()['company']['image'] is None


def test_list_hides_deleted_by_default(admin_client, company):
    create_company(admin_client, name='Other', username='other')
    admin_client.delete(f"/api/companies?id={company['id']}")

    listed = admin_client.get('/api/companies').get_json()['companies']
    assert [c['name'] for c in listed] == ['Other']

    everything = admin_client.get('/api/companies?include_deleted=true').get_json()['companies']
    assert {c['name'] for c in everything} == {'Acme', 'Other'}
    deleted = next(c for c in everything if c['name'] == 'Acme')
    assert deleted['deleted'] is True


def test_update_requires_id(admin_client):
    response = admin_client.put('/api/companies', json={'name': 'New'})

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Company ID is required'}


def test_update_unknown_company(admin_client, company):
    response = admin_client.put('/api/companies', json={'id': 'company_0'})

    assert response.status_code == 404
    assert response.get_json() == {'error': 'Company not found'}


def test_rename_renames_sheet(admin_client, company, event, workbook):
    response = admin_client.put('/api/companies', json={'id': company['id'], 'name': 'Acme Labs'})

    assert response.status_code == 200
    assert response.get_json()['company']['name'] == 'Acme Labs'
    wb = workbook()
    assert 'Acme Labs' in wb.sheetnames
    assert 'Acme' not in wb.sheetnames

    events = admin_client.get('/api/events?company=Acme%20Labs').get_json()['events']
    assert [e['name'] for e in events] == ['Launch']


def test_rename_case_only(admin_client, company, workbook):
    response = admin_client.put('/api/companies', json={'id': company['id'], 'name': 'ACME'})

    assert response.status_code == 200
    assert 'ACME' in workbook().sheetnames


def test_rename_to_existing_name(admin_client, company):
    create_company(admin_client, name='Other', username='other')

    response = admin_client.put('/api/companies', json={'id': company['id'], 'name': 'Other'})

    assert response.status_code == 400


def test_rename_to_name_too_long_to_delete(admin_client, company, workbook):
    response = admin_client.put('/api/companies', json={'id': company['id'], 'name': 'x' * 24})

    assert response.status_code == 400
    assert 'Acme' in workbook().sheetnames


def test_update_username_conflict(admin_client, company):
    create_company(admin_client, name='Other', username='other')

    response = admin_client.put('/api/companies', json={'id': company['id'], 'username': 'other'})

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Username already exists'}


def test_update_password(admin_client, app, company):
    admin_client.put('/api/companies', json={'id': company['id'], 'password': 'new-secret'})

    assert login(app.test_client(), 'acme', 'secret').status_code == 401
    assert login(app.test_client(), 'acme', 'new-secret').status_code == 200


def test_update_keeps_password_when_not_given(admin_client, app, company):
    admin_client.put('/api/companies', json={'id': company['id'], 'name': 'Acme Labs'})

    assert login(app.test_client(), 'acme', 'secret').status_code == 200


def test_update_status(admin_client, company):
    response = admin_client.put('/api/companies', json={'id': company['id'], 'status': 'disabled'})

    assert response.get_json()['company']['status'] == 'disabled'


def test_update_rejects_unknown_status(admin_client, company):
    response = admin_client.put('/api/companies', json={'id': company['id'], 'status': 'paused'})

    assert response.status_code == 400


def test_update_image(admin_client, company, uploads):
    response = admin_client.put('/api/companies', json={'id': company['id'], 'image': png_base64()})

    assert response.get_json()['company']['image'].startswith('https://images.example.com/companies/')


def test_delete_requires_id(admin_client):
    response = admin_client.delete('/api/companies')

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Company ID is required'}


def test_delete_unknown_company(admin_client, company):
    response = admin_client.delete('/api/companies?id=company_0')

    assert response.status_code == 404
    assert response.get_json() == {'error': 'Company not found'}


def test_soft_delete(admin_client, company, workbook):
    response = admin_client.delete(f"/api/companies?id={company['id']}")

    assert response.status_code == 200
    assert response.get_json() == {
        'success': True,
        'message': 'Company Acme marked as deleted successfully',
    }
    wb = workbook()
    assert 'Acme-deleted' in wb.sheetnames
    assert 'Acme' not in wb.sheetnames
    row = [cell.value for cell in wb['companies'][2]]
    assert row[6] is True


def test_soft_delete_longest_name(admin_client, workbook):
    name = 'x' * 23
    response = create_company(admin_client, name=name, username='long')
    company_id = response.get_json()['company']['id']

    response = admin_client.delete(f'/api/companies?id={company_id}')

    assert response.status_code == 200
    sheetnames = workbook().sheetnames
    assert f'{name}-deleted' in sheetnames
    assert all(len(title) <= 31 for title in sheetnames)


def test_deleted_company_cannot_sign_in(admin_client, app, company):
    admin_client.delete(f"/api/companies?id={company['id']}")

    assert login(app.test_client(), 'acme', 'secret').status_code == 401


def test_restore_keeps_deleted_sheet_name(admin_client, company, workbook):
    admin_client.delete(f"/api/companies?id={company['id']}")

    response = admin_client.put('/api/companies', json={'id': company['id'], 'deleted': False})

    assert response.status_code == 200
    assert response.get_json()['company']['deleted'] is False
    assert 'Acme-deleted' in workbook().sheetnames


def test_restore_rechecks_username(admin_client, company):
    admin_client.delete(f"/api/companies?id={company['id']}")
    create_company(admin_client, name='Other', username='acme')

    response = admin_client.put('/api/companies', json={'id': company['id'], 'deleted': False})

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Username already exists'}
