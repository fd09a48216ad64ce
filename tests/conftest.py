import os
import base64
from io import BytesIO

import pytest
from openpyxl import load_workbook
from PIL import Image

os.environ['APP_ENV'] = 'testing'

from app import create_app  # noqa: E402
from utils.image_upload import image_uploader  # noqa: E402


ADMIN_CREDENTIALS = {'username': 'admin', 'password': 'admin-password'}


@pytest.fixture
def app(tmp_path):
    app = create_app('testing', {
        'SPREADSHEET_PATH': str(tmp_path / 'events.xlsx'),
        'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def uploads(monkeypatch):
    """Replace the image uploader; records every call"""
    calls = []

    def fake_upload(file_name, image, folder='images'):
        calls.append({'file_name': file_name, 'image': image, 'folder': folder})
        return {'success': True, 'url': f'https://images.example.com/{folder}/{file_name}.png'}

    monkeypatch.setattr(image_uploader, 'upload', fake_upload)
    return calls


@pytest.fixture
def admin_client(app, uploads):
    client = app.test_client()
    response = client.post('/api/auth/login', json=ADMIN_CREDENTIALS)
    assert response.status_code == 200
    return client


@pytest.fixture
def workbook(app):
    """Load the saved workbook from disk"""
    def _load():
        return load_workbook(app.config['SPREADSHEET_PATH'])
    return _load


def create_company(admin_client, name='Acme', username='acme', password='secret', **extra):
    payload = {'name': name, 'username': username, 'password': password}
    payload.update(extra)
    return admin_client.post('/api/companies', json=payload)


def login(client, username, password):
    return client.post('/api/auth/login', json={'username': username, 'password': password})


@pytest.fixture
def company(admin_client):
    response = create_company(admin_client)
    assert response.status_code == 200
    return response.get_json()['company']


@pytest.fixture
def company_client(app, company):
    client = app.test_client()
    response = login(client, 'acme', 'secret')
    assert response.status_code == 200
    return client


@pytest.fixture
def event(company_client):
    response = company_client.post('/api/events', json={'name': 'Launch'})
    assert response.status_code == 200
    return response.get_json()['event']


def registration_payload(**overrides):
    payload = {
        'companyName': 'Acme',
        'eventName': 'Launch',
        'name': 'Jane Doe',
        'whatsapp': '201001234567',
        'email': 'jane@example.com',
        'gender': 'female',
        'education': 'Bachelor',
        'universityCollege': 'Cairo University',
        'age': '22',
        'nationalId': '29801011234567',
    }
    payload.update(overrides)
    return payload


def png_base64(size=(4, 4), color='red'):
    buffer = BytesIO()
    Image.new('RGB', size, color).save(buffer, format='PNG')
    return base64.b64encode(buffer.getvalue()).decode('ascii')
