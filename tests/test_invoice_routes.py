from datetime import date
from unittest.mock import patch

from src.dashboard import db
from src.dashboard.models.models import Invoice
from src.dashboard.services.database_ops import InvoiceStore
from src.dashboard.utils.exceptions import PersistenceError

CUSTOMER_ID = '3958dc9e-712f-4377-85e9-fec4b6a6442a'


def test_list_invoices(auth_client):
    response = auth_client.get('/dashboard/invoices?query=delba&page=1')

    body = response.get_json()
    assert response.status_code == 200
    assert body['total_pages'] == 1
    assert body['current_page'] == 1
    assert {row['name'] for row in body['invoices']} == {'Delba de Oliveira'}


def test_list_rejects_bad_page(auth_client):
    assert auth_client.get('/dashboard/invoices?page=0').status_code == 422


def test_create_redirects_and_persists(auth_client):
    response = auth_client.post('/dashboard/invoices', data={
        'customerId': CUSTOMER_ID, 'amount': '10', 'status': 'pending',
    })

    assert response.status_code == 303
    assert response.headers['Location'].endswith('/dashboard/invoices')
    created = Invoice.query.filter_by(customer_id=CUSTOMER_ID, amount=1000).one()
    assert created.date == date.today()
    assert created.status == 'pending'


def test_create_returns_field_errors(auth_client):
    response = auth_client.post('/dashboard/invoices', data={'customerId': CUSTOMER_ID, 'amount': '0'})

    assert response.status_code == 400
    assert response.get_json() == {
        'errors': {
            'amount': ['Please enter an amount greater than $0.'],
            'status': ['Please select an invoice status.'],
        },
        'message': 'Missing Fields. Failed to Create Invoice.',
    }


def test_create_database_failure(auth_client):
    with patch.object(InvoiceStore, 'insert', side_effect=PersistenceError()):
        response = auth_client.post('/dashboard/invoices', data={
            'customerId': CUSTOMER_ID, 'amount': '10', 'status': 'pending',
        })

    assert response.status_code == 400
    assert response.get_json() == {'errors': None, 'message': 'Database Error: Failed to Create Invoice.'}


def test_listing_cache_is_refreshed_after_create(auth_client):
    before = auth_client.get('/dashboard/invoices?query=delba').get_json()
    auth_client.post('/dashboard/invoices', data={'customerId': CUSTOMER_ID, 'amount': '1', 'status': 'paid'})
    after = auth_client.get('/dashboard/invoices?query=delba').get_json()

    assert len(after['invoices']) == len(before['invoices']) + 1


def test_listing_is_served_from_cache(app, auth_client):
    auth_client.get('/dashboard/invoices?query=delba')
    # A write that bypasses the actions is invisible until the path is revalidated
    InvoiceStore(db.session).insert(CUSTOMER_ID, 100, 'paid', date.today())

    cached = auth_client.get('/dashboard/invoices?query=delba').get_json()
    app.extensions['page_cache'].revalidate_path('/dashboard/invoices')
    fresh = auth_client.get('/dashboard/invoices?query=delba').get_json()

    assert len(fresh['invoices']) == len(cached['invoices']) + 1


def test_get_invoice_for_edit(auth_client):
    invoice = Invoice.query.filter_by(amount=20348).one()

    response = auth_client.get(f'/dashboard/invoices/{invoice.id}')

    body = response.get_json()
    assert response.status_code == 200
    assert body['invoice']['amount'] == 203.48
    assert len(body['customers']) == 6


def test_get_missing_invoice(auth_client):
    assert auth_client.get('/dashboard/invoices/missing').status_code == 404


def test_update_invoice(auth_client):
    invoice = Invoice.query.filter_by(amount=20348).one()
    original_date = invoice.date

    response = auth_client.post(f'/dashboard/invoices/{invoice.id}', data={
        'customerId': CUSTOMER_ID, 'amount': '250.5', 'status': 'paid',
    })

    assert response.status_code == 303
    db.session.expire_all()
    updated = db.session.get(Invoice, invoice.id)
    assert updated.amount == 25050
    assert updated.status == 'paid'
    assert updated.date == original_date


def test_update_validation_failure(auth_client):
    invoice = Invoice.query.filter_by(amount=20348).one()

    response = auth_client.post(f'/dashboard/invoices/{invoice.id}', data={
        'customerId': CUSTOMER_ID, 'amount': 'abc', 'status': 'paid',
    })

    assert response.status_code == 400
    assert response.get_json()['errors'] == {'amount': ['Please enter a valid amount.']}
    assert response.get_json()['message'] == 'Missing Fields. Failed to Update Invoice.'


def test_update_unknown_invoice_is_silent(auth_client):
    response = auth_client.post('/dashboard/invoices/missing', data={
        'customerId': CUSTOMER_ID, 'amount': '5', 'status': 'paid',
    })
    assert response.status_code == 303


def test_delete_invoice(auth_client):
    invoice_id = Invoice.query.filter_by(amount=666).one().id

    assert auth_client.delete(f'/dashboard/invoices/{invoice_id}').status_code == 204
    assert db.session.get(Invoice, invoice_id) is None


def test_delete_unknown_invoice(auth_client):
    assert auth_client.delete('/dashboard/invoices/missing').status_code == 204


def test_delete_from_form(auth_client):
    invoice_id = Invoice.query.filter_by(amount=666).one().id

    response = auth_client.post(f'/dashboard/invoices/{invoice_id}/delete')

    assert response.status_code == 303
    assert db.session.get(Invoice, invoice_id) is None


def test_delete_database_failure(auth_client):
    with patch.object(InvoiceStore, 'delete', side_effect=PersistenceError()):
        response = auth_client.delete('/dashboard/invoices/anything')
    assert response.status_code == 500


def test_dashboard_overview(auth_client):
    body = auth_client.get('/dashboard/').get_json()

    assert body['cards']['number_of_invoices'] == 13
    assert len(body['revenue']) == 12
    assert len(body['latest_invoices']) == 5


def test_customers(auth_client):
    body = auth_client.get('/dashboard/customers?query=amy').get_json()
    assert [row['name'] for row in body] == ['Amy Burns']
    assert body[0]['total_invoices'] == 2


def test_create_rejects_amount_beyond_column_range(auth_client):
    before = Invoice.query.count()
    response = auth_client.post('/dashboard/invoices', data={
        'customerId': CUSTOMER_ID, 'amount': '1e20', 'status': 'pending',
    })

    assert response.status_code == 400
    assert response.get_json()['errors'] == {'amount': ['Please enter an amount no greater than $21,474,836.47.']}
    assert Invoice.query.count() == before


def test_create_rejects_fraction_of_a_cent(auth_client):
    response = auth_client.post('/dashboard/invoices', data={
        'customerId': CUSTOMER_ID, 'amount': '0.001', 'status': 'pending',
    })

    assert response.status_code == 400
    assert Invoice.query.filter_by(amount=0).count() == 0


def test_listing_cache_stays_bounded(app, auth_client):
    for i in range(120):
        auth_client.get(f'/dashboard/invoices?query=q{i}')

    page_cache = app.extensions['page_cache']
    retained = sum(
        page_cache.get('/dashboard/invoices', f'q{i}|1') is not None for i in range(120)
    )
    assert retained <= app.config['CACHE_THRESHOLD']


def test_read_failures_are_logged(auth_client, caplog):
    with patch('src.dashboard.routes.dashboard_routes.fetch_card_data',
               side_effect=PersistenceError('Failed to fetch card data')):
        response = auth_client.get('/dashboard/')

    assert response.status_code == 500
    assert 'Dashboard overview failed: Failed to fetch card data' in caplog.text


def test_customer_listing_failure_is_logged(auth_client, caplog):
    with patch('src.dashboard.routes.customer_routes.fetch_filtered_customers',
               side_effect=PersistenceError('Failed to fetch customer table')):
        response = auth_client.get('/dashboard/customers')

    assert response.status_code == 500
    assert 'Listing customers failed' in caplog.text


def test_invoice_listing_failure_is_logged(auth_client, caplog):
    with patch('src.dashboard.routes.invoice_routes.fetch_filtered_invoices',
               side_effect=PersistenceError('Failed to fetch invoices')):
        response = auth_client.get('/dashboard/invoices?query=unseen')

    assert response.status_code == 500
    assert 'Listing invoices failed' in caplog.text
