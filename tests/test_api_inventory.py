from io import BytesIO

import openpyxl

from conftest import movement_payload

CSV_UPLOAD = (
    "\ufeffName,SKU,Category,Price,Quantity,Status\n"
    "Plasma Power Core,PPC-1,Power,99.5,45,\n"
    "Ion Battery Cell,,Power,abc,5,\n"
    ",NO-NAME,Power,1,1,\n"
    "Legacy Drone Kit,LDK-1,Robotics,10,300,Discontinued\n"
).encode('utf-8')


class TestCatalog:

    def test_requires_login(self, client):
        response = client.get('/api/inventory')
        assert response.status_code == 401
        assert response.get_json()['success'] is False

    def test_list_and_filter(self, admin_client, make_item):
        make_item('INV-1', name='Quantum Processor', sku='QP-1', quantity=100)
        make_item('INV-2', name='Neural Link Interface', sku='NLI-2', quantity=3, status='Low Stock')

        names = [i['name'] for i in admin_client.get('/api/inventory').get_json()]
        assert names == ['Neural Link Interface', 'Quantum Processor']

        by_sku = admin_client.get('/api/inventory?q=qp-').get_json()
        assert [i['id'] for i in by_sku] == ['INV-1']

        low = admin_client.get('/api/inventory', query_string={'status': 'Low Stock'}).get_json()
        assert [i['id'] for i in low] == ['INV-2']

    def test_get_missing_item_is_json_404(self, admin_client):
        response = admin_client.get('/api/inventory/INV-404')
        assert response.status_code == 404
        assert response.get_json()['item_id'] == 'INV-404'

    def test_bulk_upsert_by_id(self, admin_client, make_item):
        make_item('INV-1', name='Old Name', quantity=1)
        response = admin_client.post('/api/inventory/bulk', json=[
            {'id': 'INV-1', 'name': 'New Name', 'sku': 'SKU-INV-1', 'quantity': 60, 'price': 2},
            {'id': 'INV-9', 'name': 'Titan Shield Module', 'sku': 'TSM-9', 'quantity': 0,
             'lastUpdated': '2024-05-01T10:00:00Z'},
        ])
        assert response.status_code == 200
        items = {i['id']: i for i in response.get_json()}
        assert items['INV-1']['name'] == 'New Name'
        assert items['INV-1']['status'] == 'In Stock'
        assert items['INV-9']['status'] == 'Out of Stock'
        assert items['INV-9']['last_updated'] == '2024-05-01'

    def test_bulk_upsert_rejects_bad_rows(self, admin_client):
        response = admin_client.post('/api/inventory/bulk', json=[{'id': 'INV-1', 'name': 'X', 'sku': 'X',
                                                                  'quantity': -4}])
        assert response.status_code == 400
        assert admin_client.get('/api/inventory').get_json() == []

    def test_bulk_upsert_is_admin_only(self, staff_client):
        response = staff_client.post('/api/inventory/bulk', json=[])
        assert response.status_code == 403


class TestImport:

    def test_csv_upload(self, admin_client):
        response = admin_client.post(
            '/api/inventory/import',
            data={'file': (BytesIO(CSV_UPLOAD), 'catalog.csv')},
            content_type='multipart/form-data',
        )
        assert response.status_code == 200
        body = response.get_json()
        assert (body['created'], body['updated'], body['skipped']) == (3, 0, 1)

        items = {i['name']: i for i in admin_client.get('/api/inventory').get_json()}
        assert items['Plasma Power Core']['status'] == 'In Stock'
        assert items['Ion Battery Cell']['price'] == 0
        assert items['Ion Battery Cell']['status'] == 'Low Stock'
        assert items['Ion Battery Cell']['sku'].startswith('GEN-')
        assert items['Ion Battery Cell']['id'].startswith('IMP-')
        assert items['Legacy Drone Kit']['status'] == 'Discontinued'

    def test_csv_with_ragged_rows(self, admin_client):
        ragged = b"Name,SKU,Quantity\nWidget,W-1,5,overflow\n,,,stray\nGasket,G-2\n"
        response = admin_client.post(
            '/api/inventory/import',
            data={'file': (BytesIO(ragged), 'catalog.csv')},
            content_type='multipart/form-data',
        )
        assert response.status_code == 200
        assert response.get_json()['created'] == 2

        items = {i['name']: i for i in admin_client.get('/api/inventory').get_json()}
        assert set(items) == {'Widget', 'Gasket'}
        assert items['Widget']['quantity'] == 5
        assert items['Gasket']['quantity'] == 0

    def test_xlsx_upload(self, admin_client):
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.append(['Name', 'SKU', 'Category', 'Price', 'Quantity', 'Status'])
        ws.append(['Optic Cable', 'OC-1', None, 4.5, 0, None])
        buffer = BytesIO()
        wb.save(buffer)
        buffer.seek(0)

        response = admin_client.post('/api/inventory/import', data={'file': (buffer, 'catalog.xlsx')},
                                     content_type='multipart/form-data')
        assert response.status_code == 200
        item = admin_client.get('/api/inventory').get_json()[0]
        assert (item['name'], item['category'], item['status']) == ('Optic Cable', 'General', 'Out of Stock')

    def test_unsupported_file_type(self, admin_client):
        response = admin_client.post('/api/inventory/import', data={'file': (BytesIO(b'x'), 'catalog.pdf')},
                                     content_type='multipart/form-data')
        assert response.status_code == 400

    def test_missing_file(self, admin_client):
        assert admin_client.post('/api/inventory/import', data={}).status_code == 400

    def test_template_download(self, admin_client):
        response = admin_client.get('/api/inventory/template')
        assert response.status_code == 200
        ws = openpyxl.load_workbook(BytesIO(response.data)).active
        assert [c.value for c in ws[1]] == ['Name', 'SKU', 'Category', 'Price', 'Quantity', 'Status']


class TestStockCardApi:

    def test_stock_card_and_window(self, admin_client, make_item):
        make_item('INV-1', quantity=100)
        admin_client.post('/api/transactions', json=movement_payload('IN', [('INV-1', 50)], on='2024-01-01'))
        admin_client.post('/api/transactions', json=movement_payload('OUT', [('INV-1', 30)], on='2024-01-05'))

        card = admin_client.get('/api/inventory/INV-1/stock-card').get_json()
        assert (card['opening_balance'], card['total_in'], card['total_out'], card['closing_balance']) == \
            (100, 50, 30, 120)
        assert [row['balance_after'] for row in card['rows']] == [120, 150]
        assert card['item']['quantity'] == 120

        window = admin_client.get('/api/inventory/INV-1/stock-card?end=2024-01-02').get_json()
        assert (window['opening_balance'], window['total_in'], window['total_out'], window['closing_balance']) == \
            (100, 50, 0, 150)

    def test_bad_dates(self, admin_client, make_item):
        make_item('INV-1')
        response = admin_client.get('/api/inventory/INV-1/stock-card?start=2024-13-45')
        assert response.status_code == 400

    def test_export(self, admin_client, make_item):
        make_item('INV-1', quantity=100)
        admin_client.post('/api/transactions', json=movement_payload('IN', [('INV-1', 50)]))

        response = admin_client.get('/api/inventory/INV-1/stock-card/export')
        assert response.status_code == 200
        ws = openpyxl.load_workbook(BytesIO(response.data)).active
        balances = [row[5] for row in ws.iter_rows(min_row=3, values_only=True)]
        assert balances == [100, 150, 150]
