import json

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, login
from neonflow.commands import forge, init_db, status
from neonflow.models import AuditLog, Movement, RejectRecord, StockItem, User
from neonflow.services.movement_service import MovementService


class TestDashboard:

    def test_totals(self, staff_client, make_item):
        make_item('INV-1', category='Power', quantity=10, price=2.5)
        make_item('INV-2', category='Power', quantity=100, price=1)
        make_item('INV-3', category='Optics', quantity=0, price=50)
        make_item('INV-4', category='Optics', quantity=3, price=1, status='Discontinued')

        body = staff_client.get('/api/dashboard').get_json()
        assert body == {'totalValue': 128.0, 'totalItems': 4, 'lowStockCount': 2, 'topCategory': 'Optics'}

    def test_empty_catalog(self, staff_client):
        body = staff_client.get('/api/dashboard').get_json()
        assert body == {'totalValue': 0.0, 'totalItems': 0, 'lowStockCount': 0, 'topCategory': None}

    def test_units(self, staff_client):
        units = staff_client.get('/api/units').get_json()
        assert units[0] == {'name': 'Pcs', 'ratio': 1}
        assert {'name': 'Box (24x)', 'ratio': 24} in units


class TestSystemReset:

    def test_reset_wipes_data_and_reseeds_admin(self, app, admin_client, make_item):
        make_item('INV-1')
        response = admin_client.post('/api/system/reset')
        assert response.status_code == 200

        with app.app_context():
            assert StockItem.query.count() == 0
            assert [u.email for u in User.query.all()] == [ADMIN_EMAIL]
            entries = AuditLog.query.all()
            assert [(e.module, e.action) for e in entries] == [('system', 'reset')]
            assert entries[0].user.email == ADMIN_EMAIL
            assert json.loads(entries[0].details) == {'requested_by': ADMIN_EMAIL}
        assert login(app.test_client(), ADMIN_EMAIL, ADMIN_PASSWORD).status_code == 200

    def test_reset_is_admin_only(self, staff_client):
        assert staff_client.post('/api/system/reset').status_code == 403


class TestCommands:

    def test_init_db_and_status(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(init_db)
        assert result.exit_code == 0
        assert f"Admin login: {ADMIN_EMAIL}" in result.output

        result = runner.invoke(status)
        assert 'Users: \t\t1' in result.output

    def test_forge_builds_consistent_history(self, app):
        result = app.test_cli_runner().invoke(forge, ['--scale', '1', '--days', '30'])
        assert result.exit_code == 0, result.output

        with app.app_context():
            assert StockItem.query.count() == 20
            assert Movement.query.count() > 0
            assert RejectRecord.query.count() == 5
            # Every stock card walks back to an empty starting shelf
            for item in StockItem.query.all():
                _, card = MovementService.stock_card(item.id)
                assert card.opening_balance == 0
                assert card.closing_balance == item.quantity
                assert item.quantity >= 0

