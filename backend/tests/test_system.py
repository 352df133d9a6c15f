"""System endpoints, CORS headers and CLI commands."""

from tuldokbenta.extensions import db
from tuldokbenta.models import Operator

from conftest import item_line, open_sale


class TestSystemRoutes:

    def test_health(self, client):
        resp = client.get('/api/health')
        assert resp.status_code == 200
        body = resp.get_json()
        assert body['status'] == 'ok'
        assert body['checks']['database']['status'] == 'ok'

    def test_version(self, client):
        resp = client.get('/api/version')
        assert resp.status_code == 200
        assert resp.get_json()['api_version']

    def test_unknown_route_is_json_404(self, client):
        resp = client.get('/api/nope')
        assert resp.status_code == 404
        assert resp.get_json() == {'message': 'Not found'}

    def test_wrong_method_is_json_405(self, client):
        resp = client.patch('/api/inventory')
        assert resp.status_code == 405
        assert resp.get_json() == {'message': 'Method not allowed'}

    def test_cors_allowed_origin(self, client):
        resp = client.get('/api/health', headers={'Origin': 'http://localhost:5173'})
        assert resp.headers['Access-Control-Allow-Origin'] == 'http://localhost:5173'

    def test_cors_unknown_origin(self, client):
        resp = client.get('/api/health', headers={'Origin': 'http://evil.example'})
        assert 'Access-Control-Allow-Origin' not in resp.headers


class TestCli:

    def test_create_and_list_operators(self, app, db_session):
        runner = app.test_cli_runner()

        result = runner.invoke(args=['operators', 'create', '--username', 'frontdesk', '--password', 'Password123'])
        assert result.exit_code == 0, result.output
        assert 'Created operator frontdesk' in result.output

        result = runner.invoke(args=['operators', 'list'])
        assert result.exit_code == 0
        assert 'frontdesk' in result.output

    def test_create_operator_weak_password(self, app, db_session):
        runner = app.test_cli_runner()
        result = runner.invoke(args=['operators', 'create', '--username', 'frontdesk', '--password', 'weak'])
        assert result.exit_code != 0
        assert db_session.query(Operator).count() == 0

    def test_deactivate(self, app, db_session, operator):
        runner = app.test_cli_runner()
        result = runner.invoke(args=['operators', 'deactivate', 'counter'])
        assert result.exit_code == 0

        db_session.expire_all()
        assert db.session.get(Operator, operator.id).is_active is False

        result = runner.invoke(args=['operators', 'deactivate', 'ghost'])
        assert result.exit_code != 0

    def test_next_invoice(self, app, client, widget):
        open_sale(client, 'INV-0041', [item_line('Widget', 1, '5.00')])
        result = app.test_cli_runner().invoke(args=['sales', 'next-invoice'])
        assert result.exit_code == 0
        assert result.output.strip() == 'INV-0042'
