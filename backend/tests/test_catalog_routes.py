"""
Catalog API tests: /api/inventory and /api/services.

Verifies:
- CRUD round trips with money serialized as 2-decimal strings
- Validation failures return 400 with a message
- Duplicate names return 409
- Unknown ids return 404
"""

import pytest

from tuldokbenta.services import catalog_service


# =============================================================================
# INVENTORY
# =============================================================================


class TestInventoryRoutes:

    def test_create_defaults_stock_to_zero(self, client):
        resp = client.post('/api/inventory', json={
            'item_name': 'Conditioner',
            'item_classification': 'Hair',
            'price': 7.5,
        })
        assert resp.status_code == 201
        body = resp.get_json()
        assert body['item_name'] == 'Conditioner'
        assert body['item_classification'] == 'Hair'
        assert body['price'] == '7.50'
        assert body['stock'] == 0
        assert body['id'] > 0

    def test_list_is_ordered_by_name(self, client, widget, shampoo):
        resp = client.get('/api/inventory')
        assert resp.status_code == 200
        names = [row['item_name'] for row in resp.get_json()]
        assert names == ['Shampoo', 'Widget']

    def test_get_by_id(self, client, widget):
        resp = client.get(f'/api/inventory/{widget.id}')
        assert resp.status_code == 200
        assert resp.get_json()['stock'] == 10

    def test_get_unknown_returns_404(self, client, db_session):
        resp = client.get('/api/inventory/999')
        assert resp.status_code == 404
        assert resp.get_json()['message'] == 'Item not found'

    def test_update_is_partial(self, client, widget):
        resp = client.put(f'/api/inventory/{widget.id}', json={'stock': 25})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body['stock'] == 25
        assert body['price'] == '5.00'
        assert body['item_name'] == 'Widget'

    def test_update_unknown_returns_404(self, client, db_session):
        resp = client.put('/api/inventory/999', json={'stock': 1})
        assert resp.status_code == 404

    def test_delete(self, client, widget):
        resp = client.delete(f'/api/inventory/{widget.id}')
        assert resp.status_code == 200
        assert resp.get_json()['message'] == 'Item deleted successfully'
        assert client.get(f'/api/inventory/{widget.id}').status_code == 404

    def test_duplicate_name_conflicts(self, client, widget):
        resp = client.post('/api/inventory', json={'item_name': 'Widget', 'price': 1})
        assert resp.status_code == 409

    def test_rename_onto_existing_name_conflicts(self, client, widget, shampoo):
        resp = client.put(f'/api/inventory/{shampoo.id}', json={'item_name': 'Widget'})
        assert resp.status_code == 409

    @pytest.mark.parametrize(
        "payload",
        [
            {'price': 5},
            {'item_name': 'Gizmo'},
            {'item_name': '', 'price': 5},
            {'item_name': 'Gizmo', 'price': 'abc'},
            {'item_name': 'Gizmo', 'price': -1},
            {'item_name': 'Gizmo', 'price': '1e30'},
            {'item_name': 'Gizmo', 'price': 10000000},
            {'item_name': 'Gizmo', 'price': 5, 'stock': 1.5},
            {'item_name': 'Gizmo', 'price': 5, 'color': 'red'},
        ],
    )
    def test_create_rejects_bad_payload(self, client, db_session, payload):
        resp = client.post('/api/inventory', json=payload)
        assert resp.status_code == 400
        assert resp.get_json()['message']

    def test_get_unexpected_failure_is_json_500(self, client, db_session, monkeypatch):
        def boom(item_id):
            raise RuntimeError("database went away")

        monkeypatch.setattr(catalog_service, 'get_inventory_item', boom)
        monkeypatch.setattr(catalog_service, 'get_service', boom)

        for path in ('/api/inventory/1', '/api/services/1'):
            resp = client.get(path)
            assert resp.status_code == 500
            assert resp.get_json() == {'message': 'Internal server error'}

    def test_negative_stock_is_allowed(self, client, widget):
        resp = client.put(f'/api/inventory/{widget.id}', json={'stock': -3})
        assert resp.status_code == 200
        assert resp.get_json()['stock'] == -3


# =============================================================================
# SERVICES
# =============================================================================


class TestServiceRoutes:

    def test_create_with_freebies(self, client, db_session):
        resp = client.post('/api/services', json={
            'service_name': 'Massage',
            'price': '25',
            'freebies': ['Oil', ' Towel ', 'Oil', ''],
        })
        assert resp.status_code == 201
        body = resp.get_json()
        assert body['price'] == '25.00'
        assert body['freebies'] == ['Oil', 'Towel']

    def test_create_without_freebies(self, client, db_session):
        resp = client.post('/api/services', json={'service_name': 'Trim', 'price': 4})
        assert resp.status_code == 201
        assert resp.get_json()['freebies'] == []

    def test_list_and_get(self, client, haircut):
        resp = client.get('/api/services')
        assert resp.status_code == 200
        assert [s['service_name'] for s in resp.get_json()] == ['Haircut']

        resp = client.get(f'/api/services/{haircut.id}')
        assert resp.status_code == 200
        assert resp.get_json()['freebies'] == ['Hair']

    def test_update_freebies(self, client, haircut):
        resp = client.put(f'/api/services/{haircut.id}', json={'freebies': ['Hair', 'Nails']})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body['freebies'] == ['Hair', 'Nails']
        assert body['price'] == '10.00'

    def test_freebies_must_be_strings(self, client, haircut):
        resp = client.put(f'/api/services/{haircut.id}', json={'freebies': [1, 2]})
        assert resp.status_code == 400

    def test_huge_price_is_400(self, client, haircut):
        resp = client.post('/api/services', json={'service_name': 'Perm', 'price': '1e30'})
        assert resp.status_code == 400
        assert resp.get_json()['message']

        resp = client.put(f'/api/services/{haircut.id}', json={'price': '1e30'})
        assert resp.status_code == 400

    def test_duplicate_name_conflicts(self, client, haircut):
        resp = client.post('/api/services', json={'service_name': 'Haircut', 'price': 1})
        assert resp.status_code == 409

    def test_delete(self, client, haircut):
        resp = client.delete(f'/api/services/{haircut.id}')
        assert resp.status_code == 200
        assert resp.get_json()['message'] == 'Service deleted successfully'
        assert client.get(f'/api/services/{haircut.id}').status_code == 404

    def test_unknown_returns_404(self, client, db_session):
        assert client.get('/api/services/42').status_code == 404
        assert client.delete('/api/services/42').status_code == 404
