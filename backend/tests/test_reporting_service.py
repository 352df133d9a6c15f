"""
Reporting tests.

summarize() is exercised on unsaved model instances; the route tests go
through the database.
"""

from datetime import date, datetime

import pytest

from tuldokbenta.models import OpenSale, ClosedSale
from tuldokbenta.services import reporting_service
from tuldokbenta.services.reporting_service import ReportError

from conftest import item_line, service_line, open_sale


def _open(invoice, created_at, items):
    return OpenSale(invoice_number=invoice, items=items, created_at=created_at)


def _closed(invoice, created_at, items, paid_using):
    return ClosedSale(
        invoice_number=invoice,
        items=items,
        created_at=created_at,
        paid_at=created_at,
        paid_using=paid_using,
    )


@pytest.fixture
def history():
    open_sales = [
        _open("INV-0004", datetime(2024, 3, 5, 9, 0), [item_line("Widget", 1, "5.00")]),
    ]
    closed_sales = [
        _closed("INV-0001", datetime(2024, 3, 1, 10, 0), [item_line("Widget", 3, "5.00")], "cash"),
        _closed("INV-0002", datetime(2024, 3, 2, 23, 59), [
            service_line("Haircut", 2, "10.00", freebies=[
                {"classification": "Hair", "choices": [{"item": "Shampoo", "qty": 2}]},
            ]),
        ], "gcash"),
        _closed("INV-0003", datetime(2024, 3, 3, 0, 0), [item_line("Widget", 2, "5.00")], "cash"),
    ]
    return open_sales, closed_sales


class TestSummarize:

    def test_full_history(self, history):
        report = reporting_service.summarize(*history)

        assert report["low"] is None and report["high"] is None
        assert report["open_sales_count"] == 1
        assert report["closed_sales_count"] == 3
        assert report["open_total"] == "5.00"
        assert report["closed_total"] == "45.00"
        assert report["grand_total"] == "50.00"
        assert report["freebies_used"] == 2

    def test_group_by_payment(self, history):
        report = reporting_service.summarize(*history)
        assert report["by_payment"] == [
            {"paid_using": "cash", "count": 2, "total": "25.00", "invoice_numbers": ["INV-0001", "INV-0003"]},
            {"paid_using": "gcash", "count": 1, "total": "20.00", "invoice_numbers": ["INV-0002"]},
        ]

    def test_item_and_service_rollups(self, history):
        report = reporting_service.summarize(*history)
        assert report["items"] == [{"name": "Widget", "qty": 6, "total": "30.00"}]
        assert report["services"] == [{"name": "Haircut", "qty": 2, "total": "20.00"}]

    def test_date_range_is_inclusive(self, history):
        report = reporting_service.summarize(*history, low=date(2024, 3, 2), high=date(2024, 3, 3))

        assert report["low"] == "2024-03-02"
        assert report["high"] == "2024-03-03"
        assert report["open_sales_count"] == 0
        assert report["closed_sales_count"] == 2
        assert report["closed_total"] == "30.00"

    def test_single_bound_means_full_history(self, history):
        report = reporting_service.summarize(*history, low=date(2024, 3, 4), high=None)
        assert report["closed_sales_count"] == 3
        assert report["low"] is None

    def test_empty_history(self):
        report = reporting_service.summarize([], [])
        assert report["grand_total"] == "0.00"
        assert report["by_payment"] == []
        assert report["items"] == []


class TestSummaryRoute:

    def test_summary_over_database(self, client, widget):
        open_sale(client, 'INV-0001', [item_line('Widget', 1, '5.00')])
        paid = open_sale(client, 'INV-0002', [item_line('Widget', 3, '5.00')])
        client.post(f"/api/pay-sale/{paid['id']}", json={'paid_using': 'cash'})

        resp = client.get('/api/reports/summary')
        assert resp.status_code == 200
        body = resp.get_json()
        assert body['open_total'] == '5.00'
        assert body['closed_total'] == '15.00'
        assert body['grand_total'] == '20.00'
        assert body['generated_at'].endswith('Z')

    def test_freebies_used_counts_flattened_lines(self, client, haircut, shampoo):
        open_sale(client, 'INV-0001', [
            service_line('Haircut', 2, '10.00', freebies=[
                {'classification': 'Hair', 'choices': [{'item': 'Shampoo', 'qty': 2}]},
            ]),
            item_line('Shampoo', 1, '3.50'),
        ])

        body = client.get('/api/reports/summary').get_json()
        assert body['freebies_used'] == 2
        assert body['items'] == [{'name': 'Shampoo', 'qty': 3, 'total': '3.50'}]
        assert body['grand_total'] == '23.50'

    def test_range_outside_history_is_empty(self, client, widget):
        open_sale(client, 'INV-0001', [item_line('Widget', 1, '5.00')])
        resp = client.get('/api/reports/summary?low=2000-01-01&high=2000-12-31')
        assert resp.status_code == 200
        assert resp.get_json()['open_sales_count'] == 0

    @pytest.mark.parametrize(
        "query",
        ["low=yesterday&high=2024-01-01", "low=2024-02-01&high=2024-01-01"],
    )
    def test_bad_range_is_400(self, client, db_session, query):
        resp = client.get(f'/api/reports/summary?{query}')
        assert resp.status_code == 400
        assert resp.get_json()['message']

    def test_parse_range_direct(self):
        with pytest.raises(ReportError):
            reporting_service._parse_range("2024-13-01", "2024-12-01")
