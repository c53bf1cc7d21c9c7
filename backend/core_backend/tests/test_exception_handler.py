"""
API error envelope tests.

Every API error answers ``{"success": false, "error", "message"}``; DRF
errors add ``details`` and unexpected errors never leak internals.
"""
import logging
import pytest

from rest_framework import exceptions
from rest_framework.test import APIRequestFactory

from core_backend.exceptions import api_exception_handler
from orders.exceptions import ItemNotFoundError, StoreClosedError
from orders.services import PosOrderService


def context(path='/api/orders/pos/'):
    request = APIRequestFactory().post(path, REMOTE_ADDR='198.51.100.4')
    return {'request': request, 'view': None}


class TestApiExceptionHandler:

    def test_order_assembly_error(self):
        response = api_exception_handler(ItemNotFoundError(42), context())

        assert response.status_code == 400
        assert response.data == {
            'success': False,
            'error': 'ITEM_NOT_FOUND',
            'message': 'Menu item 42 was not found',
            'details': {'itemId': '42', 'kind': 'menu'},
        }

    def test_error_without_details(self):
        response = api_exception_handler(StoreClosedError(), context())

        assert response.data == {
            'success': False,
            'error': 'STORE_CLOSED',
            'message': 'The store is closed at the requested time.',
        }

    def test_validation_error(self):
        exc = exceptions.ValidationError({'orderType': ['This field is required.']})

        response = api_exception_handler(exc, context())

        assert response.status_code == 400
        assert response.data['error'] == 'VALIDATION_ERROR'
        assert response.data['message'] == 'orderType: This field is required.'
        assert response.data['details'] == {'orderType': ['This field is required.']}

    def test_permission_denied(self):
        response = api_exception_handler(exceptions.PermissionDenied(), context())

        assert response.status_code == 403
        assert response.data['error'] == 'PERMISSION_DENIED'

    def test_unexpected_error_is_logged_not_leaked(self, caplog):
        with caplog.at_level(logging.ERROR, logger='core_backend'):
            response = api_exception_handler(KeyError('secret_column'), context())

        assert response.status_code == 500
        assert response.data == {
            'success': False,
            'error': 'INTERNAL_ERROR',
            'message': 'An unexpected error occurred. Please try again.',
        }
        assert 'Unhandled error on /api/orders/pos/ from 198.51.100.4: KeyError' in caplog.text


@pytest.mark.django_db
class TestEnvelopeOverHttp:

    def test_unexpected_error_from_view(self, staff_client_a, monkeypatch):
        def explode(self, *args, **kwargs):
            raise RuntimeError('database password is hunter2')

        monkeypatch.setattr(PosOrderService, 'create_order', explode)

        response = staff_client_a.post(
            '/api/orders/pos/', {'orderType': 'TAKEAWAY', 'items': []}, format='json'
        )

        assert response.status_code == 500
        assert response.json()['error'] == 'INTERNAL_ERROR'
        assert 'hunter2' not in response.content.decode()

    def test_method_not_allowed(self, staff_client_a):
        response = staff_client_a.get('/api/orders/pos/')

        assert response.status_code == 405
        assert response.json()['error'] == 'METHOD_NOT_ALLOWED'
