"""
Staff and super-admin login endpoints.
"""

import pytest
from rest_framework import status

from core_identity.tokens import decode_claims

pytestmark = pytest.mark.django_db(databases='__all__')


class TestStaffLogin:

    url = '/api/users/login'

    def test_login(self, api_client, staff_user):
        response = api_client.post(self.url, {
            'email': 'recruiter@acme.example.com',
            'password': 'testpass123',
        }, format='json', HTTP_X_TENANT_ID='acme')

        assert response.status_code == status.HTTP_200_OK
        data = response.json()['data']
        assert data['user']['role'] == 'recruiter'
        assert 'password' not in data['user']
        assert data['tenant']['company_name'] == 'Acme Corp'

        claims = decode_claims(data['token'])
        assert (claims.user_type, claims.role, claims.tenant_key) == ('user', 'recruiter', 'acme')

    def test_wrong_password(self, api_client, staff_user):
        response = api_client.post(self.url, {
            'email': staff_user.email,
            'password': 'nope-nope',
        }, format='json', HTTP_X_TENANT_ID='acme')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()['message'] == 'Invalid credentials'

    def test_missing_tenant(self, api_client, staff_user):
        response = api_client.post(self.url, {
            'email': staff_user.email,
            'password': 'testpass123',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_lockout(self, api_client, staff_user):
        payload = {'email': staff_user.email, 'password': 'wrong-password'}
        codes = [
            api_client.post(self.url, payload, format='json', HTTP_X_TENANT_ID='acme').status_code
            for _ in range(5)
        ]
        assert codes == [401] * 5

        response = api_client.post(self.url, {
            'email': staff_user.email,
            'password': 'testpass123',
        }, format='json', HTTP_X_TENANT_ID='acme')

        assert response.status_code == status.HTTP_423_LOCKED
        body = response.json()
        assert body['error_code'] == 'ACCOUNT_LOCKED'
        assert 'lock_until' in body['meta']


class TestSuperAdminLogin:

    url = '/api/super-admin/login'

    def test_login(self, api_client, super_admin):
        response = api_client.post(self.url, {
            'email': 'root@platform.example.com',
            'password': 'testpass123',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        data = response.json()['data']
        assert data['user']['role'] == 'super_admin'

        claims = decode_claims(data['token'])
        assert claims.is_super_admin
        assert claims.tenant_key is None

    def test_staff_cannot_use_super_admin_login(self, api_client, staff_user, super_admin):
        response = api_client.post(self.url, {
            'email': staff_user.email,
            'password': 'testpass123',
        }, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
