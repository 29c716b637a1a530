"""
Unit Tests for Authentication API Endpoints
"""
import pytest
from httpx import AsyncClient
from faker import Faker

from app.core.config import settings

fake = Faker()


class TestSignup:
    """Test signup endpoint"""

    @pytest.mark.asyncio
    async def test_signup_success(self, client: AsyncClient):
        user_data = {
            'rollNumber': 'CS2023/014',
            'name': fake.name(),
            'password': 'securePassword123',
        }

        response = await client.post('/api/v1/auth/signup', json=user_data)

        assert response.status_code == 201
        data = response.json()
        assert data['message'] == 'User created successfully. Upload your ID to get verified.'
        assert data['user']['rollNumber'] == 'CS2023/014'
        assert data['user']['isVerified'] is False
        assert 'passwordHash' not in data['user']
        assert 'password_hash' not in data['user']

    @pytest.mark.asyncio
    async def test_signup_duplicate_roll_number(self, client: AsyncClient, test_user):
        response = await client.post('/api/v1/auth/signup', json={
            'rollNumber': test_user.roll_number,
            'name': fake.name(),
            'password': 'securePassword123',
        })

        assert response.status_code == 409
        body = response.json()
        assert body['success'] is False
        assert body['detail'] == 'User with this roll number already exists'
        assert body['error']['code'] == 'USER_EXISTS'

    @pytest.mark.asyncio
    async def test_signup_bad_roll_number(self, client: AsyncClient):
        response = await client.post('/api/v1/auth/signup', json={
            'rollNumber': 'cs-2023-14',
            'name': fake.name(),
            'password': 'securePassword123',
        })

        assert response.status_code == 422
        errors = response.json()['error']['details']['errors']
        assert errors[0]['field'] == 'rollNumber'

    @pytest.mark.asyncio
    async def test_signup_short_password(self, client: AsyncClient):
        response = await client.post('/api/v1/auth/signup', json={
            'rollNumber': 'CS2023/014',
            'name': fake.name(),
            'password': 'short',
        })

        assert response.status_code == 422
        assert response.json()['error']['code'] == 'VALIDATION_ERROR'


class TestLogin:
    """Test login endpoint"""

    @pytest.mark.asyncio
    async def test_login_success_sets_cookie(self, client: AsyncClient, make_user):
        await make_user(roll_number='EE2022/101', password='correctpassword')

        response = await client.post('/api/v1/auth/login', json={
            'rollNumber': 'EE2022/101',
            'password': 'correctpassword',
        })

        assert response.status_code == 200
        data = response.json()
        assert data['accessToken']
        assert data['tokenType'] == 'bearer'
        assert data['user']['rollNumber'] == 'EE2022/101'
        cookie = response.headers['set-cookie']
        assert cookie.startswith(f'{settings.AUTH_COOKIE_NAME}=')
        assert 'httponly' in cookie.lower()

    @pytest.mark.asyncio
    async def test_cookie_authenticates_later_requests(self, client: AsyncClient, make_user):
        await make_user(roll_number='EE2022/101', password='correctpassword')
        await client.post('/api/v1/auth/login', json={
            'rollNumber': 'EE2022/101',
            'password': 'correctpassword',
        })

        response = await client.get('/api/v1/users/me')

        assert response.status_code == 200
        assert response.json()['rollNumber'] == 'EE2022/101'

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, make_user):
        await make_user(roll_number='EE2022/101', password='correctpassword')

        response = await client.post('/api/v1/auth/login', json={
            'rollNumber': 'EE2022/101',
            'password': 'wrongpassword',
        })

        assert response.status_code == 401
        assert response.json()['detail'] == 'Invalid credentials'

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, client: AsyncClient):
        response = await client.post('/api/v1/auth/login', json={
            'rollNumber': 'ZZ9999/999',
            'password': 'whatever123',
        })

        assert response.status_code == 401
        assert response.json()['detail'] == 'Invalid credentials'


class TestLogout:

    @pytest.mark.asyncio
    async def test_logout_clears_cookie(self, client: AsyncClient):
        response = await client.post('/api/v1/auth/logout')

        assert response.status_code == 200
        assert response.json()['message'] == 'Logged out successfully'
        assert settings.AUTH_COOKIE_NAME in response.headers['set-cookie']


class TestTokenHandling:
    """Protected routes and bad tokens"""

    @pytest.mark.asyncio
    async def test_missing_token(self, client: AsyncClient):
        response = await client.get('/api/v1/users/me')

        assert response.status_code == 401
        assert response.json()['detail'] == 'Unauthorized'

    @pytest.mark.asyncio
    async def test_invalid_token(self, client: AsyncClient):
        response = await client.get('/api/v1/users/me', headers={'Authorization': 'Bearer garbage'})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_bearer_token(self, client: AsyncClient, test_user, auth_headers):
        response = await client.get('/api/v1/users/me', headers=auth_headers)

        assert response.status_code == 200
        assert response.json()['id'] == test_user.id


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'

    @pytest.mark.asyncio
    async def test_liveness(self, client: AsyncClient):
        response = await client.get('/api/v1/health/live')

        assert response.status_code == 200
