"""
Unit Tests for profile and verification-request endpoints
"""
import pytest
from httpx import AsyncClient


class TestProfile:

    @pytest.mark.asyncio
    async def test_get_me(self, client: AsyncClient, test_user, auth_headers):
        response = await client.get('/api/v1/users/me', headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data['rollNumber'] == test_user.roll_number
        assert data['isVerified'] is False
        assert data['verificationRequest'] is None

    @pytest.mark.asyncio
    async def test_update_me(self, client: AsyncClient, auth_headers):
        response = await client.put('/api/v1/users/me', json={
            'name': 'New Name',
            'profilePicUrl': 'https://cdn.test/avatar.png',
        }, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()['name'] == 'New Name'
        assert response.json()['profilePicUrl'] == 'https://cdn.test/avatar.png'

    @pytest.mark.asyncio
    async def test_update_bad_email(self, client: AsyncClient, auth_headers):
        response = await client.put('/api/v1/users/me', json={'email': 'nope'}, headers=auth_headers)

        assert response.status_code == 422
        assert response.json()['error']['details']['errors'][0]['field'] == 'email'


class TestRequestVerification:

    @pytest.mark.asyncio
    async def test_submit_with_id_image(self, client: AsyncClient, auth_headers, storage):
        response = await client.post(
            '/api/v1/users/me/verify',
            files={'id_image': ('student-id.jpg', b'\xff\xd8\xff fake jpeg', 'image/jpeg')},
            headers=auth_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data['message'] == 'Verification request submitted'
        assert data['request']['status'] == 'PENDING'
        assert data['request']['idImageUrl'].startswith('https://storage.test/verification/')
        assert len(storage.uploads) == 1

    @pytest.mark.asyncio
    async def test_submit_without_image(self, client: AsyncClient, auth_headers):
        response = await client.post('/api/v1/users/me/verify', headers=auth_headers)

        assert response.status_code == 201
        assert response.json()['request']['idImageUrl'] is None

    @pytest.mark.asyncio
    async def test_profile_shows_pending_request(self, client: AsyncClient, auth_headers):
        await client.post('/api/v1/users/me/verify', headers=auth_headers)

        response = await client.get('/api/v1/users/me', headers=auth_headers)

        assert response.json()['verificationRequest']['status'] == 'PENDING'

    @pytest.mark.asyncio
    async def test_second_submission_conflicts(self, client: AsyncClient, auth_headers):
        await client.post('/api/v1/users/me/verify', headers=auth_headers)

        response = await client.post('/api/v1/users/me/verify', headers=auth_headers)

        assert response.status_code == 409
        assert response.json()['detail'] == 'Verification request already pending'

    @pytest.mark.asyncio
    async def test_unsupported_file_type(self, client: AsyncClient, auth_headers, storage):
        response = await client.post(
            '/api/v1/users/me/verify',
            files={'id_image': ('id.txt', b'hello', 'text/plain')},
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert response.json()['error']['details']['errors'][0]['field'] == 'idImage'
        assert storage.uploads == []
