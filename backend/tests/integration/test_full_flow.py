"""
Integration Tests for the complete complaint lifecycle
"""
from httpx import AsyncClient


def bearer_from(response) -> dict:
    """Authorization header built from the session cookie a response set"""
    token = response.headers['set-cookie'].split(';', 1)[0].partition('=')[2]
    return {'Authorization': f'Bearer {token}'}


class TestComplaintLifecycle:
    """A user files a complaint and an admin works it to resolution"""

    async def test_user_and_admin_flow(self, client: AsyncClient, notifier):
        # Ann registers and submits a complaint
        ann = await client.post('/api/v1/auth/register', json={
            'name': 'Ann', 'email': 'ann@example.com', 'password': 'secret1',
        })
        assert ann.status_code == 201
        ann_headers = bearer_from(ann)

        created = await client.post('/api/v1/complaints', headers=ann_headers, json={
            'title': 'Broken blender',
            'description': 'It stopped working after one day',
            'category': 'Product',
            'priority': 'High',
        })
        assert created.status_code == 201
        complaint_id = created.json()['id']
        assert created.json()['status'] == 'Pending'
        assert created.json()['userEmail'] == 'ann@example.com'
        assert [c.id for c in notifier.created] == [complaint_id]

        # Bob cannot see it
        bob = await client.post('/api/v1/auth/register', json={
            'name': 'Bob', 'email': 'bob@example.com', 'password': 'secret2',
        })
        bob_headers = bearer_from(bob)
        assert (await client.get('/api/v1/complaints', headers=bob_headers)).json() == []
        assert (await client.get(f'/api/v1/complaints/{complaint_id}', headers=bob_headers)).status_code == 404

        # Ann cannot change status herself
        forbidden = await client.put(
            f'/api/v1/complaints/{complaint_id}', headers=ann_headers, json={'status': 'Resolved'}
        )
        assert forbidden.status_code == 403

        # An admin logs in and moves it along
        await client.post('/api/v1/auth/register', json={
            'name': 'Root', 'email': 'root@example.com', 'password': 'rootpass', 'role': 'admin',
        })
        admin = await client.post('/api/v1/auth/login', json={
            'email': 'root@example.com', 'password': 'rootpass',
        })
        assert admin.status_code == 200
        admin_headers = bearer_from(admin)

        listed = await client.get('/api/v1/complaints', headers=admin_headers)
        assert [c['id'] for c in listed.json()] == [complaint_id]

        for status in ('In Progress', 'Resolved'):
            updated = await client.put(
                f'/api/v1/complaints/{complaint_id}', headers=admin_headers, json={'status': status}
            )
            assert updated.status_code == 200
            assert updated.json()['status'] == status

        assert [c.status.value for c in notifier.status_updated] == ['In Progress', 'Resolved']
        assert all(c.user_email == 'ann@example.com' for c in notifier.status_updated)

        # Ann sees the resolution
        mine = await client.get(f'/api/v1/complaints/{complaint_id}', headers=ann_headers)
        assert mine.json()['status'] == 'Resolved'

        stats = await client.get('/api/v1/complaints/stats', headers=ann_headers)
        assert stats.json() == {'total': 1, 'byStatus': {'Pending': 0, 'In Progress': 0, 'Resolved': 1}}

        # The admin removes it; it is gone for everyone
        deleted = await client.delete(f'/api/v1/complaints/{complaint_id}', headers=admin_headers)
        assert deleted.status_code == 200
        assert (await client.get('/api/v1/complaints', headers=ann_headers)).json() == []

    async def test_logout_then_cookie_session_ends(self, client: AsyncClient):
        registered = await client.post('/api/v1/auth/register', json={
            'name': 'Ann', 'email': 'ann@example.com', 'password': 'secret1',
        })
        token = registered.headers['set-cookie'].split(';', 1)[0].partition('=')[2]
        cookie = {'Cookie': f'auth-token={token}'}

        assert (await client.get('/api/v1/auth/me', headers=cookie)).status_code == 200

        logged_out = await client.post('/api/v1/auth/logout', headers=cookie)
        assert logged_out.status_code == 200

        client.cookies.clear()
        assert (await client.get('/api/v1/auth/me')).status_code == 401
