from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, login


class TestAuth:

    def test_login_me_logout(self, client):
        response = login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
        assert response.status_code == 200
        user = response.get_json()['user']
        assert user['role'] == 'ADMIN'
        assert 'password_hash' not in user
        assert user['last_active'] is not None

        assert client.get('/api/auth/me').get_json()['user']['email'] == ADMIN_EMAIL
        assert client.post('/api/auth/logout').status_code == 200
        assert client.get('/api/auth/me').status_code == 401

    def test_wrong_password(self, client):
        response = login(client, ADMIN_EMAIL, 'nope')
        assert response.status_code == 401
        assert response.get_json()['message'] == 'Invalid username or password'

    def test_missing_fields(self, client):
        response = client.post('/api/auth/login', json={'email': ADMIN_EMAIL})
        assert response.status_code == 400
        assert 'password' in response.get_json()['errors']

    def test_inactive_user_cannot_login(self, admin_client, client):
        admin_client.post('/api/users', json={'name': 'Former Clerk', 'email': 'former@neonflow.test',
                                              'password': 'secret', 'status': 'INACTIVE'})
        assert login(client, 'former@neonflow.test', 'secret').status_code == 401


class TestUserAdmin:

    def test_create_update_delete(self, admin_client, client):
        response = admin_client.post('/api/users', json={
            'name': 'Night Shift', 'email': 'night@neonflow.test', 'password': 'moonlight'})
        assert response.status_code == 201
        user = response.get_json()['user']
        assert (user['role'], user['status']) == ('STAFF', 'ACTIVE')

        response = admin_client.put(f"/api/users/{user['id']}", json={'role': 'ADMIN', 'password': 'sunrise'})
        assert response.status_code == 200
        assert response.get_json()['user']['role'] == 'ADMIN'
        assert login(client, 'night@neonflow.test', 'sunrise').status_code == 200

        assert admin_client.delete(f"/api/users/{user['id']}").status_code == 200
        assert [u['email'] for u in admin_client.get('/api/users').get_json()] == [ADMIN_EMAIL]

    def test_duplicate_email(self, admin_client):
        response = admin_client.post('/api/users', json={'name': 'Copy', 'email': ADMIN_EMAIL, 'password': 'xx'})
        assert response.status_code == 400

    def test_invalid_role(self, admin_client):
        response = admin_client.post('/api/users', json={'name': 'X', 'email': 'x@neonflow.test',
                                                         'password': 'xx', 'role': 'OWNER'})
        assert response.status_code == 400

    def test_super_admin_is_protected(self, admin_client):
        assert admin_client.delete('/api/users/usr-admin-01').status_code == 403
        assert admin_client.put('/api/users/usr-admin-01', json={'role': 'STAFF'}).status_code == 403
        assert admin_client.put('/api/users/usr-admin-01', json={'name': 'Root'}).status_code == 200

    def test_staff_cannot_manage_users(self, staff_client, staff_user_id):
        assert staff_client.get('/api/users').status_code == 403
        assert staff_client.delete(f"/api/users/{staff_user_id}").status_code == 403

    def test_unknown_user(self, admin_client):
        assert admin_client.get('/api/users/usr-404').status_code == 404
