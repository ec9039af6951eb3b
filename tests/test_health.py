"""
Smoke tests: the server boots, answers health checks, and speaks JSON errors.
"""

from datetime import timedelta
from conftest import make_token


class TestHealthEndpoints:
    """Verify the server boots and responds."""

    def test_root_health(self, client):
        resp = client.get('/health')
        assert resp.status_code == 200
        assert resp.get_json()['status'] == 'ok'

    def test_tracking_blueprints_registered(self, app):
        rules = {rule.rule for rule in app.url_map.iter_rules()}
        assert '/api/tasks/<int:task_id>/location' in rules
        assert '/api/tasks/<int:task_id>/completion-code/redeem' in rules
        assert '/api/proximity-alerts/<int:alert_id>/acknowledge' in rules
        assert '/api/admin/settings' in rules


class TestAuthErrors:

    def test_expired_token(self, client, task_id, runner):
        headers = {'Authorization': f'Bearer {make_token(runner["id"], expires_in=timedelta(seconds=-1))}'}
        resp = client.get(f'/api/tasks/{task_id}/location', headers=headers)

        assert resp.status_code == 401
        assert resp.get_json()['error'] == 'Token has expired'

    def test_raw_token_without_bearer_prefix(self, client, task_id, runner):
        resp = client.get(f'/api/tasks/{task_id}/location', headers={'Authorization': make_token(runner['id'])})
        assert resp.status_code == 200

    def test_tracking_errors_are_json(self, client, db_session, runner):
        resp = client.get('/api/tasks/999999/location/history', headers={
            'Authorization': f'Bearer {make_token(runner["id"])}'
        })
        assert resp.status_code == 404
        assert 'error' in resp.get_json()
