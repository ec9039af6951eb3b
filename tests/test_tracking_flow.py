"""
End-to-end tracking flow: a runner walks towards the pickup point in Lagos,
the creator is alerted once, and the handoff is confirmed with the code.
"""

from conftest import PICKUP, make_token, offset_north
from errands import socketio
from errands.models import TaskStatus


def event_names(socket_client):
    return [packet['name'] for packet in socket_client.get_received()]


class TestTrackingFlow:

    def test_walk_to_pickup_and_confirm_handoff(self, app, client, make_task, creator, runner,
                                                creator_headers, runner_headers):
        task_id = make_task(status=TaskStatus.ACCEPTED)

        assert client.post(f'/api/tasks/{task_id}/start', headers=runner_headers).status_code == 200

        alerts = []
        for meters in (2000, 1200, 600, 250, 120, 95, 60, 30):
            lat, lng = offset_north(PICKUP, meters)
            response = client.post(
                f'/api/tasks/{task_id}/location',
                json={'latitude': lat, 'longitude': lng, 'accuracy': 10},
                headers=runner_headers
            )
            assert response.status_code == 201
            if response.json['proximity_alert']:
                alerts.append(meters)

        # One alert, on the first sample inside the 100 m radius
        assert alerts == [95]

        listed = client.get(f'/api/tasks/{task_id}/proximity-alerts', headers=runner_headers)
        assert listed.json['total'] == 1

        code_response = client.get(f'/api/tasks/{task_id}/completion-code', headers=creator_headers)
        completion_code = code_response.json['completion_code']
        assert completion_code is not None
        assert completion_code['is_used'] is False

        redeemed = client.post(
            f'/api/tasks/{task_id}/completion-code/redeem',
            json={'code': completion_code['code']},
            headers=runner_headers
        )
        assert redeemed.status_code == 200

        # Tracking stops once the task is completed
        lat, lng = PICKUP
        late = client.post(
            f'/api/tasks/{task_id}/location',
            json={'latitude': lat, 'longitude': lng},
            headers=runner_headers
        )
        assert late.status_code == 409

    def test_realtime_events(self, app, client, task_id, creator, runner, runner_headers):
        creator_socket = socketio.test_client(app, auth={'token': make_token(creator['id'])})
        runner_socket = socketio.test_client(app, auth={'token': make_token(runner['id'])})
        assert creator_socket.is_connected()

        for socket_client, user in ((creator_socket, creator), (runner_socket, runner)):
            socket_client.emit('join_task', {'task_id': task_id, 'token': make_token(user['id'])})
        creator_socket.get_received()
        runner_socket.get_received()

        lat, lng = offset_north(PICKUP, 40)
        client.post(
            f'/api/tasks/{task_id}/location',
            json={'latitude': lat, 'longitude': lng},
            headers=runner_headers
        )

        creator_events = event_names(creator_socket)
        runner_events = event_names(runner_socket)

        assert 'location_updated' in creator_events
        assert 'proximity_alert' in creator_events
        assert 'proximity_alert' in runner_events
        # Only the creator ever receives the code
        assert 'completion_code_generated' in creator_events
        assert 'completion_code_generated' not in runner_events

        creator_socket.disconnect()
        runner_socket.disconnect()

    def test_outsider_cannot_join_task_room(self, app, task_id, outsider):
        socket_client = socketio.test_client(app, auth={'token': make_token(outsider['id'])})
        socket_client.get_received()

        socket_client.emit('join_task', {'task_id': task_id, 'token': make_token(outsider['id'])})

        received = socket_client.get_received()
        assert [p['name'] for p in received] == ['error']
        socket_client.disconnect()

    def test_socket_rejects_invalid_token(self, app, db_session):
        socket_client = socketio.test_client(app, auth={'token': 'garbage'})
        assert not socket_client.is_connected()
