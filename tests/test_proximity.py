"""
Tests for proximity evaluation and alerts.
"""

from datetime import datetime, timedelta
import pytest
from conftest import PICKUP, offset_north
from errands import db
from errands.exceptions import AlertNotFound, NotTaskParticipant
from errands.models import CompletionCode, LocationSample, ProximityAlert, ProximityState, Task
from errands.services import location, proximity, settings


def report(task_id, runner, meters, recorded_at=None):
    lat, lng = offset_north(PICKUP, meters)
    return location.record_location(task_id, runner['id'], {
        'latitude': lat,
        'longitude': lng,
        'recorded_at': recorded_at,
    })


class TestEdgeTriggeredAlerts:

    def test_inside_outside_inside_sequence(self, task_id, runner):
        """50m, 50m, 500m, 80m with a 100m radius: exactly two alerts."""
        _, first = report(task_id, runner, 50)
        _, second = report(task_id, runner, 50)
        _, third = report(task_id, runner, 500)
        _, fourth = report(task_id, runner, 80)

        assert first is not None
        assert second is None
        assert third is None
        assert fourth is not None
        assert ProximityAlert.query.filter_by(task_id=task_id).count() == 2

    def test_alert_records_measured_distance(self, task_id, runner, creator):
        _, alert = report(task_id, runner, 60)
        alert = db.session.get(ProximityAlert, alert.id)

        assert alert.distance == pytest.approx(60, abs=0.5)
        assert alert.runner_id == runner['id']
        assert alert.creator_id == creator['id']
        assert not alert.acknowledged_by_runner
        assert not alert.acknowledged_by_creator

    def test_outside_updates_state_without_alert(self, task_id, runner):
        _, alert = report(task_id, runner, 2000)

        state = db.session.get(ProximityState, task_id)
        assert alert is None
        assert state.state == ProximityState.OUTSIDE
        assert state.last_distance == pytest.approx(2000, abs=1)

    def test_alert_mints_completion_code(self, task_id, runner):
        report(task_id, runner, 30)
        assert CompletionCode.active_for_task(task_id) is not None

    def test_auto_generation_can_be_disabled(self, app, task_id, runner):
        app.config['AUTO_GENERATE_COMPLETION_CODE'] = False
        try:
            _, alert = report(task_id, runner, 30)
        finally:
            app.config['AUTO_GENERATE_COMPLETION_CODE'] = True

        assert alert is not None
        assert CompletionCode.active_for_task(task_id) is None

    def test_missing_pickup_is_a_no_op(self, make_task, runner):
        task_id = make_task(pickup=None)
        sample, alert = report(task_id, runner, 0)

        assert sample.id is not None
        assert alert is None
        assert db.session.get(ProximityState, task_id) is None

    def test_first_evaluation_survives_concurrent_state_insert(self, task_id, runner, monkeypatch):
        """Another sample created the state row between our read and our insert."""
        db.session.add(ProximityState(task_id=task_id, state=ProximityState.OUTSIDE, last_distance=500))
        db.session.commit()
        db.session.expunge_all()

        real_get_state = proximity.get_state
        reads = []

        def stale_first_read(state_task_id):
            reads.append(state_task_id)
            return None if len(reads) == 1 else real_get_state(state_task_id)

        monkeypatch.setattr(proximity, 'get_state', stale_first_read)

        task = db.session.get(Task, task_id)
        lat, lng = offset_north(PICKUP, 50)
        sample = LocationSample(
            task_id=task_id, runner_id=runner['id'],
            latitude=lat, longitude=lng, recorded_at=datetime.utcnow()
        )
        db.session.add(sample)
        alert = proximity.evaluate_proximity(task, sample)
        db.session.commit()

        assert alert is not None
        assert LocationSample.query.filter_by(task_id=task_id).count() == 1
        db.session.expire_all()
        assert db.session.get(ProximityState, task_id).state == ProximityState.INSIDE


class TestThreshold:

    def test_threshold_is_reread_each_evaluation(self, task_id, runner):
        _, alert = report(task_id, runner, 150)
        assert alert is None

        settings.update_setting(settings.PROXIMITY_ALERT_DISTANCE, 200)
        _, alert = report(task_id, runner, 150)
        assert alert is not None

    def test_invalid_stored_threshold_falls_back_to_default(self, task_id, runner):
        from errands.models import AdminSetting
        db.session.add(AdminSetting(key=settings.PROXIMITY_ALERT_DISTANCE, value='banana'))
        db.session.commit()

        assert settings.get_proximity_threshold() == settings.DEFAULT_PROXIMITY_ALERT_DISTANCE
        _, alert = report(task_id, runner, 90)
        assert alert is not None


class TestOutOfOrderSamples:

    def test_older_sample_is_stored_but_not_evaluated(self, task_id, runner):
        now = datetime.utcnow()
        report(task_id, runner, 500, recorded_at=now.isoformat())

        # Delayed retry from before the last evaluated sample, inside the radius
        sample, alert = report(task_id, runner, 20, recorded_at=(now - timedelta(minutes=2)).isoformat())

        assert sample.id is not None
        assert alert is None
        state = db.session.get(ProximityState, task_id)
        assert state.state == ProximityState.OUTSIDE

    def test_future_timestamp_is_clamped(self, task_id, runner):
        future = (datetime.utcnow() + timedelta(hours=3)).isoformat() + 'Z'
        sample, _ = report(task_id, runner, 500, recorded_at=future)

        assert sample.recorded_at <= datetime.utcnow()
        # A later sample must still be evaluated
        _, alert = report(task_id, runner, 20)
        assert alert is not None


class TestAlertQueries:

    def test_alerts_newest_first(self, task_id, runner):
        report(task_id, runner, 50)
        report(task_id, runner, 500)
        report(task_id, runner, 40)

        alerts = proximity.get_proximity_alerts(task_id, user_id=runner['id'])
        assert len(alerts) == 2
        assert alerts[0].distance == pytest.approx(40, abs=0.5)

    def test_outsider_cannot_list_alerts(self, task_id, outsider):
        with pytest.raises(NotTaskParticipant):
            proximity.get_proximity_alerts(task_id, user_id=outsider['id'])

    def test_acknowledge_sets_only_callers_flag(self, task_id, runner, creator):
        _, alert = report(task_id, runner, 50)

        acked = proximity.acknowledge_proximity_alert(alert.id, runner['id'])
        assert acked.acknowledged_by_runner
        assert not acked.acknowledged_by_creator

        acked = proximity.acknowledge_proximity_alert(alert.id, creator['id'])
        assert acked.acknowledged_by_runner
        assert acked.acknowledged_by_creator

    def test_acknowledge_unknown_alert(self, db_session, runner):
        with pytest.raises(AlertNotFound):
            proximity.acknowledge_proximity_alert(99999, runner['id'])

    def test_outsider_cannot_acknowledge(self, task_id, runner, outsider):
        _, alert = report(task_id, runner, 50)
        with pytest.raises(NotTaskParticipant):
            proximity.acknowledge_proximity_alert(alert.id, outsider['id'])


class TestProximityRoutes:

    def test_list_alerts(self, client, task_id, runner, creator_headers):
        report(task_id, runner, 50)

        response = client.get(f'/api/tasks/{task_id}/proximity-alerts', headers=creator_headers)

        assert response.status_code == 200
        assert response.json['total'] == 1

    def test_acknowledge_route(self, client, task_id, runner, creator_headers):
        _, alert = report(task_id, runner, 50)

        response = client.post(f'/api/proximity-alerts/{alert.id}/acknowledge', headers=creator_headers)

        assert response.status_code == 200
        assert response.json['alert']['acknowledged_by_creator'] is True

    def test_acknowledge_route_outsider(self, client, task_id, runner, outsider_headers):
        _, alert = report(task_id, runner, 50)

        response = client.post(f'/api/proximity-alerts/{alert.id}/acknowledge', headers=outsider_headers)

        assert response.status_code == 403
