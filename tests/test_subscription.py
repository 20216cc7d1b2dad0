from datetime import datetime, timedelta

import pytest

from models import db, User, UserRole, SubscriptionStatus, Student, Payment, SchoolClass
from routes.admin import apply_subscription
from tests.conftest import login


def test_trial_expiry(tenant):
    now = datetime.utcnow()
    assert not tenant.is_subscription_expired(now)
    assert tenant.is_subscription_expired(now + timedelta(days=15))


def test_active_subscription_expiry(tenant):
    now = datetime(2024, 1, 1)
    apply_subscription(tenant, 'ACTIVE', plan='Small', months=3, now=now)
    assert tenant.subscription_end_date == now + timedelta(days=90)
    assert not tenant.is_subscription_expired(now + timedelta(days=89))
    assert tenant.is_subscription_expired(now + timedelta(days=91))


def test_expired_status(tenant):
    apply_subscription(tenant, 'EXPIRED')
    assert tenant.is_subscription_expired()


def test_activation_needs_a_known_duration(tenant):
    with pytest.raises(ValueError):
        apply_subscription(tenant, 'ACTIVE', months=2)


def expire(user):
    user.subscription_status = SubscriptionStatus.EXPIRED
    db.session.commit()


def test_expired_tenant_is_sent_to_billing(client, tenant):
    expire(tenant)
    response = client.get('/dashboard')
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/billing/')


def test_expired_tenant_can_reach_billing_and_settings(client, tenant):
    expire(tenant)
    assert client.get('/billing/').status_code == 200
    assert client.get('/settings/').status_code == 200


def test_active_tenant_reaches_dashboard(client, school):
    response = client.get('/dashboard')
    assert response.status_code == 200
    assert 'KES 15,000' in response.get_data(as_text=True)


@pytest.fixture
def super_admin(app):
    user = User(email='admin@platform.test', name='Platform Admin', role=UserRole.SUPER_ADMIN)
    user.start_trial(0)
    user.subscription_status = SubscriptionStatus.EXPIRED
    db.session.add(user)
    db.session.commit()
    return user


def test_admin_console_requires_super_admin(client):
    assert client.get('/admin/').status_code == 403


def test_admin_console(app, super_admin, tenant, other_tenant):
    admin_client = app.test_client()
    login(admin_client, super_admin)

    response = admin_client.get('/admin/')
    assert response.status_code == 200
    html = response.get_data(as_text=True)
    assert 'owner@sunrise.test' in html
    assert 'Trial: 2' in html


def test_admin_activates_tenant(app, super_admin, tenant):
    admin_client = app.test_client()
    login(admin_client, super_admin)

    response = admin_client.post(f'/admin/{tenant.id}/subscription', data={
        'status': 'ACTIVE', 'plan': 'Medium', 'months': '12', 'max_students': '500'})
    assert response.status_code == 302

    user = db.session.get(User, tenant.id)
    assert user.subscription_status == SubscriptionStatus.ACTIVE
    assert user.subscription_plan == 'Medium'
    assert user.max_students == 500
    assert user.subscription_end_date > datetime.utcnow() + timedelta(days=364)


def test_admin_deletes_a_school(app, super_admin, tenant, school, other_tenant):
    admin_client = app.test_client()
    login(admin_client, super_admin)
    hillside_id = other_tenant['user'].id

    response = admin_client.post(f'/admin/{hillside_id}/delete')
    assert response.status_code == 302

    assert db.session.get(User, hillside_id) is None
    assert Student.query.filter_by(user_id=hillside_id).count() == 0
    assert Payment.query.filter_by(user_id=hillside_id).count() == 0
    assert SchoolClass.query.filter_by(user_id=hillside_id).count() == 0
    assert Student.query.filter_by(user_id=tenant.id).count() == 2


def test_only_super_admin_deletes_schools(client, other_tenant, super_admin):
    assert client.post(f"/admin/{other_tenant['user'].id}/delete").status_code == 403
    assert db.session.get(User, other_tenant['user'].id) is not None


def test_super_admin_account_cannot_be_deleted(app, super_admin):
    admin_client = app.test_client()
    login(admin_client, super_admin)
    assert admin_client.post(f'/admin/{super_admin.id}/delete').status_code == 404
