from datetime import date
from decimal import Decimal

import pytest

from models import (db, Payment, StudentStatus, add_months, get_collection_target,
                    get_monthly_analysis, get_tenant_totals)


@pytest.fixture
def admitted(school, tenant):
    """Jane joined in January, John in March, and John paid 1,500 in February"""
    school['jane'].admission_date = date(2024, 1, 8)
    school['john'].admission_date = date(2024, 3, 1)
    db.session.add(Payment(user_id=tenant.id, student_id=school['john'].id, amount=Decimal('1500'),
                           payment_date=date(2024, 2, 20)))
    db.session.commit()
    return school


def test_totals(tenant, school, other_tenant):
    stats = get_tenant_totals(tenant.id, today=date(2024, 3, 20))

    assert stats['total_students'] == 2
    assert stats['total_classes'] == 2
    assert stats['total_collected'] == Decimal('15000')
    assert stats['month_collected'] == Decimal('15000')
    assert stats['expected_fees'] == Decimal('23000')
    assert stats['outstanding'] == Decimal('8000')
    assert stats['collection_rate'] == 65


def test_inactive_students_are_not_expected_to_pay(tenant, school):
    school['john'].status = StudentStatus.INACTIVE
    db.session.commit()

    stats = get_tenant_totals(tenant.id)
    assert stats['expected_fees'] == Decimal('20000')
    assert stats['outstanding'] == Decimal('5000')


def test_overpayment_does_not_reduce_outstanding(tenant, school):
    db.session.add(Payment(user_id=tenant.id, student_id=school['jane'].id, amount=Decimal('9000'),
                           payment_date=date(2024, 3, 9)))
    db.session.commit()

    assert get_tenant_totals(tenant.id)['outstanding'] == Decimal('3000')


def test_empty_school_has_zero_rate(tenant):
    stats = get_tenant_totals(tenant.id)
    assert stats['expected_fees'] == 0
    assert stats['collection_rate'] == 0


def test_target_defaults_to_expected_fees(tenant, school):
    stats = get_tenant_totals(tenant.id, today=date(2024, 3, 20))
    target = get_collection_target(tenant, stats)

    assert not target['is_custom']
    assert target['target'] == Decimal('23000')
    assert target['progress'] == 65


def test_custom_target_progress_is_capped(tenant, school):
    tenant.monthly_target = Decimal('10000')
    db.session.commit()

    target = get_collection_target(tenant, get_tenant_totals(tenant.id, today=date(2024, 3, 20)))
    assert target['is_custom']
    assert target['target'] == Decimal('10000')
    assert target['progress'] == 100


def test_add_months():
    assert add_months(date(2024, 3, 20), -2) == date(2024, 1, 1)
    assert add_months(date(2024, 1, 31), -1) == date(2023, 12, 1)
    assert add_months(date(2024, 12, 5), 1) == date(2025, 1, 1)


def test_monthly_analysis(tenant, admitted, other_tenant):
    rows = get_monthly_analysis(tenant.id, today=date(2024, 3, 20), months=3)

    assert [row['month'] for row in rows] == ['Jan 2024', 'Feb 2024', 'Mar 2024']
    assert [row['collected'] for row in rows] == [0, Decimal('1500'), Decimal('15000')]
    assert [row['expected'] for row in rows] == [Decimal('20000'), Decimal('20000'), Decimal('23000')]
    assert [row['rate'] for row in rows] == [0, 7.5, 65.2]
    assert [row['change'] for row in rows] == [None, None, 900.0]


def test_monthly_analysis_covers_a_year(tenant, school):
    rows = get_monthly_analysis(tenant.id, today=date(2024, 3, 20))
    assert len(rows) == 12
    assert rows[0]['month'] == 'Apr 2023'
    assert rows[-1]['month'] == 'Mar 2024'


def test_dashboard_shows_collection_summary(client, school):
    html = client.get('/dashboard').get_data(as_text=True)
    assert 'Collection rate' in html
    assert '65%' in html
    assert 'KES 23,000' in html
    assert 'Monthly analysis' in html


def test_set_custom_target(client, tenant):
    response = client.post('/dashboard/target', data={'target_type': 'custom', 'amount': '50000'})
    assert response.status_code == 302

    db.session.refresh(tenant)
    assert tenant.monthly_target == Decimal('50000')

    client.post('/dashboard/target', data={'target_type': 'expected'})
    db.session.refresh(tenant)
    assert tenant.monthly_target is None


@pytest.mark.parametrize('amount', ['', '-5', '0', 'abc', 'NaN'])
def test_invalid_target_is_rejected(client, tenant, amount):
    tenant.monthly_target = Decimal('1000')
    db.session.commit()

    client.post('/dashboard/target', data={'target_type': 'custom', 'amount': amount})
    db.session.refresh(tenant)
    assert tenant.monthly_target == Decimal('1000')
