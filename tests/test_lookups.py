from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from receipts import lookups
from receipts.lookups import (fallback_balance, fetch_school_info, filter_members, load_family_members,
                              student_member)


def test_school_info(school, tenant):
    info = fetch_school_info(tenant.id)
    assert info.name == 'Sunrise Academy'
    assert info.address == 'P.O. Box 1234, Nairobi'
    assert info.phone == '0712 345 678'


def test_school_info_for_missing_user_is_blank(app):
    info = fetch_school_info(999)
    assert (info.name, info.address, info.phone) == ('', '', '')


def test_member_balance(school):
    member = student_member(school['jane'])
    assert member.class_name == 'Grade 3'
    assert member.total_paid == Decimal('15000')
    assert member.balance == Decimal('5000')


def test_family_members_are_tenant_scoped(school, other_tenant, tenant):
    members = load_family_members(tenant.id, school['jane'].id)
    assert set(members) == {school['jane'].id, school['john'].id}
    assert members[school['john'].id].balance == Decimal('3000')


def test_payer_only(school, tenant):
    members = load_family_members(tenant.id, school['jane'].id, include_all=False)
    assert list(members) == [school['jane'].id]


def failing_total(student_id):
    raise OperationalError('SELECT sum(amount)', {}, Exception('database is locked'))


def test_failed_lookup_uses_zero_fallback(school, tenant, monkeypatch):
    monkeypatch.setattr(lookups, 'get_student_total_paid', failing_total)
    members = load_family_members(tenant.id, school['jane'].id)

    jane = members[school['jane'].id]
    assert jane.name == 'Jane Doe'
    assert jane.class_name == 'Grade 3'
    assert jane.total_paid is None
    assert jane.balance == Decimal('0')


def test_failed_lookup_uses_unknown_fallback(school, tenant, monkeypatch):
    monkeypatch.setattr(lookups, 'get_student_total_paid', failing_total)
    members = load_family_members(tenant.id, school['jane'].id, fallback='unknown')
    assert all(member.balance is None for member in members.values())


def test_one_failure_does_not_affect_siblings(school, tenant, monkeypatch):
    real_total = lookups.get_student_total_paid
    jane_id = school['jane'].id

    def flaky_total(student_id):
        if student_id == jane_id:
            return failing_total(student_id)
        return real_total(student_id)

    monkeypatch.setattr(lookups, 'get_student_total_paid', flaky_total)
    members = load_family_members(tenant.id, jane_id, fallback='unknown')

    assert members[jane_id].balance is None
    assert members[school['john'].id].balance == Decimal('3000')


def test_unknown_fallback_name():
    with pytest.raises(ValueError):
        fallback_balance('guess')


def test_filter_members(school, tenant):
    members = load_family_members(tenant.id, school['jane'].id)
    assert [m.name for m in filter_members(members, 'john')] == ['John Doe']
    assert [m.name for m in filter_members(members, 'adm001')] == ['Jane Doe']
    assert len(filter_members(members, '  ')) == 2
    assert filter_members(members, 'nobody') == []
