"""Tests for common utilities — filters, search and datetime helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.common.dates import as_utc, naive_utc, parse_datetime, whole_hours
from shift_manager.common.filters import _get_column, apply_filters, apply_search
from shift_manager.customers.models import Customer
from shift_manager.shifts.models import Shift


# ── Helpers ─────────────────────────────────────────────────────────


async def _seed_customers(db: AsyncSession, owner_id: int) -> None:
    db.add_all([
        Customer(name="Kavárna Slavia", address="Smetanovo nábřeží 2", city="Praha", ic="12345678", user_id=owner_id),
        Customer(name="Pekárna Brno", address="Masarykova 1", city="Brno", user_id=owner_id),
        Customer(name="Bistro Ostrava", address="Stodolní 5", city="Ostrava", user_id=owner_id),
    ])
    await db.commit()


# ═════════════════════════════════════════════════════════════════════
# FILTER TESTS
# ═════════════════════════════════════════════════════════════════════


class TestApplyFilters:
    """Tests for apply_filters utility."""

    async def test_filter_by_equality(self, db: AsyncSession, company):
        await _seed_customers(db, company.id)
        query = apply_filters(select(Customer), Customer, {"city": "Brno"})
        result = await db.execute(query)
        assert [c.name for c in result.scalars().all()] == ["Pekárna Brno"]

    async def test_none_values_skipped(self, db: AsyncSession, company):
        await _seed_customers(db, company.id)
        query = apply_filters(select(Customer), Customer, {"city": None, "ic": None})
        result = await db.execute(query)
        assert len(result.scalars().all()) == 3

    async def test_ilike_and_in(self, db: AsyncSession, company):
        await _seed_customers(db, company.id)
        query = apply_filters(
            select(Customer),
            Customer,
            {"name__ilike": "SLAVIA", "city__in": ["Praha", "Ostrava"]},
        )
        result = await db.execute(query)
        assert [c.name for c in result.scalars().all()] == ["Kavárna Slavia"]

    async def test_date_range(self, db: AsyncSession, make_workplace, make_shift):
        workplace = await make_workplace()
        early = await make_shift(workplace_id=workplace.id, start=datetime(2025, 3, 1, 8))
        await make_shift(workplace_id=workplace.id, start=datetime(2025, 3, 20, 8))

        query = apply_filters(
            select(Shift),
            Shift,
            {"date__from": datetime(2025, 3, 1), "date__to": datetime(2025, 3, 10)},
        )
        result = await db.execute(query)
        assert [s.id for s in result.scalars().all()] == [early.id]

    async def test_unknown_column_ignored(self, db: AsyncSession, company):
        await _seed_customers(db, company.id)
        query = apply_filters(select(Customer), Customer, {"nonexistent": "x"})
        result = await db.execute(query)
        assert len(result.scalars().all()) == 3

    def test_get_column(self):
        assert _get_column(Customer, "name") is Customer.name
        assert _get_column(Customer, "missing") is None


class TestApplySearch:
    """Tests for apply_search utility."""

    async def test_search_across_columns(self, db: AsyncSession, company):
        await _seed_customers(db, company.id)
        query = apply_search(select(Customer), Customer, "  ostrava ", ("name", "city"))
        result = await db.execute(query)
        assert [c.name for c in result.scalars().all()] == ["Bistro Ostrava"]

    async def test_search_matches_registration_number(self, db: AsyncSession, company):
        await _seed_customers(db, company.id)
        query = apply_search(select(Customer), Customer, "3456", ("name", "ic"))
        result = await db.execute(query)
        assert [c.name for c in result.scalars().all()] == ["Kavárna Slavia"]

    @pytest.mark.parametrize("term", [None, "", "   "])
    def test_blank_search_returns_query_unchanged(self, term):
        query = select(Customer)
        assert apply_search(query, Customer, term, ("name",)) is query


# ═════════════════════════════════════════════════════════════════════
# DATETIME HELPERS
# ═════════════════════════════════════════════════════════════════════


class TestDates:

    def test_parse_datetime_iso_with_offset(self):
        assert parse_datetime("2025-03-10T10:00:00+02:00") == datetime(2025, 3, 10, 8, 0)

    def test_parse_datetime_zulu(self):
        assert parse_datetime("2025-03-10T08:00:00Z") == datetime(2025, 3, 10, 8, 0)

    @pytest.mark.parametrize("value", [None, "", "zitra", "31.12.2025"])
    def test_parse_datetime_unparseable(self, value):
        assert parse_datetime(value) is None

    def test_naive_utc(self):
        aware = datetime(2025, 3, 10, 9, 0, tzinfo=timezone(timedelta(hours=1)))
        assert naive_utc(aware) == datetime(2025, 3, 10, 8, 0)
        naive = datetime(2025, 3, 10, 8, 0)
        assert naive_utc(naive) is naive
        assert naive_utc(None) is None

    def test_as_utc(self):
        assert as_utc(datetime(2025, 3, 10)).tzinfo is timezone.utc

    @pytest.mark.parametrize(
        "minutes, expected",
        [(480, 8), (510, 8), (59, 0), (-90, -1)],
    )
    def test_whole_hours_truncates(self, minutes, expected):
        start = datetime(2025, 3, 10, 8, 0)
        assert whole_hours(start, start + timedelta(minutes=minutes)) == expected

    def test_whole_hours_missing_end(self):
        assert whole_hours(datetime(2025, 3, 10), None) == 0
