"""Integration tests for an owner's paginated order history"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from servicedesk.orders.errors import UserNotFound
from servicedesk.orders.schemas import OrderHistoryResult


BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def place_orders(order_manager, owner, catalog_service, db_session):
    """Create review orders one day apart, oldest first."""
    def _place(count, owner_ref=None, **kwargs):
        orders = []
        for day in range(count):
            order = order_manager.create_order(owner_ref or owner.auth_id, catalog_service.id, **kwargs)
            order.created_at = BASE_TIME + timedelta(days=day)
            orders.append(order)
        db_session.commit()
        return orders
    return _place


class TestOrderHistory:
    """Test pagination, filters and ordering"""

    def test_pagination(self, order_manager, owner, place_orders):
        orders = place_orders(25)

        result = order_manager.get_order_history(owner.auth_id, page=3, limit=10)

        assert isinstance(result, OrderHistoryResult)
        assert result.review.total == 25
        assert result.review.page == 3
        assert result.review.limit == 10
        assert result.review.total_pages == 3
        assert len(result.review.orders) == 5
        # Newest first, so the last page holds the five oldest
        assert [o.id for o in result.review.orders] == [o.id for o in reversed(orders[:5])]

        assert result.finalized.total == 0
        assert result.finalized.total_pages == 0
        assert result.finalized.orders == []

    def test_default_page_size(self, order_manager, owner, place_orders):
        place_orders(12)

        result = order_manager.get_order_history(owner.auth_id)
        assert result.review.limit == 10
        assert len(result.review.orders) == 10
        assert result.review.total_pages == 2

    def test_limit_capped(self, order_manager, owner, place_orders):
        place_orders(1)
        result = order_manager.get_order_history(owner.auth_id, limit=1000)
        assert result.review.limit == 100

    def test_newest_first_with_details(self, order_manager, owner, place_orders):
        orders = place_orders(3)

        result = order_manager.get_order_history(owner.auth_id)

        assert [o.id for o in result.review.orders] == [o.id for o in reversed(orders)]
        first = result.review.orders[0]
        assert first.service.title == "Passport Renewal"
        assert first.user.full_name == "Asha Verma"
        assert len(first.status_history) == 1

    def test_status_filter_matches_tracking_status(self, order_manager, owner, place_orders):
        place_orders(2)
        place_orders(1, tracking_status="Payment Pending")

        result = order_manager.get_order_history(owner.auth_id, status="Payment Pending")
        assert result.review.total == 1
        assert result.review.orders[0].tracking_status == "Payment Pending"

        result = order_manager.get_order_history(owner.auth_id, status="pending")
        assert result.review.total == 0

    def test_inclusive_date_range(self, order_manager, owner, place_orders):
        orders = place_orders(5)

        result = order_manager.get_order_history(
            owner.auth_id,
            start_date=BASE_TIME + timedelta(days=1),
            end_date=BASE_TIME + timedelta(days=3),
        )

        assert result.review.total == 3
        assert {o.id for o in result.review.orders} == {o.id for o in orders[1:4]}

    def test_finalized_orders_listed(self, order_manager, owner, place_orders):
        orders = place_orders(3)
        order_manager.approve_order(orders[0].id)

        result = order_manager.get_order_history(owner.auth_id)

        assert result.review.total == 2
        assert result.finalized.total == 1
        finalized = result.finalized.orders[0]
        assert finalized.source_order_id == orders[0].id
        assert finalized.tracking_status == "Approved"
        assert finalized.service.title == "Passport Renewal"

        result = order_manager.get_order_history(owner.auth_id, status="Approved")
        assert result.review.total == 0
        assert result.finalized.total == 1

    def test_only_own_orders(self, order_manager, owner, other_owner, place_orders):
        place_orders(2)
        place_orders(3, owner_ref=other_owner.auth_id)

        assert order_manager.get_order_history(owner.auth_id).review.total == 2
        assert order_manager.get_order_history(other_owner.auth_id).review.total == 3

    def test_unknown_owner(self, order_manager):
        with pytest.raises(UserNotFound):
            order_manager.get_order_history("nobody")

    @pytest.mark.parametrize("kwargs", [
        {"page": 0},
        {"limit": 0},
        {"limit": -1},
        {"start_date": BASE_TIME, "end_date": BASE_TIME - timedelta(days=1)},
    ])
    def test_invalid_query(self, order_manager, owner, kwargs):
        with pytest.raises(ValidationError):
            order_manager.get_order_history(owner.auth_id, **kwargs)
