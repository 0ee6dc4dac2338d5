"""Tests for the follow graph service."""

from datetime import timedelta

import pytest

from reeldine.domain.models import UserPreferences
from reeldine.domain.notifications import NEW_FOLLOWER
from reeldine.errors import ConflictError, NotFoundError
from reeldine.services.notifications import NotificationService
from reeldine.services.social import SocialService
from tests.conftest import (
    BASE_TIME,
    InMemoryPartnerRepository,
    InMemoryUserRepository,
    make_partner,
    make_user,
)


def _service() -> tuple[
    SocialService, InMemoryUserRepository, InMemoryPartnerRepository
]:
    users = InMemoryUserRepository()
    partners = InMemoryPartnerRepository()
    service = SocialService(
        users=users, partners=partners, notifications=NotificationService()
    )
    return service, users, partners


def test_follow_then_unfollow_restores_state() -> None:
    service, users, partners = _service()
    user = users.add(make_user())
    partner = partners.add(make_partner(followers_count=3))

    followed = service.follow(user.id, partner.id)

    assert followed.followers_count == 4
    assert users.users[user.id].following == (partner.id,)
    assert partners.partners[partner.id].followers_count == 4

    unfollowed = service.unfollow(user.id, partner.id)

    assert unfollowed.followers_count == 3
    assert users.users[user.id].following == ()
    assert partners.partners[partner.id].followers_count == 3


def test_follow_twice_is_rejected_without_changes() -> None:
    service, users, partners = _service()
    user = users.add(make_user())
    partner = partners.add(make_partner())
    service.follow(user.id, partner.id)

    with pytest.raises(ConflictError, match="Already following this partner"):
        service.follow(user.id, partner.id)

    assert users.users[user.id].following == (partner.id,)
    assert partners.partners[partner.id].followers_count == 1


def test_follow_that_loses_a_race_does_not_bump_the_counter(monkeypatch) -> None:
    service, users, partners = _service()
    user = users.add(make_user())
    partner = partners.add(make_partner())
    users.add_following(user.id, partner.id)
    # The read still sees the user before the concurrent follow landed.
    monkeypatch.setattr(users, "get_user", lambda _user_id: user)

    with pytest.raises(ConflictError, match="Already following this partner"):
        service.follow(user.id, partner.id)

    assert partners.partners[partner.id].followers_count == 0


def test_unfollow_that_loses_a_race_does_not_drop_the_counter(monkeypatch) -> None:
    service, users, partners = _service()
    partner = partners.add(make_partner(followers_count=5))
    user = users.add(make_user(following=(partner.id,)))
    users.remove_following(user.id, partner.id)
    monkeypatch.setattr(users, "get_user", lambda _user_id: user)

    with pytest.raises(ConflictError, match="Not following this partner"):
        service.unfollow(user.id, partner.id)

    assert partners.partners[partner.id].followers_count == 5


def test_unfollow_without_following_is_rejected() -> None:
    service, users, partners = _service()
    user = users.add(make_user())
    partner = partners.add(make_partner())

    with pytest.raises(ConflictError, match="Not following this partner"):
        service.unfollow(user.id, partner.id)


def test_follow_unknown_accounts() -> None:
    service, users, partners = _service()
    user = users.add(make_user())
    partner = partners.add(make_partner())

    with pytest.raises(NotFoundError, match="Food partner not found"):
        service.follow(user.id, make_partner().id)
    with pytest.raises(NotFoundError, match="User not found"):
        service.follow(make_user().id, partner.id)


def test_follow_notifies_partner() -> None:
    service, users, partners = _service()
    user = users.add(make_user(full_name="Grace"))
    partner = partners.add(make_partner())

    service.follow(user.id, partner.id)

    inbox = service.notifications.get_notifications(partner.id)
    assert inbox["unreadCount"] == 1
    notification = inbox["notifications"][0]
    assert notification["type"] == NEW_FOLLOWER
    assert notification["message"] == "Grace started following you"


def test_follow_survives_counter_failure(app_logs) -> None:
    service, users, partners = _service()
    user = users.add(make_user())
    partner = partners.add(make_partner(followers_count=7))
    partners.fail_counters = True

    followed = service.follow(user.id, partner.id)

    assert followed.followers_count == 7
    assert users.users[user.id].following == (partner.id,)
    assert "Failed to increment followers_count" in app_logs.text
    assert service.notifications.stats(partner.id)["total"] == 1


def test_reconcile_followers_count_repairs_drift() -> None:
    service, users, partners = _service()
    partner = partners.add(make_partner(followers_count=42))
    users.add(make_user(following=(partner.id,)))
    users.add(make_user(following=(partner.id,)))
    users.add(make_user(following=(partner.id,), is_active=False))

    count = service.reconcile_followers_count(partner.id)

    assert count == 2
    assert partners.partners[partner.id].followers_count == 2


def test_list_following_preserves_follow_order() -> None:
    service, users, partners = _service()
    first = partners.add(make_partner(name="First"))
    second = partners.add(make_partner(name="Second"))
    third = partners.add(make_partner(name="Third"))
    user = users.add(make_user(following=(second.id, first.id, third.id)))

    data = service.list_following(user.id, page=1, limit=2)

    assert [item["name"] for item in data["following"]] == ["Second", "First"]
    assert data["pagination"]["totalItems"] == 3
    assert data["pagination"]["hasNext"] is True


def test_list_followers_newest_accounts_first() -> None:
    service, users, partners = _service()
    partner = partners.add(make_partner())
    users.add(make_user(full_name="Old", following=(partner.id,)))
    users.add(
        make_user(
            full_name="New",
            following=(partner.id,),
            created_at=BASE_TIME + timedelta(days=1),
        )
    )
    users.add(make_user(full_name="Stranger"))

    data = service.list_followers(partner.id)

    assert [item["fullName"] for item in data["followers"]] == ["New", "Old"]
    assert data["pagination"]["totalItems"] == 2


def test_follow_status() -> None:
    service, users, partners = _service()
    partner = partners.add(make_partner())
    other = partners.add(make_partner())
    user = users.add(make_user(following=(partner.id,)))

    assert service.follow_status(user.id, partner.id) == {
        "isFollowing": True,
        "followingCount": 1,
    }
    assert service.follow_status(user.id, other.id)["isFollowing"] is False


def test_stats_average_rating_over_followed_partners() -> None:
    service, users, partners = _service()
    first = partners.add(make_partner(rating=4.0, total_videos=3))
    second = partners.add(make_partner(rating=4.5, total_videos=5))
    user = users.add(make_user(following=(first.id, second.id)))

    stats = service.stats(user.id)

    assert stats["following"] == {
        "count": 2,
        "totalVideos": 8,
        "averageRating": 4.2,
    }
    assert stats["preferences"]["cuisines"] == []


def test_stats_without_follows() -> None:
    service, users, _ = _service()
    user = users.add(make_user())

    assert service.stats(user.id)["following"]["averageRating"] == 0.0


def test_update_preferences_merges_provided_lists() -> None:
    service, users, _ = _service()
    user = users.add(
        make_user(
            preferences=UserPreferences(
                cuisines=("Thai",), favorite_ingredients=("basil",)
            )
        )
    )

    preferences = service.update_preferences(user.id, dietary_restrictions=["Vegan"])

    assert preferences.cuisines == ("Thai",)
    assert preferences.dietary_restrictions == ("Vegan",)
    assert preferences.favorite_ingredients == ("basil",)
    assert users.users[user.id].preferences == preferences
