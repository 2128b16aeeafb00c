from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient

from posts.models import Post, PostLike
from relations.models import Follow

pytestmark = pytest.mark.django_db
User = get_user_model()


class BaseFeedAPITest:
    @pytest.fixture(autouse=True)
    def _env(self, settings, monkeypatch):
        # 캐시를 끄고 ORM 경로만 검증
        settings.FEED_CACHE_ENABLED = False
        import feed.services as services

        monkeypatch.setattr(services, "_cache", None)

    @pytest.fixture
    def users(self):
        author = User.objects.create_user(username="author")
        viewer = User.objects.create_user(username="viewer")
        return author, viewer

    @pytest.fixture
    def api(self, users):
        _, viewer = users
        client = APIClient()
        client.force_authenticate(viewer)
        return client

    def _post(self, author, content, *, minutes=0, is_public=True):
        p = Post.objects.create(author=author, content=content, is_public=is_public)
        Post.objects.filter(pk=p.pk).update(created_at=timezone.now() - timedelta(days=1) + timedelta(minutes=minutes))
        return p


class TestHomeFeedAPI(BaseFeedAPITest):
    def test_home_contains_own_and_followees_public_posts_only(self, users, api):
        author, viewer = users
        stranger = User.objects.create_user(username="stranger")
        Follow.objects.create(follower=viewer, following=author)

        own_private = self._post(viewer, "my private", minutes=1, is_public=False)
        own_public = self._post(viewer, "my public", minutes=2)
        followee_public = self._post(author, "followee public", minutes=3)
        self._post(author, "followee private", minutes=4, is_public=False)
        self._post(stranger, "stranger public", minutes=5)

        r = api.get("/api/v1/feed/home/")
        assert r.status_code == 200
        body = r.json()
        assert [item["id"] for item in body["results"]] == [str(followee_public.id), str(own_public.id), str(own_private.id)]
        assert body["total"] == 3
        assert body["has_more"] is False

    def test_home_pagination_newest_first(self, users, api):
        _, viewer = users
        posts = [self._post(viewer, f"t{i}", minutes=i) for i in range(1, 6)]

        r1 = api.get("/api/v1/feed/home/?page=1&limit=2")
        b1 = r1.json()
        assert [x["content"] for x in b1["results"]] == ["t5", "t4"]
        assert b1["has_more"] is True

        r3 = api.get("/api/v1/feed/home/?page=3&limit=2")
        b3 = r3.json()
        assert [x["id"] for x in b3["results"]] == [str(posts[0].id)]
        assert b3["has_more"] is False

    def test_home_page_past_end_is_empty(self, users, api):
        _, viewer = users
        self._post(viewer, "only one")
        r = api.get("/api/v1/feed/home/?page=9&limit=5")
        assert r.status_code == 200
        assert r.json()["results"] == []
        assert r.json()["has_more"] is False

    def test_home_requires_authentication(self):
        r = APIClient().get("/api/v1/feed/home/")
        assert r.status_code == 401

    @pytest.mark.parametrize("page", ["0", "-1", "abc"])
    def test_invalid_page_is_validation_error(self, api, page):
        r = api.get(f"/api/v1/feed/home/?page={page}")
        assert r.status_code == 400
        assert r.json()["code"] == "validation_error"

    def test_limit_is_clamped(self, users, api):
        _, viewer = users
        self._post(viewer, "x")
        assert api.get("/api/v1/feed/home/?limit=1000").json()["limit"] == 100
        assert api.get("/api/v1/feed/home/?limit=0").json()["limit"] == 1


class TestDiscoverFeedAPI(BaseFeedAPITest):
    def test_discover_anonymous_sees_public_posts(self, users):
        author, viewer = users
        public = self._post(author, "public", minutes=1)
        self._post(viewer, "private", minutes=2, is_public=False)

        r = APIClient().get("/api/v1/feed/discover/")
        assert r.status_code == 200
        body = r.json()
        assert [x["id"] for x in body["results"]] == [str(public.id)]
        assert body["results"][0]["liked_by_viewer"] is False

    def test_discover_annotates_liked_by_viewer_and_counts(self, users, api):
        author, viewer = users
        p = self._post(author, "leg day")
        PostLike.objects.create(post=p, user=viewer)

        item = api.get("/api/v1/feed/discover/").json()["results"][0]
        assert item["liked_by_viewer"] is True
        assert item["like_count"] == 1
        assert item["comment_count"] == 0
        assert item["author"]["username"] == "author"

    def test_deleted_post_disappears_from_feeds(self, users, api):
        author, viewer = users
        Follow.objects.create(follower=viewer, following=author)
        p = self._post(author, "leg day")
        assert api.get("/api/v1/feed/home/").json()["total"] == 1

        author_client = APIClient()
        author_client.force_authenticate(author)
        assert author_client.delete(f"/api/v1/posts/{p.id}/").status_code == 204

        assert api.get("/api/v1/feed/home/").json()["results"] == []
        assert api.get("/api/v1/feed/discover/").json()["results"] == []


class TestFeedTieBreak(BaseFeedAPITest):
    @pytest.fixture
    def same_time_posts(self, users):
        author, viewer = users
        Follow.objects.create(follower=viewer, following=author)
        posts = [Post.objects.create(author=author, content=f"tie {i}") for i in range(3)]
        stamp = timezone.now() - timedelta(hours=1)
        Post.objects.filter(pk__in=[p.pk for p in posts]).update(created_at=stamp)
        # 같은 시각이면 id 역순
        return [str(p.id) for p in sorted(posts, key=lambda p: p.id, reverse=True)]

    @pytest.mark.parametrize("path", ["/api/v1/feed/home/", "/api/v1/feed/discover/"])
    def test_equal_created_at_ordered_by_id_desc(self, api, same_time_posts, path):
        body = api.get(path).json()
        assert [item["id"] for item in body["results"]] == same_time_posts

    @pytest.mark.parametrize("path", ["/api/v1/feed/home/", "/api/v1/feed/discover/"])
    def test_pages_split_ties_without_overlap(self, api, same_time_posts, path):
        first = api.get(path, {"page": 1, "limit": 2}).json()
        second = api.get(path, {"page": 2, "limit": 2}).json()
        assert [i["id"] for i in first["results"]] + [i["id"] for i in second["results"]] == same_time_posts
        assert first["has_more"] is True and second["has_more"] is False
