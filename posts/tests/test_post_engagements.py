import pytest
from django.contrib.auth import get_user_model
from django.db import IntegrityError
from rest_framework.test import APIClient

from common.exceptions import ForbiddenError, NotFoundError, ValidationError
from posts.engagements import EngagementEngine
from posts.models import Comment, Post, PostLike

User = get_user_model()


@pytest.mark.django_db
class TestPostLikes:
    def setup_method(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="liker")
        self.author = User.objects.create_user(username="author")
        self.post = Post.objects.create(author=self.author, content="leg day")
        self.base = f"/api/v1/posts/{self.post.id}"

    def test_toggle_like_and_unlike(self):
        self.client.force_authenticate(self.user)
        res = self.client.post(f"{self.base}/like/")
        assert res.status_code == 200
        assert res.json() == {"liked": True, "like_count": 1}

        res2 = self.client.post(f"{self.base}/like/")
        assert res2.json() == {"liked": False, "like_count": 0}
        assert PostLike.objects.filter(post=self.post).count() == 0

    def test_like_count_matches_likers(self):
        engine = EngagementEngine()
        users = [User.objects.create_user(username=f"u{i}") for i in range(4)]
        # u0: 1회, u1: 2회, u2: 3회, u3: 0회
        for i, u in enumerate(users):
            for _ in range(i + 1 if i < 3 else 0):
                result = engine.toggle_like(self.post.id, u)
                assert result.like_count == PostLike.objects.filter(post=self.post).count()

        likers = set(PostLike.objects.filter(post=self.post).values_list("user__username", flat=True))
        assert likers == {"u0", "u2"}

    def test_lost_insert_race_counts_as_liked(self, monkeypatch):
        def _raise(**kwargs):
            raise IntegrityError("uniq_post_like_user")

        monkeypatch.setattr(PostLike.objects, "create", _raise)
        result = EngagementEngine().toggle_like(self.post.id, self.user)
        assert result.liked is True

    def test_like_missing_post(self):
        self.client.force_authenticate(self.user)
        res = self.client.post("/api/v1/posts/33333333-3333-3333-3333-333333333333/like/")
        assert res.status_code == 404

    def test_private_post_only_author_can_like(self):
        Post.objects.filter(pk=self.post.pk).update(is_public=False)
        self.client.force_authenticate(self.user)
        res = self.client.post(f"{self.base}/like/")
        assert res.status_code == 403
        assert PostLike.objects.count() == 0

        self.client.force_authenticate(self.author)
        assert self.client.post(f"{self.base}/like/").json() == {"liked": True, "like_count": 1}

    def test_like_requires_auth(self):
        res = self.client.post(f"{self.base}/like/")
        assert res.status_code == 401


@pytest.mark.django_db
class TestComments:
    def setup_method(self):
        self.client = APIClient()
        self.author = User.objects.create_user(username="author")
        self.commenter = User.objects.create_user(username="commenter")
        self.outsider = User.objects.create_user(username="outsider")
        self.post = Post.objects.create(author=self.author, content="hello")
        self.base = f"/api/v1/posts/{self.post.id}/comments/"

    def _comment(self, user, content="nice!"):
        self.client.force_authenticate(user)
        return self.client.post(self.base, {"content": content}, format="json")

    def test_add_comment(self):
        res = self._comment(self.commenter, "  great set  ")
        assert res.status_code == 201
        body = res.json()
        assert body["comment"]["content"] == "great set"
        assert body["comment"]["author"]["username"] == "commenter"
        assert body["comment_count"] == 1

    @pytest.mark.parametrize("content", ["", "   ", "x" * 501])
    def test_invalid_comment_rejected(self, content):
        res = self._comment(self.commenter, content)
        assert res.status_code == 400
        assert Comment.objects.count() == 0

    def test_comment_on_missing_post(self):
        self.client.force_authenticate(self.commenter)
        res = self.client.post("/api/v1/posts/44444444-4444-4444-4444-444444444444/comments/", {"content": "hi"}, format="json")
        assert res.status_code == 404

    def test_private_post_comment_forbidden_for_others(self):
        Post.objects.filter(pk=self.post.pk).update(is_public=False)
        assert self._comment(self.commenter).status_code == 403
        assert self._comment(self.author).status_code == 201

    def test_delete_by_comment_author(self):
        cid = self._comment(self.commenter).json()["comment"]["id"]
        self.client.force_authenticate(self.commenter)
        assert self.client.delete(f"{self.base}{cid}/").status_code == 204
        assert Comment.objects.count() == 0

    def test_delete_by_post_author(self):
        cid = self._comment(self.commenter).json()["comment"]["id"]
        self.client.force_authenticate(self.author)
        assert self.client.delete(f"{self.base}{cid}/").status_code == 204

    def test_delete_by_unrelated_user_forbidden(self):
        cid = self._comment(self.commenter).json()["comment"]["id"]
        self.client.force_authenticate(self.outsider)
        res = self.client.delete(f"{self.base}{cid}/")
        assert res.status_code == 403
        assert Comment.objects.filter(pk=cid).exists()

    def test_delete_comment_of_other_post_is_not_found(self):
        other_post = Post.objects.create(author=self.author, content="other")
        cid = self._comment(self.commenter).json()["comment"]["id"]
        self.client.force_authenticate(self.commenter)
        res = self.client.delete(f"/api/v1/posts/{other_post.id}/comments/{cid}/")
        assert res.status_code == 404
        assert Comment.objects.filter(pk=cid).exists()


@pytest.mark.django_db
class TestEngagementEngine:
    def setup_method(self):
        self.engine = EngagementEngine()
        self.author = User.objects.create_user(username="author")
        self.x = User.objects.create_user(username="xuser")
        self.post = Post.objects.create(author=self.author, content="leg day")

    def test_double_toggle_restores_state(self):
        first = self.engine.toggle_like(self.post.id, self.x)
        second = self.engine.toggle_like(self.post.id, self.x)
        assert (first.liked, first.like_count) == (True, 1)
        assert (second.liked, second.like_count) == (False, 0)

    def test_add_and_delete_comment_counts(self):
        r1 = self.engine.add_comment(self.post.id, self.x, "one")
        r2 = self.engine.add_comment(self.post.id, self.author, "two")
        assert (r1.comment_count, r2.comment_count) == (1, 2)
        assert self.engine.delete_comment(self.post.id, r1.comment.id, self.x) == 1

    def test_errors(self):
        with pytest.raises(ValidationError):
            self.engine.add_comment(self.post.id, self.x, "")
        with pytest.raises(NotFoundError):
            self.engine.toggle_like("55555555-5555-5555-5555-555555555555", self.x)
        with pytest.raises(NotFoundError):
            self.engine.delete_comment(self.post.id, "66666666-6666-6666-6666-666666666666", self.author)

        c = self.engine.add_comment(self.post.id, self.author, "mine").comment
        outsider = User.objects.create_user(username="outsider")
        with pytest.raises(ForbiddenError):
            self.engine.delete_comment(self.post.id, c.id, outsider)
        assert Comment.objects.filter(pk=c.id).exists()
