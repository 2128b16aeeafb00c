from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient

from posts.models import Comment, Post, PostLike

User = get_user_model()


@pytest.mark.django_db
class TestPostDetailAndEdit:
    def setup_method(self):
        self.client = APIClient()
        self.author = User.objects.create_user(username="author")
        self.other = User.objects.create_user(username="other")
        self.post = Post.objects.create(author=self.author, content="hello")
        self.url = f"/api/v1/posts/{self.post.id}/"

    def test_retrieve_public_anonymous(self):
        res = self.client.get(self.url)
        assert res.status_code == 200
        assert res.json()["id"] == str(self.post.id)

    def test_retrieve_private_forbidden_for_others(self):
        Post.objects.filter(pk=self.post.pk).update(is_public=False)
        self.client.force_authenticate(self.other)
        res = self.client.get(self.url)
        assert res.status_code == 403
        assert res.json()["code"] == "forbidden"

        self.client.force_authenticate(self.author)
        assert self.client.get(self.url).status_code == 200

    def test_retrieve_missing(self):
        assert self.client.get("/api/v1/posts/22222222-2222-2222-2222-222222222222/").status_code == 404
        assert self.client.get("/api/v1/posts/not-a-uuid/").status_code == 404

    def test_counts_follow_rows(self):
        PostLike.objects.create(post=self.post, user=self.other)
        Comment.objects.create(post=self.post, author=self.other, content="nice")
        Comment.objects.create(post=self.post, author=self.author, content="thanks")

        body = self.client.get(self.url).json()
        assert body["like_count"] == 1
        assert body["comment_count"] == 2
        assert [c["content"] for c in body["comments"]] == ["nice", "thanks"]

    def test_patch_by_author(self):
        self.client.force_authenticate(self.author)
        res = self.client.patch(self.url, {"content": "edited", "is_public": False}, format="json")
        assert res.status_code == 200
        self.post.refresh_from_db()
        assert self.post.content == "edited"
        assert self.post.is_public is False

    def test_patch_by_other_forbidden(self):
        self.client.force_authenticate(self.other)
        res = self.client.patch(self.url, {"content": "hijack"}, format="json")
        assert res.status_code == 403
        self.post.refresh_from_db()
        assert self.post.content == "hello"

    def test_patch_non_editable_field_rejected(self):
        self.client.force_authenticate(self.author)
        res = self.client.patch(self.url, {"content": "x", "author": str(self.other.id)}, format="json")
        assert res.status_code == 400
        self.post.refresh_from_db()
        assert self.post.content == "hello"
        assert self.post.author_id == self.author.id

    @pytest.mark.parametrize("images", [5, "https://cdn.example.com/a.jpg", {"url": "x"}, True])
    def test_patch_images_must_be_list(self, images):
        self.client.force_authenticate(self.author)
        res = self.client.patch(self.url, {"images": images}, format="json")
        assert res.status_code == 400
        assert res.json()["code"] == "validation_error"
        self.post.refresh_from_db()
        assert self.post.images == []

    def test_delete_by_other_forbidden_and_by_author_cascades(self):
        Comment.objects.create(post=self.post, author=self.other, content="c")
        PostLike.objects.create(post=self.post, user=self.other)

        self.client.force_authenticate(self.other)
        assert self.client.delete(self.url).status_code == 403
        assert Post.objects.filter(pk=self.post.pk).exists()

        self.client.force_authenticate(self.author)
        assert self.client.delete(self.url).status_code == 204
        assert not Post.objects.filter(pk=self.post.pk).exists()
        assert Comment.objects.count() == 0
        assert PostLike.objects.count() == 0


@pytest.mark.django_db
class TestUserPosts:
    def setup_method(self):
        self.client = APIClient()
        self.author = User.objects.create_user(username="author")
        self.other = User.objects.create_user(username="other")
        base = timezone.now() - timedelta(hours=1)
        self.public = Post.objects.create(author=self.author, content="public")
        self.private = Post.objects.create(author=self.author, content="private", is_public=False)
        Post.objects.filter(pk=self.public.pk).update(created_at=base)
        Post.objects.filter(pk=self.private.pk).update(created_at=base + timedelta(minutes=1))

    def test_owner_sees_all_newest_first(self):
        self.client.force_authenticate(self.author)
        body = self.client.get(f"/api/v1/users/{self.author.id}/posts").json()
        assert [p["content"] for p in body["results"]] == ["private", "public"]
        assert body["total"] == 2

    def test_others_see_public_only(self):
        self.client.force_authenticate(self.other)
        body = self.client.get("/api/v1/users/author/posts").json()
        assert [p["content"] for p in body["results"]] == ["public"]

        anon = APIClient().get(f"/api/v1/users/{self.author.id}/posts").json()
        assert [p["content"] for p in anon["results"]] == ["public"]

    def test_unknown_user_404(self):
        assert self.client.get("/api/v1/users/ghost_user/posts").status_code == 404

    def test_deleted_post_removed_from_user_posts(self):
        self.client.force_authenticate(self.author)
        assert self.client.delete(f"/api/v1/posts/{self.public.id}/").status_code == 204
        body = self.client.get(f"/api/v1/users/{self.author.id}/posts").json()
        assert [p["content"] for p in body["results"]] == ["private"]
