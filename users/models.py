import uuid

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.validators import MinLengthValidator, RegexValidator
from django.db import models
from django.db.models.functions import Lower

USERNAME_MIN = 3
USERNAME_MAX = 30

username_validator = RegexValidator(r"^[A-Za-z0-9_]+$", "Username can only contain English letters, numbers and underscores.")


class UserManager(BaseUserManager):
    def create_user(self, username, password=None, **extra_fields):
        if not username:
            raise ValueError("username is required")
        user = self.model(username=username.strip(), **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        return self.create_user(username, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    # username 은 생성 후 변경 불가(어떤 API도 수정하지 않는다)
    username = models.CharField(max_length=USERNAME_MAX, unique=True, validators=[MinLengthValidator(USERNAME_MIN), username_validator])
    display_name = models.CharField(max_length=100, blank=True, default="")
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = UserManager()

    USERNAME_FIELD = "username"
    REQUIRED_FIELDS = []

    class Meta:
        db_table = "users"
        constraints = [
            # "Bob" 과 "bob" 은 같은 이름으로 본다
            models.UniqueConstraint(Lower("username"), name="uq_users_username_ci"),
        ]

    def __str__(self):
        return self.username
