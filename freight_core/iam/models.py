# freight_core/iam/models.py
from __future__ import annotations

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils import timezone

from freight_core.common.models import SoftDeleteModel, TimeStampedModel
from freight_core.common.roles import normalize_role


class Role(TimeStampedModel):
    """
    Named role. `slug` is the canonical comparison key ("Back Office" -> "back_office").
    Hard-deleted, but only while no user (including soft-deleted ones) holds it.
    """
    name = models.CharField(max_length=255, unique=True)
    slug = models.SlugField(max_length=255, unique=True)

    class Meta:
        db_table = "iam_role"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):
        self.slug = normalize_role(self.name)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "name" in update_fields and "slug" not in update_fields:
            kwargs["update_fields"] = [*update_fields, "slug"]
        return super().save(*args, **kwargs)


class UserStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"


class UserManager(BaseUserManager):
    """
    Email is the login identifier. Soft-deleted users are invisible here,
    which also keeps them out of authentication.
    """
    use_in_migrations = True

    def get_queryset(self):
        return super().get_queryset().filter(deleted_at__isnull=True)

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("Email is required.")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        if "role" not in extra_fields:
            extra_fields["role"] = Role.objects.filter(slug="admin").first()
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    username = None
    first_name = None
    last_name = None

    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)

    role = models.ForeignKey(Role, on_delete=models.PROTECT, related_name="users", null=True, blank=True)
    status = models.CharField(max_length=16, choices=UserStatus.choices, default=UserStatus.ACTIVE, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = UserManager()
    all_objects = models.Manager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    class Meta:
        db_table = "iam_user"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"

    def save(self, *args, **kwargs):
        # Inactive or removed accounts cannot authenticate
        self.is_active = self.status == UserStatus.ACTIVE and self.deleted_at is None
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and {"status", "deleted_at"} & set(update_fields):
            kwargs["update_fields"] = list({*update_fields, "is_active"})
        return super().save(*args, **kwargs)

    @property
    def role_name(self) -> str:
        return self.role.name if self.role_id else ""

    def soft_delete(self) -> None:
        now = timezone.now()
        self.deleted_at = now
        self.save(update_fields=["deleted_at", "updated_at"])
        CompanyDetail.objects.filter(user=self).update(deleted_at=now, updated_at=now)


class CompanyDetail(SoftDeleteModel):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="company")

    company_name = models.CharField(max_length=255, blank=True)
    company_email = models.EmailField(blank=True)
    company_phone = models.CharField(max_length=32, blank=True)
    company_address = models.TextField(blank=True)
    city = models.CharField(max_length=128, blank=True)
    state = models.CharField(max_length=128, blank=True)
    country = models.CharField(max_length=128, blank=True)
    zip_code = models.CharField(max_length=32, blank=True)
    website = models.URLField(blank=True)

    class Meta:
        db_table = "iam_company_detail"

    def __str__(self) -> str:
        return self.company_name or f"Company of user #{self.user_id}"
