"""
Authentication models.
Account is the custom User (the authenticable identity); Profile is the
application-level profile document holding name and role.
"""

import uuid
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager


class AccountManager(BaseUserManager):
    def create_user(self, email, password=None, **extra):
        if not email:
            raise ValueError("Email is required.")
        user = self.model(email=self.normalize_email(email), **extra)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password, **extra):
        extra.setdefault("is_staff", True)
        extra.setdefault("is_superuser", True)
        return self.create_user(email, password, **extra)


class Account(AbstractBaseUser, PermissionsMixin):
    """Authenticable identity — admins, delivery agents and customers alike."""

    id            = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email         = models.EmailField(unique=True)
    display_name  = models.CharField(max_length=120, blank=True)
    is_active     = models.BooleanField(default=True)
    is_staff      = models.BooleanField(default=False)
    created_at    = models.DateTimeField(auto_now_add=True)

    USERNAME_FIELD  = "email"
    REQUIRED_FIELDS = []

    objects = AccountManager()

    class Meta:
        verbose_name = "Account"

    def __str__(self):
        return self.email


class Profile(models.Model):
    """Profile document keyed by account. Blank fields resolve to defaults."""

    class Role(models.TextChoices):
        ADMIN    = "admin",    "Admin"
        AGENT    = "agent",    "Delivery Agent"
        CUSTOMER = "customer", "Customer"

    account    = models.OneToOneField(Account, on_delete=models.CASCADE, related_name="profile")
    name       = models.CharField(max_length=120, blank=True)
    role       = models.CharField(max_length=10, choices=Role.choices, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [models.Index(fields=["role"], name="auth_profile_role_idx")]

    def __str__(self):
        return f"{self.name or self.account.email} ({self.role or 'customer'})"
