"""
User models for Journal Desk.
Handles authentication, profile fields and the single role tag each user holds.
"""
import uuid
from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models
from django.core.validators import EmailValidator, RegexValidator

from apps.submissions.lifecycle import ROLE_CHOICES, AUTHOR, ADMIN


class CustomUserManager(UserManager):
    """Custom user manager that uses email instead of username."""

    def create_user(self, email, password=None, **extra_fields):
        """Create and return a regular user with an email and password."""
        if not email:
            raise ValueError('The Email field must be set')

        email = self.normalize_email(email)
        extra_fields.setdefault('username', email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """Create and return a superuser with an email and password."""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


class CustomUser(AbstractUser):
    """
    Custom User model extending Django's AbstractUser.
    Uses UUID as primary key and email as username.

    Accounts are never hard-deleted: deactivation moves ``account_status``
    to INACTIVE (or SUSPENDED) and Django's ``is_active`` follows it, so
    token authentication stops accepting the account.
    """
    ACCOUNT_STATUS_CHOICES = [
        ('ACTIVE', 'Active'),
        ('INACTIVE', 'Inactive'),
        ('SUSPENDED', 'Suspended'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(
        unique=True,
        validators=[EmailValidator()],
        help_text="Unique email address for authentication"
    )
    username = models.CharField(
        max_length=150,
        unique=True,
        null=True,
        blank=True,
        help_text="Optional username, defaults to email"
    )

    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True)

    # Academic profile
    title = models.CharField(max_length=50, blank=True, help_text="e.g. Dr., Prof.")
    affiliation = models.CharField(max_length=255, blank=True)
    country = models.CharField(max_length=100, blank=True)
    orcid = models.CharField(
        max_length=19,
        blank=True,
        validators=[RegexValidator(r'^\d{4}-\d{4}-\d{4}-\d{3}[\dX]$', 'Invalid ORCID iD format.')],
        help_text="ORCID identifier (e.g., 0000-0000-0000-0000)"
    )
    bio = models.TextField(blank=True)

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=AUTHOR)
    account_status = models.CharField(
        max_length=20,
        choices=ACCOUNT_STATUS_CHOICES,
        default='ACTIVE'
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        app_label = 'users'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['email'], name='users_email_idx'),
            models.Index(fields=['role', 'account_status'], name='users_role_status_idx'),
            models.Index(fields=['created_at'], name='users_created_idx'),
        ]

    def save(self, *args, **kwargs):
        if not self.username:
            self.username = self.email
        self.is_active = self.account_status == 'ACTIVE'
        super().save(*args, **kwargs)

    def __str__(self):
        return self.email

    def get_full_name(self):
        name = f"{self.title} {self.first_name} {self.last_name}".strip()
        return name or self.email

    def deactivate(self, account_status='INACTIVE'):
        """Soft-delete the account."""
        self.account_status = account_status
        self.save(update_fields=['account_status', 'is_active', 'updated_at'])
