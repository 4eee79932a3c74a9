from django.db import models
from django.db.models.functions import Lower
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager
from django.utils import timezone


class CustomUserManager(BaseUserManager):

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Email is required")
        # the whole address is compared case-insensitively, so store it lowercased
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        return self.create_user(email, password, **extra_fields)

    def get_by_natural_key(self, email):
        return self.get(email__iexact=email)


class User(AbstractBaseUser, PermissionsMixin):
    MEMBERSHIP_FREE = 'free'
    MEMBERSHIP_COMMUNITY = 'community'
    MEMBERSHIP_CONSULT = 'consult'
    MEMBERSHIP_CHOICES = [
        (MEMBERSHIP_FREE, 'Free'),
        (MEMBERSHIP_COMMUNITY, 'Fusion Community'),
        (MEMBERSHIP_CONSULT, '1-on-1 Consult'),
    ]

    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150, blank=True)
    avatar = models.URLField(blank=True)

    membership_type = models.CharField(max_length=20, choices=MEMBERSHIP_CHOICES, default=MEMBERSHIP_FREE)
    has_community_access = models.BooleanField(default=False)
    has_consult_access = models.BooleanField(default=False)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    date_joined = models.DateTimeField(default=timezone.now)

    objects = CustomUserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        constraints = [
            models.UniqueConstraint(Lower('email'), name='users_user_email_ci_unique'),
        ]

    def __str__(self):
        return self.email

    @property
    def display_name(self):
        # local part of the email when no name was given at checkout
        return self.name or self.email.split('@')[0]
