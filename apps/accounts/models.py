"""
Per-user settings and email one-time codes

Django's built-in User holds identity (username = email, first_name =
display name). Financial defaults live in UserSettings, created by signal
when the user is created.
"""
import secrets
from datetime import timedelta

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from decimal import Decimal

from apps.core.models import TimeStampedModel


class UserSettings(TimeStampedModel):
    """Financial defaults and theme"""

    CURRENCY_CHOICES = [
        ('USD', 'USD'),
        ('EUR', 'EUR'),
        ('GBP', 'GBP'),
        ('GHS', 'GHS'),
        ('NGN', 'NGN'),
    ]

    THEME_CHOICES = [
        ('light', 'Light'),
        ('dark', 'Dark'),
    ]

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='finance_settings')
    gross_income = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(Decimal('0'))],
        help_text='Monthly income baseline before expenses'
    )
    red_line_amount = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(Decimal('0'))],
        help_text='Warn when the remaining balance reaches this amount'
    )
    currency = models.CharField(max_length=3, choices=CURRENCY_CHOICES, default='USD')
    theme = models.CharField(max_length=10, choices=THEME_CHOICES, default='light')

    class Meta:
        db_table = 'user_settings'
        verbose_name_plural = 'user settings'

    def __str__(self):
        return f"{self.user} settings"

    @classmethod
    def for_user(cls, user):
        """Settings row for ``user``, created on first access"""
        obj, _ = cls.objects.get_or_create(user=user)
        return obj

    def reset(self):
        """Back to the defaults a new account starts with"""
        for name in ('gross_income', 'red_line_amount', 'currency', 'theme'):
            setattr(self, name, self._meta.get_field(name).get_default())
        self.save()


class EmailOTPQuerySet(models.QuerySet):
    def usable(self):
        return self.filter(used_at__isnull=True, expires_at__gt=timezone.now())

    def for_purpose(self, purpose):
        return self.filter(purpose=purpose)


class EmailOTP(TimeStampedModel):
    """6 digit code mailed for sign-up verification or password recovery"""

    PURPOSE_SIGNUP = 'signup'
    PURPOSE_RECOVERY = 'recovery'
    PURPOSE_CHOICES = [
        (PURPOSE_SIGNUP, 'Sign-up verification'),
        (PURPOSE_RECOVERY, 'Password recovery'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='email_otps')
    purpose = models.CharField(max_length=20, choices=PURPOSE_CHOICES, db_index=True)
    code = models.CharField(max_length=6)
    expires_at = models.DateTimeField()
    used_at = models.DateTimeField(null=True, blank=True)
    attempts = models.PositiveSmallIntegerField(default=0)

    objects = EmailOTPQuerySet.as_manager()

    class Meta:
        db_table = 'email_otps'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'purpose', 'used_at'], name='email_otps_user_id_2d9c41_idx'),
        ]

    def __str__(self):
        return f"{self.user} {self.get_purpose_display()}"

    @staticmethod
    def generate_code():
        return f"{secrets.randbelow(10 ** 6):06d}"

    @classmethod
    def issue(cls, user, purpose):
        """Invalidate older unused codes and create a fresh one"""
        now = timezone.now()
        cls.objects.filter(user=user, purpose=purpose, used_at__isnull=True).update(used_at=now)
        return cls.objects.create(
            user=user,
            purpose=purpose,
            code=cls.generate_code(),
            expires_at=now + timedelta(minutes=settings.OTP_TTL_MINUTES),
        )

    @property
    def is_usable(self):
        return self.used_at is None and self.expires_at > timezone.now()

    def mark_used(self):
        self.used_at = timezone.now()
        self.save(update_fields=['used_at', 'updated_at'])

    def record_failure(self):
        """Count a wrong guess; the code is burned after OTP_MAX_ATTEMPTS"""
        self.attempts += 1
        update_fields = ['attempts', 'updated_at']
        if self.attempts >= settings.OTP_MAX_ATTEMPTS:
            self.used_at = timezone.now()
            update_fields.append('used_at')
        self.save(update_fields=update_fields)
