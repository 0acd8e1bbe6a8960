from datetime import timedelta

import pytest
from django.contrib.auth.models import User
from django.utils import timezone

from apps.accounts.models import EmailOTP, UserSettings


@pytest.mark.django_db
class TestUserSettings:
    def test_created_with_user(self):
        """post_save signal creates the settings row"""
        user = User.objects.create_user(username='new@example.com', email='new@example.com', password='x')

        user_settings = UserSettings.objects.get(user=user)
        assert user_settings.currency == 'USD'
        assert user_settings.theme == 'light'
        assert user_settings.gross_income is None
        assert user_settings.red_line_amount is None

    def test_for_user_is_idempotent(self, test_user):
        first = UserSettings.for_user(test_user)
        second = UserSettings.for_user(test_user)
        assert first.pk == second.pk
        assert UserSettings.objects.filter(user=test_user).count() == 1

    def test_for_user_recreates_missing_row(self, test_user):
        UserSettings.objects.filter(user=test_user).delete()
        assert UserSettings.for_user(test_user).user == test_user


@pytest.mark.django_db
class TestEmailOTP:
    def test_generated_code_is_six_digits(self):
        for _ in range(20):
            code = EmailOTP.generate_code()
            assert len(code) == 6 and code.isdigit()

    def test_issue_sets_expiry(self, settings, test_user):
        settings.OTP_TTL_MINUTES = 10
        otp = EmailOTP.issue(test_user, EmailOTP.PURPOSE_SIGNUP)

        remaining = otp.expires_at - timezone.now()
        assert timedelta(minutes=9) < remaining <= timedelta(minutes=10)
        assert otp.is_usable

    def test_issue_invalidates_older_codes(self, test_user):
        old = EmailOTP.issue(test_user, EmailOTP.PURPOSE_SIGNUP)
        new = EmailOTP.issue(test_user, EmailOTP.PURPOSE_SIGNUP)

        old.refresh_from_db()
        assert old.used_at is not None
        assert list(EmailOTP.objects.usable()) == [new]

    def test_other_purpose_untouched(self, test_user):
        recovery = EmailOTP.issue(test_user, EmailOTP.PURPOSE_RECOVERY)
        EmailOTP.issue(test_user, EmailOTP.PURPOSE_SIGNUP)

        recovery.refresh_from_db()
        assert recovery.is_usable

    def test_expired_code_not_usable(self, test_user):
        otp = EmailOTP.issue(test_user, EmailOTP.PURPOSE_SIGNUP)
        EmailOTP.objects.filter(pk=otp.pk).update(expires_at=timezone.now() - timedelta(seconds=1))

        assert not EmailOTP.objects.usable().exists()

    def test_code_burned_after_max_failures(self, settings, test_user):
        settings.OTP_MAX_ATTEMPTS = 3
        otp = EmailOTP.issue(test_user, EmailOTP.PURPOSE_RECOVERY)

        otp.record_failure()
        otp.record_failure()
        otp.refresh_from_db()
        assert otp.attempts == 2
        assert otp.is_usable

        otp.record_failure()
        otp.refresh_from_db()
        assert otp.used_at is not None
        assert not otp.is_usable
