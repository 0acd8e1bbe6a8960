"""
User -> UserSettings signal

Every new user gets a UserSettings row with the default currency (USD)
and theme, so views can read settings without existence checks.
"""

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import UserSettings


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_user_settings(sender, instance, created, **kwargs):
    """
    Create UserSettings when a User is created

    Example:
        user = User.objects.create_user(username='a@b.com')
        -> UserSettings.objects.create(user=user) runs automatically
    """
    if created:
        UserSettings.objects.get_or_create(user=instance)
