"""
Shared abstract models

- TimeStampedModel: created/updated timestamps
- UserOwnedModel: owned by one user + timestamps
"""

from django.db import models
from django.conf import settings


class TimeStampedModel(models.Model):
    """Track creation and modification time automatically"""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class UserOwnedModel(TimeStampedModel):
    """
    A row that belongs to exactly one user.

    Every list/detail query in the views filters on ``user=request.user``,
    so another user's rows resolve to 404.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='%(class)s_set',
        db_index=True
    )

    class Meta:
        abstract = True

    def is_owner(self, user):
        """Ownership check"""
        return self.user_id == getattr(user, 'pk', None)
