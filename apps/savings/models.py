from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F
from django.utils import timezone

from apps.core.models import UserOwnedModel

DEFAULT_GOAL_NAME = 'New goal'

# largest value decimal(12, 2) holds
MAX_BALANCE = Decimal('9999999999.99')


def progress_color(percent):
    """Progress bar color bucket"""
    if percent >= 100:
        return 'green-strong'
    if percent >= 66:
        return 'green'
    if percent >= 33:
        return 'amber'
    return 'red'


class SavingsGoalQuerySet(models.QuerySet):
    def search(self, term):
        term = (term or '').strip()
        return self.filter(name__icontains=term) if term else self


class SavingsGoal(UserOwnedModel):
    """A target amount the user is saving towards"""

    name = models.CharField(max_length=100, default=DEFAULT_GOAL_NAME)
    target_amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    current_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    deadline = models.DateField(null=True, blank=True)

    objects = SavingsGoalQuerySet.as_manager()

    class Meta:
        db_table = 'savings_goals'
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(condition=models.Q(target_amount__gt=0), name='savings_target_positive'),
            models.CheckConstraint(condition=models.Q(current_amount__gte=0), name='savings_current_not_negative'),
        ]

    def __str__(self):
        return f"{self.name} ({self.current_amount:,.2f} / {self.target_amount:,.2f})"

    @property
    def progress_percent(self):
        """0..100, 0 when there is no positive target"""
        if not self.target_amount or self.target_amount <= 0:
            return 0
        return min(100, float(self.current_amount / self.target_amount * 100))

    @property
    def progress_color(self):
        return progress_color(self.progress_percent)

    @property
    def remaining(self):
        return max(Decimal('0'), self.target_amount - self.current_amount)

    def contribute(self, amount):
        """
        Add ``amount`` to the saved balance in one UPDATE

        Returns False (and changes nothing) when the new balance would not fit.
        """
        updated = type(self).objects.filter(
            pk=self.pk,
            current_amount__lte=MAX_BALANCE - amount,
        ).update(
            current_amount=F('current_amount') + amount,
            updated_at=timezone.now(),
        )
        self.refresh_from_db(fields=['current_amount', 'updated_at'])
        return bool(updated)
