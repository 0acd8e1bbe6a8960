from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import OuterRef, Subquery, Sum, Value
from django.db.models.functions import Coalesce

from apps.core.models import UserOwnedModel
from apps.transactions.models import Category, Transaction, TYPE_EXPENSE

PERIOD_MONTHLY = 'monthly'
PERIOD_CHOICES = [
    (PERIOD_MONTHLY, 'Monthly'),
]


class BudgetQuerySet(models.QuerySet):
    def with_relations(self):
        return self.select_related('category')

    def with_spent(self):
        """
        Annotate ``spent``: the owner's expense transactions in the budget's
        category with start_date <= date <= end_date
        """
        spent = (
            Transaction.objects
            .filter(
                user=OuterRef('user'),
                category=OuterRef('category'),
                type=TYPE_EXPENSE,
                date__gte=OuterRef('start_date'),
                date__lte=OuterRef('end_date'),
            )
            .values('category')
            .annotate(total=Sum('amount'))
            .values('total')
        )
        amount_field = models.DecimalField(max_digits=12, decimal_places=2)
        return self.annotate(
            spent=Coalesce(Subquery(spent, output_field=amount_field), Value(Decimal('0')), output_field=amount_field)
        )

    def total_amount(self):
        return self.aggregate(total=Sum('amount'))['total'] or Decimal('0')


class Budget(UserOwnedModel):
    """Spending limit for one expense category over a date range"""

    category = models.ForeignKey(Category, on_delete=models.CASCADE, related_name='budgets')
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    period = models.CharField(max_length=20, choices=PERIOD_CHOICES, default=PERIOD_MONTHLY)
    start_date = models.DateField()
    end_date = models.DateField()
    description = models.TextField(blank=True)

    objects = BudgetQuerySet.as_manager()

    class Meta:
        db_table = 'budgets'
        ordering = ['-start_date', '-created_at']
        constraints = [
            models.CheckConstraint(condition=models.Q(amount__gt=0), name='budget_amount_positive'),
        ]

    def __str__(self):
        return f"{self.category.name} {self.amount:,.2f} ({self.start_date} ~ {self.end_date})"

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({'end_date': 'End date cannot be before the start date.'})

    @property
    def remaining(self):
        return self.amount - getattr(self, 'spent', Decimal('0'))

    @property
    def spent_percent(self):
        if not self.amount:
            return 0
        return float(getattr(self, 'spent', Decimal('0')) / self.amount * 100)

    @property
    def is_over(self):
        return getattr(self, 'spent', Decimal('0')) > self.amount
