from django.db import models
from django.conf import settings
from django.core.validators import FileExtensionValidator, MinValueValidator
from django.core.exceptions import ValidationError
from django.db.models.signals import post_delete, pre_save
from django.dispatch import receiver
from django.utils import timezone
from decimal import Decimal
import os
import logging

from apps.core.models import TimeStampedModel

logger = logging.getLogger(__name__)

# constants
RECEIPT_ALLOWED_EXTENSIONS = ['png', 'jpg', 'jpeg', 'pdf']
RECEIPT_EXTENSION_MESSAGE = 'Only PNG, JPG, and PDF receipts are allowed.'

TYPE_INCOME = 'income'
TYPE_EXPENSE = 'expense'
TYPE_CHOICES = [
    (TYPE_INCOME, 'Income'),
    (TYPE_EXPENSE, 'Expense'),
]


class Category(TimeStampedModel):
    """Income/expense category (defaults are seeded per user)"""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='categories')
    name = models.CharField(max_length=50)
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, db_index=True)
    budget_limit = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(Decimal('0'))]
    )
    color = models.CharField(max_length=9, default='#64748b')

    class Meta:
        db_table = 'categories'
        verbose_name_plural = 'categories'
        ordering = ['type', 'name']
        indexes = [
            models.Index(fields=['user', 'type'], name='categories_user_id_4f5b1d_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'type', 'name'],
                name='unique_category_name_per_user_type'
            ),
        ]

    def __str__(self):
        return f"[{self.get_type_display()}] {self.name}"

    @property
    def normalized_name(self):
        return self.name.lower().strip()


class TransactionQuerySet(models.QuerySet):
    """Transaction helper filters"""
    def income(self): return self.filter(type=TYPE_INCOME)
    def expense(self): return self.filter(type=TYPE_EXPENSE)
    def by_month(self, year, month): return self.filter(date__year=year, date__month=month)
    def by_date_range(self, start_date, end_date): return self.filter(date__gte=start_date, date__lte=end_date)
    def with_relations(self): return self.select_related('category')

    def totals(self):
        """{'income': Decimal, 'expense': Decimal} over this queryset"""
        result = self.aggregate(
            income=models.Sum('amount', filter=models.Q(type=TYPE_INCOME)),
            expense=models.Sum('amount', filter=models.Q(type=TYPE_EXPENSE)),
        )
        return {
            'income': result['income'] or Decimal('0'),
            'expense': result['expense'] or Decimal('0'),
        }


def receipt_upload_path(instance, filename):
    """
    receipts/<user_id>/<epoch ms>-<original name>

    e.g. receipts/7/1760700000000-lunch.jpg
    """
    stamp = int(timezone.now().timestamp() * 1000)
    return f'receipts/{instance.user_id}/{stamp}-{os.path.basename(filename)}'


def validate_receipt_size(file):
    limit = settings.RECEIPT_MAX_BYTES
    if file and getattr(file, 'size', 0) > limit:
        raise ValidationError(f'Receipts cannot be larger than {limit // (1024 * 1024)}MB.')


class Transaction(TimeStampedModel):
    """A single income or expense entry"""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='transactions', db_index=True)
    # RESTRICT: a used category cannot be deleted on its own, but deleting
    # the user removes both sides
    category = models.ForeignKey(Category, on_delete=models.RESTRICT, related_name='transactions')

    type = models.CharField(max_length=10, choices=TYPE_CHOICES, default=TYPE_EXPENSE, db_index=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    date = models.DateField(default=timezone.localdate, db_index=True)
    description = models.TextField(blank=True)
    receipt = models.FileField(
        upload_to=receipt_upload_path,
        blank=True,
        validators=[
            FileExtensionValidator(allowed_extensions=RECEIPT_ALLOWED_EXTENSIONS, message=RECEIPT_EXTENSION_MESSAGE),
            validate_receipt_size,
        ]
    )

    objects = TransactionQuerySet.as_manager()

    class Meta:
        db_table = 'transactions'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['user', '-date'], name='transaction_user_id_8c2e7a_idx'),
            models.Index(fields=['user', 'type', '-date'], name='transaction_user_id_b31f90_idx'),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(amount__gt=0), name='transaction_amount_positive'),
        ]

    def __str__(self):
        return f"{self.get_type_display()} {self.amount:,.2f} ({self.date})"

    def clean(self):
        errors = {}
        if self.category_id and self.category.type != self.type:
            errors['category'] = f'Choose an {self.get_type_display().lower()} category for this transaction.'
        if self.category_id and self.user_id and self.category.user_id != self.user_id:
            errors['category'] = 'Select a valid category.'
        if errors:
            raise ValidationError(errors)

    @property
    def category_name(self):
        return self.category.name if self.category_id else 'Uncategorized'

    @property
    def has_receipt(self):
        return bool(self.receipt)

    @property
    def signed_amount(self):
        return self.amount if self.type == TYPE_INCOME else -self.amount


@receiver(pre_save, sender=Transaction)
def auto_delete_receipt_on_change(sender, instance, **kwargs):
    """
    Remove the previous receipt file when it is replaced or cleared
    """
    # new rows have nothing to compare against
    if not instance.pk:
        return

    try:
        old_file = sender.objects.get(pk=instance.pk).receipt
    except sender.DoesNotExist:
        return

    if old_file and old_file != instance.receipt:
        old_file.storage.delete(old_file.name)
        logger.info(f"Old receipt removed (replaced): {old_file.name}")


@receiver(post_delete, sender=Transaction)
def auto_delete_receipt_on_delete(sender, instance, **kwargs):
    """
    Remove the receipt file once its row is deleted
    """
    if instance.receipt:
        instance.receipt.storage.delete(instance.receipt.name)
        logger.info(f"Receipt removed (row deleted): {instance.receipt.name}")
