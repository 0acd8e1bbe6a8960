import os

from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils import timezone

from apps.core.amounts import AmountField
from .categories import as_queryset, list_categories
from .models import Transaction, Category, RECEIPT_ALLOWED_EXTENSIONS, RECEIPT_EXTENSION_MESSAGE


class CategoryChoiceField(forms.ModelChoiceField):
    def label_from_instance(self, obj):
        return obj.name


class TransactionForm(forms.ModelForm):
    """Add / edit a transaction"""
    amount = AmountField(
        label='Amount',
        min_message='Enter a valid amount.',
        error_messages={'invalid': 'Enter a valid amount.'},
    )
    category = CategoryChoiceField(queryset=Category.objects.none(), label='Category', empty_label=None)

    class Meta:
        model = Transaction

        fields = ['type', 'amount', 'category', 'date', 'description', 'receipt']
        widgets = {
            'type': forms.Select(attrs={'class': 'form-select', 'data-category-filter': ''}),
            'date': forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d'),
            'description': forms.Textarea(attrs={'rows': 2, 'placeholder': 'e.g. Groceries at the market'}),
            'receipt': forms.ClearableFileInput(attrs={'accept': '.png,.jpg,.jpeg,.pdf'}),
        }
        labels = {
            'type': 'Type',
            'date': 'Date',
            'description': 'Description',
            'receipt': 'Receipt (optional)',
        }

    def __init__(self, *args, **kwargs):
        self.user = kwargs.pop('user', None)
        super().__init__(*args, **kwargs)

        # only the user's (deduplicated) categories
        if self.user:
            self.instance.user = self.user
            self.fields['category'].queryset = as_queryset(list_categories(self.user))

        self.fields['description'].required = False
        self.fields['receipt'].required = False
        if not self.is_bound and not self.instance.pk:
            self.fields['date'].initial = timezone.localdate()

    def clean_receipt(self):
        """Receipt extension and size check"""
        receipt = self.cleaned_data.get('receipt')
        # unchanged or cleared receipts are not uploads
        if not receipt or not hasattr(receipt, 'content_type'):
            return receipt

        ext = os.path.splitext(receipt.name)[1].lstrip('.').lower()
        if ext not in RECEIPT_ALLOWED_EXTENSIONS:
            raise ValidationError(RECEIPT_EXTENSION_MESSAGE)

        limit = settings.RECEIPT_MAX_BYTES
        if receipt.size > limit:
            raise ValidationError(f'Receipts cannot be larger than {limit // (1024 * 1024)}MB.')
        return receipt

    def clean(self):
        cleaned_data = super().clean()
        tx_type = cleaned_data.get('type')
        category = cleaned_data.get('category')

        # the category list is filtered by type on the page; enforce it here too
        if tx_type and category and category.type != tx_type:
            self.add_error('category', f'Choose an {tx_type} category for this transaction.')

        return cleaned_data


class TransactionSearchForm(forms.Form):
    search = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={'placeholder': 'Search description or category', 'type': 'search'})
    )
