from django import forms

from apps.core.amounts import AmountField
from apps.transactions.categories import as_queryset, categories_by_type, list_categories
from apps.transactions.forms import CategoryChoiceField
from apps.transactions.models import Category, TYPE_EXPENSE
from .models import Budget


class BudgetForm(forms.ModelForm):
    """Budget add / edit; expense categories only"""
    amount = AmountField(
        label='Budget amount',
        min_message='Enter a valid amount.',
        error_messages={'invalid': 'Enter a valid amount.', 'required': 'Enter a valid amount.'},
    )
    category = CategoryChoiceField(queryset=Category.objects.none(), label='Category', empty_label=None)

    class Meta:
        model = Budget
        fields = ['category', 'amount', 'start_date', 'end_date', 'description']
        widgets = {
            'start_date': forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d'),
            'end_date': forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d'),
            'description': forms.Textarea(attrs={'rows': 2, 'placeholder': 'Optional note'}),
        }
        labels = {
            'start_date': 'Start date',
            'end_date': 'End date',
            'description': 'Description',
        }

    def __init__(self, *args, **kwargs):
        self.user = kwargs.pop('user', None)
        super().__init__(*args, **kwargs)

        if self.user:
            self.instance.user = self.user
            expense = categories_by_type(list_categories(self.user), TYPE_EXPENSE)
            self.fields['category'].queryset = as_queryset(expense)

        self.fields['description'].required = False
