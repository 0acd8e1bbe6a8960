from decimal import Decimal

from django import forms
from django.core.exceptions import ValidationError

from apps.core.amounts import AmountField, AmountInput, parse_amount_from_display
from .models import SavingsGoal, DEFAULT_GOAL_NAME, MAX_BALANCE


class SavingsGoalForm(forms.ModelForm):
    """New goal: name, target and optional deadline"""
    name = forms.CharField(
        label='Goal name',
        max_length=100,
        required=False,
        widget=forms.TextInput(attrs={'placeholder': 'e.g. Emergency fund'}),
    )
    target_amount = AmountField(
        label='Target amount',
        min_message='Enter a valid target amount.',
        error_messages={'invalid': 'Enter a valid target amount.', 'required': 'Enter a valid target amount.'},
    )

    class Meta:
        model = SavingsGoal
        fields = ['name', 'target_amount', 'deadline']
        widgets = {
            'deadline': forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d'),
        }
        labels = {
            'deadline': 'Deadline (optional)',
        }

    def __init__(self, *args, **kwargs):
        self.user = kwargs.pop('user', None)
        super().__init__(*args, **kwargs)
        if self.user:
            self.instance.user = self.user
        self.fields['deadline'].required = False

    def clean_name(self):
        """Blank keeps the current name (``New goal`` for a new goal)"""
        name = (self.cleaned_data.get('name') or '').strip()
        return name or self.instance.name or DEFAULT_GOAL_NAME


class SavingsGoalUpdateForm(SavingsGoalForm):
    """Edit: also the saved amount; a blank deadline clears it"""
    current_amount = AmountField(
        label='Current amount',
        allow_zero=True,
        min_message='Current amount cannot be negative.',
        error_messages={'invalid': 'Current amount cannot be negative.', 'required': 'Current amount cannot be negative.'},
    )

    class Meta(SavingsGoalForm.Meta):
        fields = ['name', 'target_amount', 'current_amount', 'deadline']


class ContributeForm(forms.Form):
    """Add to goal; the amount may carry thousands separators"""
    amount = forms.CharField(
        label='Amount to add',
        widget=AmountInput(attrs={'placeholder': '0.00'}),
        error_messages={'required': 'Enter a valid amount to add.'},
    )

    def __init__(self, *args, **kwargs):
        self.goal = kwargs.pop('goal', None)
        super().__init__(*args, **kwargs)

    def clean_amount(self):
        amount = parse_amount_from_display(self.cleaned_data.get('amount'))
        if amount > MAX_BALANCE:
            raise ValidationError('Enter a valid amount to add.')
        # sub-cent amounts round to zero
        amount = amount.quantize(Decimal('0.01'))
        if amount <= 0:
            raise ValidationError('Enter a valid amount to add.')
        # the new balance must still fit the column
        if self.goal is not None and self.goal.current_amount + amount > MAX_BALANCE:
            raise ValidationError('Enter a valid amount to add.')
        return amount
