from django import forms
from django.contrib.auth import password_validation
from django.contrib.auth.forms import AuthenticationForm, UserCreationForm
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError

from apps.core.amounts import AmountField, AmountInput, format_with_commas
from .models import UserSettings
from .preferences import DATE_FORMAT_CHOICES, START_OF_WEEK_CHOICES


class SignUpForm(UserCreationForm):
    """
    Sign-up form
    - email is the login (stored as username too)
    - duplicate email check
    - the user stays inactive until the emailed code is verified
    """
    email = forms.EmailField(
        required=True,
        label='Email',
        widget=forms.EmailInput(attrs={
            'class': 'form-input-field',
            'placeholder': 'you@example.com',
            'autocomplete': 'email'
        }),
    )

    password1 = forms.CharField(
        label='Password',
        strip=False,
        widget=forms.PasswordInput(attrs={
            'class': 'form-input-field',
            'placeholder': 'At least 8 characters',
            'autocomplete': 'new-password'
        }),
        help_text='At least 8 characters, not entirely numeric.'
    )

    password2 = forms.CharField(
        label='Confirm password',
        strip=False,
        widget=forms.PasswordInput(attrs={
            'class': 'form-input-field',
            'placeholder': 'Repeat password',
            'autocomplete': 'new-password'
        }),
    )

    class Meta:
        model = User
        fields = ('email',)

    def clean_email(self):
        """Normalize and check for an existing account"""
        email = self.cleaned_data.get('email', '').strip().lower()
        if User.objects.filter(username__iexact=email).exists() or User.objects.filter(email__iexact=email).exists():
            raise ValidationError('An account with this email already exists.')
        return email

    def _post_clean(self):
        # password validators compare against username, which mirrors email
        email = self.cleaned_data.get('email')
        if email:
            self.instance.username = email
        super()._post_clean()

    def save(self, commit=True):
        user = super().save(commit=False)
        user.email = self.cleaned_data['email']
        user.username = self.cleaned_data['email']
        user.is_active = False

        if commit:
            user.save()

        return user


class EmailAuthenticationForm(AuthenticationForm):
    """Sign in with email + password"""
    username = forms.EmailField(
        label='Email',
        widget=forms.EmailInput(attrs={'autofocus': True, 'autocomplete': 'email'}),
    )

    def clean_username(self):
        return self.cleaned_data.get('username', '').strip().lower()


class VerifyCodeForm(forms.Form):
    email = forms.EmailField(label='Email')
    code = forms.CharField(
        label='Verification code',
        min_length=6,
        max_length=6,
        widget=forms.TextInput(attrs={'inputmode': 'numeric', 'autocomplete': 'one-time-code'}),
    )

    def clean_code(self):
        code = self.cleaned_data.get('code', '').strip()
        if not code.isdigit():
            raise ValidationError('The code is 6 digits.')
        return code


class RecoveryRequestForm(forms.Form):
    email = forms.EmailField(label='Email')


class RecoveryConfirmForm(VerifyCodeForm):
    new_password1 = forms.CharField(label='New password', strip=False, widget=forms.PasswordInput)
    new_password2 = forms.CharField(label='Confirm new password', strip=False, widget=forms.PasswordInput)

    def clean(self):
        cleaned_data = super().clean()
        password1 = cleaned_data.get('new_password1')
        password2 = cleaned_data.get('new_password2')

        if password1 and password2 and password1 != password2:
            self.add_error('new_password2', 'The two password fields didn’t match.')
        elif password1:
            try:
                password_validation.validate_password(password1)
            except ValidationError as e:
                self.add_error('new_password1', e)
        return cleaned_data


class DisplayNameForm(forms.Form):
    display_name = forms.CharField(
        label='Display name / Username',
        max_length=150,
        required=False,
        widget=forms.TextInput(attrs={'placeholder': 'Your name'}),
        help_text='Shown in the sidebar and across the app.'
    )


class FinancialSettingsForm(forms.ModelForm):
    """Currency, monthly gross income and red line (comma formatted input)"""
    gross_income = AmountField(
        label='Monthly gross income',
        required=False,
        allow_zero=True,
        min_message='Gross income cannot be negative.',
        widget=AmountInput(attrs={'placeholder': 'Total income before expenses'}, formatter=format_with_commas),
        help_text='Baseline before expenses.'
    )
    red_line_amount = AmountField(
        label='Red line amount',
        required=False,
        allow_zero=True,
        min_message='Red line amount cannot be negative.',
        widget=AmountInput(attrs={'placeholder': 'Warn when remaining reaches this'}, formatter=format_with_commas),
    )

    class Meta:
        model = UserSettings
        fields = ['currency', 'gross_income', 'red_line_amount']
        labels = {
            'currency': 'Default currency',
        }
        help_texts = {
            'currency': 'Used for all amounts.',
        }


class PreferencesForm(forms.Form):
    date_format = forms.ChoiceField(label='Date format', choices=DATE_FORMAT_CHOICES)
    start_of_week = forms.ChoiceField(label='Start of week', choices=START_OF_WEEK_CHOICES)
    email_reminders = forms.BooleanField(label='Email reminders', required=False)
    enable_notifications = forms.BooleanField(label='Enable notifications', required=False)


class ThemeForm(forms.Form):
    theme = forms.ChoiceField(choices=UserSettings.THEME_CHOICES, required=False)
