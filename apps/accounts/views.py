# Django
from django.shortcuts import render, redirect
from django.urls import reverse_lazy
from django.contrib import messages
from django.contrib.auth import login as auth_login, logout as auth_logout
from django.contrib.auth.decorators import login_required
from django.contrib.auth.models import User
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

# Django auth views
from django.contrib.auth.views import (
    LoginView as DjangoLoginView,
    LogoutView as DjangoLogoutView,
)

# Database
from django.db import IntegrityError, transaction

# Other
import logging

# Project
from .forms import (
    SignUpForm,
    EmailAuthenticationForm,
    VerifyCodeForm,
    RecoveryRequestForm,
    RecoveryConfirmForm,
    DisplayNameForm,
    FinancialSettingsForm,
    PreferencesForm,
    ThemeForm,
)
from .models import EmailOTP, UserSettings
from .otp import issue_code, verify_code
from .preferences import get_preferences, save_preferences
from apps.budgets.models import Budget
from apps.savings.models import SavingsGoal
from apps.transactions.models import Category, Transaction

logger = logging.getLogger(__name__)

PENDING_EMAIL_SESSION_KEY = 'pending_verification_email'
RECOVERY_EMAIL_SESSION_KEY = 'recovery_email'


class UserLoginView(DjangoLoginView):
    """Sign in with email + password"""
    template_name = "accounts/login.html"
    authentication_form = EmailAuthenticationForm
    redirect_authenticated_user = True
    next_page = reverse_lazy("home")


class UserLogoutView(DjangoLogoutView):
    """Sign out (POST)"""
    next_page = reverse_lazy("accounts:login")


def signup(request):
    """
    Sign up
    - creates an inactive user
    - mails a 6 digit code, then asks for it on the verify page
    """
    if request.user.is_authenticated:
        return redirect('home')

    if request.method == "POST":
        form = SignUpForm(request.POST)
        if form.is_valid():
            try:
                with transaction.atomic():
                    user = form.save()
                    issue_code(user, EmailOTP.PURPOSE_SIGNUP)
                request.session[PENDING_EMAIL_SESSION_KEY] = user.email
                logger.info(f"New sign-up: user_id={user.id}")
                messages.success(request, f"We sent a 6 digit code to {user.email}. Enter it to finish signing up.")
                return redirect("accounts:verify")
            except IntegrityError as e:
                logger.error(f"Sign-up failed (duplicate data): {e}")
                messages.error(request, "An account with this email already exists.")
            except OSError as e:
                logger.error(f"Sign-up failed (mail delivery): {e}", exc_info=True)
                messages.error(request, "We couldn't send your verification email. Please try again.")
        else:
            messages.error(request, "Please check the highlighted fields.")
    else:
        form = SignUpForm()

    return render(request, "accounts/signup.html", {"form": form})


def verify(request):
    """Confirm a sign-up code; activates the account and signs the user in"""
    if request.user.is_authenticated:
        return redirect('home')

    if request.method == "POST":
        form = VerifyCodeForm(request.POST)
        if form.is_valid():
            user = verify_code(form.cleaned_data['email'], form.cleaned_data['code'], EmailOTP.PURPOSE_SIGNUP)
            if user is not None:
                user.is_active = True
                user.save(update_fields=['is_active'])
                request.session.pop(PENDING_EMAIL_SESSION_KEY, None)
                auth_login(request, user, backend='django.contrib.auth.backends.ModelBackend')
                logger.info(f"Email verified: user_id={user.id}")
                messages.success(request, "Your email is verified. Welcome to MyFinTrack!")
                return redirect("home")
            form.add_error('code', 'Invalid or expired code.')
    else:
        form = VerifyCodeForm(initial={'email': request.session.get(PENDING_EMAIL_SESSION_KEY, '')})

    return render(request, "accounts/verify.html", {"form": form})


@require_POST
def resend_code(request):
    """Send a new sign-up code; the response does not reveal whether the email exists"""
    email = (request.POST.get('email') or request.session.get(PENDING_EMAIL_SESSION_KEY) or '').strip().lower()
    user = User.objects.filter(email__iexact=email, is_active=False).first() if email else None
    if user is not None:
        try:
            issue_code(user, EmailOTP.PURPOSE_SIGNUP)
        except OSError as e:
            logger.error(f"Resend failed: user_id={user.id}, error={e}")
            messages.error(request, "We couldn't send the email. Please try again.")
            return redirect("accounts:verify")
    messages.success(request, "If that account is waiting for verification, a new code is on its way.")
    return redirect("accounts:verify")


def recover(request):
    """Request a password recovery code"""
    if request.method == "POST":
        form = RecoveryRequestForm(request.POST)
        if form.is_valid():
            email = form.cleaned_data['email'].strip().lower()
            user = User.objects.filter(email__iexact=email, is_active=True).first()
            if user is not None:
                try:
                    issue_code(user, EmailOTP.PURPOSE_RECOVERY)
                except OSError as e:
                    logger.error(f"Recovery mail failed: user_id={user.id}, error={e}")
            request.session[RECOVERY_EMAIL_SESSION_KEY] = email
            messages.success(request, "If an account exists for that email, we sent a reset code.")
            return redirect("accounts:recover_confirm")
    else:
        form = RecoveryRequestForm()

    return render(request, "accounts/recover.html", {"form": form})


def recover_confirm(request):
    """Enter the recovery code and a new password"""
    if request.method == "POST":
        form = RecoveryConfirmForm(request.POST)
        if form.is_valid():
            user = verify_code(form.cleaned_data['email'], form.cleaned_data['code'], EmailOTP.PURPOSE_RECOVERY)
            if user is not None:
                user.set_password(form.cleaned_data['new_password1'])
                user.save(update_fields=['password'])
                request.session.pop(RECOVERY_EMAIL_SESSION_KEY, None)
                logger.info(f"Password reset: user_id={user.id}")
                messages.success(request, "Your password was updated. Please sign in.")
                return redirect("accounts:login")
            form.add_error('code', 'Invalid or expired code.')
    else:
        form = RecoveryConfirmForm(initial={'email': request.session.get(RECOVERY_EMAIL_SESSION_KEY, '')})

    return render(request, "accounts/recover_confirm.html", {"form": form})


# ============================================================
# Settings
# ============================================================

def _settings_context(request, **overrides):
    user_settings = UserSettings.for_user(request.user)
    display_name = request.user.first_name.strip() or request.user.email.split('@')[0]
    context = {
        'name_form': DisplayNameForm(initial={'display_name': display_name}),
        'financial_form': FinancialSettingsForm(instance=user_settings),
        'preferences_form': PreferencesForm(initial=get_preferences(request)),
        'user_settings': user_settings,
    }
    context.update(overrides)
    return context


@login_required
def settings_view(request):
    return render(request, 'accounts/settings.html', _settings_context(request))


@login_required
@require_POST
def settings_profile(request):
    form = DisplayNameForm(request.POST)
    if not form.is_valid():
        return render(request, 'accounts/settings.html', _settings_context(request, name_form=form))

    request.user.first_name = form.cleaned_data['display_name'].strip()
    request.user.save(update_fields=['first_name'])
    messages.success(request, 'Display name saved.')
    return redirect('accounts:settings')


@login_required
@require_POST
def settings_financial(request):
    user_settings = UserSettings.for_user(request.user)
    form = FinancialSettingsForm(request.POST, instance=user_settings)
    if not form.is_valid():
        messages.error(request, 'Please check the highlighted fields.')
        return render(request, 'accounts/settings.html', _settings_context(request, financial_form=form))

    try:
        form.save()
    except IntegrityError as e:
        logger.error(f"Settings save failed: user_id={request.user.id}, error={e}")
        messages.error(request, 'Failed to save settings.')
        return redirect('accounts:settings')

    logger.info(f"Settings saved: user_id={request.user.id}")
    messages.success(request, 'Settings saved.')
    return redirect('accounts:settings')


@login_required
@require_POST
def settings_preferences(request):
    form = PreferencesForm(request.POST)
    if not form.is_valid():
        return render(request, 'accounts/settings.html', _settings_context(request, preferences_form=form))

    save_preferences(request, form.cleaned_data)
    messages.success(request, 'Preferences saved.')
    return redirect('accounts:settings')


@login_required
@require_POST
def settings_theme(request):
    """Set the theme, or flip it when none is posted"""
    user_settings = UserSettings.for_user(request.user)
    form = ThemeForm(request.POST)
    theme = form.cleaned_data.get('theme') if form.is_valid() else ''
    if not theme:
        theme = 'light' if user_settings.theme == 'dark' else 'dark'
    user_settings.theme = theme
    user_settings.save(update_fields=['theme', 'updated_at'])
    next_url = request.POST.get('next', '')
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        return redirect(next_url)
    return redirect('accounts:settings')


@login_required
def clear_data(request):
    """Delete the user's transactions, budgets, goals and categories; reset their settings"""
    if request.method == 'POST':
        user = request.user
        with transaction.atomic():
            # transactions first: their category FK is RESTRICT.
            # post_delete fires per row, so receipt files go too
            tx_count, _ = Transaction.objects.filter(user=user).delete()
            Budget.objects.filter(user=user).delete()
            SavingsGoal.objects.filter(user=user).delete()
            Category.objects.filter(user=user).delete()
            UserSettings.for_user(user).reset()
        logger.info(f"Data cleared: user_id={user.id}, transactions={tx_count}")
        messages.success(request, 'All your data has been cleared.')
        return redirect('accounts:settings')

    return render(request, 'accounts/confirm_danger.html', {
        'title': 'Clear all data?',
        'description': 'All transactions, budgets, savings goals and categories will be removed and your settings reset. This cannot be undone.',
        'action_url': 'accounts:clear_data',
        'confirm_label': 'Clear all data',
    })


@login_required
def delete_account(request):
    """Delete the account and everything it owns, then sign out"""
    if request.method == 'POST':
        user = request.user
        user_id = user.id
        user.delete()
        auth_logout(request)
        logger.info(f"Account deleted: user_id={user_id}")
        messages.success(request, 'Your account has been deleted.')
        return redirect('accounts:login')

    return render(request, 'accounts/confirm_danger.html', {
        'title': 'Delete account?',
        'description': 'Your account and all of its data will be permanently deleted.',
        'action_url': 'accounts:delete_account',
        'confirm_label': 'Delete account',
    })
