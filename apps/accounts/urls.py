from django.urls import path
from . import views

app_name = "accounts"

urlpatterns = [
    path("login/", views.UserLoginView.as_view(), name="login"),
    path("logout/", views.UserLogoutView.as_view(), name="logout"),
    path("signup/", views.signup, name="signup"),

    # email code verification
    path("verify/", views.verify, name="verify"),
    path("verify/resend/", views.resend_code, name="resend_code"),

    # password recovery
    path("recover/", views.recover, name="recover"),
    path("recover/confirm/", views.recover_confirm, name="recover_confirm"),

    # settings
    path("settings/", views.settings_view, name="settings"),
    path("settings/profile/", views.settings_profile, name="settings_profile"),
    path("settings/financial/", views.settings_financial, name="settings_financial"),
    path("settings/preferences/", views.settings_preferences, name="settings_preferences"),
    path("settings/theme/", views.settings_theme, name="settings_theme"),
    path("settings/clear-data/", views.clear_data, name="clear_data"),
    path("settings/delete-account/", views.delete_account, name="delete_account"),
]
