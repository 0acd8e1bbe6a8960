from .models import UserSettings
from .preferences import get_preferences


def user_settings(request):
    """Expose the current user's settings (currency, theme) and UI preferences to every template"""
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return {'user_settings': None, 'currency': 'USD', 'theme': 'light', 'preferences': None}
    settings_obj = UserSettings.for_user(user)
    return {
        'user_settings': settings_obj,
        'currency': settings_obj.currency,
        'theme': settings_obj.theme,
        'preferences': get_preferences(request),
    }
