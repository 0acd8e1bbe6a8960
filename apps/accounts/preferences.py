"""
UI preferences kept in the session (date format, week start, notifications)
"""

PREF_SESSION_KEY = 'myfintrack_prefs'

DATE_FORMAT_CHOICES = [
    ('MM/DD', 'Month / Day (e.g. 12/31)'),
    ('DD/MM', 'Day / Month (e.g. 31/12)'),
]

START_OF_WEEK_CHOICES = [
    ('sunday', 'Sunday'),
    ('monday', 'Monday'),
]

DEFAULT_PREFERENCES = {
    'date_format': 'MM/DD',
    'start_of_week': 'sunday',
    'email_reminders': False,
    'enable_notifications': True,
}


def get_preferences(request):
    stored = request.session.get(PREF_SESSION_KEY) or {}
    prefs = dict(DEFAULT_PREFERENCES)
    # unknown keys or wrong types in the session are ignored
    for key, default in DEFAULT_PREFERENCES.items():
        value = stored.get(key)
        if isinstance(value, type(default)):
            prefs[key] = value
    return prefs


def save_preferences(request, prefs):
    request.session[PREF_SESSION_KEY] = {key: prefs[key] for key in DEFAULT_PREFERENCES}
