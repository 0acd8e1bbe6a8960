"""
Email one-time codes

issue_code()  -> create an EmailOTP and mail it
verify_code() -> consume a matching code, return its user (or None)
"""
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.mail import send_mail

from .models import EmailOTP

logger = logging.getLogger(__name__)

SUBJECTS = {
    EmailOTP.PURPOSE_SIGNUP: 'Confirm your MyFinTrack account',
    EmailOTP.PURPOSE_RECOVERY: 'Reset your MyFinTrack password',
}


def issue_code(user, purpose):
    otp = EmailOTP.issue(user, purpose)
    body = (
        f"Your MyFinTrack code is {otp.code}.\n\n"
        f"It expires in {settings.OTP_TTL_MINUTES} minutes. "
        "If you did not request it, you can ignore this email."
    )
    send_mail(SUBJECTS[purpose], body, settings.DEFAULT_FROM_EMAIL, [user.email])
    logger.info(f"OTP issued: user_id={user.id}, purpose={purpose}")
    return otp


def verify_code(email, code, purpose):
    """Return the user whose latest usable code matches, marking it used"""
    User = get_user_model()
    user = User.objects.filter(email__iexact=(email or '').strip()).first()
    if user is None:
        return None

    # issue() leaves at most one live code per purpose
    otp = EmailOTP.objects.usable().for_purpose(purpose).filter(user=user).first()
    if otp is None:
        logger.warning(f"OTP rejected (no live code): user_id={user.id}, purpose={purpose}")
        return None

    if otp.code != (code or '').strip():
        otp.record_failure()
        logger.warning(f"OTP rejected: user_id={user.id}, purpose={purpose}, attempts={otp.attempts}")
        return None

    otp.mark_used()
    return user
