"""Message catalogue used by app.core.translation.

Values are plain strings or callables taking positional arguments.
"""

from collections.abc import Callable

Message = str | Callable[..., str]

# "invalidNumber" has no entry on purpose: lookups fall back to the key.
MESSAGES: dict[str, dict[str, Message]] = {
    "en": {
        "internalError": "Server error, please try again.",
        "invalid_date": "invalid date",
        "onBoarding_title_required": "The onboarding title is required.",
        "onBoarding_success_validated": "The onboarding data is valid",
        "temp_cleanup_summary": lambda deleted, errors: f"Removed {deleted} temp file(s), {errors} error(s).",
    },
    "ar": {
        "internalError": "خطأ في الخادم، يرجى المحاولة مرة أخرى",
        "invalid_date": "تاريخ غير صالح",
        "onBoarding_title_required": "عنوان صفحة الترحيب مطلوب.",
        "onBoarding_success_validated": "بيانات صفحة الترحيب صالحة",
        "temp_cleanup_summary": lambda deleted, errors: f"تم حذف {deleted} ملف مؤقت، {errors} خطأ.",
    },
}
