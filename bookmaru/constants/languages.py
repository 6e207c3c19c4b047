"""Language and moderation status constants."""

SUPPORTED_LANGUAGES = ('en', 'ko')
DEFAULT_LANGUAGE = 'en'

# Names handed to the language model prompts
LANGUAGE_NAMES = {
    'en': 'English',
    'ko': 'Korean',
}

PLACE_STATUSES = ('pending', 'approved', 'rejected')


def normalize_language(language: str | None) -> str | None:
    """Lowercase and strip a language code; None for anything unsupported."""
    if not isinstance(language, str):
        return None
    code = language.strip().lower()
    return code if code in SUPPORTED_LANGUAGES else None


def opposite_language(language: str) -> str:
    """The other supported language (the translation target)."""
    return 'en' if language == 'ko' else 'ko'
