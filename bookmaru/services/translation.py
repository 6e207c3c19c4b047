"""Translation of place submissions with swappable providers.

Approval sends the submitter's name, description and recommended book to a
translator and gets back the other language's version. Two providers:

- ``remote``: the hosted translation function (the default)
- ``openai``: call the OpenAI chat completions API from this process

Responses are untrusted. Anything unusable raises TranslationError, which
the approval workflow downgrades to "approve without translation".
"""
import logging
import time
from dataclasses import dataclass

import requests
from flask import current_app

from bookmaru.constants import LANGUAGE_NAMES, opposite_language
from bookmaru.errors import TranslationError
from bookmaru.utils.place_helpers import parse_recommended_book

logger = logging.getLogger(__name__)

OPENAI_CHAT_URL = 'https://api.openai.com/v1/chat/completions'

# Circuit breaker: after N consecutive failures, pause for a cooldown
_consecutive_failures = 0
_MAX_CONSECUTIVE_FAILURES = 3
_failure_cooldown_until = 0  # timestamp when we can retry
_COOLDOWN_SECONDS = 300      # 5 minutes

PLAIN_PROMPT = (
    "You are a professional translator. Translate the following text from "
    "{source} to {target}. Return only the translation, no explanations or "
    "additional text."
)

PLACE_NAME_PROMPTS = {
    ('ko', 'en'): """You are a professional translator specializing in Korean place names. When translating Korean location names to English, follow this specific format:
- Use romanized Korean names with hyphens for compound words
- Keep the original Korean structure but make it readable in English
- Examples:
  * 종달리 책약방 → Jongdal-ri Chaekyakbang
  * 서울 도서관 → Seoul Library
  * 교보문고 광화문점 → Kyobo Book Center Gwanghwamun
  * 다독다독 북카페 → Dadokdadok Book Cafe
- For generic terms like "도서관" (library), "책방" (bookstore), "북카페" (book cafe), translate to English
- For specific place names, use romanization with hyphens
- Return only the translation, no explanations.""",
    ('en', 'ko'): """You are a professional translator specializing in location names. When translating English location names to Korean, follow this specific format:
- For English names, transcribe phonetically using Korean characters (외래어 표기법)
- Keep generic terms translated naturally in Korean
- Examples:
  * Checkngrow → 채그로
  * Starfield Library → 스타필드 도서관
  * Blue Square → 블루스퀘어
  * Coffee & Library → 커피앤도서관
- If it's a descriptive English name (like "Seoul Public Library"), translate meaningfully to Korean
- For brand names or unique names, use phonetic Korean transcription
- Return only the translation, no explanations.""",
}


@dataclass
class TranslationResult:
    """Translated fields for the opposite language."""
    name: str
    description: str = ''
    recommended_book: dict | None = None


def _is_circuit_open() -> bool:
    """Check if we should skip translation due to too many failures."""
    global _consecutive_failures, _failure_cooldown_until

    if _consecutive_failures >= _MAX_CONSECUTIVE_FAILURES:
        if time.time() < _failure_cooldown_until:
            return True
        # Cooldown expired, reset and allow retry
        _consecutive_failures = 0
        _failure_cooldown_until = 0
        logger.info("[TRANSLATE] Circuit breaker reset, retrying")
    return False


def _record_success():
    global _consecutive_failures
    _consecutive_failures = 0


def _record_failure():
    global _consecutive_failures, _failure_cooldown_until

    _consecutive_failures += 1
    if _consecutive_failures >= _MAX_CONSECUTIVE_FAILURES:
        _failure_cooldown_until = time.time() + _COOLDOWN_SECONDS
        logger.warning(
            f"[TRANSLATE] Failed {_consecutive_failures} times in a row. "
            f"Pausing for {_COOLDOWN_SECONDS}s."
        )


def reset_circuit_breaker():
    """Close the breaker (used by tests and after config changes)."""
    global _consecutive_failures, _failure_cooldown_until
    _consecutive_failures = 0
    _failure_cooldown_until = 0


def parse_translation_response(payload) -> TranslationResult:
    """Validate a translator answer.

    A usable answer is an object with a non-blank ``name``. Description and
    book are optional; malformed ones are dropped rather than trusted.
    """
    if not isinstance(payload, dict):
        raise TranslationError('Translation response is not an object')

    name = payload.get('name')
    if not isinstance(name, str) or not name.strip():
        raise TranslationError('Translation response has no name')

    description = payload.get('description')
    if not isinstance(description, str):
        description = ''

    return TranslationResult(
        name=name.strip(),
        description=description.strip(),
        recommended_book=parse_recommended_book(payload.get('recommended_book')),
    )


def remote_translate(place_id, source_language, name, description, recommended_book) -> TranslationResult:
    """Translate through the hosted translation function."""
    url = current_app.config.get('TRANSLATION_FUNCTION_URL')
    if not url:
        raise TranslationError('TRANSLATION_FUNCTION_URL is not configured')

    headers = {'Content-Type': 'application/json'}
    key = current_app.config.get('TRANSLATION_FUNCTION_KEY')
    if key:
        headers['Authorization'] = f'Bearer {key}'

    body = {
        'submission_id': place_id,
        'original_language': source_language,
        'name': name,
        'description': description,
        'recommended_book': recommended_book,
    }

    try:
        response = requests.post(
            url,
            json=body,
            headers=headers,
            timeout=current_app.config.get('TRANSLATION_TIMEOUT_SECONDS', 30),
        )
    except requests.Timeout as e:
        raise TranslationError('Translation function timed out') from e
    except requests.RequestException as e:
        raise TranslationError(f'Translation function unreachable: {e}') from e

    if not response.ok:
        raise TranslationError(f'Translation function failed: {response.status_code}')

    try:
        payload = response.json()
    except ValueError as e:
        raise TranslationError('Translation function returned invalid JSON') from e

    return parse_translation_response(payload)


def openai_translate_text(text: str, source_language: str, target_language: str,
                          is_place_name: bool = False) -> str:
    """Translate one string with the OpenAI chat completions API."""
    api_key = current_app.config.get('OPENAI_API_KEY')
    if not api_key:
        raise TranslationError('OPENAI_API_KEY is not configured')

    system_prompt = None
    if is_place_name:
        system_prompt = PLACE_NAME_PROMPTS.get((source_language, target_language))
    if system_prompt is None:
        system_prompt = PLAIN_PROMPT.format(
            source=LANGUAGE_NAMES[source_language],
            target=LANGUAGE_NAMES[target_language],
        )

    try:
        response = requests.post(
            OPENAI_CHAT_URL,
            headers={'Authorization': f'Bearer {api_key}'},
            json={
                'model': current_app.config.get('OPENAI_MODEL', 'gpt-3.5-turbo'),
                'messages': [
                    {'role': 'system', 'content': system_prompt},
                    {'role': 'user', 'content': text},
                ],
                'max_tokens': 1000,
                'temperature': 0.3,
            },
            timeout=current_app.config.get('TRANSLATION_TIMEOUT_SECONDS', 30),
        )
    except requests.RequestException as e:
        raise TranslationError(f'OpenAI request failed: {e}') from e

    if not response.ok:
        raise TranslationError(f'OpenAI API error: {response.status_code}')

    try:
        content = response.json()['choices'][0]['message']['content']
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise TranslationError('OpenAI returned an unexpected response format') from e

    if not isinstance(content, str) or not content.strip():
        raise TranslationError('OpenAI returned an empty translation')
    return content.strip()


def openai_translate(place_id, source_language, name, description, recommended_book) -> TranslationResult:
    """Translate a submission field by field with the OpenAI API."""
    target_language = opposite_language(source_language)

    translated_name = openai_translate_text(name, source_language, target_language, is_place_name=True)

    translated_description = ''
    if description and description.strip():
        translated_description = openai_translate_text(description, source_language, target_language)

    translated_book = None
    book = parse_recommended_book(recommended_book)
    if book:
        translated_book = dict(book)
        translated_book['title'] = openai_translate_text(book['title'], source_language, target_language)
        translated_book['author'] = openai_translate_text(book['author'], source_language, target_language)

    return TranslationResult(
        name=translated_name,
        description=translated_description,
        recommended_book=translated_book,
    )


PROVIDERS = {
    'remote': remote_translate,
    'openai': openai_translate,
}


def request_translation(place_id, source_language: str, name: str,
                        description: str | None, recommended_book) -> TranslationResult:
    """
    Translate a submission into the language it was not written in.

    Args:
        place_id: Id of the place being approved (for the remote function's logs)
        source_language: 'en' or 'ko', the submitter's language
        name: Source-language name, required
        description: Source-language description, may be empty
        recommended_book: Source-language book (dict or stored JSON), may be None

    Returns:
        TranslationResult for the opposite language

    Raises:
        TranslationError: provider disabled, unreachable, or unusable answer
    """
    if not name or not name.strip():
        raise TranslationError('Nothing to translate: name is empty')

    service = current_app.config.get('TRANSLATION_SERVICE', 'remote')
    provider = PROVIDERS.get(service)
    if provider is None:
        raise TranslationError(f'Translation service "{service}" is disabled')

    if _is_circuit_open():
        raise TranslationError('Translation paused after repeated failures')

    logger.info(
        f"[TRANSLATE] Place {place_id}: {source_language} -> "
        f"{opposite_language(source_language)} via {service}"
    )
    try:
        result = provider(
            place_id,
            source_language,
            name,
            description or '',
            parse_recommended_book(recommended_book),
        )
    except TranslationError as e:
        logger.warning(f"[TRANSLATE] Place {place_id} failed: {e.message}")
        _record_failure()
        raise

    _record_success()
    return result
