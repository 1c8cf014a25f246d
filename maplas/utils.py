import json
import math
from typing import Dict, Optional

from flask import request

from .errors import ValidationError

EARTH_RADIUS_KM = 6371.0

LANGUAGES = ("tr", "en", "de", "fr", "ru", "ar")
DEFAULT_LANGUAGE = "tr"


def distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance using the spherical law of cosines."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    delta = math.radians(lng2 - lng1)
    cos_angle = math.cos(phi1) * math.cos(phi2) * math.cos(delta) + math.sin(phi1) * math.sin(phi2)
    # rounding can push identical points slightly past 1
    cos_angle = max(-1.0, min(1.0, cos_angle))
    return EARTH_RADIUS_KM * math.acos(cos_angle)


def _turkish_upper(ch: str) -> str:
    if ch == "i":
        return "İ"
    if ch == "ı":
        return "I"
    return ch.upper()


def _turkish_lower(ch: str) -> str:
    if ch == "I":
        return "ı"
    if ch == "İ":
        return "i"
    return ch.lower()


def title_case_city(city: Optional[str]) -> str:
    if not city:
        return ""
    words = []
    for word in city.strip().split():
        words.append(_turkish_upper(word[0]) + "".join(_turkish_lower(c) for c in word[1:]))
    return " ".join(words)


def localize_text(value) -> Dict[str, str]:
    """Expand user input into a language -> text mapping.

    A plain string is copied into every supported language. A mapping is
    kept, with the default language filled from another entry if missing.
    """
    if value is None:
        value = ""
    if isinstance(value, dict):
        texts = {str(k): str(v) for k, v in value.items() if v is not None}
        if DEFAULT_LANGUAGE not in texts and texts:
            texts[DEFAULT_LANGUAGE] = next(iter(texts.values()))
        return texts
    if not isinstance(value, str):
        raise ValidationError("Localized text must be a string or an object")
    return {lang: value for lang in LANGUAGES}


def localized_content(texts, locale: str, fallback: str = DEFAULT_LANGUAGE) -> str:
    if not texts:
        return ""
    if isinstance(texts, str):
        return texts
    return (
        texts.get(locale)
        or texts.get(fallback)
        or texts.get("en")
        or next(iter(texts.values()), "")
    )


def load_json_text(raw) -> Dict[str, str]:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        # rows written before localization held plain text
        return {DEFAULT_LANGUAGE: raw}
    return data if isinstance(data, dict) else {DEFAULT_LANGUAGE: str(data)}


def parse_float(value, field: str, required: bool = True) -> Optional[float]:
    if value is None or value == "":
        if required:
            raise ValidationError(f"{field} is required")
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{field} must be a finite number")
    return number


def parse_int(value, field: str, required: bool = True) -> Optional[int]:
    if value is None or value == "":
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{field} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")


def check_coordinates(lat: float, lng: float):
    if not -90.0 <= lat <= 90.0:
        raise ValidationError("lat must be between -90 and 90")
    if not -180.0 <= lng <= 180.0:
        raise ValidationError("lng must be between -180 and 180")


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Invalid request")
    return data
