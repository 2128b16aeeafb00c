import re
from typing import Iterable, List

from django.conf import settings

from common.exceptions import ValidationError

IMAGE_URL_REGEX = re.compile(r"^https?://.+\.(jpg|jpeg|png|gif|webp)$", re.IGNORECASE)


def _limit(key: str, default: int) -> int:
    return int(getattr(settings, "POST_LIMITS", {}).get(key, default))


def max_content_length() -> int:
    return _limit("MAX_CONTENT_LENGTH", 1000)


def max_comment_length() -> int:
    return _limit("MAX_COMMENT_LENGTH", 500)


def max_images() -> int:
    return _limit("MAX_IMAGES", 10)


def _clean_text(value, max_length: int, label: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{label} must be a string.")
    text = value.strip()
    if not text:
        raise ValidationError(f"{label} must not be empty.")
    if len(text) > max_length:
        raise ValidationError(f"{label} cannot exceed {max_length} characters.")
    return text


def validate_post_content(value) -> str:
    return _clean_text(value, max_content_length(), "Post content")


def validate_comment_content(value) -> str:
    return _clean_text(value, max_comment_length(), "Comment")


def validate_images(urls: Iterable) -> List[str]:
    # 순서 유지. 각 항목은 허용된 이미지 확장자로 끝나는 http(s) URL 이어야 한다.
    if urls is None:
        return []
    if not isinstance(urls, (list, tuple)):
        raise ValidationError("Images must be a list of URLs.")
    cleaned = []
    for url in urls:
        if not isinstance(url, str) or not IMAGE_URL_REGEX.match(url.strip()):
            raise ValidationError(f"Invalid image URL: {url}")
        cleaned.append(url.strip())
    if len(cleaned) > max_images():
        raise ValidationError(f"Too many images (>{max_images()}).")
    return cleaned
