from __future__ import annotations


# Alias families: when any member is unavailable, try the rest in listed order.
MODEL_FAMILIES = {
    "haiku": [
        "claude-3-5-haiku-latest",
        "claude-3-5-haiku-20241022",
        "claude-3-haiku-20240307",
    ],
    "sonnet": [
        "claude-sonnet-4-20250514",
        "claude-3-7-sonnet-latest",
        "claude-3-5-sonnet-latest",
    ],
}


def candidate_models_for(model: str | None) -> list[str]:
    """Ordered models to try: the requested one first, then its family."""
    resolved = (model or "").strip() or MODEL_FAMILIES["haiku"][0]
    candidates = [resolved]
    for family in MODEL_FAMILIES.values():
        if resolved.lower() in family:
            candidates.extend(name for name in family if name not in candidates)
    return candidates


def is_model_not_found_error(exc: Exception) -> bool:
    text = str(exc or "").lower()
    if not text:
        return False
    return (
        "not_found_error" in text
        or ("model" in text and "not found" in text)
        or ("error code: 404" in text and "model" in text)
    )
