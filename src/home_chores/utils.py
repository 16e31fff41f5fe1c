"""Utility functions for Home Chores."""


def parse_task_title(raw_title: str) -> tuple[str, str | None]:
    """Parse a quick-entry task name, extracting category from #tag syntax.

    The category is taken from everything after the LAST '#' character.

    Args:
        raw_title: The raw input string, e.g., "take out the bins #kitchen"

    Returns:
        A tuple of (name, category). Category is None if no valid category found.

    Examples:
        >>> parse_task_title("buy milk")
        ('buy milk', None)
        >>> parse_task_title("buy milk #Errands")
        ('buy milk', 'Errands')
        >>> parse_task_title("fix tap #bathroom sink")
        ('fix tap', 'bathroom sink')
        >>> parse_task_title("task with #multiple #tags")
        ('task with #multiple', 'tags')
    """
    if "#" not in raw_title:
        return raw_title.strip(), None

    last_hash_index = raw_title.rfind("#")
    title_part = raw_title[:last_hash_index].strip()
    category_part = raw_title[last_hash_index + 1 :].strip()

    # If category is empty or name is empty, treat as uncategorized
    if not category_part or not title_part:
        return raw_title.strip(), None

    return title_part, category_part


def blank_to_none(value: str | None) -> str | None:
    """Strip a form value, mapping empty input to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def truncate(text: str | None, width: int) -> str:
    """Shorten text to ``width`` characters on one line, with an ellipsis."""
    if not text:
        return ""
    flat = " ".join(text.split())
    if len(flat) <= width:
        return flat
    return flat[: max(width - 1, 0)] + "…"
