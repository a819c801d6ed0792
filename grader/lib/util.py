import typing as t


def fragments(texts: t.Iterable[str]) -> list[str]:
    """Split texts on newlines and return the sorted, distinct, non-blank lines."""
    return sorted({line for text in texts for line in text.split("\n") if line.strip()})
