"""Pure text analytics served by the tool worker.

These functions operate on plain note dicts ({"id", "text", "createdAt",
"updatedAt"}) as sent by the server, never on server-side objects.
"""

import re
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any

_TAG_RE = re.compile(r"<[^>]*>")
_BLOCK_END_RE = re.compile(r"<br\s*/?>|</(?:p|li|h[1-6]|div|blockquote)>", re.IGNORECASE)
_WORD_RE = re.compile(r"\b[a-z]{4,}\b")

_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_URL_RE = re.compile(r"https?://[^\s<>\"']+")
_DATE_RE = re.compile(
    r"\b\d{1,2}[/-]\d{1,2}[/-]\d{2,4}\b"
    r"|\b(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]* \d{1,2},? \d{4}\b",
    re.IGNORECASE,
)
_PHONE_RE = re.compile(r"\(\d{3}\)\s*\d{3}[-.]?\d{4}|\b\d{3}[-.]?\d{3}[-.]?\d{4}\b")

STOP_WORDS = frozenset(
    {
        "about", "been", "could", "from", "have", "should", "that", "their",
        "there", "this", "what", "when", "which", "will", "with", "would",
        "your", "also", "into", "just", "more", "some", "than", "them",
        "then", "they", "were",
    }
)
POSITIVE_WORDS = ("happy", "great", "excellent", "good", "love", "awesome", "wonderful", "fantastic")
NEGATIVE_WORDS = ("sad", "bad", "terrible", "hate", "awful", "horrible", "poor", "worst")

ANALYSIS_TYPES = ("summary", "topics", "sentiment", "actionItems", "statistics")


def strip_html(text: str) -> str:
    """Remove markup, turning block-level closing tags into line breaks."""
    return _TAG_RE.sub("", _BLOCK_END_RE.sub("\n", text))


def _unique(matches: list[str]) -> list[str]:
    return list(dict.fromkeys(matches))


def extract_entities(text: str) -> dict[str, Any]:
    """Find emails, URLs, dates and phone numbers in text.

    Each entity list is de-duplicated, keeping first-seen order.
    """
    clean = strip_html(text)
    return {
        "entities": {
            "emails": _unique(_EMAIL_RE.findall(clean)),
            "urls": _unique(_URL_RE.findall(clean)),
            "dates": _unique(_DATE_RE.findall(clean)),
            "phones": _unique(_PHONE_RE.findall(clean)),
        }
    }


def _parse_time(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _word_counts(notes: list[dict[str, Any]]) -> Counter[str]:
    counts: Counter[str] = Counter()
    for note in notes:
        words = _WORD_RE.findall(strip_html(note.get("text", "")).lower())
        counts.update(word for word in words if word not in STOP_WORDS)
    return counts


def summarize(notes: list[dict[str, Any]]) -> dict[str, Any]:
    all_text = "\n\n".join(strip_html(note.get("text", "")) for note in notes)
    word_count = len(all_text.split())
    key_phrases = [word for word, _ in _word_counts(notes).most_common(10)]

    recent = sorted(notes, key=lambda n: _parse_time(n["createdAt"]), reverse=True)[:5]
    recent_notes = []
    for note in recent:
        clean = strip_html(note.get("text", "")).strip()
        preview = clean[:100] + ("..." if len(clean) > 100 else "")
        recent_notes.append(
            {"id": note["id"], "preview": preview, "createdAt": note["createdAt"]}
        )

    topics = ", ".join(key_phrases[:5]) or "none yet"
    return {
        "totalNotes": len(notes),
        "totalWords": word_count,
        "keyPhrases": key_phrases,
        "recentNotes": recent_notes,
        "summary": (
            f"You have {len(notes)} notes with approximately {word_count} words. "
            f"Key topics include: {topics}."
        ),
    }


def extract_topics(notes: list[dict[str, Any]]) -> dict[str, Any]:
    counts = _word_counts(notes)
    return {
        "topics": [{"word": word, "count": count} for word, count in counts.most_common(10)],
        "totalUniqueWords": len(counts),
    }


def analyze_sentiment(notes: list[dict[str, Any]]) -> dict[str, Any]:
    sentiments = []
    for note in notes:
        words = Counter(re.findall(r"\b[a-z]+\b", strip_html(note.get("text", "")).lower()))
        score = sum(words[w] for w in POSITIVE_WORDS) - sum(words[w] for w in NEGATIVE_WORDS)
        if score > 0:
            label = "positive"
        elif score < 0:
            label = "negative"
        else:
            label = "neutral"
        sentiments.append({"noteId": note["id"], "sentiment": label, "score": score})

    average = sum(s["score"] for s in sentiments) / len(sentiments) if sentiments else 0.0
    return {"sentiments": sentiments, "averageSentiment": f"{average:.2f}"}


def _is_action_item(line: str) -> bool:
    lowered = line.lower()
    return (
        "todo" in lowered
        or "[ ]" in line
        or re.match(r"^\s*[-*]\s", line) is not None
        or "action:" in lowered
        or "task:" in lowered
    )


def extract_action_items(notes: list[dict[str, Any]]) -> dict[str, Any]:
    items = []
    for note in notes:
        for line in strip_html(note.get("text", "")).split("\n"):
            if line.strip() and _is_action_item(line):
                items.append({"noteId": note["id"], "item": line.strip()})
    return {"actionItems": items, "count": len(items)}


def calculate_statistics(
    notes: list[dict[str, Any]], now: datetime | None = None
) -> dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    by_date = sorted(notes, key=lambda n: _parse_time(n["createdAt"]), reverse=True)
    week_ago = now - timedelta(days=7)

    created = [_parse_time(note["createdAt"]) for note in notes]
    return {
        "totalNotes": len(notes),
        "oldestNote": by_date[-1]["createdAt"] if by_date else None,
        "newestNote": by_date[0]["createdAt"] if by_date else None,
        "notesThisWeek": sum(1 for c in created if c >= week_ago),
        "notesThisMonth": sum(
            1 for c in created if c.year == now.year and c.month == now.month
        ),
    }


def analyze_notes(
    notes: list[dict[str, Any]], analysis_type: str, now: datetime | None = None
) -> dict[str, Any]:
    """Run one kind of analysis over a list of notes.

    Raises:
        ValueError: If analysis_type is not supported
    """
    if analysis_type == "summary":
        return summarize(notes)
    if analysis_type == "topics":
        return extract_topics(notes)
    if analysis_type == "sentiment":
        return analyze_sentiment(notes)
    if analysis_type == "actionItems":
        return extract_action_items(notes)
    if analysis_type == "statistics":
        return calculate_statistics(notes, now=now)
    raise ValueError(f"Unknown analysis type: {analysis_type}")
