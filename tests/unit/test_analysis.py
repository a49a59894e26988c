"""Unit tests for the note analytics served by the tool worker."""

from datetime import datetime, timezone

import pytest

from quill_server.worker import analysis

NOW = datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)


def note(note_id, text, created_at="2024-03-19T09:00:00Z"):
    return {"id": note_id, "text": text, "createdAt": created_at, "updatedAt": created_at}


def test_strip_html_turns_blocks_into_lines():
    assert analysis.strip_html("<p>One</p><p>Two<br>Three</p>") == "One\nTwo\nThree\n"


def test_extract_entities_finds_all_kinds():
    text = (
        "<p>Mail alice@example.com or see https://example.com/docs today</p>"
        "<p>Call 555-123-4567 before 12/25/2024 or Jan 5, 2025.</p>"
    )

    entities = analysis.extract_entities(text)["entities"]

    assert entities["emails"] == ["alice@example.com"]
    assert entities["urls"] == ["https://example.com/docs"]
    assert entities["phones"] == ["555-123-4567"]
    assert entities["dates"] == ["12/25/2024", "Jan 5, 2025"]


def test_extract_entities_deduplicates():
    entities = analysis.extract_entities("a@b.io and a@b.io again")["entities"]
    assert entities["emails"] == ["a@b.io"]


def test_extract_entities_empty_text():
    assert analysis.extract_entities("") == {
        "entities": {"emails": [], "urls": [], "dates": [], "phones": []}
    }


def test_summary():
    notes = [
        note("n1", "<p>Project planning meeting about project budget</p>", "2024-03-18T09:00:00Z"),
        note("n2", "Budget review with finance", "2024-03-19T09:00:00Z"),
    ]

    result = analysis.analyze_notes(notes, "summary")

    assert result["totalNotes"] == 2
    assert result["totalWords"] == 10
    assert result["keyPhrases"][:2] == ["project", "budget"]
    assert [n["id"] for n in result["recentNotes"]] == ["n2", "n1"]
    assert result["summary"].startswith("You have 2 notes with approximately 10 words.")


def test_summary_preview_is_truncated():
    result = analysis.summarize([note("n1", "word " * 50)])
    assert result["recentNotes"][0]["preview"].endswith("...")
    assert len(result["recentNotes"][0]["preview"]) == 103


def test_topics_skip_stop_words_and_short_words():
    result = analysis.analyze_notes(
        [note("n1", "this garden garden has roses and roses roses")], "topics"
    )

    assert result["topics"] == [{"word": "roses", "count": 3}, {"word": "garden", "count": 2}]
    assert result["totalUniqueWords"] == 2


def test_sentiment():
    notes = [
        note("n1", "What a great and wonderful day"),
        note("n2", "Terrible traffic, awful weather, bad mood"),
        note("n3", "Groceries"),
    ]

    result = analysis.analyze_notes(notes, "sentiment")

    assert [s["sentiment"] for s in result["sentiments"]] == ["positive", "negative", "neutral"]
    assert [s["score"] for s in result["sentiments"]] == [2, -3, 0]
    assert result["averageSentiment"] == "-0.33"


def test_sentiment_without_notes():
    assert analysis.analyze_sentiment([]) == {"sentiments": [], "averageSentiment": "0.00"}


def test_action_items():
    text = "Plan\n- buy milk\nTODO call mom\n[ ] pay rent\nTask: file taxes\nJust a thought"

    result = analysis.analyze_notes([note("n1", text)], "actionItems")

    assert [item["item"] for item in result["actionItems"]] == [
        "- buy milk",
        "TODO call mom",
        "[ ] pay rent",
        "Task: file taxes",
    ]
    assert result["count"] == 4


def test_statistics():
    notes = [
        note("n1", "a", "2024-03-19T09:00:00Z"),
        note("n2", "b", "2024-03-02T09:00:00Z"),
        note("n3", "c", "2024-02-10T09:00:00Z"),
    ]

    result = analysis.analyze_notes(notes, "statistics", now=NOW)

    assert result == {
        "totalNotes": 3,
        "oldestNote": "2024-02-10T09:00:00Z",
        "newestNote": "2024-03-19T09:00:00Z",
        "notesThisWeek": 1,
        "notesThisMonth": 2,
    }


def test_statistics_without_notes():
    result = analysis.calculate_statistics([], now=NOW)
    assert result["totalNotes"] == 0
    assert result["oldestNote"] is None
    assert result["newestNote"] is None


def test_unknown_analysis_type():
    with pytest.raises(ValueError, match="Unknown analysis type: mood"):
        analysis.analyze_notes([], "mood")
