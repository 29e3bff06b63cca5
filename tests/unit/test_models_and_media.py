"""Unit tests for question item parsing and media stream release."""

import asyncio

import pytest

from offerflow.config import MediaConfig
from offerflow.interview_prep import (
    LocalMediaDevices,
    MediaStream,
    MediaTrack,
    PermissionDeniedError,
    QuestionCategory,
    QuestionItem,
    QuestionSource,
)


@pytest.mark.unit
def test_descriptor_labels_case_insensitive():
    """Test category and source labels are matched loosely."""
    item = QuestionItem.from_descriptor(
        {"question": "Design a URL shortener.", "type": "system design", "source": "ROLE REQUIREMENT"}
    )

    assert item.category is QuestionCategory.SYSTEM_DESIGN
    assert item.source is QuestionSource.ROLE_REQUIREMENT
    assert item.hint == ""


@pytest.mark.unit
@pytest.mark.parametrize("descriptor", [None, "text", {"type": "Technical"}, {"question": "   "}, {"question": 7}])
def test_descriptor_without_question_rejected(descriptor):
    """Test descriptors lacking usable text are skipped."""
    assert QuestionItem.from_descriptor(descriptor) is None


@pytest.mark.unit
def test_fresh_items_get_distinct_ids():
    """Test generated items are unbookmarked, unanswered and uniquely identified."""
    first = QuestionItem.from_descriptor({"question": "Why us?"})
    second = QuestionItem.from_descriptor({"question": "Why us?"})

    assert first.id != second.id
    assert first.is_bookmarked is False
    assert first.user_answer is None and first.ai_feedback is None


@pytest.mark.unit
def test_persisted_record_keeps_user_state():
    """Test stored bookmarks, answers and feedback survive a reload."""
    item = QuestionItem("Why us?", category=QuestionCategory.CULTURAL_FIT, hint="Be specific")
    item.is_bookmarked = True
    item.user_answer = "Mission"
    item.ai_feedback = "Add an example"

    record = item.to_dict()
    assert record["type"] == "Cultural Fit"
    assert record["isBookmarked"] is True

    restored = QuestionItem.from_dict(record)
    assert restored == item


@pytest.mark.unit
def test_release_is_idempotent():
    """Test each track is stopped exactly once."""
    stops = []
    stream = MediaStream([
        MediaTrack("video", lambda: stops.append("video")),
        MediaTrack("audio", lambda: stops.append("audio")),
    ])

    assert stream.active
    stream.release()
    stream.release()

    assert stops == ["video", "audio"]
    assert not stream.active


@pytest.mark.unit
def test_release_continues_after_track_error():
    """Test a failing track does not keep the others alive."""
    stops = []

    def broken():
        raise OSError("device busy")

    stream = MediaStream([
        MediaTrack("video", broken),
        MediaTrack("audio", lambda: stops.append("audio")),
    ])
    stream.release()

    assert stops == ["audio"]
    assert not stream.active


@pytest.mark.unit
def test_microphone_failure_releases_camera(monkeypatch):
    """Test an unexpected microphone error still closes the opened camera."""
    devices = LocalMediaDevices(MediaConfig())
    camera = MediaTrack("video", lambda: None)

    def broken_microphone():
        raise OSError("no default input device")

    monkeypatch.setattr(devices, "_open_camera", lambda: camera)
    monkeypatch.setattr(devices, "_open_microphone", broken_microphone)

    with pytest.raises(PermissionDeniedError):
        asyncio.run(devices.acquire())
    assert not camera.live
