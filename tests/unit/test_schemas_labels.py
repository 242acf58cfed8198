"""Contains unit tests for the label webhook payload schema."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from github_label_sync.schemas.labels import LabelEventPayload, LabelModel


def test_payload_without_changes_has_no_previous_name() -> None:
    """Test that a created payload carries no previous name."""
    payload = LabelEventPayload.model_validate({"action": "created", "label": {"name": "bug", "color": "ff0000", "description": "Something broken"}})
    assert payload.previous_name is None
    assert payload.label == LabelModel(name="bug", color="ff0000", description="Something broken")


def test_payload_reads_previous_name_from_changes() -> None:
    """Test that changes.name.from is exposed as the previous name."""
    payload = LabelEventPayload.model_validate(
        {"action": "edited", "label": {"name": "defect", "color": "ff0000"}, "changes": {"name": {"from": "bug"}}}
    )
    assert payload.previous_name == "bug"


def test_payload_with_only_color_change_has_no_previous_name() -> None:
    """Test that edits touching only other fields carry no previous name."""
    payload = LabelEventPayload.model_validate(
        {"action": "edited", "label": {"name": "bug", "color": "00ff00"}, "changes": {"color": {"from": "ff0000"}}}
    )
    assert payload.previous_name is None


def test_label_normalizes_null_description_and_hash_color() -> None:
    """Test that a null description becomes empty and a leading '#' is dropped from the color."""
    label = LabelModel.model_validate({"name": "bug", "color": "#ff0000", "description": None})
    assert label.description == ""
    assert label.color == "ff0000"


def test_payload_rejects_unknown_action() -> None:
    """Test that actions other than created, edited, and deleted are rejected."""
    with pytest.raises(ValidationError):
        LabelEventPayload.model_validate({"action": "transferred", "label": {"name": "bug", "color": "ff0000"}})


def test_payload_from_file_ignores_unrelated_fields(tmp_path: Path) -> None:
    """Test loading a full webhook payload from disk."""
    event_path = tmp_path / "event.json"
    event_path.write_text(
        json.dumps(
            {
                "action": "deleted",
                "label": {"id": 1, "name": "wontfix", "color": "ffffff", "description": "This will not be worked on", "default": True},
                "repository": {"full_name": "neurobagel/planning"},
                "sender": {"login": "octocat"},
            }
        )
    )
    payload = LabelEventPayload.from_file(event_path)
    assert payload.action == "deleted"
    assert payload.label.name == "wontfix"
