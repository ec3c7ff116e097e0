"""
Tests for the tool-facing intention operations.
Path: tests/test_operations.py
"""

import json
from datetime import timedelta

import pytest

from intention.errors import IntentStoreError
from intention.models import utc_now
from intention.operations import IntentionService
from intention.skills.asset_manager import AssetManager

def test_log_intent_uses_identity(service):
    result = service.log_intent("src/app.py", "Create application entry point")

    assert result.success
    intent = result.data["intent"]
    assert intent["user"] == "tester"
    assert intent["model"] == "test-model"
    assert intent["overrides"] == []

def test_save_and_get_history(service):
    saved = service.save_intent("src/app.py", "Add health check", user="alice")
    history = service.get_history("src/app.py")

    assert saved.success and history.success
    assert history.data["total"] == 1
    assert history.data["intents"][0]["id"] == saved.data["intent"]["id"]
    assert history.data["intents"][0]["relative_time"] == "just now"

def test_dangling_override_is_reported(service):
    result = service.save_intent("src/app.py", "Replace handler", overrides=["nope"])

    assert not result.success
    assert "nope" in result.error
    assert service.get_history("src/app.py").data["total"] == 0

def test_storage_errors_become_results(service):
    result = service.get_history("../outside.py")

    assert not result.success
    assert "outside the workspace" in result.error

def test_search_intents(service):
    service.log_intent("src/auth.js", "Add authentication to login page")

    found = service.search_intents("authentication", 10)
    missing = service.search_intents("nonexistent", 10)

    assert len(found.data["results"]) == 1
    assert found.data["results"][0]["file_path"] == "src/auth.js"
    assert missing.data["results"] == []

def test_check_without_history(service):
    result = service.check("src/new.py", "Add module")
    assert result.success and result.data["safe"] is True

def test_check_lists_recent_intents_without_prompt(service):
    service.log_intent("src/app.py", "Add health check")

    result = service.check("src/app.py")

    assert result.success
    assert len(result.data["recent_intents"]) == 1
    assert "recommendation" in result.data

def test_check_blocks_fresh_contradiction(service):
    service.log_intent("src/api.py", "Add authentication to the API endpoint")

    result = service.check("src/api.py", "Remove authentication from the API")

    assert result.success
    assert result.data["decision"] == "block"
    assert result.data["safe"] is False
    assert result.data["conflict"]["severity"] == "high"

def test_detect_and_prepare_operations(service, intent_factory):
    intents = [intent_factory("Add authentication to the API endpoint", age=timedelta(hours=2),
                              now=utc_now())]

    detected = service.detect_conflicts("Remove authentication from the API", intents)
    prepared = service.prepare_conflict_analysis("Remove authentication from the API", intents)

    assert detected.data["conflict_type"] == "semantic"
    assert prepared.data["requires_llm_analysis"] is True
    assert "system_prompt" in prepared.data

def test_analyze_and_explain(service):
    service.log_intent("src/parser.py", "Fix bug in tokenizer")

    analyzed = service.analyze("src/parser.py", "Fix another bug in tokenizer")
    explained = service.explain("src/parser.py")
    empty = service.explain("src/other.py")

    assert analyzed.success and analyzed.data["requires_llm_analysis"] is True
    assert "Bug Fixes" in explained.data["themes"]
    assert explained.data["explanation"] == explained.data["summary"]
    assert "no recorded intents" in empty.data["explanation"]

def test_write_new_file_records_intent(service, workspace):
    result = service.write_file("src/new.py", "print('hi')\n", "Create greeting script")

    assert result.success
    assert (workspace / "src" / "new.py").read_text() == "print('hi')\n"
    assert service.get_history("src/new.py").data["total"] == 1

def test_write_blocked_then_forced(service, workspace):
    service.write_file("src/api.py", "auth = True\n", "Add authentication to the API endpoint")

    blocked = service.write_file("src/api.py", "auth = False\n", "Remove authentication from the API")
    assert not blocked.success
    assert blocked.data["decision"] == "block"
    assert (workspace / "src" / "api.py").read_text() == "auth = True\n"

    forced = service.write_file("src/api.py", "auth = False\n",
                                "Remove authentication from the API", force=True)
    assert forced.success
    first_id = service.get_history("src/api.py").data["intents"][0]["id"]
    assert forced.data["intent"]["overrides"] == [first_id]

def test_write_escalates_and_skip_check_proceeds(service, workspace, identity):
    intent_path = workspace / ".intents" / "src" / "loader.py.json"
    intent_path.parent.mkdir(parents=True)
    earlier = utc_now() - timedelta(days=2)
    intent_path.write_text(json.dumps({"intents": [{
        "id": "sync-1",
        "timestamp": earlier.isoformat(),
        "user": "alice",
        "prompt": "Make the config loader synchronous",
        "model": "unknown",
        "overrides": [],
    }]}), encoding="utf-8")
    (workspace / "src").mkdir()
    (workspace / "src" / "loader.py").write_text("def load(): ...\n")

    escalated = service.write_file("src/loader.py", "async def load(): ...\n",
                                   "Switch to async loading")
    assert not escalated.success
    assert escalated.data["requires_conflict_analysis"] is True
    assert escalated.data["request"]["analysis_prompt"].startswith("CONFLICT ANALYSIS REQUEST")

    skipped = service.write_file("src/loader.py", "async def load(): ...\n",
                                 "Switch to async loading", skip_conflict_check=True)
    assert skipped.success
    assert skipped.data["intent"]["overrides"] == []

def test_edit_missing_file(service):
    result = service.edit_file("src/missing.py", "a", "b", "Rename variable")

    assert not result.success
    assert result.error == "File not found: src/missing.py"

def test_edit_without_match_leaves_file_untouched(service, workspace):
    target = workspace / "config.py"
    target.write_text("DEBUG = False\n")

    result = service.edit_file("config.py", "VERBOSE", "QUIET", "Rename verbosity flag")

    assert not result.success
    assert result.error == "The specified text was not found in the file"
    assert target.read_text() == "DEBUG = False\n"
    assert service.get_history("config.py").data["total"] == 0

def test_edit_replace_all_without_match_is_byte_identical(service, workspace):
    target = workspace / "settings.py"
    original = "TIMEOUT = 30\r\nRETRIES = 3\r\n".encode("utf-8")
    target.write_bytes(original)

    result = service.edit_file("settings.py", "VERBOSE", "QUIET", "Rename flag", replace_all=True)

    assert not result.success
    assert result.error == "No matches found for the specified text"
    assert target.read_bytes() == original
    assert service.store.history("settings.py") == []

@pytest.mark.parametrize("make_path", [
    lambda workspace: "../outside.txt",
    lambda workspace: str(workspace.parent / "outside.txt"),
])
def test_write_outside_workspace_changes_nothing(service, workspace, make_path):
    result = service.write_file(make_path(workspace), "hello", "Create outside file")

    assert not result.success
    assert "outside the workspace" in result.error
    assert not (workspace.parent / "outside.txt").exists()
    assert service.search_intents("outside", 10).data["results"] == []

def test_edit_outside_workspace_changes_nothing(service, workspace):
    outside = workspace.parent / "shared.txt"
    outside.write_text("alpha\n")

    result = service.edit_file("../shared.txt", "alpha", "beta", "Rename alpha")

    assert not result.success
    assert "outside the workspace" in result.error
    assert outside.read_text() == "alpha\n"

def test_asset_manager_rejects_paths_outside_root(workspace):
    assets = AssetManager(workspace)

    result = assets.write("../escape.txt", "data")

    assert not result.success
    assert "outside the project root" in result.error
    assert not (workspace.parent / "escape.txt").exists()
    assert not assets.exists("../escape.txt")

def test_edit_replace_all(service, workspace):
    target = workspace / "names.py"
    target.write_text("foo = 1\nbar = foo + foo\n")

    result = service.edit_file("names.py", "foo", "count", "Rename foo to count", replace_all=True)

    assert result.success
    assert result.data["replacements"] == 3
    assert target.read_text() == "count = 1\nbar = count + count\n"

def test_edit_first_occurrence_only(service, workspace):
    target = workspace / "names.py"
    target.write_text("foo foo\n")

    result = service.edit_file("names.py", "foo", "bar", "Rename first foo")

    assert result.success
    assert target.read_text() == "bar foo\n"

def test_operations_never_raise(workspace, identity):
    class BrokenStore:
        workspace_root = workspace

        def history(self, file_path):
            raise IntentStoreError("disk on fire")

    service = IntentionService(identity=identity, store=BrokenStore())

    result = service.explain("anything.py")

    assert not result.success
    assert result.error == "disk on fire"

if __name__ == "__main__":
    pytest.main(["-v", __file__])
