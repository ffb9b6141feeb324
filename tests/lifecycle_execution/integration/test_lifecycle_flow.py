"""Apply, refresh and destroy flow tests against the recording remote API."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from contenttype_reconciler.content_model.content_model_entities import Field
from contenttype_reconciler.lifecycle_execution import (
    ChangeAction,
    LifecycleExecutionError,
    LifecycleRequest,
    execute_apply,
    execute_destroy,
    execute_plan,
    execute_refresh,
)
from contenttype_reconciler.remote_api.remote_contracts import ActivationError


def _write_config(tmp_path: Path, content_types: dict, **api) -> Path:
    config_path = tmp_path / "contenttypes.yaml"
    config_path.write_text(
        yaml.safe_dump(
            {
                "api": {"access_token": "token", **api},
                "content_types": content_types,
            },
            sort_keys=False,
        ),
        encoding="utf-8",
    )
    return config_path


def _blog_post(*field_ids: str, space_id: str = "space-1", description: str = "") -> dict:
    return {
        "space_id": space_id,
        "name": "Blog Post",
        "description": description,
        "display_field": field_ids[0],
        "field": [
            {"id": field_id, "name": field_id.title(), "type": "Symbol"} for field_id in field_ids
        ],
    }


def _state(tmp_path: Path) -> dict:
    return json.loads((tmp_path / "contenttypes.state.json").read_text(encoding="utf-8"))


def _apply(config_path: Path, recording_client, **kwargs):
    return execute_apply(
        LifecycleRequest(config_path=str(config_path), **kwargs),
        client_factory=lambda settings: recording_client,
    )


def test_apply_creates_declared_content_types_and_records_state(
    tmp_path: Path, recording_client
) -> None:
    config_path = _write_config(tmp_path, {"post": _blog_post("title", "body")})

    outcome = _apply(config_path, recording_client)

    (result,) = outcome.results
    assert result.action == ChangeAction.CREATE
    assert result.observed is not None
    assert result.observed.content_type_id == "ct-1"
    assert outcome.changed == 1
    entry = _state(tmp_path)["resources"]["post"]
    assert (entry["id"], entry["version"], entry["space_id"]) == ("ct-1", 2, "space-1")
    assert recording_client.closed is True


def test_second_apply_without_changes_makes_no_remote_mutations(
    tmp_path: Path, recording_client
) -> None:
    config_path = _write_config(tmp_path, {"post": _blog_post("title")})
    _apply(config_path, recording_client)
    recording_client.calls.clear()

    outcome = _apply(config_path, recording_client)

    assert [result.action for result in outcome.results] == [ChangeAction.NOOP]
    assert outcome.changed == 0
    assert recording_client.calls == []


def test_apply_removing_a_field_runs_two_phases_and_records_final_fields(
    tmp_path: Path, recording_client
) -> None:
    config_path = _write_config(tmp_path, {"post": _blog_post("title", "legacy")})
    _apply(config_path, recording_client)
    recording_client.calls.clear()
    _write_config(tmp_path, {"post": _blog_post("title")})

    outcome = _apply(config_path, recording_client)

    assert outcome.results[0].action == ChangeAction.UPDATE
    assert recording_client.operations() == [
        "get_content_type",
        "save",
        "activate",
        "save",
        "activate",
    ]
    entry = _state(tmp_path)["resources"]["post"]
    assert entry["version"] == 6
    assert [field["id"] for field in entry["declaration"]["field"]] == ["title"]
    assert recording_client.store[("space-1", "ct-1")].fields == (
        Field(id="title", name="Title", type="Symbol"),
    )


def test_apply_with_changed_space_replaces_the_content_type(
    tmp_path: Path, recording_client
) -> None:
    recording_client.spaces.add("space-2")
    config_path = _write_config(tmp_path, {"post": _blog_post("title")})
    _apply(config_path, recording_client)
    _write_config(tmp_path, {"post": _blog_post("title", space_id="space-2")})

    outcome = _apply(config_path, recording_client)

    assert outcome.results[0].action == ChangeAction.REPLACE
    assert set(recording_client.store) == {("space-2", "ct-2")}
    assert _state(tmp_path)["resources"]["post"]["space_id"] == "space-2"


def test_apply_deletes_content_types_no_longer_declared(tmp_path: Path, recording_client) -> None:
    config_path = _write_config(
        tmp_path, {"post": _blog_post("title"), "author": _blog_post("name")}
    )
    _apply(config_path, recording_client)
    _write_config(tmp_path, {"post": _blog_post("title")})

    outcome = _apply(config_path, recording_client)

    assert [(result.resource_name, result.action) for result in outcome.results] == [
        ("post", ChangeAction.NOOP),
        ("author", ChangeAction.DELETE),
    ]
    assert list(_state(tmp_path)["resources"]) == ["post"]
    assert set(recording_client.store) == {("space-1", "ct-1")}


def test_activation_failure_leaves_resource_untracked_but_keeps_earlier_progress(
    tmp_path: Path, recording_client
) -> None:
    config_path = _write_config(
        tmp_path, {"post": _blog_post("title"), "author": _blog_post("name")}
    )
    recording_client.failures["activate"] = ActivationError("publish rejected")
    with pytest.raises(LifecycleExecutionError, match="post: create failed: publish rejected"):
        _apply(config_path, recording_client)

    assert not (tmp_path / "contenttypes.state.json").exists()
    assert ("space-1", "ct-1") in recording_client.store
    assert recording_client.closed is True

    outcome = _apply(config_path, recording_client)

    assert [result.action for result in outcome.results] == [
        ChangeAction.CREATE,
        ChangeAction.CREATE,
    ]
    assert list(_state(tmp_path)["resources"]) == ["author", "post"]


def test_failure_on_second_resource_persists_first_resource(
    tmp_path: Path, recording_client
) -> None:
    config_path = _write_config(
        tmp_path, {"post": _blog_post("title"), "author": _blog_post("name", space_id="missing")}
    )

    with pytest.raises(LifecycleExecutionError, match="author: create failed"):
        _apply(config_path, recording_client)

    assert list(_state(tmp_path)["resources"]) == ["post"]


def test_dry_run_plans_without_remote_calls_or_state(tmp_path: Path, recording_client) -> None:
    config_path = _write_config(tmp_path, {"post": _blog_post("title")})

    outcome = _apply(config_path, recording_client, dry_run=True)

    assert outcome.dry_run is True
    assert [result.action for result in outcome.results] == [ChangeAction.CREATE]
    assert recording_client.calls == []
    assert not (tmp_path / "contenttypes.state.json").exists()


def test_execute_plan_reports_field_diff(tmp_path: Path, recording_client) -> None:
    config_path = _write_config(tmp_path, {"post": _blog_post("title", "legacy")})
    _apply(config_path, recording_client)
    _write_config(tmp_path, {"post": _blog_post("title", "slug")})

    (change,) = execute_plan(LifecycleRequest(config_path=str(config_path)))

    assert change.action == ChangeAction.UPDATE
    assert change.field_diff is not None
    assert change.field_diff.added_field_ids == ("slug",)
    assert change.field_diff.removed_field_ids == ("legacy",)


def test_refresh_records_remote_version_and_drops_vanished_resources(
    tmp_path: Path, recording_client
) -> None:
    config_path = _write_config(
        tmp_path, {"post": _blog_post("title"), "author": _blog_post("name")}
    )
    _apply(config_path, recording_client)
    recording_client.store[("space-1", "ct-1")].version = 12
    del recording_client.store[("space-1", "ct-2")]

    outcome = execute_refresh(
        LifecycleRequest(config_path=str(config_path)),
        client_factory=lambda settings: recording_client,
    )

    assert [(result.resource_name, result.action) for result in outcome.results] == [
        ("author", ChangeAction.DELETE),
        ("post", ChangeAction.NOOP),
    ]
    resources = _state(tmp_path)["resources"]
    assert list(resources) == ["post"]
    assert resources["post"]["version"] == 12


def test_destroy_deletes_every_tracked_content_type(tmp_path: Path, recording_client) -> None:
    config_path = _write_config(
        tmp_path, {"post": _blog_post("title")}, deactivate_before_delete=True
    )
    _apply(config_path, recording_client)
    recording_client.calls.clear()

    outcome = execute_destroy(
        LifecycleRequest(config_path=str(config_path)),
        client_factory=lambda settings: recording_client,
    )

    assert [result.action for result in outcome.results] == [ChangeAction.DELETE]
    assert recording_client.operations() == ["get_content_type", "deactivate", "delete"]
    assert recording_client.store == {}
    assert _state(tmp_path)["resources"] == {}


def test_invalid_configuration_is_reported_as_execution_error(tmp_path: Path) -> None:
    config_path = tmp_path / "contenttypes.yaml"
    config_path.write_text("content_types: {}\n", encoding="utf-8")

    with pytest.raises(LifecycleExecutionError, match="Configuration section 'api' is required"):
        execute_plan(LifecycleRequest(config_path=str(config_path)))
