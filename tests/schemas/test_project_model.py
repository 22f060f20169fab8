import pytest
from pydantic import ValidationError

from bugsnag_provider.schemas.fields import project_schema
from bugsnag_provider.schemas.project import Project


class TestProjectModel:
    def test_full_record(self, make_project):
        project = Project.model_validate(make_project())

        assert project.id == "p1"
        assert project.name == "web"
        assert project.open_error_count == 3
        assert project.ignored_browser_versions == {"chrome": "45"}

    def test_unknown_keys_are_ignored(self, make_project):
        project = Project.model_validate(make_project(new_remote_field="x"))
        assert "new_remote_field" not in project.to_state()

    @pytest.mark.parametrize(
        "missing_field",
        [pytest.param("id", id="missing_id"), pytest.param("name", id="missing_name")],
    )
    def test_missing_required_field(self, make_project, missing_field):
        raw = make_project()
        del raw[missing_field]
        with pytest.raises(ValidationError) as exc_info:
            Project.model_validate(raw)
        assert missing_field in str(exc_info.value)

    def test_wrong_type(self, make_project):
        with pytest.raises(ValidationError):
            Project.model_validate(make_project(release_stages="production"))

    def test_numeric_browser_versions_become_strings(self, make_project):
        project = Project.model_validate(
            make_project(ignored_browser_versions={"ie": 11, "safari": None})
        )
        assert project.ignored_browser_versions == {"ie": "11"}

    def test_minimal_record_defaults(self):
        project = Project.model_validate({"id": "p1", "name": "web"})
        assert project.release_stages == []
        assert project.slug is None

    def test_state_covers_every_mapped_field(self, make_project):
        state = Project.model_validate(make_project()).to_state()
        schema = project_schema(
            name_required=False, type_required=False, ignore_old_browsers_required=False
        )
        assert set(schema) == set(state)
