"""Form session unit tests"""

import logging
from datetime import timedelta

import pytest

from formengine.consts import ErrorMessages
from formengine.enums import BuilderMode, FieldType
from formengine.migration import load_schema
from formengine.session import FormSession


@pytest.fixture
def clock(now):
    ticks = iter(now + timedelta(seconds=i) for i in range(1000))
    return lambda: next(ticks)


@pytest.fixture
def session(clock):
    return FormSession(clock=clock)


def test_new_session_starts_with_empty_form(session, now):
    assert session.current_form.fields == []
    assert session.current_form.metadata.created_at == now
    assert session.mode == BuilderMode.BUILDER
    assert session.selected_field_id is None


def test_defaults_are_applied_to_new_forms(clock):
    session = FormSession(clock=clock, defaults={"title": "Survey"})
    assert session.current_form.metadata.title == "Survey"


def test_add_field_selects_inserted_field(session):
    first = session.add_field(FieldType.TEXT)
    second = session.add_field("number", 0)

    assert session.selected_field_id == second.id
    assert [f.id for f in session.current_form.fields] == [second.id, first.id]


def test_each_edit_replaces_snapshot_and_stamps_time(session):
    before = session.current_form
    session.add_field("text")

    assert session.current_form is not before
    assert before.fields == []
    assert session.current_form.metadata.updated_at > before.metadata.updated_at


def test_duplicate_selects_copy(session):
    field = session.add_field("text")
    copy = session.duplicate_field(field.id)

    assert copy.label == "Text Input (Copy)"
    assert session.selected_field_id == copy.id
    assert session.duplicate_field("missing") is None


def test_remove_field_clears_selection_and_answer(session):
    field = session.add_field("text")
    session.set_field_value(field.id, "hello")

    session.remove_field(field.id)

    assert session.current_form.fields == []
    assert session.selected_field_id is None
    assert session.form_data == {}


def test_update_and_reorder(session):
    a = session.add_field("text")
    b = session.add_field("email")

    session.update_field(a.id, label="Name")
    session.reorder_field(1, 0)

    assert [f.id for f in session.current_form.fields] == [b.id, a.id]
    assert session.current_form.get_field(a.id).label == "Name"


def test_metadata_and_settings_updates(session):
    session.update_metadata(title="Feedback")
    session.update_settings(success_message="Cheers")

    assert session.current_form.metadata.title == "Feedback"
    assert session.current_form.settings.success_message == "Cheers"


def test_load_form_resets_answers(session, country_state_document):
    session.set_field_value("anything", 1)
    session.select_field("anything")

    session.load_form(load_schema(country_state_document))

    assert session.current_form.id == "address-form"
    assert session.form_data == {}
    assert session.selected_field_id is None


def test_visible_fields_follow_answers(session, country_state_document):
    session.load_form(load_schema(country_state_document))

    session.set_field_value("country", "CA")
    assert [f.id for f in session.visible_fields()] == ["country"]

    session.set_field_value("country", "US")
    assert [f.id for f in session.visible_fields()] == ["country", "state"]


def test_submit_keeps_answers_when_invalid(session, country_state_document):
    session.load_form(load_schema(country_state_document))
    session.set_field_value("country", "US")

    result = session.submit()

    assert result.errors == {"state": ErrorMessages.REQUIRED}
    assert session.form_data == {"country": "US"}


def test_submit_clears_answers_when_valid(session, country_state_document):
    session.load_form(load_schema(country_state_document))
    session.set_field_value("country", "US")
    session.set_field_value("state", "WA")

    result = session.submit()

    assert result.valid is True
    assert session.form_data == {}


def test_cycles_are_reported_as_warning(session, caplog):
    a = session.add_field("text")
    b = session.add_field("text")
    session.update_field(
        a.id, conditions={"rules": [{"field": b.id, "operator": "isEmpty"}], "logic": "AND"}
    )
    session.update_field(
        b.id, conditions={"rules": [{"field": a.id, "operator": "isEmpty"}], "logic": "OR"}
    )

    with caplog.at_level(logging.WARNING, logger="formengine.session"):
        cycles = session.circular_dependencies()

    assert cycles == [a.id]
    assert "dependency cycles" in caplog.text


def test_set_mode(session):
    session.set_mode("preview")
    assert session.mode == BuilderMode.PREVIEW
