from __future__ import annotations

from formrules.engine import validate_submission
from formrules.render import ErrorSummaryItem, build_error_view


def _dob(day: str, month: str, year: str) -> dict[str, str]:
    return {"dateOfBirth-day": day, "dateOfBirth-month": month, "dateOfBirth-year": year}


def test_valid_view(date_of_birth, messages, today) -> None:
    result = validate_submission(date_of_birth, _dob("1", "2", "1990"), messages=messages, today=today)

    view = build_error_view(date_of_birth, result)

    assert view.to_dict() == {
        "formIsInvalid": False,
        "errorSummaryList": [],
        "inputErrors": {},
        "highlight": {"day": False, "month": False, "year": False},
    }


def test_field_specific_error_links_to_its_input(date_of_birth, messages, today) -> None:
    result = validate_submission(date_of_birth, _dob("", "2", "1990"), messages=messages, today=today)

    view = build_error_view(date_of_birth, result)

    assert view.form_is_invalid
    assert view.error_summary_list == (
        ErrorSummaryItem(text="Date of birth must include a day", href="#dateOfBirth-day"),
    )
    assert view.input_errors == {"dateOfBirth-day": "Date of birth must include a day"}
    assert view.highlight == {"day": True, "month": False, "year": False}


def test_consolidated_error_links_to_first_missing_input(date_of_birth, messages, today) -> None:
    result = validate_submission(date_of_birth, _dob("15", "", ""), messages=messages, today=today)

    view = build_error_view(date_of_birth, result).to_dict()

    assert view["errorSummaryList"] == [
        {"text": "Date of birth must include a month and year", "href": "#dateOfBirth-month"}
    ]
    assert view["inputErrors"] == {
        "dateOfBirth-month": "Date of birth must include a month and year",
        "dateOfBirth-year": "Date of birth must include a month and year",
    }
    assert view["highlight"] == {"day": False, "month": True, "year": True}


def test_global_error_links_to_cluster_anchor(date_of_birth, messages, today) -> None:
    result = validate_submission(date_of_birth, _dob("31", "4", "1990"), messages=messages, today=today)

    view = build_error_view(date_of_birth, result)

    assert [item.href for item in view.error_summary_list] == ["#dateOfBirth"]
    assert set(view.input_errors) == {"dateOfBirth-day", "dateOfBirth-month", "dateOfBirth-year"}
    assert all(view.highlight.values())


def test_global_error_without_inline_wording(date_of_birth, messages, today) -> None:
    result = validate_submission(
        date_of_birth,
        _dob("15", "3", "1987"),
        {"originalDay": "15", "originalMonth": "3", "originalYear": "1987"},
        messages=messages,
        today=today,
    )

    view = build_error_view(date_of_birth, result)

    assert view.error_summary_list[0].text == "Update the client date of birth or select 'Cancel'"
    assert view.input_errors == {"dateOfBirth-day": "", "dateOfBirth-month": "", "dateOfBirth-year": ""}


def test_at_most_one_summary_entry_per_cluster(date_of_birth, messages, today) -> None:
    for submitted in (_dob("", "", ""), _dob("x", "y", "z"), _dob("31", "2", "2090"), _dob("1", "", "")):
        result = validate_submission(date_of_birth, submitted, messages=messages, today=today)
        assert len(build_error_view(date_of_birth, result).error_summary_list) == 1
