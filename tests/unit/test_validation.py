from __future__ import annotations

import pytest

from docsubmit.jurisdictions import COUNTRIES, JurisdictionDirectory, get_directory
from docsubmit.schemas.principal import Principal
from docsubmit.validation import (
    can_submit,
    is_jurisdiction_selected,
    is_valid_email,
    validation_errors,
)
from tests.factories import pdf


@pytest.mark.parametrize(
    "value",
    ["a@b.com", "  first.last@example.co.uk  ", "x+tag@sub.domain.io"],
)
def test_valid_emails(value: str) -> None:
    assert is_valid_email(value)


@pytest.mark.parametrize(
    "value",
    ["", "   ", "not-an-email", "a@b", "a b@c.com", "a@@b.com", "@b.com", None, 42],
)
def test_invalid_emails(value) -> None:
    assert not is_valid_email(value)


def test_jurisdiction_selected(directory) -> None:
    assert is_jurisdiction_selected("India", directory)
    assert not is_jurisdiction_selected("", directory)
    assert not is_jurisdiction_selected(None, directory)
    assert not is_jurisdiction_selected("Atlantis", directory)
    assert not is_jurisdiction_selected("india", directory)


@pytest.mark.parametrize("value", [["India"], {"India": 1}, 7])
def test_non_string_jurisdiction_is_not_selected(value, directory) -> None:
    assert is_jurisdiction_selected(value, directory) is False
    assert can_submit([pdf("a.pdf")], value, "a@b.com", directory) is False
    assert "Select a jurisdiction" in validation_errors(
        [pdf("a.pdf")], value, "a@b.com", directory,
    )


class TestCanSubmit:
    def test_examples(self) -> None:
        directory = get_directory()
        f = pdf("a.pdf")
        assert can_submit([], "India", "a@b.com", directory) is False
        assert can_submit([f], "India", "a@b.com", directory) is True
        assert can_submit([f], "India", "not-an-email", directory) is False

    def test_each_condition_is_required(self, directory) -> None:
        f = pdf("a.pdf")
        assert not can_submit([f], None, "a@b.com", directory)
        assert not can_submit([f], "India", None, directory)
        assert not can_submit([], None, None, directory)

    def test_principal_identity(self, directory) -> None:
        f = pdf("a.pdf")
        assert can_submit([f], "India", Principal(id="u1", email="u@x.org"), directory)
        assert not can_submit([f], "India", Principal(id="u1", email=""), directory)


def test_validation_errors_lists_every_reason(directory) -> None:
    errors = validation_errors([], None, "nope", directory)
    assert errors == [
        "Add at least one PDF document",
        "Select a jurisdiction",
        "Enter a valid email address",
    ]


def test_validation_errors_empty_when_valid(directory) -> None:
    assert validation_errors([pdf("a.pdf")], "Germany", "a@b.com", directory) == []


def test_validation_errors_identity_variants(directory) -> None:
    files = [pdf("a.pdf")]
    assert validation_errors(files, "Mars", "", directory) == [
        "Unknown jurisdiction: Mars",
        "Enter an email address to receive the report",
    ]
    assert validation_errors(files, "India", None, directory) == [
        "Sign in to receive the analysis report",
    ]


def test_directory_order_and_dedup() -> None:
    directory = JurisdictionDirectory(["India", "Chile", "India", ""])
    assert directory.names == ("India", "Chile")
    assert list(directory) == ["India", "Chile"]
    assert len(directory) == 2


def test_default_directory_is_bundled_list() -> None:
    directory = get_directory([])
    assert directory.names == COUNTRIES
    assert "India" in directory
