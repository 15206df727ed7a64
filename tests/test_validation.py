"""
Unit tests for form validation rules.

Tests cover:
- Contact form boundaries and the configurable variant
- Testimonial rating coercion
- Credentials and password reset
"""

import pytest

from app.mbs.validation import (
    ContactRules,
    coerce_rating,
    is_valid_email,
    validate_contact,
    validate_credentials,
    validate_password_change,
    validate_testimonial,
)


class TestContactValidation:
    def test_boundaries_are_inclusive(self):
        data, errors = validate_contact({"name": "Jo", "email": "a@b.com", "message": "x" * 10})
        assert errors == {}
        assert data.name == "Jo"
        assert data.email == "a@b.com"

    def test_message_one_short_fails_on_message_field(self):
        data, errors = validate_contact({"name": "Jo", "email": "a@b.com", "message": "x" * 9})
        assert data is None
        assert list(errors) == ["message"]
        assert errors["message"] == ["Message must be at least 10 characters."]

    def test_short_name_and_bad_email(self):
        data, errors = validate_contact({"name": "J", "email": "not-an-email", "message": "Hello there, counsel."})
        assert data is None
        assert set(errors) == {"name", "email"}

    def test_missing_fields_do_not_raise(self):
        data, errors = validate_contact({})
        assert data is None
        assert set(errors) == {"name", "email", "message"}

    def test_values_are_stripped(self):
        data, errors = validate_contact({"name": "  Jane Doe ", "email": " jane@example.com ", "message": "  I need advice.  "})
        assert errors == {}
        assert data.name == "Jane Doe"
        assert data.email == "jane@example.com"
        assert data.message == "I need advice."

    def test_email_only_variant(self):
        rules = ContactRules(require_name=False, message_min_length=1, require_subject=True)
        data, errors = validate_contact({"email": "a@b.com", "subject": "Hi", "message": "?"}, rules)
        assert errors == {}
        assert data.name == ""
        assert data.subject == "Hi"

        data, errors = validate_contact({"email": "a@b.com", "message": ""}, rules)
        assert data is None
        assert errors["message"] == ["Message is required."]
        assert errors["subject"] == ["Subject is required."]

    def test_rules_from_config(self):
        rules = ContactRules.from_config(
            {"CONTACT_REQUIRE_NAME": False, "CONTACT_MESSAGE_MIN_LENGTH": 1, "CONTACT_REQUIRE_SUBJECT": True}
        )
        assert rules == ContactRules(require_name=False, message_min_length=1, require_subject=True)
        assert ContactRules.from_config({}) == ContactRules()


class TestEmail:
    @pytest.mark.parametrize("value", ["a@b.com", "first.last@firm.co.ug", "x+tag@example.org"])
    def test_valid(self, value):
        assert is_valid_email(value)

    @pytest.mark.parametrize("value", ["", "plain", "a@b", "@b.com", ".a@b.com", "a..b@c.com", "a@b.c", "a b@c.com"])
    def test_invalid(self, value):
        assert not is_valid_email(value)


class TestRatingCoercion:
    @pytest.mark.parametrize("value", ["3", "3.0", 3, 3.0, " 3 "])
    def test_three_normalizes_to_int(self, value):
        assert coerce_rating(value) == (3, None)

    @pytest.mark.parametrize("value", ["", None, "   "])
    def test_absent(self, value):
        assert coerce_rating(value) == (None, None)

    @pytest.mark.parametrize("value", [0, 6, -1, "abc", "3.5", True, "nan", "inf", [3]])
    def test_rejected(self, value):
        rating, error = coerce_rating(value)
        assert rating is None
        assert error == "Rating must be between 1 and 5 stars."

    def test_bounds(self):
        assert coerce_rating("1") == (1, None)
        assert coerce_rating(5) == (5, None)


class TestTestimonialValidation:
    def test_valid_without_rating(self):
        data, errors = validate_testimonial({"client_name": "Amina", "comment": "Excellent counsel throughout."})
        assert errors == {}
        assert data.rating is None

    def test_rating_omitted_vs_empty(self):
        base = {"client_name": "Amina", "comment": "Excellent counsel throughout."}
        assert validate_testimonial({**base, "rating": ""})[0].rating is None
        assert validate_testimonial({**base, "rating": "4"})[0].rating == 4

    def test_comment_too_short(self):
        data, errors = validate_testimonial({"client_name": "Amina", "comment": "Too short", "rating": "9"})
        assert data is None
        assert errors["comment"] == ["Comment must be at least 20 characters."]
        assert errors["rating"] == ["Rating must be between 1 and 5 stars."]


class TestAuthValidation:
    def test_credentials(self):
        creds, errors = validate_credentials({"email": "Admin@Example.com", "password": "secret1"})
        assert errors == {}
        assert creds.email == "admin@example.com"

    def test_credentials_errors(self):
        creds, errors = validate_credentials({"email": "bad", "password": "12345"})
        assert creds is None
        assert errors["password"] == ["Password must be at least 6 characters."]
        assert "email" in errors

    def test_password_mismatch_attaches_to_confirmation(self):
        change, errors = validate_password_change({"password": "secret1", "confirmPassword": "secret2"})
        assert change is None
        assert list(errors) == ["confirmPassword"]
        assert errors["confirmPassword"] == ["Passwords do not match."]

    def test_password_change_ok(self):
        change, errors = validate_password_change({"password": "secret1", "confirmPassword": "secret1"})
        assert errors == {}
        assert change.password == "secret1"


class TestMalformedValues:
    def test_list_comment_is_rejected_not_stringified(self):
        data, errors = validate_testimonial({"client_name": "Amina", "comment": ["x" * 20]})
        assert data is None
        assert errors == {"comment": ["Invalid value."]}

    @pytest.mark.parametrize("value", [["Jane"], {"first": "Jane"}, True])
    def test_contact_name_must_be_scalar(self, value):
        data, errors = validate_contact({"name": value, "email": "a@b.com", "message": "x" * 10})
        assert data is None
        assert errors == {"name": ["Invalid value."]}

    def test_numbers_are_read_as_text(self):
        data, errors = validate_contact({"name": 42, "email": "a@b.com", "message": 1234567890})
        assert errors == {}
        assert data.name == "42"
        assert data.message == "1234567890"

    def test_password_fields_must_be_scalar(self):
        creds, errors = validate_credentials({"email": "a@b.com", "password": ["secret1"]})
        assert creds is None
        assert errors == {"password": ["Invalid value."]}

        change, errors = validate_password_change({"password": "secret1", "confirmPassword": {"v": "secret1"}})
        assert change is None
        assert errors["confirmPassword"] == ["Invalid value."]
