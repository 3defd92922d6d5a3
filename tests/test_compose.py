"""
Tests for compose rules, address validation and the Message model
"""
from datetime import datetime, timedelta

import pytest

from zenmail.core.compose import (
    Submission,
    attribution_line,
    prepare_forward_subject,
    prepare_reply_subject,
    reply_body_lines,
    sanitize_subject,
)
from zenmail.core.validation import EmailValidator
from zenmail.utils.errors import (
    InvalidEmailAddressError,
    MissingRequiredFieldError,
    ValidationError,
)

from test_helpers import MessageTestHelper


class TestSubjects:
    """Test subject preparation"""

    @pytest.mark.parametrize("original,expected", [
        ("Hello", "Re: Hello"),
        ("  Hello  ", "Re: Hello"),
        ("Re: Hello", "Re: Hello"),
        ("RE: Hello", "RE: Hello"),
        ("re:Hello", "re:Hello"),
        ("", "Re: "),
    ])
    def test_reply_subject(self, original, expected):
        assert prepare_reply_subject(original) == expected

    def test_reply_subject_is_idempotent(self):
        """Replying to a reply never stacks prefixes"""
        once = prepare_reply_subject("Hello")
        assert prepare_reply_subject(once) == "Re: Hello"

    @pytest.mark.parametrize("original,expected", [
        ("Report", "Fwd: Report"),
        ("Fwd: Report", "Fwd: Report"),
        ("FW: Report", "FW: Report"),
    ])
    def test_forward_subject(self, original, expected):
        assert prepare_forward_subject(original) == expected

    @pytest.mark.parametrize("raw,expected", [
        ("Hello\r\nBcc: victim@x.com", "Hello Bcc: victim@x.com"),
        ("a\tb", "a b"),
        ("  lots    of   space ", "lots of space"),
        ("bell\x07here", "bell here"),
        ("\n\n", ""),
    ])
    def test_sanitize_subject(self, raw, expected):
        assert sanitize_subject(raw) == expected


class TestReplySeeding:
    """Test the quoted reply body"""

    def test_reply_body_layout(self, sample_message):
        lines = reply_body_lines(sample_message)
        assert lines[0] == ""
        assert lines[1] == ""
        assert lines[2] == "On Wed, 01 Oct 2025 at 09:30, Alice Smith wrote:"
        assert lines[3] == ""
        assert lines[4:] == ["> hi", "> there"]

    def test_attribution_uses_raw_sender_without_name(self):
        message = MessageTestHelper.create_message(
            sender="bob@x.com", date=datetime(2025, 1, 6, 8, 5)
        )
        assert attribution_line(message) == "On Mon, 06 Jan 2025 at 08:05, bob@x.com wrote:"

    def test_empty_body_quotes_one_line(self):
        message = MessageTestHelper.create_message(body="")
        assert reply_body_lines(message)[4:] == ["> "]

    def test_crlf_body_is_quoted_cleanly(self):
        message = MessageTestHelper.create_message(body="a\r\nb")
        assert reply_body_lines(message)[4:] == ["> a", "> b"]


class TestSubmission:
    """Test payload building and the validation gate"""

    def test_from_fields_normalises(self):
        submission = Submission.from_fields("  bob@x.com ", "Hi\tthere", ["line 1", "line 2"])
        assert submission.recipient == "bob@x.com"
        assert submission.subject == "Hi there"
        assert submission.body == "line 1\nline 2"

    def test_valid_submission(self):
        Submission("bob@x.com", "Hi", "Body").validate()

    def test_display_name_recipient_is_accepted(self):
        Submission("Bob Jones <bob@x.com>", "Hi", "Body").validate()

    @pytest.mark.parametrize("recipient,subject,body,error", [
        ("", "Hi", "Body", MissingRequiredFieldError),
        ("bob", "Hi", "Body", InvalidEmailAddressError),
        ("bob@", "Hi", "Body", InvalidEmailAddressError),
        ("bob@x.com", "", "Body", MissingRequiredFieldError),
        ("bob@x.com", "Hi", "", MissingRequiredFieldError),
    ])
    def test_invalid_submissions(self, recipient, subject, body, error):
        with pytest.raises(error) as exc_info:
            Submission(recipient, subject, body).validate()
        assert isinstance(exc_info.value, ValidationError)


class TestEmailValidator:
    """Test email address validation"""

    @pytest.mark.parametrize("address", [
        "alice@x.com",
        "first.last@mail.acme.org",
        "Alice <alice@x.com>",
    ])
    def test_valid(self, address):
        assert EmailValidator.is_valid_email(address)

    @pytest.mark.parametrize("address", [
        "",
        None,
        "alice",
        "alice@",
        "@x.com",
        "alice@@x.com",
    ])
    def test_invalid(self, address):
        assert not EmailValidator.is_valid_email(address)

    def test_extract_address(self):
        assert EmailValidator.extract_address('"A, B" <ab@x.com>') == "ab@x.com"
        assert EmailValidator.extract_address(" ab@x.com ") == "ab@x.com"


class TestMessageModel:
    """Test Message display helpers"""

    def test_display_sender_prefers_name(self):
        message = MessageTestHelper.create_message(sender='"Alice Smith" <alice@x.com>')
        assert message.display_sender == "Alice Smith"
        assert message.sender_address == "alice@x.com"

    def test_display_sender_falls_back(self):
        assert MessageTestHelper.create_message(sender="alice@x.com").display_sender == "alice@x.com"
        assert MessageTestHelper.create_message(sender="").display_sender == "Unknown Sender"
        assert MessageTestHelper.create_message(sender="<alice@x.com>").display_sender == "<alice@x.com>"

    def test_short_subject(self):
        message = MessageTestHelper.create_message(subject="A rather long subject")
        assert message.short_subject(10) == "A rathe..."
        assert message.short_subject(100) == "A rather long subject"

    def test_format_date(self, now):
        make = lambda delta: MessageTestHelper.create_message(date=now - delta)  # noqa: E731
        assert make(timedelta(hours=2)).format_date(now) == "10:00"
        assert make(timedelta(days=2)).format_date(now) == "Tue 12:00"
        assert make(timedelta(days=30)).format_date(now) == "Sep 02"

    def test_messages_are_immutable(self, sample_message):
        with pytest.raises(AttributeError):
            sample_message.subject = "changed"
