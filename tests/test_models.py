"""Tests for Slack payload models and the webhook parser."""

import json

import pytest
from pydantic import ValidationError

from conftest import make_event_callback, make_file, to_body
from alttext_bot.errors import MalformedPayload
from alttext_bot.models.slack import Attachment, EventEnvelope, InboundEvent
from alttext_bot.sources.slack import SlackSource


class TestMissingDescription:

    def test_image_without_alt_txt_key_is_missing(self):
        assert Attachment.model_validate(make_file("a.png")).missing_description

    def test_empty_alt_txt_is_not_missing(self):
        assert not Attachment.model_validate(make_file("a.png", alt_txt="")).missing_description

    def test_null_alt_txt_is_not_missing(self):
        assert not Attachment.model_validate(make_file("a.png", alt_txt=None)).missing_description

    def test_described_image_is_not_missing(self):
        assert not Attachment.model_validate(make_file("a.png", alt_txt="A cat")).missing_description

    def test_non_image_is_not_missing(self):
        assert not Attachment.model_validate(make_file("a.pdf", mimetype="application/pdf")).missing_description

    def test_file_without_mimetype_is_not_an_image(self):
        assert not Attachment.model_validate({"name": "mystery"}).is_image

    def test_event_filters_images_missing_description(self):
        event = InboundEvent.model_validate(
            make_event_callback(
                files=[
                    make_file("a.png"),
                    make_file("b.png", alt_txt="described"),
                    make_file("c.pdf", mimetype="application/pdf"),
                    make_file("d.jpg", mimetype="image/jpeg"),
                ]
            )["event"]
        )
        assert [f.name for f in event.images_missing_description] == ["a.png", "d.jpg"]


class TestAttachment:

    def test_models_are_immutable(self):
        attachment = Attachment.model_validate(make_file("a.png"))
        with pytest.raises(ValidationError):
            attachment.name = "b.png"


class TestFingerprint:

    def test_event_id_takes_precedence(self):
        envelope = EventEnvelope.model_validate(make_event_callback(event_id="Ev42"))
        assert envelope.fingerprint == "Ev42_C123_U123"

    def test_falls_back_to_event_ts(self):
        envelope = EventEnvelope.model_validate(
            make_event_callback(event_id=None, event_ts="1700000001.1", ts="1700000000.9")
        )
        assert envelope.fingerprint == "1700000001.1_C123_U123"

    def test_falls_back_to_ts(self):
        payload = make_event_callback(event_id=None, ts="1700000000.9")
        del payload["event"]["event_ts"]
        envelope = EventEnvelope.model_validate(payload)
        assert envelope.fingerprint == "1700000000.9_C123_U123"

    def test_redeliveries_share_fingerprint(self):
        first = EventEnvelope.model_validate(make_event_callback(files=[make_file()]))
        again = EventEnvelope.model_validate(make_event_callback(files=[make_file()]))
        assert first.fingerprint == again.fingerprint


class TestSlackSource:

    def test_parses_event_callback(self):
        envelope = SlackSource().parse(to_body(make_event_callback(files=[make_file("a.png")])))

        assert envelope.type == "event_callback"
        assert envelope.event_id == "Ev0001"
        assert envelope.event.channel == "C123"
        assert envelope.event.files[0].name == "a.png"

    def test_parses_url_verification(self):
        body = json.dumps({"type": "url_verification", "challenge": "abc", "token": "t"}).encode()
        envelope = SlackSource().parse(body)
        assert envelope.challenge == "abc"

    def test_ignores_unknown_fields(self):
        payload = make_event_callback(files=[make_file("a.png", size=1234, is_public=True)], blocks=[])
        envelope = SlackSource().parse(to_body(payload))
        assert envelope.event.files[0].name == "a.png"

    @pytest.mark.parametrize("body", [b"not json", b"[1, 2]", b'{"event": {}}', b"\xff\xfe"])
    def test_rejects_malformed_body(self, body):
        with pytest.raises(MalformedPayload):
            SlackSource().parse(body)

    def test_rejects_event_callback_without_event(self):
        with pytest.raises(MalformedPayload):
            SlackSource().parse(b'{"type": "event_callback"}')

    def test_rejects_wrongly_typed_files(self):
        payload = make_event_callback(files=["not-a-file"])
        with pytest.raises(MalformedPayload):
            SlackSource().parse(to_body(payload))
