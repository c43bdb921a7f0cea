"""Golden tests for deterministic message type detection."""

import pytest

from msgintel.intel.detection import (
    CONTENT_RULES,
    FIELD_RULES,
    analyze_message_payload,
    detect_by_fields,
    detect_by_values,
    detect_message_type,
)
from msgintel.intel.models import MessageKind


class TestAnalyzeBasics:
    """Baseline behaviour of analyze_message_payload()."""

    def test_empty_payload_is_unknown(self):
        result = analyze_message_payload({})

        assert result.type is MessageKind.UNKNOWN
        assert result.field_names == ()
        assert result.values == ()

    @pytest.mark.parametrize("payload", [None, "sticker", 7, [], True])
    def test_non_mapping_payloads_degrade_to_unknown(self, payload):
        assert analyze_message_payload(payload).type is MessageKind.UNKNOWN

    def test_sticker_flag(self):
        assert analyze_message_payload({"sticker": True}).type is MessageKind.STICKER

    def test_location(self):
        result = analyze_message_payload({"latitude": 1.0, "longitude": 2.0})
        assert result.type is MessageKind.LOCATION

    def test_text_field(self):
        assert analyze_message_payload({"text": "hi"}).type is MessageKind.TEXT

    def test_top_level_sequence_of_messages(self):
        result = analyze_message_payload([{"text": "hi"}])

        assert result.field_names == ("0", "0.text")
        assert result.type is MessageKind.TEXT

    def test_content_inside_list_of_lists(self):
        result = analyze_message_payload({"rows": [[{"caption": "a sticker"}]]})

        assert "rows[0].0.caption" in result.field_names
        assert result.type is MessageKind.STICKER

    def test_unrelated_fields_are_unknown(self):
        result = analyze_message_payload({"foo": 1, "bar": [2, 3]})
        assert result.type is MessageKind.UNKNOWN

    def test_parallel_sequences(self):
        result = analyze_message_payload({"a": [{"b": 1}, 2], "c": {"d": "x"}})
        assert len(result.field_names) == len(result.values)

    def test_idempotent(self):
        payload = {
            "number": "5511999998888",
            "buttons": [{"id": "1", "displayText": "Sim"}],
        }

        assert analyze_message_payload(payload) == analyze_message_payload(payload)

    def test_as_payload_wire_names(self):
        result = analyze_message_payload({"text": "hi"})

        assert result.as_payload() == {
            "fieldNames": ["text"],
            "values": ["hi"],
            "type": "text",
        }


class TestFieldNameRules:
    """Phase A: one realistic payload per kind, no content markers in values."""

    @pytest.mark.parametrize(
        "payload, expected",
        [
            ({"stickerMessage": {"url": "s1"}}, MessageKind.STICKER),
            ({"reactionMessage": {"key": {"id": "ABC"}, "text": "👍"}}, MessageKind.REACTION),
            (
                {"name": "welcome_v2", "language": "pt_BR", "components": []},
                MessageKind.TEMPLATE,
            ),
            ({"buttons": [{"id": "1", "displayText": "Sim"}]}, MessageKind.BUTTONS),
            (
                {"sections": [{"title": "Menu", "rows": []}], "buttonText": "Abrir"},
                MessageKind.LIST,
            ),
            ({"latitude": -23.5, "longitude": -46.6, "name": "Escritório"}, MessageKind.LOCATION),
            ({"contact": [{"fullName": "Ana", "wuid": "5511"}]}, MessageKind.CONTACT),
            ({"wuid": "5511"}, MessageKind.CONTACT),
            ({"name": "Almoço?", "selectableCount": 1, "values": ["Pizza", "Sushi"]}, MessageKind.POLL),
            ({"statusJidList": ["123@s.whatsapp.net"]}, MessageKind.STATUS),
            ({"videoMessage": {"caption": "oi"}}, MessageKind.PTV),
            ({"audio": "https://cdn.example.com/a.ogg"}, MessageKind.AUDIO),
            ({"mediatype": "image", "media": "https://cdn.example.com/p.png"}, MessageKind.MEDIA),
            ({"number": "5511999998888", "text": "oi"}, MessageKind.TEXT),
            ({"message": {"text": "hello"}}, MessageKind.TEXT),
        ],
    )
    def test_kind_from_field_names(self, payload, expected):
        assert analyze_message_payload(payload).type is expected

    def test_field_names_are_case_insensitive(self):
        assert detect_by_fields(["StickerMessage"]) is MessageKind.STICKER

    def test_location_needs_both_coordinates(self):
        assert detect_by_fields(["latitude"]) is None
        assert detect_by_fields(["a.latitude", "b.c.longitude"]) is MessageKind.LOCATION

    def test_exact_rules_use_last_segment(self):
        assert detect_by_fields(["message.text"]) is MessageKind.TEXT
        assert detect_by_fields(["textual"]) is None
        assert detect_by_fields(["templateName"]) is None
        assert detect_by_fields(["payload.components"]) is MessageKind.TEMPLATE

    def test_contact_outranks_status_for_all_contacts(self):
        # "allcontacts" also contains "contact", which is checked first
        assert detect_by_fields(["allContacts"]) is MessageKind.CONTACT

    def test_sticker_outranks_everything(self):
        paths = ["text", "buttons", "latitude", "longitude", "sticker"]
        assert detect_by_fields(paths) is MessageKind.STICKER

    def test_no_fields(self):
        assert detect_by_fields([]) is None


class TestContentRules:
    """Phase B: markers inside string values."""

    def test_content_fires_without_matching_field(self):
        result = analyze_message_payload({"foo": "this mentions sticker"})
        assert result.type is MessageKind.STICKER

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("Send a REACTION", MessageKind.REACTION),
            ("use template 3", MessageKind.TEMPLATE),
            ("tap the button below", MessageKind.BUTTONS),
            ("pick a section", MessageKind.LIST),
            ("latitude: 10", MessageKind.LOCATION),
            ("share a contact", MessageKind.CONTACT),
            ("selectableCount=2", MessageKind.POLL),
            ("STATUS update", MessageKind.STATUS),
            ("my video", MessageKind.PTV),
            ("voice audio", MessageKind.AUDIO),
            ("some media", MessageKind.MEDIA),
            ("plain text here", MessageKind.TEXT),
        ],
    )
    def test_marker(self, value, expected):
        assert detect_by_values([value]) is expected

    def test_only_strings_are_inspected(self):
        assert detect_by_values([1, None, True, {"sticker": "x"}, ["sticker"]]) is None

    def test_order_decides_between_markers(self):
        assert detect_by_values(["text with a video and a sticker"]) is MessageKind.STICKER

    def test_empty(self):
        assert detect_by_values([]) is None


class TestResolution:
    """Content match overrides field-name match."""

    def test_content_overrides_field_name(self):
        result = analyze_message_payload({"template": 1, "note": "tap the button below"})
        assert result.type is MessageKind.BUTTONS

    def test_media_payload_with_video_value_is_ptv(self):
        result = analyze_message_payload(
            {"mediatype": "video", "media": "https://cdn.example.com/clip.mp4"}
        )
        assert result.type is MessageKind.PTV

    def test_field_name_used_when_no_content_match(self):
        assert detect_message_type(["buttons"], ["Sim"]) is MessageKind.BUTTONS

    def test_unknown_when_nothing_matches(self):
        assert detect_message_type(["foo"], ["bar"]) is MessageKind.UNKNOWN


class TestRuleTables:
    """Both tables cover every kind except UNKNOWN, in the same order."""

    def test_same_kind_order(self):
        field_kinds = [kind for kind, _ in FIELD_RULES]
        content_kinds = [kind for kind, _ in CONTENT_RULES]

        assert field_kinds == content_kinds
        assert set(field_kinds) == set(MessageKind) - {MessageKind.UNKNOWN}

    def test_each_field_rule_is_independent(self):
        samples = {
            MessageKind.STICKER: ["stickermessage"],
            MessageKind.REACTION: ["reactionmessage"],
            MessageKind.TEMPLATE: ["template"],
            MessageKind.BUTTONS: ["buttons"],
            MessageKind.LIST: ["buttontext"],
            MessageKind.LOCATION: ["latitude", "longitude"],
            MessageKind.CONTACT: ["contactmessage"],
            MessageKind.POLL: ["selectablecount"],
            MessageKind.STATUS: ["statusjidlist"],
            MessageKind.PTV: ["ptvvideo"],
            MessageKind.AUDIO: ["audiomessage"],
            MessageKind.MEDIA: ["mimetype"],
            MessageKind.TEXT: ["text"],
        }
        for kind, match in FIELD_RULES:
            assert match(samples[kind]), kind
            assert not match(["unrelated"]), kind
