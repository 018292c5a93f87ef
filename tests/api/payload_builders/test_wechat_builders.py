"""Testes dos builders de resposta passiva WeChat."""

from __future__ import annotations

import pytest

from api.connectors.wechat.xml_codec import parse_xml
from api.payload_builders.wechat import build_reply_fields, build_reply_xml, get_payload_builder
from app.constants.wechat import ReplyType
from app.domain.outbound import (
    ImageMessage,
    MusicMessage,
    NewsItem,
    NewsMessage,
    TextMessage,
    TransferMessage,
    VideoMessage,
    VoiceMessage,
)


def _addressed(message):
    return message.addressed(from_user="gh_account", to_user="openid_user")


class TestBuildReplyFields:
    def test_text_reply(self) -> None:
        message = _addressed(TextMessage(content="olá", create_time=1700000000))
        assert build_reply_fields(message) == {
            "ToUserName": "openid_user",
            "FromUserName": "gh_account",
            "CreateTime": 1700000000,
            "MsgType": "text",
            "Content": "olá",
        }

    @pytest.mark.parametrize(
        ("message", "block"),
        [
            (ImageMessage(media_id="m1"), "Image"),
            (VoiceMessage(media_id="m1"), "Voice"),
            (VideoMessage(media_id="m1", title="t"), "Video"),
        ],
    )
    def test_media_replies_nest_media_id(self, message, block: str) -> None:
        fields = build_reply_fields(_addressed(message))
        assert fields["MsgType"] == message.reply_type.value
        assert fields[block]["MediaId"] == "m1"

    def test_music_reply(self) -> None:
        fields = build_reply_fields(_addressed(MusicMessage(thumb_media_id="thumb", music_url="http://m")))
        assert fields["Music"]["ThumbMediaId"] == "thumb"
        assert fields["Music"]["MusicUrl"] == "http://m"

    def test_news_reply_counts_articles(self) -> None:
        message = NewsMessage(articles=[NewsItem(title="a"), NewsItem(title="b", url="http://b")])
        fields = build_reply_fields(_addressed(message))
        assert fields["ArticleCount"] == 2
        assert fields["Articles"][1] == {"Title": "b", "Description": "", "PicUrl": "", "Url": "http://b"}

    def test_transfer_without_account(self) -> None:
        fields = build_reply_fields(_addressed(TransferMessage()))
        assert fields["MsgType"] == "transfer_customer_service"
        assert "TransInfo" not in fields

    def test_transfer_to_specific_account(self) -> None:
        fields = build_reply_fields(_addressed(TransferMessage(kf_account="kf1@gh")))
        assert fields["TransInfo"] == {"KfAccount": "kf1@gh"}


class TestBuildReplyXml:
    def test_xml_parses_back(self) -> None:
        xml = build_reply_xml(_addressed(TextMessage(content="hi", create_time=1)))
        assert parse_xml(xml) == {
            "ToUserName": "openid_user",
            "FromUserName": "gh_account",
            "CreateTime": "1",
            "MsgType": "text",
            "Content": "hi",
        }

    def test_news_items_serialize_as_item_list(self) -> None:
        xml = build_reply_xml(_addressed(NewsMessage(articles=[NewsItem(title="a")])))
        parsed = parse_xml(xml)
        assert parsed["ArticleCount"] == "1"
        assert parsed["Articles"] == [{"Title": "a", "Description": "", "PicUrl": "", "Url": ""}]


def test_every_reply_type_has_builder() -> None:
    for reply_type in ReplyType:
        assert get_payload_builder(reply_type) is not None
