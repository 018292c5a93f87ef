"""Builders para respostas de mídia (imagem, voz, vídeo, música)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.domain.outbound import ImageMessage, MusicMessage, VideoMessage, VoiceMessage


class ImagePayloadBuilder:
    def build(self, message: ImageMessage) -> dict[str, Any]:
        return {"Image": {"MediaId": message.media_id}}


class VoicePayloadBuilder:
    def build(self, message: VoiceMessage) -> dict[str, Any]:
        return {"Voice": {"MediaId": message.media_id}}


class VideoPayloadBuilder:
    def build(self, message: VideoMessage) -> dict[str, Any]:
        return {
            "Video": {
                "MediaId": message.media_id,
                "Title": message.title,
                "Description": message.description,
            }
        }


class MusicPayloadBuilder:
    def build(self, message: MusicMessage) -> dict[str, Any]:
        return {
            "Music": {
                "Title": message.title,
                "Description": message.description,
                "MusicUrl": message.music_url,
                "HQMusicUrl": message.hq_music_url,
                "ThumbMediaId": message.thumb_media_id,
            }
        }
