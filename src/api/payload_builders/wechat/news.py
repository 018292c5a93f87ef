"""Builder para respostas de notícias (lista de artigos)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.domain.outbound import NewsMessage


class NewsPayloadBuilder:
    """Serializa artigos como <Articles><item>...</item></Articles>."""

    def build(self, message: NewsMessage) -> dict[str, Any]:
        return {
            "ArticleCount": len(message.articles),
            "Articles": [
                {
                    "Title": article.title,
                    "Description": article.description,
                    "PicUrl": article.pic_url,
                    "Url": article.url,
                }
                for article in message.articles
            ],
        }
