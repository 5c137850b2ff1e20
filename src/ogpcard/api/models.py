"""Pydantic request and response models for the OGP card API.

Models
------
CreateImageRequest
    Payload for ``POST /api/image``.
CreateImageResponse
    Result of ``POST /api/image``: the words drawn, the stored file name, the
    image identifier and the public base URL.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# A card holds one line; longer runs are clipped anyway and cost memory to draw.
MAX_WORDS_LENGTH = 512


class CreateImageRequest(BaseModel):
    """Request body for the ``POST /api/image`` endpoint.

    Attributes:
        words: Text to draw on the card, at most ``MAX_WORDS_LENGTH``
            characters.  Drawn as a single line.
    """

    words: str = Field(
        ...,
        max_length=MAX_WORDS_LENGTH,
        description="Text to draw on the card.",
    )


class CreateImageResponse(BaseModel):
    """Response body for the ``POST /api/image`` endpoint.

    Serialised with the ``baseURL`` key the frontend expects.

    Attributes:
        words: The text that was drawn.
        file: Stored file name, ``<id>.png``.
        id: Identifier of the new image; also the ``/ogp/{id}`` route key.
        base_url: Public URL prefix of the service.
    """

    model_config = ConfigDict(populate_by_name=True)

    words: str
    file: str
    id: str
    base_url: str = Field(..., alias="baseURL")
