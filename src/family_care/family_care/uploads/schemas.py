from __future__ import annotations

from typing import Optional

from pydantic import Field

from ..common.schemas import APIModel


class FamilyImageRequest(APIModel):
    image_url: Optional[str] = Field(default=None, alias="imageURL")
