"""세션 모델 공통 정의입니다. / Base definitions for session models."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict


class TideWindModel(BaseModel):
    """불변 공통 베이스 모델입니다. / Common immutable base model."""

    model_config: ClassVar[ConfigDict] = ConfigDict(
        frozen=True,
        populate_by_name=True,
        validate_assignment=True,
    )

    def model_dump_jsonable(self, **kwargs: Any) -> dict[str, Any]:
        """JSON 직렬화 가능한 덤프입니다. / Dump JSON-serializable dict."""

        data = self.model_dump(mode="json", **kwargs)
        return data
