"""
챌린지 평가 결과 스키마.
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EvaluatedChallenge(BaseModel):
    """
    정의 + 파생 값(progress·completed·unlocked).
    평가 호출마다 새로 계산하며 별도로 저장하지 않는다.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    title: str
    icon: str = ""
    description: str = ""
    target: int = Field(..., ge=1)
    is_pro: bool = False
    progress: int = Field(..., ge=0, description="0 ~ target")
    completed: bool = Field(..., description="progress >= target")
    unlocked: bool = False
