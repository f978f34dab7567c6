from typing import List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEPARTMENTS = ("creche", "kindergarten", "primary", "junior_high")
Department = Literal["creche", "kindergarten", "primary", "junior_high"]


# ==========================================================
# [등급 구간 / 결과]
# ==========================================================
class GradeRange(BaseModel):
    grade: str                                               # 등급 (저장값이 숫자여도 문자열로 통일)
    min_percent: float = Field(..., alias="minPercent")      # 하한 (포함)
    max_percent: float = Field(..., alias="maxPercent")      # 상한 (포함)
    remark: str = ""                                         # 평어

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("grade", mode="before")
    @classmethod
    def _grade_to_str(cls, v):
        # 1 → "1", 1.5 → "1.5"
        if isinstance(v, bool):
            raise ValueError("grade must be a string or number")
        if isinstance(v, float) and v.is_integer():
            return str(int(v))
        if isinstance(v, (int, float)):
            return str(v)
        return v


class GradeResult(BaseModel):
    grade: str
    remark: str


# ==========================================================
# [채점 기준 파싱 결과] - Valid / Invalid 태그 유니온
# ==========================================================
class ValidScale(BaseModel):
    kind: Literal["valid"] = "valid"
    ranges: List[GradeRange]


class InvalidScale(BaseModel):
    kind: Literal["invalid"] = "invalid"
    reason: str


ParsedScale = Union[ValidScale, InvalidScale]


# ==========================================================
# [채점 기준 API 입출력]
# ==========================================================
class GradingScaleCreate(BaseModel):
    school_id: str
    scale_name: str
    department: Optional[Department] = None
    grades: List[GradeRange]
    is_default: bool = False
    created_by: str


class GradingScaleUpdate(BaseModel):
    scale_name: Optional[str] = None
    grades: Optional[List[GradeRange]] = None
    is_default: Optional[bool] = None
    status: Optional[Literal["active", "inactive"]] = None


class DefaultScaleRequest(BaseModel):
    school_id: str
    created_by: str


class GradingScale(BaseModel):
    id: int
    school_id: str
    scale_code: str
    scale_name: str
    department: Optional[str] = None
    grades: str
    is_default: bool
    status: str
    created_by: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
