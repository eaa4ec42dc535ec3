"""MiniAssessment Domain Model

mini-assessment 是核心评估之后补充的小问卷（如需要更新地址的金融机构）。
同一 (user_id, parent_id) 多次提交时答案合并，completion_seq 取新的更大序号。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .assessment import AssessmentResponse


class MiniAssessmentRecord(BaseModel):
    """mini-assessment 答案记录"""

    user_id: str = Field(description="所属用户")
    parent_id: str = Field(description="mini-assessment ID，即子任务的 parent_id")
    answers: AssessmentResponse = Field(
        default_factory=AssessmentResponse,
        description="合并后的答案",
    )
    completion_seq: int = Field(ge=1, description="用户内完成顺序，严格递增")
    completed_at: datetime = Field(description="最近一次完成时间")
