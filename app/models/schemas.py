from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Dict, List, Optional


class _ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ---------- Teachers / projects ----------

class TeacherIn(BaseModel):
    name: str
    subject: str = ""

class TeacherOut(_ORMModel):
    id: str
    name: str
    subject: str

class ProjectIn(BaseModel):
    title: str
    teacher_id: str
    subject: str = ""
    status: str = "Planejamento"
    next_deadline: Optional[str] = None
    deadline_label: Optional[str] = None
    description: Optional[str] = None

class ProjectOut(_ORMModel):
    id: str
    title: str
    teacher_id: str
    subject: str
    status: str
    next_deadline: Optional[str] = None
    deadline_label: Optional[str] = None
    description: Optional[str] = None

class ProjectDetailOut(ProjectOut):
    has_planning: bool
    has_competencies: bool

class PlanningIn(BaseModel):
    objectives: Optional[str] = None
    methodology: Optional[str] = None

class PlanningOut(_ORMModel):
    id: str
    project_id: str
    objectives: Optional[str] = None
    methodology: Optional[str] = None

class CompetencyIn(BaseModel):
    name: str
    category: str = "Geral"
    description: Optional[str] = None

class CompetencyOut(_ORMModel):
    id: str
    name: str
    category: str
    description: Optional[str] = None

class CompetencyLinkIn(BaseModel):
    competency_id: str
    coverage: int = Field(0, ge=0, le=100)

class CompetencyLinkOut(_ORMModel):
    id: str
    project_id: str
    competency_id: str
    coverage: int

class EventIn(BaseModel):
    teacher_id: str
    title: str
    date: datetime
    project_id: Optional[str] = None

class EventOut(_ORMModel):
    id: str
    teacher_id: str
    title: str
    date: datetime
    project_id: Optional[str] = None

class DeadlineOut(BaseModel):
    project_id: str
    title: str
    deadline: str

class UpcomingEventOut(BaseModel):
    id: str
    title: str
    date: datetime
    project_id: Optional[str] = None

class PendingActionsOut(BaseModel):
    projects_without_planning: int
    projects_without_competencies: int
    upcoming_deadlines: List[DeadlineOut]
    upcoming_events: List[UpcomingEventOut]
    total: int

# ---------- Students & achievements ----------

class StudentIn(BaseModel):
    name: str
    email: str
    xp: int = Field(0, ge=0)

class StudentPatch(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    xp: Optional[int] = Field(None, ge=0)

class StudentOut(_ORMModel):
    id: str
    name: str
    email: str
    xp: int
    level: int

class AchievementIn(BaseModel):
    id: Optional[str] = None
    title: str
    description: str = ""
    xp: int = Field(..., gt=0)
    icon: str = "award"

class AchievementPatch(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    xp: Optional[int] = Field(None, gt=0)
    icon: Optional[str] = None

class AchievementOut(_ORMModel):
    id: str
    title: str
    description: str
    xp: int
    icon: str

class StudentAchievementOut(BaseModel):
    id: str
    student_id: str
    achievement_id: str
    progress: int
    total: int
    unlocked: bool
    achievement_title: str
    achievement_description: str
    achievement_xp: int
    achievement_icon: str

class ProgressIn(BaseModel):
    increment: int = Field(1, ge=1)
    total: Optional[int] = Field(None, ge=1)

class ProgressOut(BaseModel):
    unlocked: bool
    xp_awarded: int
    status: str
    cascaded: List[str] = []

# ---------- Rubrics ----------

class RubricCriteriaIn(BaseModel):
    project_id: str
    criteria: str
    weight: int = Field(..., ge=0, le=100)
    level1: str = ""
    level2: str = ""
    level3: str = ""
    level4: str = ""

class RubricCriteriaPatch(BaseModel):
    criteria: Optional[str] = None
    weight: Optional[int] = Field(None, ge=0, le=100)
    level1: Optional[str] = None
    level2: Optional[str] = None
    level3: Optional[str] = None
    level4: Optional[str] = None

class RubricCriteriaOut(_ORMModel):
    id: str
    project_id: str
    criteria: str
    weight: int
    level1: str
    level2: str
    level3: str
    level4: str

class WeightCheckIn(BaseModel):
    criteria_id: Optional[str] = None
    weight: int = Field(..., ge=0, le=100)
    pending: Dict[str, int] = {}

class WeightCheckOut(BaseModel):
    ok: bool
    total: int

class GradePreviewIn(BaseModel):
    levels: Dict[str, int]

class GradePreviewOut(BaseModel):
    grade: int
    all_criteria_scored: bool

# ---------- Submissions ----------

class SubmissionIn(BaseModel):
    project_id: str
    student_id: str
    type: str = "link"
    content: str
    comment: Optional[str] = None

class SubmissionOut(_ORMModel):
    id: str
    project_id: str
    student_id: str
    type: str
    content: str
    comment: Optional[str] = None
    grade: Optional[int] = None
    teacher_feedback: Optional[str] = None
    submitted_at: datetime

class SubmissionCreatedOut(BaseModel):
    submission: SubmissionOut
    achievements_unlocked: List[str] = []

class GradeIn(BaseModel):
    grade: int = Field(..., ge=0, le=100)
    feedback: Optional[str] = None

class RubricGradeIn(BaseModel):
    levels: Dict[str, int]
    feedback: str = ""

class GradedOut(BaseModel):
    submission: SubmissionOut
    achievements_unlocked: List[str] = []
