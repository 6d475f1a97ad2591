from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExperienceEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    company: str = ""
    start_date: date | None = None
    end_date: date | None = None  # None = present
    description: str = ""
    industry: str = ""


class EducationEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    degree: str = ""
    field: str = ""
    institution: str = ""
    year: int | None = None


class CVData(BaseModel):
    """Structured CV as produced by the upstream parser."""
    model_config = ConfigDict(frozen=True)

    summary: str = ""
    skills: list[str] = []
    experience: list[ExperienceEntry] = []
    education: list[EducationEntry] = []
    certifications: list[str] = []
    projects: list[str] = []
    achievements: list[str] = []
    edit_count: int = Field(0, ge=0)  # optimizations applied on the platform


class JobDescription(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    description: str = Field("", max_length=20000)
    required_skills: list[str] = []
    preferred_skills: list[str] = []
    seniority: str = ""
    industry: str = ""
    min_years_experience: float | None = None
    location: str = ""
    posted_at: datetime | None = None


class RequestContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: str = ""
    application_channel: str = "direct"  # direct, referral, job_board, recruiter
    timestamp: datetime | None = None
    engagement_score: float | None = Field(None, ge=0.0, le=1.0)
    previous_applications: int = Field(0, ge=0)


class PredictionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    cv: CVData
    job: JobDescription
    context: RequestContext = RequestContext()

    @field_validator("job", mode="before")
    @classmethod
    def _coerce_free_text_job(cls, value):
        if isinstance(value, str):
            return {"description": value}
        return value


class OutcomeReport(BaseModel):
    """Real-world result reported by the surrounding application."""
    interview_obtained: bool | None = None
    offer_obtained: bool | None = None
    actual_salary: float | None = Field(None, ge=0)
    actual_days_to_hire: float | None = Field(None, ge=0)
