from pydantic import BaseModel
from typing import Optional


class ExperienceBase(BaseModel):
    company: str
    title: str
    start_date: str = ""
    end_date: str = ""
    is_current_role: bool = False
    description: str = ""


class ExperienceCreate(ExperienceBase):
    pass


class ExperienceUpdate(BaseModel):
    company: Optional[str] = None
    title: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_current_role: Optional[bool] = None
    description: Optional[str] = None


class Experience(ExperienceBase):
    id: str


class EducationBase(BaseModel):
    institution: str
    degree: str = ""
    field: str = ""
    start_date: str = ""
    end_date: str = ""


class EducationCreate(EducationBase):
    pass


class EducationUpdate(BaseModel):
    institution: Optional[str] = None
    degree: Optional[str] = None
    field: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class Education(EducationBase):
    id: str


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    title: Optional[str] = None
    summary: Optional[str] = None


class CandidateProfile(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    title: str = ""
    summary: str = ""
    experiences: list[Experience] = []
    education: list[Education] = []
    skills: list[str] = []

    class Config:
        from_attributes = True


class ProfileResponse(CandidateProfile):
    completeness: int


class SkillRequest(BaseModel):
    skill: str
