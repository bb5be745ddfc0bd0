from datetime import datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator


class Profile(BaseModel):
    user_id: str
    name: str
    avatar: Optional[str] = None
    status: str
    skills: List[str]
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    github_username: Optional[str] = None
    social: Dict[str, str] = {}
    updated_at: datetime


class ProfileRequest(BaseModel):
    status: str = Field(..., min_length=1)
    skills: Union[List[str], str]
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    github_username: Optional[str] = None
    social: Dict[str, str] = {}

    @field_validator("skills")
    @classmethod
    def split_skills(cls, value: Union[List[str], str]) -> List[str]:
        """Accept either a list or a comma separated string"""
        if isinstance(value, str):
            value = value.split(",")
        skills = [skill.strip() for skill in value if skill.strip()]
        if not skills:
            raise ValueError("Skills is required")
        return skills
