from typing import List, Literal, Optional

from pydantic import Field

from schemas import RequestSchema


class Education(RequestSchema):
    school: str
    degree: str = ''
    field: str = ''
    start_date: str = ''
    end_date: str = ''
    gpa: str = ''
    major_courses: List[str] = Field(default_factory=list)
    transcript_url: Optional[str] = None
    honors: List[str] = Field(default_factory=list)
    activities: List[str] = Field(default_factory=list)


class Experience(RequestSchema):
    company: str
    title: str
    location: str = ''
    start_date: str = ''
    end_date: Optional[str] = None
    current: bool = False
    description: str = ''
    achievements: List[str] = Field(default_factory=list)
    technologies_used: List[str] = Field(default_factory=list)
    responsibilities: List[str] = Field(default_factory=list)


class Certification(RequestSchema):
    name: str
    issuer: str = ''
    issue_date: str = ''
    expiry_date: Optional[str] = None
    credential_id: Optional[str] = None
    credential_url: Optional[str] = None
    certificate_url: Optional[str] = None


class Language(RequestSchema):
    name: str
    proficiency: Literal['Basic', 'Intermediate', 'Advanced', 'Native']
    certifications: List[str] = Field(default_factory=list)


class Publication(RequestSchema):
    title: str
    publisher: str = ''
    date: str = ''
    url: Optional[str] = None
    description: str = ''


class Project(RequestSchema):
    name: str
    description: str = ''
    role: str = ''
    url: Optional[str] = None
    start_date: str = ''
    end_date: Optional[str] = None
    technologies_used: List[str] = Field(default_factory=list)
    achievements: List[str] = Field(default_factory=list)


class Reference(RequestSchema):
    name: str
    title: str = ''
    company: str = ''
    email: str = ''
    phone: str = ''
    relationship: str = ''


class ProfileRequest(RequestSchema):
    """All fields optional: the first save creates the profile, later saves patch it"""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    title: Optional[str] = None
    bio: Optional[str] = None

    location: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None

    education: Optional[List[Education]] = None
    experience: Optional[List[Experience]] = None
    skills: Optional[List[str]] = None
    certifications: Optional[List[Certification]] = None
    languages: Optional[List[Language]] = None
    publications: Optional[List[Publication]] = None
    projects: Optional[List[Project]] = None
    reference_list: Optional[List[Reference]] = None

    resume_url: Optional[str] = None
    transcript_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    github_url: Optional[str] = None

    availability: Optional[Literal['Immediate', '2 Weeks', '1 Month', 'Other']] = None
    work_authorization: Optional[Literal['US Citizen', 'Green Card', 'H1B', 'Other']] = None
    citizenship_status: Optional[str] = None
    visa_sponsorship: Optional[bool] = None
    willing_to_relocate: Optional[bool] = None
    preferred_locations: Optional[List[str]] = None
    salary_expectation: Optional[str] = None
    veteran_status: Optional[str] = None
    security_clearance: Optional[str] = None

    def changes(self):
        """Non-null fields the client actually sent, nested records dumped to plain dicts"""
        return self.model_dump(exclude_unset=True, exclude_none=True)
