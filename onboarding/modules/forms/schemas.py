from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal, List, Dict, Any
from datetime import datetime

FormStatus = Literal["active", "inactive", "closed"]
SummaryFrequency = Literal["none", "daily", "weekly"]
QuestionType = Literal[
    "short_text", "long_text", "multiple_choice", "checkboxes", "dropdown",
    "url", "date", "time", "email", "number", "file_upload",
]

CHOICE_TYPES = ("multiple_choice", "checkboxes", "dropdown")

DEFAULT_GDPR_CONSENT_TEXT = (
    "I agree to the processing of my personal data in accordance with GDPR "
    "regulations and the company's privacy policy"
)

SLUG_PATTERN = r"^[a-z0-9-]+$"


class FormCreate(BaseModel):
    title: str
    description: Optional[str] = None
    slug: str = Field(pattern=SLUG_PATTERN, max_length=100)
    is_internal: bool = True
    status: FormStatus = "inactive"
    gdpr_consent_text: str = DEFAULT_GDPR_CONSENT_TEXT
    submission_limit: Optional[int] = Field(default=None, gt=0)
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    confirmation_message: Optional[str] = None
    redirect_url: Optional[str] = None
    email_notify_on_new_response: bool = False
    email_summary_frequency: SummaryFrequency = "none"
    collect_submitter_email: bool = False

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()


class FormUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    slug: Optional[str] = Field(default=None, pattern=SLUG_PATTERN, max_length=100)
    is_internal: Optional[bool] = None
    status: Optional[FormStatus] = None
    gdpr_consent_text: Optional[str] = None
    submission_limit: Optional[int] = Field(default=None, gt=0)
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    confirmation_message: Optional[str] = None
    redirect_url: Optional[str] = None
    email_notify_on_new_response: Optional[bool] = None
    email_summary_frequency: Optional[SummaryFrequency] = None
    collect_submitter_email: Optional[bool] = None


class FormResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    slug: str
    is_internal: bool = True
    status: FormStatus = "inactive"
    gdpr_consent_text: str = DEFAULT_GDPR_CONSENT_TEXT
    submission_limit: Optional[int] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    confirmation_message: Optional[str] = None
    redirect_url: Optional[str] = None
    email_notify_on_new_response: bool = False
    email_summary_frequency: SummaryFrequency = "none"
    collect_submitter_email: bool = False
    created_by: Optional[str] = None
    owner_user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FormDashboardItem(BaseModel):
    id: str
    title: str
    slug: str
    status: FormStatus
    access_type: Literal["Internal", "Public"]
    response_count: int = 0
    last_submission_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OptionCreate(BaseModel):
    label: str
    value: Optional[str] = None
    order_index: int = 0
    is_other: bool = False


class OptionResponse(BaseModel):
    id: str
    question_id: str
    label: str
    value: str
    order_index: int = 0
    is_other: bool = False


class QuestionCreate(BaseModel):
    type: QuestionType
    label: str
    description: Optional[str] = None
    required: bool = False
    order_index: int = 0
    settings: Dict[str, Any] = {}
    is_active: bool = True
    options: List[OptionCreate] = []

    @field_validator("label")
    @classmethod
    def label_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()


class QuestionUpdate(BaseModel):
    type: Optional[QuestionType] = None
    label: Optional[str] = None
    description: Optional[str] = None
    required: Optional[bool] = None
    order_index: Optional[int] = None
    settings: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None
    # Replaces every stored option when sent
    options: Optional[List[OptionCreate]] = None


class QuestionResponse(BaseModel):
    id: str
    form_id: str
    type: QuestionType
    label: str
    description: Optional[str] = None
    required: bool = False
    order_index: int = 0
    settings: Dict[str, Any] = {}
    is_active: bool = True
    options: List[OptionResponse] = []


class FormWithQuestionsResponse(FormResponse):
    questions: List[QuestionResponse] = []


class FormSubmitRequest(BaseModel):
    consent: bool = False
    submitter_email: Optional[str] = None
    # question id -> raw value (str, number, list of option values)
    answers: Dict[str, Any] = {}


class FormSubmitResponse(BaseModel):
    submission_id: str
    confirmation_message: Optional[str] = None
    redirect_url: Optional[str] = None


class AnswerResponse(BaseModel):
    question_id: str
    value_text: Optional[str] = None
    value_json: Optional[Any] = None
    value_number: Optional[float] = None
    value_date: Optional[str] = None
    value_time: Optional[str] = None
    value_email: Optional[str] = None
    value_url: Optional[str] = None
    selected_options: Optional[List[str]] = None
    files: Optional[Any] = None


class SubmissionResponse(BaseModel):
    id: str
    form_id: str
    status: str = "complete"
    submitter_user_id: Optional[str] = None
    submitter_email: Optional[str] = None
    submitter_ip: Optional[str] = None
    user_agent: Optional[str] = None
    consent_checked: bool = True
    consent_text_snapshot: Optional[str] = None
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    answers: List[AnswerResponse] = []
