from supabase import Client
from onboarding.modules.forms.answers import build_answer_row, form_closed_reason, validate_answers
from onboarding.modules.forms.schemas import (
    CHOICE_TYPES, FormCreate, FormUpdate, FormResponse, FormDashboardItem, FormWithQuestionsResponse,
    QuestionCreate, QuestionUpdate, QuestionResponse, OptionCreate, OptionResponse,
    FormSubmitRequest, FormSubmitResponse, SubmissionResponse
)
from onboarding.core.clock import utc_now, utc_now_iso
from onboarding.core.errors import raise_db_error
from onboarding.core.validation import is_valid_email
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import csv
import io
import json
import logging

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "submission_id", "submission_created_at", "submitter_email", "question_id", "question_label",
    "answer_text", "answer_number", "answer_date", "answer_time", "answer_email", "answer_url",
    "selected_options",
]


class FormService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    # Forms

    def _find_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("forms")\
            .select("*")\
            .eq("slug", slug)\
            .maybe_single()\
            .execute()
        return result.data if result else None

    def _get_owned_form(self, form_id: str, owner_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("forms")\
                .select("*")\
                .eq("id", form_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise_db_error(e, "Failed to fetch form")
        form = result.data if result else None
        if not form or form.get("owner_user_id") != owner_id:
            raise HTTPException(status_code=404, detail="Form not found")
        return form

    def create_form(self, data: FormCreate, owner_id: str) -> FormResponse:
        try:
            if self._find_by_slug(data.slug):
                raise HTTPException(status_code=409, detail="A form with this slug already exists")
            payload = data.model_dump(mode="json")
            result = self.supabase.table("forms").insert({
                **payload,
                "created_by": owner_id,
                "owner_user_id": owner_id,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create form")
            logger.info(f"Form created: {data.slug}")
            return FormResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to create form")

    def list_forms(self, owner_id: str) -> List[FormDashboardItem]:
        """The owner's forms with response counts, most recently updated first"""
        try:
            forms = self.supabase.table("forms")\
                .select("*")\
                .eq("owner_user_id", owner_id)\
                .order("updated_at", desc=True)\
                .execute().data or []
            submissions = []
            if forms:
                submissions = self.supabase.table("form_submissions")\
                    .select("form_id, created_at")\
                    .in_("form_id", [f["id"] for f in forms])\
                    .execute().data or []
        except Exception as e:
            raise_db_error(e, "Failed to fetch forms")

        counts: Dict[str, int] = {}
        latest: Dict[str, str] = {}
        for s in submissions:
            counts[s["form_id"]] = counts.get(s["form_id"], 0) + 1
            if s.get("created_at") and s["created_at"] > latest.get(s["form_id"], ""):
                latest[s["form_id"]] = s["created_at"]
        return [
            FormDashboardItem(
                id=f["id"],
                title=f["title"],
                slug=f["slug"],
                status=f["status"],
                access_type="Internal" if f.get("is_internal") else "Public",
                response_count=counts.get(f["id"], 0),
                last_submission_at=latest.get(f["id"]),
                created_at=f.get("created_at"),
                updated_at=f.get("updated_at"),
            )
            for f in forms
        ]

    def get_form(self, form_id: str, owner_id: str) -> FormWithQuestionsResponse:
        form = self._get_owned_form(form_id, owner_id)
        return FormWithQuestionsResponse(**form, questions=self._questions(form_id))

    def update_form(self, form_id: str, owner_id: str, updates: FormUpdate) -> FormResponse:
        update_data = updates.model_dump(exclude_unset=True, mode="json")
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        form = self._get_owned_form(form_id, owner_id)
        try:
            if update_data.get("slug") and update_data["slug"] != form["slug"] and self._find_by_slug(update_data["slug"]):
                raise HTTPException(status_code=409, detail="A form with this slug already exists")
            update_data["updated_at"] = utc_now_iso()
            result = self.supabase.table("forms")\
                .update(update_data)\
                .eq("id", form_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Form not found")
            return FormResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to update form")

    def delete_form(self, form_id: str, owner_id: str) -> None:
        """Delete a form; questions, options and submissions cascade"""
        self._get_owned_form(form_id, owner_id)
        try:
            self.supabase.table("forms").delete().eq("id", form_id).execute()
            logger.info(f"Form deleted: {form_id}")
        except Exception as e:
            raise_db_error(e, "Failed to delete form")

    def _free_copy_slug(self, slug: str) -> str:
        candidate = f"{slug}-copy"
        n = 2
        while self._find_by_slug(candidate):
            candidate = f"{slug}-copy-{n}"
            n += 1
        return candidate

    def duplicate_form(self, form_id: str, owner_id: str) -> FormResponse:
        """Copy a form with its questions and options; the copy starts inactive"""
        form = self._get_owned_form(form_id, owner_id)
        questions = self._questions(form_id)
        try:
            copy = {
                k: v for k, v in form.items()
                if k not in ("id", "created_at", "updated_at")
            }
            copy.update({
                "title": f"{form['title']} (Copy)",
                "slug": self._free_copy_slug(form["slug"]),
                "status": "inactive",
                "created_by": owner_id,
                "owner_user_id": owner_id,
            })
            result = self.supabase.table("forms").insert(copy).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to duplicate form")
            new_form = result.data[0]
            for question in questions:
                self._insert_question(new_form["id"], QuestionCreate(
                    type=question.type,
                    label=question.label,
                    description=question.description,
                    required=question.required,
                    order_index=question.order_index,
                    settings=question.settings,
                    is_active=question.is_active,
                    options=[
                        OptionCreate(label=o.label, value=o.value, order_index=o.order_index, is_other=o.is_other)
                        for o in question.options
                    ],
                ))
            logger.info(f"Form {form_id} duplicated as {new_form['slug']}")
            return FormResponse(**new_form)
        except Exception as e:
            raise_db_error(e, "Failed to duplicate form")

    # Questions

    def _questions(self, form_id: str, active_only: bool = False) -> List[QuestionResponse]:
        """Questions in order, each with its options"""
        try:
            query = self.supabase.table("form_questions").select("*").eq("form_id", form_id)
            if active_only:
                query = query.eq("is_active", True)
            questions = query.order("order_index").execute().data or []
            options: Dict[str, List[Dict[str, Any]]] = {}
            if questions:
                rows = self.supabase.table("form_question_options")\
                    .select("*")\
                    .in_("question_id", [q["id"] for q in questions])\
                    .order("order_index")\
                    .execute().data or []
                for row in rows:
                    options.setdefault(row["question_id"], []).append(row)
            return [
                QuestionResponse(**{**q, "settings": q.get("settings") or {}}, options=options.get(q["id"], []))
                for q in questions
            ]
        except Exception as e:
            raise_db_error(e, "Failed to fetch questions")

    def _insert_options(self, question_id: str, options: List[OptionCreate]) -> List[Dict[str, Any]]:
        if not options:
            return []
        rows = [
            {
                "question_id": question_id,
                "label": o.label,
                "value": o.value if o.value is not None else o.label,
                "order_index": o.order_index if o.order_index else i,
                "is_other": o.is_other,
            }
            for i, o in enumerate(options)
        ]
        return self.supabase.table("form_question_options").insert(rows).execute().data or []

    def _insert_question(self, form_id: str, data: QuestionCreate) -> QuestionResponse:
        result = self.supabase.table("form_questions").insert({
            "form_id": form_id,
            **data.model_dump(exclude={"options"}),
        }).execute()
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to add question")
        question = result.data[0]
        options = self._insert_options(question["id"], data.options)
        return QuestionResponse(**question, options=options)

    def add_question(self, form_id: str, owner_id: str, data: QuestionCreate) -> QuestionResponse:
        if data.type in CHOICE_TYPES and not data.options:
            raise HTTPException(status_code=400, detail="Choice questions need at least one option")
        self._get_owned_form(form_id, owner_id)
        try:
            return self._insert_question(form_id, data)
        except Exception as e:
            raise_db_error(e, "Failed to add question")

    def _get_owned_question(self, question_id: str, owner_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("form_questions")\
                .select("*")\
                .eq("id", question_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise_db_error(e, "Failed to fetch question")
        question = result.data if result else None
        if not question:
            raise HTTPException(status_code=404, detail="Question not found")
        self._get_owned_form(question["form_id"], owner_id)
        return question

    def update_question(self, question_id: str, owner_id: str, updates: QuestionUpdate) -> QuestionResponse:
        update_data = updates.model_dump(exclude_none=True, exclude={"options"})
        if not update_data and updates.options is None:
            raise HTTPException(status_code=400, detail="No fields to update")
        question = self._get_owned_question(question_id, owner_id)
        try:
            if update_data:
                update_data["updated_at"] = utc_now_iso()
                question = self.supabase.table("form_questions")\
                    .update(update_data)\
                    .eq("id", question_id)\
                    .execute().data[0]
            if updates.options is not None:
                self.supabase.table("form_question_options")\
                    .delete()\
                    .eq("question_id", question_id)\
                    .execute()
                self._insert_options(question_id, updates.options)
            options = self.supabase.table("form_question_options")\
                .select("*")\
                .eq("question_id", question_id)\
                .order("order_index")\
                .execute().data or []
            return QuestionResponse(**{**question, "settings": question.get("settings") or {}}, options=options)
        except Exception as e:
            raise_db_error(e, "Failed to update question")

    def delete_question(self, question_id: str, owner_id: str) -> None:
        self._get_owned_question(question_id, owner_id)
        try:
            self.supabase.table("form_question_options").delete().eq("question_id", question_id).execute()
            self.supabase.table("form_questions").delete().eq("id", question_id).execute()
        except Exception as e:
            raise_db_error(e, "Failed to delete question")

    # Public

    def _get_public_form_row(self, slug: str, user: Optional[dict]) -> Dict[str, Any]:
        try:
            form = self._find_by_slug(slug)
        except Exception as e:
            raise_db_error(e, "Failed to fetch form")
        if not form or form.get("status") != "active":
            raise HTTPException(status_code=404, detail="Form not found")
        if form.get("is_internal") and not user:
            raise HTTPException(status_code=401, detail="Sign in to access this form")
        return form

    def get_public_form(self, slug: str, user: Optional[dict]) -> FormWithQuestionsResponse:
        form = self._get_public_form_row(slug, user)
        return FormWithQuestionsResponse(**form, questions=self._questions(form["id"], active_only=True))

    def submit(
        self,
        slug: str,
        body: FormSubmitRequest,
        user: Optional[dict],
        ip: str,
        user_agent: Optional[str],
    ) -> FormSubmitResponse:
        form = self._get_public_form_row(slug, user)
        if not body.consent:
            raise HTTPException(status_code=400, detail="You must agree to GDPR consent.")

        try:
            count = len(self.supabase.table("form_submissions")
                        .select("id")
                        .eq("form_id", form["id"])
                        .execute().data or [])
        except Exception as e:
            raise_db_error(e, "Failed to submit form")
        reason = form_closed_reason(form, count, utc_now())
        if reason:
            raise HTTPException(status_code=403, detail=reason)

        questions = [q.model_dump() for q in self._questions(form["id"], active_only=True)]
        error = validate_answers(questions, body.answers)
        if error:
            raise HTTPException(status_code=400, detail=error)

        submitter_email = (body.submitter_email or "").strip() or (user or {}).get("email")
        if form.get("collect_submitter_email"):
            if not submitter_email:
                raise HTTPException(status_code=400, detail="Email is required")
            if not is_valid_email(submitter_email):
                raise HTTPException(status_code=400, detail="Invalid email format")

        now = utc_now_iso()
        try:
            result = self.supabase.table("form_submissions").insert({
                "form_id": form["id"],
                "status": "complete",
                "submitter_user_id": (user or {}).get("id"),
                "submitter_email": submitter_email or None,
                "submitter_ip": ip,
                "user_agent": user_agent,
                "consent_checked": True,
                "consent_text_snapshot": form.get("gdpr_consent_text") or "",
                "completed_at": now,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to submit form")
            submission = result.data[0]
            rows = [
                {"submission_id": submission["id"], **build_answer_row(q, body.answers.get(q["id"]))}
                for q in questions
            ]
            if rows:
                self.supabase.table("form_answers").insert(rows).execute()
        except Exception as e:
            raise_db_error(e, "Failed to submit form")

        logger.info(f"Submission {submission['id']} received for form {slug}")
        return FormSubmitResponse(
            submission_id=submission["id"],
            confirmation_message=form.get("confirmation_message"),
            redirect_url=form.get("redirect_url"),
        )

    # Responses

    def _submissions_with_answers(self, form_id: str) -> List[Dict[str, Any]]:
        try:
            submissions = self.supabase.table("form_submissions")\
                .select("*")\
                .eq("form_id", form_id)\
                .order("created_at", desc=True)\
                .execute().data or []
            answers: Dict[str, List[Dict[str, Any]]] = {}
            if submissions:
                rows = self.supabase.table("form_answers")\
                    .select("*")\
                    .in_("submission_id", [s["id"] for s in submissions])\
                    .execute().data or []
                for row in rows:
                    answers.setdefault(row["submission_id"], []).append(row)
            return [{**s, "answers": answers.get(s["id"], [])} for s in submissions]
        except Exception as e:
            raise_db_error(e, "Failed to fetch responses")

    def list_responses(self, form_id: str, owner_id: str) -> List[SubmissionResponse]:
        self._get_owned_form(form_id, owner_id)
        return [SubmissionResponse(**s) for s in self._submissions_with_answers(form_id)]

    def export_responses_csv(self, form_id: str, owner_id: str) -> str:
        """One CSV row per answer, newest submission first"""
        self._get_owned_form(form_id, owner_id)
        labels = {q.id: q.label for q in self._questions(form_id)}
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(EXPORT_COLUMNS)
        for submission in self._submissions_with_answers(form_id):
            for answer in submission["answers"]:
                number = answer.get("value_number")
                writer.writerow([
                    submission["id"],
                    submission.get("created_at") or "",
                    submission.get("submitter_email") or "",
                    answer["question_id"],
                    labels.get(answer["question_id"], ""),
                    answer.get("value_text") or "",
                    "" if number is None else number,
                    answer.get("value_date") or "",
                    answer.get("value_time") or "",
                    answer.get("value_email") or "",
                    answer.get("value_url") or "",
                    json.dumps(answer.get("selected_options") or []),
                ])
        return buffer.getvalue()
