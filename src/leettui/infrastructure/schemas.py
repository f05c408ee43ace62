"""Pydantic schemas for judge GraphQL responses."""

from pydantic import BaseModel, ConfigDict, Field

from leettui.domain.models import (
    CodeSnippet,
    Difficulty,
    Problem,
    ProblemPage,
    ProblemStatus,
    ProblemSummary,
    RunResult,
    Submission,
    SubmissionHandle,
    Verdict,
)

from .parsers.interfaces import ContentParserProtocol


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TopicTagSchema(_Schema):
    """Tag attached to a problem."""

    name: str
    slug: str


class ProblemSummarySchema(_Schema):
    """Entry of the problem list query."""

    frontend_question_id: str = Field(alias="frontendQuestionId")
    title: str
    title_slug: str = Field(alias="titleSlug")
    difficulty: Difficulty
    ac_rate: float = Field(default=0.0, alias="acRate")
    is_paid_only: bool = Field(default=False, alias="isPaidOnly")
    status: str | None = None
    topic_tags: list[TopicTagSchema] = Field(default_factory=list, alias="topicTags")

    def to_domain(self) -> ProblemSummary:
        return ProblemSummary(
            id=self.frontend_question_id,
            title=self.title,
            slug=self.title_slug,
            difficulty=self.difficulty,
            status=ProblemStatus.from_remote(self.status),
            ac_rate=self.ac_rate,
            paid_only=self.is_paid_only,
            tags=tuple(tag.slug for tag in self.topic_tags),
        )


class ProblemListSchema(_Schema):
    """Payload of ``problemsetQuestionList``."""

    total: int
    questions: list[ProblemSummarySchema] = Field(default_factory=list)

    def to_domain(self) -> ProblemPage:
        return ProblemPage(total=self.total, problems=[q.to_domain() for q in self.questions])


class CodeSnippetSchema(_Schema):
    lang: str
    lang_slug: str = Field(alias="langSlug")
    code: str


class QuestionDetailSchema(_Schema):
    """Payload of ``questionDetail``."""

    question_id: str = Field(alias="questionId")
    frontend_question_id: str = Field(alias="frontendQuestionId")
    title: str
    title_slug: str = Field(alias="titleSlug")
    difficulty: Difficulty
    content: str | None = None
    is_paid_only: bool = Field(default=False, alias="isPaidOnly")
    ac_rate: float = Field(default=0.0, alias="acRate")
    status: str | None = None
    example_testcase_list: list[str] | None = Field(default=None, alias="exampleTestcaseList")
    sample_test_case: str | None = Field(default=None, alias="sampleTestCase")
    topic_tags: list[TopicTagSchema] = Field(default_factory=list, alias="topicTags")
    code_snippets: list[CodeSnippetSchema] | None = Field(default=None, alias="codeSnippets")
    hints: list[str] = Field(default_factory=list)

    def to_domain(self, parser: ContentParserProtocol) -> Problem:
        description = parser.to_text(self.content)
        testcases = self.example_testcase_list or []
        if not testcases and self.sample_test_case:
            testcases = [self.sample_test_case]
        return Problem(
            id=self.frontend_question_id,
            question_id=self.question_id,
            slug=self.title_slug,
            title=self.title,
            difficulty=self.difficulty,
            status=ProblemStatus.from_remote(self.status),
            description=description,
            tags=tuple(tag.slug for tag in self.topic_tags),
            examples=tuple(parser.extract_examples(description)),
            code_snippets=tuple(
                CodeSnippet(lang_slug=s.lang_slug, lang=s.lang, code=s.code)
                for s in self.code_snippets or []
            ),
            hints=tuple(parser.to_text(hint) for hint in self.hints),
            paid_only=self.is_paid_only,
            ac_rate=self.ac_rate,
            example_testcases=tuple(testcases),
        )


class SubmitResultSchema(_Schema):
    """Payload of ``submitSolution``."""

    submission_id: int | str = Field(alias="submissionId")

    def to_domain(self, problem_id: str) -> SubmissionHandle:
        return SubmissionHandle(submission_id=str(self.submission_id), problem_id=problem_id)


class SubmissionStatusSchema(_Schema):
    """Payload of ``submissionStatus``."""

    state: str
    status_code: int | None = Field(default=None, alias="statusCode")
    status_msg: str | None = Field(default=None, alias="statusMsg")
    status_runtime: str | None = Field(default=None, alias="statusRuntime")
    status_memory: str | None = Field(default=None, alias="statusMemory")
    total_correct: int | None = Field(default=None, alias="totalCorrect")
    total_testcases: int | None = Field(default=None, alias="totalTestcases")
    compile_error: str | None = Field(default=None, alias="compileError")
    runtime_error: str | None = Field(default=None, alias="runtimeError")

    def to_domain(self, handle: SubmissionHandle) -> Submission:
        if self.state.upper() != "SUCCESS":
            return Submission(
                problem_id=handle.problem_id,
                verdict=Verdict.PENDING,
                submission_id=handle.submission_id,
            )

        return Submission(
            problem_id=handle.problem_id,
            verdict=Verdict.from_status(self.status_code, self.status_msg),
            submission_id=handle.submission_id,
            runtime=self.status_runtime,
            memory=self.status_memory,
            passed=self.total_correct,
            total=self.total_testcases,
            detail=self.compile_error or self.runtime_error,
        )


class InterpretResultSchema(_Schema):
    """Body returned when an example run is queued."""

    interpret_id: str

    def to_domain(self, problem_id: str) -> SubmissionHandle:
        return SubmissionHandle(submission_id=self.interpret_id, problem_id=problem_id)


class RunCheckSchema(_Schema):
    """Body of the check endpoint for an example run."""

    state: str
    status_code: int | None = None
    status_msg: str | None = None
    status_runtime: str | None = None
    correct_answer: bool | None = None
    code_answer: list[str] | None = None
    expected_code_answer: list[str] | None = None
    full_compile_error: str | None = None
    full_runtime_error: str | None = None

    def to_domain(self, handle: SubmissionHandle) -> RunResult:
        if self.state.upper() != "SUCCESS":
            return RunResult(
                problem_id=handle.problem_id, verdict=Verdict.PENDING, run_id=handle.submission_id
            )

        verdict = Verdict.from_status(self.status_code, self.status_msg)
        # The run itself succeeded but at least one example disagrees.
        if verdict is Verdict.ACCEPTED and self.correct_answer is False:
            verdict = Verdict.WRONG_ANSWER

        return RunResult(
            problem_id=handle.problem_id,
            verdict=verdict,
            run_id=handle.submission_id,
            output=tuple(self.code_answer or ()),
            expected=tuple(self.expected_code_answer or ()),
            runtime=self.status_runtime,
            detail=self.full_compile_error or self.full_runtime_error,
        )
