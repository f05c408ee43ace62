"""Named GraphQL operations understood by the judge endpoint."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GraphQLOperation:
    """A query or mutation sent to the single GraphQL endpoint."""

    name: str
    query: str
    requires_auth: bool = False

    def payload(self, variables: dict) -> dict:
        return {"operationName": self.name, "query": self.query, "variables": variables}


PROBLEM_LIST = GraphQLOperation(
    name="problemsetQuestionList",
    query="""
query problemsetQuestionList($categorySlug: String, $limit: Int, $skip: Int, $filters: QuestionListFilterInput) {
  problemsetQuestionList: questionList(
    categorySlug: $categorySlug
    limit: $limit
    skip: $skip
    filters: $filters
  ) {
    total: totalNum
    questions: data {
      frontendQuestionId: questionFrontendId
      title
      titleSlug
      difficulty
      acRate
      isPaidOnly
      status
      topicTags {
        name
        slug
      }
    }
  }
}
""",
)

QUESTION_DETAIL = GraphQLOperation(
    name="questionDetail",
    query="""
query questionDetail($titleSlug: String!) {
  question(titleSlug: $titleSlug) {
    questionId
    frontendQuestionId: questionFrontendId
    title
    titleSlug
    difficulty
    content
    isPaidOnly
    acRate
    status
    exampleTestcaseList
    sampleTestCase
    topicTags {
      name
      slug
    }
    codeSnippets {
      lang
      langSlug
      code
    }
    hints
  }
}
""",
)

SUBMIT_SOLUTION = GraphQLOperation(
    name="submitSolution",
    query="""
mutation submitSolution($titleSlug: String!, $questionId: String!, $lang: String!, $typedCode: String!) {
  submitSolution(titleSlug: $titleSlug, questionId: $questionId, lang: $lang, typedCode: $typedCode) {
    submissionId
  }
}
""",
    requires_auth=True,
)

SUBMISSION_STATUS = GraphQLOperation(
    name="submissionStatus",
    query="""
query submissionStatus($submissionId: ID!) {
  submissionStatus(submissionId: $submissionId) {
    state
    statusCode
    statusMsg
    statusRuntime
    statusMemory
    totalCorrect
    totalTestcases
    compileError
    runtimeError
  }
}
""",
    requires_auth=True,
)
