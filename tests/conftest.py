"""Shared payloads shaped like the judge's GraphQL responses."""

import json

import pytest

from leettui.domain.models import CodeSnippet, Difficulty, Example, Problem
from leettui.infrastructure import HTTPResponse

REMOVE_ELEMENT_HTML = """<p>Given an integer array <code>nums</code> and an integer <code>val</code>, \
remove all occurrences of <code>val</code> in <code>nums</code> \
<a href="https://en.wikipedia.org/wiki/In-place_algorithm"><strong>in-place</strong></a>.</p>

<p>&nbsp;</p>
<p><strong class="example">Example 1:</strong></p>

<pre>
<strong>Input:</strong> nums = [3,2,2,3], val = 3
<strong>Output:</strong> 2, nums = [2,2,_,_]
<strong>Explanation:</strong> Your function should return k = 2, with the first two elements of nums being 2.
It does not matter what you leave beyond the returned k (hence they are underscores).
</pre>

<p>&nbsp;</p>
<p><strong>Constraints:</strong></p>

<ul>
\t<li><code>0 &lt;= nums.length &lt;= 100</code></li>
\t<li><code>0 &lt;= nums[i] &lt;= 50</code></li>
\t<li><code>0 &lt;= val &lt;= 10<sup>2</sup></code></li>
</ul>
"""

PYTHON_SNIPPET = (
    "class Solution:\n"
    "    def removeElement(self, nums: List[int], val: int) -> int:\n"
    "        "
)

RUST_SNIPPET = (
    "impl Solution {\n"
    "    pub fn remove_element(nums: &mut Vec<i32>, val: i32) -> i32 {\n"
    "        \n"
    "    }\n"
    "}"
)

CPP_SNIPPET = (
    "class Solution {\n"
    "public:\n"
    "    int removeElement(vector<int>& nums, int val) {\n"
    "        \n"
    "    }\n"
    "};"
)


def summary_payload(frontend_id: str, title: str, slug: str, difficulty: str = "Easy", status=None):
    return {
        "frontendQuestionId": frontend_id,
        "title": title,
        "titleSlug": slug,
        "difficulty": difficulty,
        "acRate": 58.4,
        "isPaidOnly": False,
        "status": status,
        "topicTags": [{"name": "Array", "slug": "array"}],
    }


@pytest.fixture
def remove_element_html():
    return REMOVE_ELEMENT_HTML


@pytest.fixture
def problem_list_data():
    return {
        "problemsetQuestionList": {
            "total": 2,
            "questions": [
                summary_payload(
                    "26",
                    "Remove Duplicates from Sorted Array",
                    "remove-duplicates-from-sorted-array",
                    status="ac",
                ),
                summary_payload("27", "Remove Element", "remove-element"),
            ],
        }
    }


@pytest.fixture
def question_detail_data():
    return {
        "question": {
            "questionId": "27",
            "frontendQuestionId": "27",
            "title": "Remove Element",
            "titleSlug": "remove-element",
            "difficulty": "Easy",
            "content": REMOVE_ELEMENT_HTML,
            "isPaidOnly": False,
            "acRate": 58.4,
            "status": None,
            "exampleTestcaseList": ["[3,2,2,3]\n3"],
            "sampleTestCase": "[3,2,2,3]\n3",
            "topicTags": [
                {"name": "Array", "slug": "array"},
                {"name": "Two Pointers", "slug": "two-pointers"},
            ],
            "codeSnippets": [
                {"lang": "Python3", "langSlug": "python3", "code": PYTHON_SNIPPET},
                {"lang": "Rust", "langSlug": "rust", "code": RUST_SNIPPET},
                {"lang": "C++", "langSlug": "cpp", "code": CPP_SNIPPET},
            ],
            "hints": ["The problem statement clearly asks us to modify the array in-place."],
        }
    }


@pytest.fixture
def graphql_response():
    """Build an HTTPResponse carrying a GraphQL body."""

    def build(data=None, *, errors=None, status=200):
        body = {}
        if data is not None:
            body["data"] = data
        if errors is not None:
            body["errors"] = errors
        return HTTPResponse(status=status, text=json.dumps(body))

    return build


@pytest.fixture
def remove_element_problem():
    return Problem(
        id="27",
        question_id="27",
        slug="remove-element",
        title="Remove Element",
        difficulty=Difficulty.EASY,
        description="Given an integer array nums and an integer val, remove all occurrences.",
        examples=(
            Example(
                input="nums = [3,2,2,3], val = 3",
                output="2, nums = [2,2,_,_]",
                explanation="Your function should return k = 2.",
            ),
        ),
        code_snippets=(
            CodeSnippet("python3", "Python3", PYTHON_SNIPPET),
            CodeSnippet("rust", "Rust", RUST_SNIPPET),
            CodeSnippet("cpp", "C++", CPP_SNIPPET),
        ),
    )
