from .problem_cache import ProblemCache
from .problem_list_store import ProblemListStore
from .scaffold import ScaffoldGenerator
from .submission_poller import SubmissionPoller

__all__ = ["ProblemCache", "ProblemListStore", "ScaffoldGenerator", "SubmissionPoller"]
