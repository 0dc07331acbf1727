"""
Common-Failure Analyzer - FAIL answers grouped by topic.

Two numbers are kept per topic and never merged:
    fail_count      every FAIL, repeats by the same person included
                    ("how often does this fail")
    affected_count  distinct executors with at least one FAIL
                    ("how many people get this wrong")

Topic keys (TOPIC mode, first match wins):
    TAG:<tag>             question has a tag
    CLASS:<classification> question has a classification
    Q:<question_id>       fallback, so every FAIL lands somewhere

Tag and classification keys are case-insensitive.
"""
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from models import FAIL, Answer, Member, Question, Run, SharedTopicPair, TopicFailure
from utils.config import COMMON_FAILURES_TOP_N, PAIRWISE_PEOPLE_WARN_THRESHOLD, SHARED_TOPICS_TOP_N
from utils.logger import log_pairwise_scale_warning, logger

from analytics.errors import invalid_argument, require_count
from analytics.rankings.ranking import collation_key

TOPIC = 'TOPIC'
TAG = 'TAG'
CLASSIFICATION = 'CLASSIFICATION'
QUESTION = 'QUESTION'
GROUPING_MODES = (TOPIC, TAG, CLASSIFICATION, QUESTION)

UNCLASSIFIED = 'Unclassified'


def _require_mode(mode: str) -> str:
    if mode not in GROUPING_MODES:
        raise invalid_argument('mode', mode, f"must be one of {', '.join(GROUPING_MODES)}")
    return mode


def topic_key(question_id: str, question: Optional[Question], mode: str = TOPIC) -> Tuple[str, str]:
    """
    Topic key and display label for a failed question.

    An unknown question still gets its own Q:<id> topic.

    Returns:
        (key, label), e.g. ('TAG:towels', 'Towels')
    """
    tag = question.tag if question else None
    classification = question.classification if question else None
    text = question.text if question and question.text else question_id

    if mode in (TOPIC, TAG) and tag:
        return f"TAG:{tag.lower()}", tag
    if mode in (TOPIC, CLASSIFICATION) and classification:
        return f"CLASS:{classification.lower()}", classification
    if mode == CLASSIFICATION:
        return f"CLASS:{UNCLASSIFIED.lower()}", UNCLASSIFIED
    return f"Q:{question_id}", text


def failed_answers(answers: Iterable[Answer]) -> List[Answer]:
    return [answer for answer in answers if answer.value == FAIL]


def answers_for_runs(runs: Iterable[Run], answers_by_run: Mapping[str, List[Answer]]) -> List[Answer]:
    """Answers of the given runs, in run order."""
    return [answer for run in runs for answer in answers_by_run.get(run.id, [])]


def analyze_failures(
    answers: Iterable[Answer],
    questions_by_id: Mapping[str, Question],
    member_by_run: Optional[Mapping[str, str]] = None,
    mode: str = TOPIC,
) -> List[TopicFailure]:
    """
    Aggregate FAIL answers per topic.

    Args:
        answers: Answers of the runs in scope (non-FAIL values are skipped)
        questions_by_id: Question lookup for tag/classification/text
        member_by_run: Executor per run id; a FAIL on a run without an
                       executor counts in fail_count but affects nobody
        mode: TOPIC, TAG, CLASSIFICATION or QUESTION

    Returns:
        TopicFailures in first-seen order
    """
    mode = _require_mode(mode)
    member_by_run = member_by_run or {}

    topics: Dict[str, dict] = {}
    for answer in failed_answers(answers):
        question = questions_by_id.get(answer.question_id)
        key, label = topic_key(answer.question_id, question, mode)
        entry = topics.get(key)
        if entry is None:
            entry = topics[key] = {
                'label': label,
                'fails': 0,
                'people': set(),
                'example': question.text if question and question.text else None,
                'question': question,
                'question_id': answer.question_id,
            }
        elif entry['example'] is None and question and question.text:
            entry['example'] = question.text
        entry['fails'] += 1
        member_id = member_by_run.get(answer.run_id)
        if member_id:
            entry['people'].add(member_id)

    results = []
    for key, entry in topics.items():
        question: Optional[Question] = entry['question']
        results.append(TopicFailure(
            topic_key=key,
            topic=entry['label'],
            fail_count=entry['fails'],
            affected_count=len(entry['people']),
            example_text=entry['example'],
            question_id=entry['question_id'] if key.startswith('Q:') else None,
            tag=question.tag if question and key.startswith('TAG:') else None,
            classification=question.classification if question and key.startswith('CLASS:') else None,
        ))
    return results


def by_affected(topics: Iterable[TopicFailure], n: int = COMMON_FAILURES_TOP_N) -> List[TopicFailure]:
    """
    Systemic problems: topics more than one person failed, most people
    first, then most FAILs.
    """
    n = require_count('n', n)
    systemic = [topic for topic in topics if topic.affected_count > 1]
    systemic.sort(key=lambda t: (-t.affected_count, -t.fail_count, collation_key(t.topic)))
    return systemic[:n]


def by_fail_count(topics: Iterable[TopicFailure], n: int = COMMON_FAILURES_TOP_N) -> List[TopicFailure]:
    """Most frequent FAILs first, then most people."""
    n = require_count('n', n)
    ordered = sorted(topics, key=lambda t: (-t.fail_count, -t.affected_count, collation_key(t.topic)))
    return ordered[:n]


@dataclass(frozen=True)
class FailureAnalysis:
    """Both sorted views of one failure aggregate."""
    by_affected: List[TopicFailure] = field(default_factory=list)
    by_fails: List[TopicFailure] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "by_affected": [topic.to_dict() for topic in self.by_affected],
            "by_fails": [topic.to_dict() for topic in self.by_fails],
        }


def common_failures(
    answers: Iterable[Answer],
    questions_by_id: Mapping[str, Question],
    member_by_run: Optional[Mapping[str, str]] = None,
    mode: str = TOPIC,
    n: int = COMMON_FAILURES_TOP_N,
) -> FailureAnalysis:
    """Build the by-people and by-fails views from one aggregate."""
    topics = analyze_failures(answers, questions_by_id, member_by_run, mode)
    return FailureAnalysis(by_affected=by_affected(topics, n), by_fails=by_fail_count(topics, n))


def failed_topics_by_member(
    answers: Iterable[Answer],
    questions_by_id: Mapping[str, Question],
    member_by_run: Mapping[str, str],
    mode: str = TOPIC,
) -> Dict[str, Set[str]]:
    """Set of failed topic keys per executor, first-seen member order."""
    mode = _require_mode(mode)
    by_member: Dict[str, Set[str]] = {}
    for answer in failed_answers(answers):
        member_id = member_by_run.get(answer.run_id)
        if not member_id:
            continue
        key, _ = topic_key(answer.question_id, questions_by_id.get(answer.question_id), mode)
        by_member.setdefault(member_id, set()).add(key)
    return by_member


def shared_topic_pairs(
    answers: Iterable[Answer],
    questions_by_id: Mapping[str, Question],
    member_by_run: Mapping[str, str],
    members_by_id: Optional[Mapping[str, Member]] = None,
    n: int = SHARED_TOPICS_TOP_N,
    mode: str = TOPIC,
) -> List[SharedTopicPair]:
    """
    Pairs of people who failed the same topics (training-group suggestions).

    Compares every unordered pair of people with at least one failed topic:
    O(P^2 * T) for P people and T topics. Above
    PAIRWISE_PEOPLE_WARN_THRESHOLD people a warning is logged.

    Returns:
        Pairs with at least one shared topic, most shared first
    """
    n = require_count('n', n)
    members_by_id = members_by_id or {}
    topics_by_member = failed_topics_by_member(answers, questions_by_id, member_by_run, mode)

    people = list(topics_by_member)
    if len(people) > PAIRWISE_PEOPLE_WARN_THRESHOLD:
        all_topics = set().union(*topics_by_member.values())
        log_pairwise_scale_warning(len(people), len(all_topics), PAIRWISE_PEOPLE_WARN_THRESHOLD)

    def display(member_id: str) -> str:
        member = members_by_id.get(member_id)
        return member.name if member else '—'

    pairs = []
    for a_id, b_id in combinations(people, 2):
        shared = len(topics_by_member[a_id] & topics_by_member[b_id])
        if shared == 0:
            continue
        pairs.append(SharedTopicPair(a_id=a_id, a_name=display(a_id),
                                     b_id=b_id, b_name=display(b_id), shared_count=shared))

    pairs.sort(key=lambda pair: -pair.shared_count)
    logger.debug("Shared topic pairs computed", extra={
        "event_type": "shared_topic_pairs",
        "people": len(people),
        "pairs": len(pairs)
    })
    return pairs[:n]
