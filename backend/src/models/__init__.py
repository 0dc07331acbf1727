# Hotel Audit Analytics - Models Package

# Typed read-only input records, the snapshot that bundles them, and the
# serializable result records produced by the analytics engine
from .audit import (
    PASS, FAIL, NA, ANSWER_VALUES, STATUS_SUBMITTED,
    Question, Section, Answer, Run, Area, Template, Member,
    normalize_answer_value, resolve_answer_value, value_or_default_pass,
)
from .snapshot import AuditSnapshot, group_answers_by_run, member_by_run, name_of
from .statistics import (
    ScoreBreakdown, ScoreAgg, EMPTY_SCORE, SectionScore, AreaScore, WorstAudit,
    HeatCell, HeatMapChild, HeatMapRow, TrendPoint,
    MemberRankingRow, TopicFailure, SharedTopicPair,
    TemplateShare, MemberTrendRow, MemberReport,
)

__all__ = [
    'PASS',
    'FAIL',
    'NA',
    'ANSWER_VALUES',
    'STATUS_SUBMITTED',
    'Question',
    'Section',
    'Answer',
    'Run',
    'Area',
    'Template',
    'Member',
    'normalize_answer_value',
    'resolve_answer_value',
    'value_or_default_pass',
    'AuditSnapshot',
    'group_answers_by_run',
    'member_by_run',
    'name_of',
    'ScoreBreakdown',
    'ScoreAgg',
    'EMPTY_SCORE',
    'SectionScore',
    'AreaScore',
    'WorstAudit',
    'HeatCell',
    'HeatMapChild',
    'HeatMapRow',
    'TrendPoint',
    'MemberRankingRow',
    'TopicFailure',
    'SharedTopicPair',
    'TemplateShare',
    'MemberTrendRow',
    'MemberReport',
]
