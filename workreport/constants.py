"""
Fixed report categories, orderings and rendering limits.
"""

# -------------------------------------------------
# Grouping categories
# -------------------------------------------------
PRIORITY_GROUP = "DCIM프로젝트"

# Always rendered after the general groups, in exactly this order
SPECIAL_GROUPS = ["사이트 지원", "결함처리", "OJT", "기타"]

# Subgroups of this group are keyed by customer instead of subGroup
SITE_SUPPORT_GROUP = "사이트 지원"

SUB_GROUP_ORDER = ["분석", "구현", "기타"]

INSUFFICIENT_DATA_GROUP = "데이터 부족"
PLACEHOLDER = "-"

MEETING_GROUP = "회의"

LEAVE_SUB_GROUPS = ["연차", "반차", "오전반차", "오후반차"]

# -------------------------------------------------
# Members
# -------------------------------------------------
UNKNOWN_MEMBER_PRIORITY = 999

# -------------------------------------------------
# Limits imposed by the workspace API
# -------------------------------------------------
TEXT_CHUNK_SIZE = 2000
BLOCK_LIMIT = 100
QUERY_PAGE_SIZE = 100

# -------------------------------------------------
# Labels
# -------------------------------------------------
WEEKDAY_LABELS = ["월", "화", "수", "목", "금", "토", "일"]

REPORT_TAGS = {
    "daily": "일간",
    "weekly": "주간",
    "monthly": "월간",
}

REPORT_ICONS = {
    "daily": "📝",
    "weekly": "🔶",
    "monthly": "📊",
}

EFFORT_HEADERS = {
    "daily": "일일 공수 현황",
    "weekly": "주간 공수 현황",
    "monthly": "월간 공수 현황",
}

PERSON_SECTION_TITLE = "개인별 공수 및 진행 상황"
COMPLETION_MARK = "작성 완료"
