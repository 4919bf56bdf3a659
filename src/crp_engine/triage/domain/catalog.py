"""
Triage Lookup Tables
====================

Static keyword and weight tables used by the complexity scorer and the
skill identifier. Kept as data so they can be tested and swapped
independently of the scoring code.
"""

from typing import Dict, List, Tuple

from crp_engine.config import AffectedSystem, SkillType, UrgencyLevel


DESCRIPTION_LENGTH_BUCKETS: List[Tuple[int, int]] = [
    (500, 20),
    (300, 15),
    (150, 10),
]
DESCRIPTION_LENGTH_MINIMUM = 5

ATTACHMENT_POINTS = 5
ATTACHMENT_CAP = 15

URGENCY_COMPLEXITY_WEIGHT: Dict[UrgencyLevel, int] = {
    UrgencyLevel.CRITICAL: 20,
    UrgencyLevel.HIGH: 15,
    UrgencyLevel.MEDIUM: 10,
    UrgencyLevel.LOW: 5,
}

COMPLEXITY_KEYWORDS: Dict[str, int] = {
    "multiple": 3,
    "complex": 4,
    "failure": 3,
    "error": 2,
    "critical": 3,
    "breach": 4,
    "security": 3,
    "performance": 2,
    "degradation": 3,
    "integration": 3,
    "across": 3,
    "systems": 2,
    "modules": 2,
    "inconsistent": 3,
    "intermittent": 4,
    "authentication": 3,
    "authorization": 3,
    "connectivity": 2,
    "configuration": 2,
    "corruption": 4,
}
KEYWORD_SCORE_CAP = 25

SYSTEM_COMPLEXITY: Dict[str, int] = {
    AffectedSystem.ERP.value: 15,
    AffectedSystem.S4HANA.value: 18,
    AffectedSystem.SUCCESS_FACTORS.value: 12,
    AffectedSystem.ARIBA.value: 10,
    AffectedSystem.CONCUR.value: 8,
    AffectedSystem.FIELDGLASS.value: 10,
    AffectedSystem.CUSTOMER_EXPERIENCE.value: 12,
    AffectedSystem.BTP.value: 20,
}
DEFAULT_SYSTEM_COMPLEXITY = 10

HIGH_TIER_THRESHOLD = 70
MEDIUM_TIER_THRESHOLD = 40

# Declaration order matters: it is the scan order and therefore the
# tie order after the stable confidence sort.
SKILL_KEYWORDS: Dict[SkillType, List[str]] = {
    SkillType.DATABASE: ["database", "sql", "query", "data", "connection", "timeout", "table", "record", "field"],
    SkillType.FRONTEND: ["ui", "interface", "screen", "display", "form", "button", "layout", "css", "html"],
    SkillType.BACKEND: ["api", "service", "server", "process", "function", "module", "method", "class"],
    SkillType.NETWORK: ["network", "connection", "timeout", "latency", "bandwidth", "firewall", "proxy", "dns"],
    SkillType.SECURITY: ["security", "breach", "authentication", "login", "password", "access", "permission", "role"],
    SkillType.DEVOPS: ["deployment", "pipeline", "build", "environment", "configuration", "ci/cd", "docker"],
    SkillType.INTEGRATION: ["integration", "connector", "interface", "communication", "sync", "middleware", "api"],
    SkillType.ANALYTICS: ["report", "analytics", "dashboard", "metrics", "statistics", "chart", "graph", "kpi"],
    SkillType.MOBILE: ["mobile", "app", "phone", "tablet", "responsive", "android", "ios", "native"],
    SkillType.CLOUD: ["cloud", "aws", "azure", "saas", "infrastructure", "serverless", "container", "kubernetes"],
    SkillType.UX: ["user experience", "ux", "usability", "design", "workflow", "journey", "accessibility"],
}
MIN_SKILL_CONFIDENCE = 20

SYSTEM_FALLBACK_SKILLS: Dict[str, List[Tuple[SkillType, float]]] = {
    AffectedSystem.ERP.value: [(SkillType.BACKEND, 70), (SkillType.DATABASE, 60)],
    AffectedSystem.S4HANA.value: [(SkillType.BACKEND, 70), (SkillType.DATABASE, 60)],
    AffectedSystem.SUCCESS_FACTORS.value: [(SkillType.FRONTEND, 70), (SkillType.INTEGRATION, 60)],
    AffectedSystem.CUSTOMER_EXPERIENCE.value: [(SkillType.FRONTEND, 70), (SkillType.INTEGRATION, 60)],
    AffectedSystem.BTP.value: [(SkillType.CLOUD, 80), (SkillType.INTEGRATION, 70)],
}
DEFAULT_FALLBACK_SKILLS: List[Tuple[SkillType, float]] = [(SkillType.BACKEND, 60)]

# Urgency score bands: base + randrange(URGENCY_BAND_WIDTH)
URGENCY_SCORE_BASE: Dict[UrgencyLevel, int] = {
    UrgencyLevel.CRITICAL: 80,
    UrgencyLevel.HIGH: 60,
    UrgencyLevel.MEDIUM: 40,
    UrgencyLevel.LOW: 20,
}
URGENCY_BAND_WIDTH = 20

CONFIDENCE_FLOOR = 60
CONFIDENCE_CEILING = 95
CONFIDENCE_JITTER = 5.0
