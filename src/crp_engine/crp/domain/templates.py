"""
Thread Templates
================

Default title/description templates per skill and the keywords used to
pull relevant sentences out of a ticket description.
"""

from typing import Dict, List

from crp_engine.config import SkillType
from crp_engine.crp.domain.entities import ThreadTemplate


THREAD_TEMPLATES: Dict[SkillType, ThreadTemplate] = {
    SkillType.DATABASE: ThreadTemplate(
        title="Database investigation for {subject}",
        description=(
            "Investigate database-related issues in the ticket. Check for connection problems, "
            "query performance, data integrity, and database configuration. Review any error logs "
            "for SQL errors or timeouts."
        ),
    ),
    SkillType.FRONTEND: ThreadTemplate(
        title="User interface analysis for {subject}",
        description=(
            "Analyze frontend components related to the issue. Check for rendering problems, form "
            "validation, UI responsiveness, and browser compatibility issues. Verify CSS and layout "
            "consistency."
        ),
    ),
    SkillType.BACKEND: ThreadTemplate(
        title="Backend service investigation for {subject}",
        description=(
            "Investigate backend services and business logic related to the issue. Check API "
            "endpoints, service methods, data processing, and application server logs. Verify "
            "business rule implementation and service configuration."
        ),
    ),
    SkillType.NETWORK: ThreadTemplate(
        title="Network connectivity analysis for {subject}",
        description=(
            "Analyze network-related aspects of the issue. Check for connectivity problems, latency "
            "issues, firewall configurations, and network timeouts. Verify DNS resolution and proxy "
            "settings if applicable."
        ),
    ),
    SkillType.SECURITY: ThreadTemplate(
        title="Security assessment for {subject}",
        description=(
            "Perform security analysis related to the issue. Check authentication mechanisms, "
            "authorization rules, access controls, and potential security vulnerabilities. Review "
            "security logs and user permissions."
        ),
    ),
    SkillType.DEVOPS: ThreadTemplate(
        title="Deployment and environment investigation for {subject}",
        description=(
            "Investigate deployment and environment configuration related to the issue. Check build "
            "artifacts, deployment scripts, environment variables, and infrastructure configuration. "
            "Verify CI/CD pipeline and deployment logs."
        ),
    ),
    SkillType.INTEGRATION: ThreadTemplate(
        title="Integration point analysis for {subject}",
        description=(
            "Analyze integration aspects of the issue. Check interfaces between systems, data "
            "mapping, message formats, and communication protocols. Verify middleware configuration "
            "and integration error logs."
        ),
    ),
    SkillType.ANALYTICS: ThreadTemplate(
        title="Reporting and analytics investigation for {subject}",
        description=(
            "Investigate reporting and analytics components related to the issue. Check data "
            "aggregation, calculation logic, report rendering, and metric definitions. Verify "
            "dashboard functionality and data visualization."
        ),
    ),
    SkillType.MOBILE: ThreadTemplate(
        title="Mobile application analysis for {subject}",
        description=(
            "Analyze mobile-specific aspects of the issue. Check responsive design, mobile app "
            "functionality, device compatibility, and mobile-specific features. Verify performance "
            "on different mobile devices."
        ),
    ),
    SkillType.CLOUD: ThreadTemplate(
        title="Cloud infrastructure investigation for {subject}",
        description=(
            "Investigate cloud infrastructure related to the issue. Check cloud service "
            "configuration, resource allocation, scaling policies, and cloud provider-specific "
            "settings. Verify cloud service limits and quotas."
        ),
    ),
    SkillType.UX: ThreadTemplate(
        title="User experience evaluation for {subject}",
        description=(
            "Evaluate user experience aspects of the issue. Check workflow design, usability "
            "patterns, accessibility compliance, and user journey mapping. Verify consistency with "
            "design guidelines and user expectations."
        ),
    ),
}

INTEGRATION_THREAD_TEMPLATE = ThreadTemplate(
    title="Integration and system-wide verification for {subject}",
    description=(
        "Verify that all individual thread solutions work together correctly. Ensure system-wide "
        "consistency and perform integration testing across the affected components."
    ),
)

# Shorter than the identification keyword lists on purpose: only strong
# signals pull a sentence into a thread description.
RELEVANT_CONTENT_KEYWORDS: Dict[SkillType, List[str]] = {
    SkillType.DATABASE: ["database", "sql", "query", "data", "connection", "timeout", "table"],
    SkillType.FRONTEND: ["ui", "interface", "screen", "display", "form", "button"],
    SkillType.BACKEND: ["api", "service", "server", "process", "function", "module"],
    SkillType.NETWORK: ["network", "connection", "timeout", "latency", "bandwidth"],
    SkillType.SECURITY: ["security", "breach", "authentication", "login", "password"],
    SkillType.DEVOPS: ["deployment", "pipeline", "build", "environment", "configuration"],
    SkillType.INTEGRATION: ["integration", "connector", "interface", "communication"],
    SkillType.ANALYTICS: ["report", "analytics", "dashboard", "metrics", "statistics"],
    SkillType.MOBILE: ["mobile", "app", "phone", "tablet", "responsive"],
    SkillType.CLOUD: ["cloud", "aws", "azure", "saas", "infrastructure"],
    SkillType.UX: ["user experience", "ux", "usability", "design", "workflow"],
}

RELEVANT_CONTENT_PREFIX = "\n\nRelevant information from ticket: "
