"""
The fixed onboarding checklist every new developer works through.

Step ids are stored in checklist_status.step_name.
"""

from typing import Dict, List

CATEGORY_LABELS = {
    "setup": "ENVIRONMENT SETUP",
    "access": "ACCESS & PERMISSIONS",
    "training": "TRAINING & LEARNING",
    "integration": "TEAM INTEGRATION",
}

CATEGORY_DESCRIPTIONS = {
    "setup": "Configure your development environment and essential tools",
    "access": "Obtain necessary access permissions and credentials",
    "training": "Complete required training and documentation review",
    "integration": "Integrate with team processes and workflows",
}


def _item(id, title, description, category, required, estimated_time):
    return {
        "id": id,
        "title": title,
        "description": description,
        "category": category,
        "required": required,
        "estimated_time": estimated_time,
    }


ONBOARDING_CHECKLIST: List[Dict] = [
    _item("development-environment", "Development Environment Setup",
          "Install and configure development tools (IDE, Git, Node.js, Docker)",
          "setup", True, "2-3 hours"),
    _item("company-accounts", "Company Account Creation",
          "Create accounts for company tools (Slack, Jira, Confluence, etc.)",
          "setup", True, "1 hour"),
    _item("vpn-setup", "VPN Configuration",
          "Install and configure company VPN for secure remote access",
          "setup", True, "30 minutes"),
    _item("repository-access", "Repository Access",
          "Gain access to relevant Git repositories and understand branching strategy",
          "access", True, "1 hour"),
    _item("database-access", "Database Access",
          "Configure database connections for development and staging environments",
          "access", True, "45 minutes"),
    _item("server-access", "Server Access",
          "SSH access to development and staging servers",
          "access", False, "30 minutes"),
    _item("codebase-review", "Codebase Architecture Review",
          "Review main application architecture and coding standards",
          "training", True, "4-6 hours"),
    _item("documentation-review", "Documentation Review",
          "Read technical documentation, API docs, and development guidelines",
          "training", True, "2-3 hours"),
    _item("security-training", "Security Training",
          "Complete mandatory security awareness training",
          "training", True, "1 hour"),
    _item("testing-procedures", "Testing Procedures",
          "Learn testing frameworks, procedures, and quality standards",
          "training", True, "2 hours"),
    _item("team-meetings", "Team Introduction Meetings",
          "Meet with team members, stakeholders, and project managers",
          "integration", True, "2-3 hours"),
    _item("first-task-assignment", "First Task Assignment",
          "Receive and begin work on first development task",
          "integration", True, "Varies"),
    _item("code-review-process", "Code Review Process",
          "Participate in code review process as both reviewer and reviewee",
          "integration", True, "1-2 hours"),
    _item("deployment-process", "Deployment Process",
          "Learn and practice deployment procedures and CI/CD pipeline",
          "integration", True, "2 hours"),
    _item("mentorship-setup", "Mentorship Setup",
          "Connect with assigned mentor and establish regular check-ins",
          "integration", False, "30 minutes"),
]

STEP_IDS = {item["id"] for item in ONBOARDING_CHECKLIST}
REQUIRED_STEP_IDS = {item["id"] for item in ONBOARDING_CHECKLIST if item["required"]}
