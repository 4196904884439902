"""Fixed text used by the content synthesizer.

Every block here is static: the synthesizer filters and orders these tables
against the active profile set but never edits their wording. Prompts and
table rows reference profiles by id.
"""

RULES_PREAMBLE = """# Cursor IDE Rules - Vibecode Configuration

## Core Principles
1. Follow agent-specific guidelines for each domain
2. Maintain consistency across all code
3. Prioritize readability and maintainability
4. Write comprehensive tests for all features
5. Document complex logic and decisions
"""

SUMMARY_PLACEHOLDER = "Specialized agent for this domain. See the full profile for details."

RULES_FOOTER = """---

*Generated by vibecode - Intelligent Agent System*
*Agent profiles are available in .cursor/agents/ for detailed reference*
"""

# Optional guideline sections, emitted in this order
RULE_OPTION_SECTIONS: dict[str, tuple[str, tuple[str, ...]]] = {
    "git": (
        "Git Workflow",
        (
            "Use conventional commits (feat:, fix:, docs:, etc.)",
            "Keep commits atomic and focused",
            "Write clear, descriptive commit messages",
            "Create feature branches for all changes",
            "Squash commits before merging",
        ),
    ),
    "testing": (
        "Testing Guidelines",
        (
            "Write tests before implementing features (TDD)",
            "Aim for >80% code coverage",
            "Include unit, integration, and E2E tests",
            "Test edge cases and error scenarios",
            "Use descriptive test names",
        ),
    ),
    "security": (
        "Security Best Practices",
        (
            "Never hardcode secrets or credentials",
            "Validate all user inputs",
            "Use parameterized queries for databases",
            "Implement proper authentication and authorization",
            "Keep dependencies updated",
            "Follow OWASP guidelines",
        ),
    ),
    "performance": (
        "Performance Guidelines",
        (
            "Optimize for Core Web Vitals",
            "Implement lazy loading for heavy components",
            "Use proper caching strategies",
            "Minimize bundle sizes",
            "Profile and optimize database queries",
        ),
    ),
    "accessibility": (
        "Accessibility Rules",
        (
            "Follow WCAG 2.1 AA standards",
            "Provide proper ARIA labels",
            "Ensure keyboard navigation",
            "Test with screen readers",
            "Maintain proper color contrast",
        ),
    ),
    "docs": (
        "Documentation Standards",
        (
            "Document all public APIs",
            "Include usage examples",
            "Maintain up-to-date README",
            "Document architectural decisions",
            "Create onboarding guides",
        ),
    ),
}

FILE_PATTERN_GUIDE: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("*.tsx, *.jsx", ("frontend",)),
    ("*/api/*, */backend/*", ("backend",)),
    ("*.test.*, *.spec.*", ("testing",)),
    ("*/components/*", ("frontend", "design")),
    ("Dockerfile, docker-compose.yml", ("docker-container",)),
    (".github/workflows/*", ("devops",)),
    ("*.sql, */migrations/*", ("data",)),
    ("*/auth/*, */security/*", ("security",)),
    ("*.swift", ("ios-swift",)),
    ("*.dart", ("flutter",)),
)

TASK_GUIDE: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("UI/Component Development", ("frontend", "design")),
    ("API Development", ("backend", "api-graphql")),
    ("Database Work", ("data", "backend")),
    ("Testing", ("testing",)),
    ("Security", ("security",)),
    ("Performance", ("monitoring-observability",)),
    ("Deployment", ("devops",)),
    ("Mobile", ("mobile", "flutter", "ios-swift")),
)

SPECIALIZATIONS: dict[str, str] = {
    "frontend": "React, TypeScript, UI components, state management",
    "backend": "APIs, databases, authentication, server logic",
    "mobile": "React Native, mobile UI, platform-specific features",
    "testing": "Jest, Playwright, E2E tests, coverage",
    "security": "Authentication, encryption, GDPR, vulnerabilities",
    "devops": "CI/CD, deployment, Docker, monitoring",
    "data": "Database optimization, migrations, queries",
    "design": "UI/UX, Figma, design systems, accessibility",
}

DEFAULT_SPECIALIZATION = "Domain-specific expertise"

CONTEXT_USAGE = """## How to Use Agents in Cursor

### In Composer:
1. Reference agents using @agent-id
2. Example: "@frontend help me create a responsive navbar"
3. Agents provide domain-specific expertise

## Files and Conventions

- Agent specs: .cursor/agents/*.md
- Project rules: .cursorrules
- Context: This file
- Prompts: .cursor/composer-prompts.md
"""

# Project type -> prompt template name
TEMPLATE_FOR_TYPE: dict[str, str] = {
    "web": "web",
    "desktop": "web",
    "other": "web",
    "mobile": "mobile",
    "fullstack": "fullstack",
    "api": "backend",
    "cli": "backend",
}

TEMPLATE_PROMPTS: dict[str, tuple[tuple[str, str], ...]] = {
    "web": (
        ("frontend", "Create a responsive navigation bar with mobile menu"),
        ("design", "Design a modern hero section with CTA buttons"),
        ("frontend", "Implement infinite scrolling for product list"),
        ("testing", "Write comprehensive tests for user authentication flow"),
        ("accessibility", "Audit and fix accessibility issues in forms"),
        ("seo-marketing", "Optimize pages for search engines"),
    ),
    "mobile": (
        ("mobile", "Create onboarding screens with swipe navigation"),
        ("flutter", "Build onboarding screens with a PageView and shared widgets"),
        ("ios-swift", "Create onboarding screens with SwiftUI TabView paging"),
        ("backend", "Set up push notification service"),
        ("testing", "Write E2E tests for critical user flows"),
        ("design", "Design consistent mobile UI patterns"),
    ),
    "fullstack": (
        ("backend", "Create RESTful API with CRUD operations"),
        ("frontend", "Build admin dashboard with data tables"),
        ("api-graphql", "Convert REST endpoints to GraphQL"),
        ("data", "Optimize database queries for performance"),
        ("devops", "Set up CI/CD pipeline with automated testing"),
        ("security", "Implement role-based access control"),
    ),
    "backend": (
        ("backend", "Design microservices architecture"),
        ("api-graphql", "Create GraphQL schema and resolvers"),
        ("data", "Design normalized database schema"),
        ("docker-container", "Containerize application"),
        ("devops", "Set up Kubernetes deployment"),
        ("monitoring-observability", "Add logging and monitoring"),
    ),
}

# Titled prompt blocks shared by every template
PROMPT_BLOCKS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Authentication System",
        (
            ("security", "Design secure authentication flow with JWT"),
            ("backend", "Implement auth endpoints with refresh tokens"),
            ("frontend", "Create login and signup forms with validation"),
            ("testing", "Write auth integration tests"),
        ),
    ),
    (
        "Real-time Features",
        (
            ("websocket-realtime", "Set up WebSocket server"),
            ("backend", "Implement real-time message broadcasting"),
            ("frontend", "Create live chat interface"),
            ("mobile", "Add real-time sync to mobile app"),
        ),
    ),
    (
        "Payment Integration",
        (
            ("payment", "Integrate Stripe payment processing"),
            ("security", "Ensure PCI compliance"),
            ("backend", "Create subscription management API"),
            ("frontend", "Build checkout flow with payment forms"),
        ),
    ),
    (
        "Performance Issues",
        (
            ("monitoring-observability", "Identify performance bottlenecks"),
            ("data", "Analyze and optimize slow queries"),
            ("frontend", "Implement code splitting and lazy loading"),
            ("testing", "Create performance benchmarks"),
        ),
    ),
    (
        "Code Quality",
        (
            ("testing", "Increase test coverage to 80%"),
            ("security", "Perform security audit"),
            ("documentation", "Update API documentation"),
            ("devops", "Set up code quality checks in CI"),
        ),
    ),
)

# Ordered multi-agent workflows; steps are renumbered after filtering
WORKFLOWS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Complete Feature (Example: User Profile)",
        (
            ("data", "Design user profile database schema"),
            ("backend", "Create profile API endpoints"),
            ("frontend", "Build profile UI components"),
            ("mobile", "Implement mobile profile screens"),
            ("testing", "Write comprehensive tests"),
            ("security", "Review security implications"),
        ),
    ),
    (
        "Migration Project",
        (
            ("data", "Plan database migration strategy"),
            ("database-migration", "Create migration scripts"),
            ("backend", "Update API to support both versions"),
            ("frontend", "Migrate UI components gradually"),
            ("testing", "Ensure backward compatibility"),
            ("devops", "Deploy with zero downtime"),
        ),
    ),
)

PROMPT_TIPS = """## Tips for Using Agents

1. **Be Specific**: Instead of "fix bug", say "@testing reproduce login bug then @frontend fix validation issue"
2. **Chain Agents**: For complex tasks, involve multiple agents in sequence
3. **Context Matters**: Provide code snippets or file paths when asking for help
4. **Iterate**: Start with one agent, then bring in others as needed

## Custom Prompts Template

```
@[agent-id]
Task: [Specific task description]
Context: [Current state or problem]
Requirements: [What needs to be done]
Constraints: [Any limitations or preferences]
```
"""
