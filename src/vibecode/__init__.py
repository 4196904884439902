"""vibecode - agent profile selection and rules synthesis

Philosophy:
- Ruthless simplicity
- Brick architecture (self-contained modules)
- Pure pipeline: resolve and synthesize return values, writers persist them
- Fail fast with helpful guidance

vibecode picks the minimal set of agent profiles that applies to a project
and renders a rules document, a context summary and a prompt library from it.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
