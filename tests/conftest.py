from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.boilerplate_builder import BoilerplateBuilder


@pytest.fixture
def boilerplate_builder(tmp_path: Path) -> BoilerplateBuilder:
    """Provide a reusable working-copy builder rooted at the pytest tmp_path."""
    return BoilerplateBuilder(tmp_path)


@pytest.fixture
def populated_builder(boilerplate_builder: BoilerplateBuilder) -> BoilerplateBuilder:
    """A working copy with backend and frontend boilerplates and guideline documents."""
    boilerplate_builder.write(
        {
            "backend/AGENTS.md": """
            # Backend guidelines
            Use dependency injection for services.
            Keep controllers thin.
            Validate input with schemas.
            Log with structured context.
            """,
            "backend/src/app.ts": "export const app = {};\n",
            "frontend/AGENTS.md": """
            # Frontend guidelines
            Prefer composition over inheritance.
            """,
            "frontend/src/main.tsx": "render();\n",
        }
    )
    return boilerplate_builder
