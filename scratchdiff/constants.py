"""Constants shared by the snapshot loader, canonicalizer and differs."""

from typing import Tuple

# Appended to the stage's name wherever a sprite is displayed
STAGE_SUFFIX = " (stage)"

# Opcodes ending in this suffix are dropdown helpers, not script content
MENU_SUFFIX = "_menu"

# Replaces every block id in canonical text
ID_PLACEHOLDER = "id"

# Line emitted before the second branch of an if/else
ELSE_MARKER = "else"

INDENT = "\t"

# Input slots that hold nested scripts
CONDITION_INPUT = "CONDITION"
SUBSTACK_INPUT = "SUBSTACK"
SUBSTACK2_INPUT = "SUBSTACK2"

# Maps of a block that take part in its canonical line, in render order
RENDERED_BLOCK_KEYS: Tuple[str, ...] = ("inputs", "fields", "mutation")

# Enough context to diff a whole script in one hunk
DEFAULT_CONTEXT_LINES = 2000

PROJECT_JSON = "project.json"
GIT_EXECUTABLE = "git"

# Environment overrides read by DiffConfig.from_env()
ENV_CONTEXT_LINES = "SCRATCHDIFF_CONTEXT_LINES"
ENV_GIT = "SCRATCHDIFF_GIT"
ENV_PROJECT_FILE = "SCRATCHDIFF_PROJECT_FILE"
