"""Read-only model of a loaded project document."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .constants import STAGE_SUFFIX


@dataclass(frozen=True)
class Asset:
    """A costume or sound; ``path`` is its content-addressed file name."""
    name: str
    data_format: str
    path: str


@dataclass(frozen=True)
class Sprite:
    """A sprite (or the stage) with its raw block graph and media."""
    name: str
    is_stage: bool
    blocks: Dict[str, Any] = field(default_factory=dict, hash=False)
    costumes: Tuple[Asset, ...] = ()
    sounds: Tuple[Asset, ...] = ()

    @property
    def display_name(self) -> str:
        return display_name(self.name, self.is_stage)

    @property
    def assets(self) -> Tuple[Asset, ...]:
        return self.costumes + self.sounds


@dataclass(frozen=True)
class Snapshot:
    """One revision of a project: its sprites in document order."""
    sprites: Tuple[Sprite, ...] = ()
    data: Optional[Dict[str, Any]] = field(default=None, compare=False, hash=False, repr=False)

    def __iter__(self) -> Iterator[Sprite]:
        return iter(self.sprites)

    def __len__(self) -> int:
        return len(self.sprites)

    @property
    def stage(self) -> Optional[Sprite]:
        return next((sprite for sprite in self.sprites if sprite.is_stage), None)

    def sprite(self, name: str) -> Optional[Sprite]:
        return next((sprite for sprite in self.sprites if sprite.name == name), None)

    def names(self) -> List[str]:
        return [sprite.display_name for sprite in self.sprites]


def display_name(name: str, is_stage: bool) -> str:
    return name + (STAGE_SUFFIX if is_stage else "")
